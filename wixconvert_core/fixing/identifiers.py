"""
Identifier helpers used when the converter has to invent or recase values.
"""

import re

ADD_PREFIX = re.compile(r"^[^a-zA-Z_]")
ILLEGAL_IDENTIFIER_CHARACTERS = re.compile(r"[^A-Za-z0-9_.]+|\.{2,}")


def get_identifier_from_name(name: str) -> str:
    """
    Return a legal identifier based on a file or directory name.

    Runs of illegal characters and runs of two or more periods each become
    a single underscore. Identifiers must start with a letter or an
    underscore, so anything else gets an underscore prefix.

    Example:
        >>> get_identifier_from_name("My File!.txt")
        'My_File_.txt'
        >>> get_identifier_from_name("3Setup")
        '_3Setup'
    """
    result = ILLEGAL_IDENTIFIER_CHARACTERS.sub("_", name)

    if ADD_PREFIX.match(name):
        result = "_" + result

    return result


def lowercase_first_char(value: str) -> str:
    if value:
        first = value[0].lower()
        if first != value[0]:
            return first + value[1:]
    return value
