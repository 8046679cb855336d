"""
Whitespace rules for the text nodes that separate sibling elements.

Canonical whitespace before a node at nesting ``level`` is one or more
newlines followed by exactly ``level * indentation_amount`` spaces.
"""

NEWLINE = "\n"


def leading_whitespace_valid(indentation_amount: int, level: int, whitespace: str) -> bool:
    """
    Determine if the whitespace preceding a node is appropriate for its depth.

    Args:
        indentation_amount: Spaces per nesting level
        level: Depth the whitespace must match
        whitespace: Whitespace to validate

    Returns:
        True if the whitespace is legal
    """
    # Any number of leading newlines is allowed.
    whitespace = whitespace.lstrip(NEWLINE)

    return whitespace == " " * (level * indentation_amount)


def fixup_whitespace(indentation_amount: int, level: int, whitespace: str) -> str:
    """
    Return corrected whitespace for a node at ``level``.

    Leading newlines are kept, and there is always at least one.
    """
    newlines = len(whitespace) - len(whitespace.lstrip(NEWLINE))

    return NEWLINE * max(newlines, 1) + " " * (level * indentation_amount)
