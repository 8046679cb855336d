"""
Converter Test Types
====================

Every violation the converter can detect belongs to exactly one test type.
Test types are what users name when downgrading violations to warnings or
ignoring them, and their ordinal is the numeric message code.
"""

from enum import IntEnum
from typing import Dict, Optional


class ConverterTestType(IntEnum):
    # Internal: a configured name did not match any test type.
    ConverterTestTypeUnknown = 0

    # The XML could not be parsed.
    XmlException = 1

    # A file could not be read or written back.
    UnauthorizedAccessException = 2

    DeclarationEncodingWrong = 3
    DeclarationMissing = 4

    WhitespacePrecedingCDATAWrong = 5
    WhitespacePrecedingNodeWrong = 6
    NotEmptyElement = 7
    WhitespaceFollowingCDATAWrong = 8
    WhitespacePrecedingEndElementWrong = 9

    # The root Wix/Include element has no namespace.
    XmlnsMissing = 10

    # A namespace declaration uses a deprecated URI.
    XmlnsValueWrong = 11

    # File without Id gets one derived from its Name or Source.
    AssignAnonymousFileId = 12

    # SuppressSignatureValidation is replaced by EnableSignatureValidation.
    SuppressSignatureValidationDeprecated = 13

    # WixCA/UtilCA binary ids were renamed.
    WixCABinaryIdRenamed = 14

    # CAQuietExec and QtExec properties were renamed.
    QuietExecCustomActionsRenamed = 15

    # QtExecCmdTimeout served both the 32 and 64 bit quiet exec actions.
    QtExecCmdTimeoutAmbiguous = 16

    # Directory/@ShortName may only be specified with Directory/@Name.
    AssignDirectoryNameFromShortName = 17

    # BootstrapperApplicationData is replaced by Unreal.
    BootstrapperApplicationDataDeprecated = 18

    # PermissionEx/@Inheritable now defaults to yes except under CreateFolder.
    AssignPermissionExInheritable = 19

    ColumnCategoryCamelCase = 20
    ColumnModularizeCamelCase = 21

    @classmethod
    def lookup(cls, name: str) -> Optional["ConverterTestType"]:
        """
        Resolve a configured test type name.

        Names match case-insensitively; a decimal string matches by code.

        Args:
            name: Test type name or numeric code

        Returns:
            The matching test type, or None when unknown
        """
        if name is None:
            return None
        key = str(name).strip()
        if key.isdigit():
            try:
                return cls(int(key))
            except ValueError:
                return None
        return _BY_LOWER_NAME.get(key.lower())


_BY_LOWER_NAME: Dict[str, ConverterTestType] = {
    member.name.lower(): member for member in ConverterTestType
}
