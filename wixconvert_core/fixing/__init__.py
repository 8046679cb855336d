"""
Conversion Framework
====================

Converters that migrate documents to the current schema and fix
formatting violations.

Components:
- BaseConverter: Abstract base class for all converters
- ConversionResult: Container for conversion results
- Wix3Converter: WiX v3 to v4 converter
"""

from wixconvert_core.fixing.base import (
    BaseConverter,
    ConversionResult,
)

from wixconvert_core.fixing.wix3_converter import Wix3Converter

from wixconvert_core.fixing.namespaces import (
    OLD_TO_NEW_NAMESPACES,
    WIX_NAMESPACE,
    WIX_UTIL_NAMESPACE,
    update_deprecated_namespaces,
)

from wixconvert_core.fixing.identifiers import (
    get_identifier_from_name,
    lowercase_first_char,
)

from wixconvert_core.fixing.whitespace import (
    fixup_whitespace,
    leading_whitespace_valid,
)

__all__ = [
    # Base classes
    "BaseConverter",
    "ConversionResult",
    # WiX conversion
    "Wix3Converter",
    "OLD_TO_NEW_NAMESPACES",
    "WIX_NAMESPACE",
    "WIX_UTIL_NAMESPACE",
    "update_deprecated_namespaces",
    "get_identifier_from_name",
    "lowercase_first_char",
    "fixup_whitespace",
    "leading_whitespace_valid",
]
