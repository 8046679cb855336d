"""
Namespace Migration
===================

Legacy (v3 and earlier) schema namespaces and their current replacements,
plus the rewrite that moves an element subtree from one to the other.
"""

from types import MappingProxyType
from typing import Iterable, Mapping

from wixconvert_core.xml.nodes import (
    XMLNS_ATTRIBUTE,
    Element,
    QName,
    declaration_name,
    is_namespace_declaration,
)

WIX_NAMESPACE = "http://wixtoolset.org/schemas/v4/wxs"
WIX_UTIL_NAMESPACE = "http://wixtoolset.org/schemas/v4/wxs/util"

OLD_TO_NEW_NAMESPACES: Mapping[str, str] = MappingProxyType({
    "http://schemas.microsoft.com/wix/BalExtension": "http://wixtoolset.org/schemas/v4/wxs/bal",
    "http://schemas.microsoft.com/wix/ComPlusExtension": "http://wixtoolset.org/schemas/v4/wxs/complus",
    "http://schemas.microsoft.com/wix/DependencyExtension": "http://wixtoolset.org/schemas/v4/wxs/dependency",
    "http://schemas.microsoft.com/wix/DifxAppExtension": "http://wixtoolset.org/schemas/v4/wxs/difxapp",
    "http://schemas.microsoft.com/wix/FirewallExtension": "http://wixtoolset.org/schemas/v4/wxs/firewall",
    "http://schemas.microsoft.com/wix/GamingExtension": "http://wixtoolset.org/schemas/v4/wxs/gaming",
    "http://schemas.microsoft.com/wix/IIsExtension": "http://wixtoolset.org/schemas/v4/wxs/iis",
    "http://schemas.microsoft.com/wix/MsmqExtension": "http://wixtoolset.org/schemas/v4/wxs/msmq",
    "http://schemas.microsoft.com/wix/NetFxExtension": "http://wixtoolset.org/schemas/v4/wxs/netfx",
    "http://schemas.microsoft.com/wix/PSExtension": "http://wixtoolset.org/schemas/v4/wxs/powershell",
    "http://schemas.microsoft.com/wix/SqlExtension": "http://wixtoolset.org/schemas/v4/wxs/sql",
    "http://schemas.microsoft.com/wix/TagExtension": "http://wixtoolset.org/schemas/v4/wxs/tag",
    "http://schemas.microsoft.com/wix/UtilExtension": WIX_UTIL_NAMESPACE,
    "http://schemas.microsoft.com/wix/VSExtension": "http://wixtoolset.org/schemas/v4/wxs/vs",
    "http://wixtoolset.org/schemas/thmutil/2010": "http://wixtoolset.org/schemas/v4/thmutil",
    "http://schemas.microsoft.com/wix/2009/Lux": "http://wixtoolset.org/schemas/v4/lux",
    "http://schemas.microsoft.com/wix/2006/wi": WIX_NAMESPACE,
    "http://schemas.microsoft.com/wix/2006/localization": "http://wixtoolset.org/schemas/v4/wxl",
    "http://schemas.microsoft.com/wix/2006/libraries": "http://wixtoolset.org/schemas/v4/wixlib",
    "http://schemas.microsoft.com/wix/2006/objects": "http://wixtoolset.org/schemas/v4/wixobj",
    "http://schemas.microsoft.com/wix/2006/outputs": "http://wixtoolset.org/schemas/v4/wixout",
    "http://schemas.microsoft.com/wix/2007/pdbs": "http://wixtoolset.org/schemas/v4/wixpdb",
    "http://schemas.microsoft.com/wix/2003/04/actions": "http://wixtoolset.org/schemas/v4/wi/actions",
    "http://schemas.microsoft.com/wix/2006/tables": "http://wixtoolset.org/schemas/v4/wi/tables",
    "http://schemas.microsoft.com/wix/2006/WixUnit": "http://wixtoolset.org/schemas/v4/wixunit",
})


def update_deprecated_namespaces(elements: Iterable[Element], deprecated_to_updated: Mapping[str, str]) -> None:
    """
    Move elements and their attributes out of deprecated namespaces.

    Each element's attributes are rebuilt in their original order: deprecated
    namespace declarations get the current URI under the same prefix, and
    attributes in a deprecated namespace are renamed into the current one.

    Args:
        elements: Elements to rewrite (typically a subtree, self first)
        deprecated_to_updated: Deprecated URI to current URI
    """
    for element in list(elements):
        updated = deprecated_to_updated.get(element.name.namespace)
        if updated is not None:
            element.name = QName(updated, element.name.local)

        attributes = list(element.attributes.items())
        element.attributes.clear()

        for name, value in attributes:
            if is_namespace_declaration(name):
                updated = deprecated_to_updated.get(value)
                if updated is not None:
                    prefix = None if name == XMLNS_ATTRIBUTE else name.local
                    name, value = declaration_name(prefix), updated
            else:
                updated = deprecated_to_updated.get(name.namespace)
                if updated is not None:
                    name = QName(updated, name.local)

            element.attributes[name] = value
