"""
XML Processing
==============

Node model, reader and writer used by the converter.
"""

from wixconvert_core.xml.nodes import (
    XML_NAMESPACE,
    XMLNS_ATTRIBUTE,
    XMLNS_NAMESPACE,
    CData,
    Comment,
    Container,
    Document,
    DocumentType,
    Element,
    Node,
    ProcessingInstruction,
    QName,
    Text,
    XmlDeclaration,
    declaration_name,
    is_namespace_declaration,
)
from wixconvert_core.xml.results import (
    FailureKind,
    LoadResult,
    SaveResult,
)
from wixconvert_core.xml.reader import (
    load_document,
    parse_document,
)
from wixconvert_core.xml.writer import (
    save_document,
    serialize_document,
)
from wixconvert_core.xml.utils import (
    local_name,
    is_whitespace,
    is_whitespace_text,
    iter_elements,
    find_elements_by_local_name,
    get_element_path,
    element_depth,
)

__all__ = [
    "XML_NAMESPACE",
    "XMLNS_ATTRIBUTE",
    "XMLNS_NAMESPACE",
    "CData",
    "Comment",
    "Container",
    "Document",
    "DocumentType",
    "Element",
    "Node",
    "ProcessingInstruction",
    "QName",
    "Text",
    "XmlDeclaration",
    "declaration_name",
    "is_namespace_declaration",
    "FailureKind",
    "LoadResult",
    "SaveResult",
    "load_document",
    "parse_document",
    "save_document",
    "serialize_document",
    "local_name",
    "is_whitespace",
    "is_whitespace_text",
    "iter_elements",
    "find_elements_by_local_name",
    "get_element_path",
    "element_depth",
]
