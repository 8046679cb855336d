"""
XML Writer
==========

Serializes a ``Document`` without reformatting: whitespace text nodes are
written exactly as they are in the tree. Namespace declarations that repeat
a binding already in scope are dropped, and prefixes are generated only when
an element or attribute namespace has no binding at all.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
import codecs
import logging

from wixconvert_core.xml.nodes import (
    XML_NAMESPACE,
    XMLNS_ATTRIBUTE,
    CData,
    Comment,
    Document,
    DocumentType,
    Element,
    Node,
    ProcessingInstruction,
    QName,
    Text,
    is_namespace_declaration,
)
from wixconvert_core.xml.results import FailureKind, SaveResult

logger = logging.getLogger(__name__)


def escape_text(value: str) -> str:
    return value.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def _declaration_text(prefix: str) -> str:
    return f"xmlns:{prefix}" if prefix else "xmlns"


def escape_attribute(value: str) -> str:
    return (value.replace("&", "&amp;")
                 .replace("<", "&lt;")
                 .replace('"', "&quot;")
                 .replace("\n", "&#xA;")
                 .replace("\r", "&#xD;")
                 .replace("\t", "&#x9;"))


class _Serializer:

    def __init__(self):
        self._parts: List[str] = []
        self._generated = 0

    def _new_prefix(self, scope: Dict[str, str]) -> str:
        while True:
            self._generated += 1
            prefix = f"p{self._generated}"
            if prefix not in scope:
                return prefix

    @staticmethod
    def _find_prefix(scope: Dict[str, str], namespace: str,
                     preferred: Optional[str] = None) -> Optional[str]:
        if preferred and scope.get(preferred) == namespace:
            return preferred
        for prefix, uri in reversed(list(scope.items())):
            if prefix and uri == namespace:
                return prefix
        return None

    def write_document(self, document: Document) -> str:
        declaration = document.declaration
        if declaration is not None:
            text = f'<?xml version="{declaration.version}"'
            if declaration.encoding:
                text += f' encoding="{declaration.encoding}"'
            if declaration.standalone:
                text += f' standalone="{declaration.standalone}"'
            self._parts.append(text + "?>")

        scope = {"xml": XML_NAMESPACE, "": ""}
        for node in document.children:
            self._write_node(node, scope)
        return "".join(self._parts)

    def _write_node(self, node: Node, scope: Dict[str, str]) -> None:
        if isinstance(node, Element):
            self._write_element(node, scope)
        elif isinstance(node, CData):
            self._parts.append(f"<![CDATA[{node.value}]]>")
        elif isinstance(node, Text):
            self._parts.append(escape_text(node.value))
        elif isinstance(node, Comment):
            self._parts.append(f"<!--{node.value}-->")
        elif isinstance(node, ProcessingInstruction):
            data = f" {node.data}" if node.data else ""
            self._parts.append(f"<?{node.target}{data}?>")
        elif isinstance(node, DocumentType):
            self._write_doctype(node)

    def _write_doctype(self, node: DocumentType) -> None:
        text = f"<!DOCTYPE {node.name}"
        if node.public_id:
            text += f' PUBLIC "{node.public_id}" "{node.system_id or ""}"'
        elif node.system_id:
            text += f' SYSTEM "{node.system_id}"'
        self._parts.append(text + ">")

    def _write_element(self, element: Element, parent_scope: Dict[str, str]) -> None:
        scope = dict(parent_scope)
        pieces: List[Tuple[bool, object, str]] = []

        for name, value in element.attributes.items():
            if is_namespace_declaration(name):
                prefix = "" if name == XMLNS_ATTRIBUTE else name.local
                if parent_scope.get(prefix) == value:
                    continue
                scope[prefix] = value
                pieces.append((True, prefix, value))
            else:
                pieces.append((False, name, value))

        # Prefixes missing from scope are declared after the source attributes.
        generated: List[Tuple[str, str]] = []
        tag = self._element_tag(element, scope, generated)

        parts = [f"<{tag}"]
        for is_declaration, name, value in pieces:
            if is_declaration:
                parts.append(f' {_declaration_text(name)}="{escape_attribute(value)}"')
            else:
                parts.append(f' {self._attribute_name(name, scope, generated)}="{escape_attribute(value)}"')
        for prefix, uri in generated:
            parts.append(f' {_declaration_text(prefix)}="{escape_attribute(uri)}"')

        if not element.children:
            parts.append(" />")
            self._parts.append("".join(parts))
            return

        parts.append(">")
        self._parts.append("".join(parts))
        for child in element.children:
            self._write_node(child, scope)
        self._parts.append(f"</{tag}>")

    def _element_tag(self, element: Element, scope: Dict[str, str],
                     generated: List[Tuple[str, str]]) -> str:
        name = element.name
        if element.prefix and scope.get(element.prefix) == name.namespace:
            return f"{element.prefix}:{name.local}"
        if scope.get("") == name.namespace:
            return name.local

        prefix = self._find_prefix(scope, name.namespace)
        if prefix is not None:
            return f"{prefix}:{name.local}"

        if not name.namespace:
            scope[""] = ""
            generated.append(("", ""))
            return name.local

        if element.prefix and element.prefix not in scope:
            prefix = element.prefix
        else:
            prefix = self._new_prefix(scope)
        scope[prefix] = name.namespace
        generated.append((prefix, name.namespace))
        return f"{prefix}:{name.local}"

    def _attribute_name(self, name: QName, scope: Dict[str, str],
                        generated: List[Tuple[str, str]]) -> str:
        if not name.namespace:
            return name.local
        if name.namespace == XML_NAMESPACE:
            return f"xml:{name.local}"
        prefix = self._find_prefix(scope, name.namespace)
        if prefix is None:
            prefix = self._new_prefix(scope)
            scope[prefix] = name.namespace
            generated.append((prefix, name.namespace))
        return f"{prefix}:{name.local}"


def serialize_document(document: Document) -> str:
    """
    Serialize a document without any reformatting.

    Args:
        document: Document to write

    Returns:
        XML text
    """
    return _Serializer().write_document(document)


def save_document(document: Document, path: Union[str, Path]) -> SaveResult:
    """
    Write a document to ``path``, replacing its contents.

    The declared encoding is used when Python knows it; otherwise utf-8.

    Args:
        document: Document to save
        path: Destination file

    Returns:
        SaveResult; I/O problems are returned, not raised
    """
    path = Path(path)
    encoding = "utf-8"
    if document.declaration is not None and document.declaration.encoding:
        try:
            encoding = codecs.lookup(document.declaration.encoding).name
        except LookupError:
            logger.warning(f"Unknown encoding '{document.declaration.encoding}', writing {path} as utf-8")

    data = serialize_document(document).encode(encoding, errors="xmlcharrefreplace")
    try:
        path.write_bytes(data)
    except PermissionError as e:
        return SaveResult(failure=FailureKind.ACCESS_DENIED, detail=str(e))
    except OSError as e:
        return SaveResult(failure=FailureKind.IO_ERROR, detail=str(e))

    logger.info(f"Saved {path}")
    return SaveResult(saved=True)
