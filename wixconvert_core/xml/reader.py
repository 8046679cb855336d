"""
XML Reader
==========

Builds a ``Document`` from XML source while keeping everything a
whitespace-sensitive rewrite needs: whitespace text (including the prolog
and epilog), CDATA sections as their own nodes, comments, processing
instructions and per-node line numbers.

Namespace prefixes are resolved here so the rest of the package only deals
with ``QName`` values.
"""

from pathlib import Path
from typing import Dict, List, Optional, Union
from xml.parsers import expat
import logging

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
    ProcessingInstruction,
    QName,
    Text,
    XmlDeclaration,
)
from wixconvert_core.xml.results import FailureKind, LoadResult

logger = logging.getLogger(__name__)


class NamespaceError(ValueError):
    """Raised while building the tree when a prefix is not bound."""

    def __init__(self, message: str, line: Optional[int]):
        super().__init__(message)
        self.line = line


class _TreeBuilder:
    """Receives expat callbacks and assembles the node tree."""

    def __init__(self, source: Optional[str]):
        self.document = Document(source=source)
        self.parser = expat.ParserCreate()
        self.parser.ordered_attributes = True
        self._stack: List[Container] = [self.document]
        self._scopes: List[Dict[str, str]] = [{"xml": XML_NAMESPACE, "": ""}]
        self._in_cdata = False
        self._in_doctype = False

        p = self.parser
        p.XmlDeclHandler = self._xml_decl
        p.StartDoctypeDeclHandler = self._start_doctype
        p.EndDoctypeDeclHandler = self._end_doctype
        p.StartElementHandler = self._start_element
        p.EndElementHandler = self._end_element
        p.CharacterDataHandler = self._characters
        p.StartCdataSectionHandler = self._start_cdata
        p.EndCdataSectionHandler = self._end_cdata
        p.CommentHandler = self._comment
        p.ProcessingInstructionHandler = self._processing_instruction
        # Prolog and epilog whitespace only reaches the default handler.
        p.DefaultHandlerExpand = self._default

    @property
    def _line(self) -> int:
        return self.parser.CurrentLineNumber

    def _xml_decl(self, version, encoding, standalone):
        standalone_value = None
        if standalone == 1:
            standalone_value = "yes"
        elif standalone == 0:
            standalone_value = "no"
        self.document.declaration = XmlDeclaration(version or "1.0", encoding, standalone_value)

    def _start_doctype(self, name, system_id, public_id, has_internal_subset):
        self._in_doctype = True
        self.document.append(DocumentType(name, public_id, system_id, line=self._line))

    def _end_doctype(self):
        self._in_doctype = False

    def _resolve(self, qname: str, scope: Dict[str, str], is_attribute: bool) -> QName:
        if ":" in qname:
            prefix, local = qname.split(":", 1)
            if prefix == "xmlns":
                return QName(XMLNS_NAMESPACE, local)
            if prefix not in scope:
                raise NamespaceError(f"Undeclared namespace prefix '{prefix}' in '{qname}'", self._line)
            return QName(scope[prefix], local)
        if qname == "xmlns":
            return XMLNS_ATTRIBUTE
        if is_attribute:
            return QName("", qname)
        return QName(scope.get("", ""), qname)

    def _start_element(self, name: str, attrs: List[str]):
        pairs = list(zip(attrs[0::2], attrs[1::2]))

        scope = dict(self._scopes[-1])
        for attr_name, value in pairs:
            if attr_name == "xmlns":
                scope[""] = value
            elif attr_name.startswith("xmlns:"):
                scope[attr_name[6:]] = value
        self._scopes.append(scope)

        attributes: Dict[QName, str] = {}
        for attr_name, value in pairs:
            key = self._resolve(attr_name, scope, is_attribute=True)
            if key in attributes:
                raise NamespaceError(f"Duplicate attribute '{key}'", self._line)
            attributes[key] = value

        prefix = name.split(":", 1)[0] if ":" in name else None
        element = Element(self._resolve(name, scope, is_attribute=False), attributes,
                          line=self._line, prefix=prefix)
        self._stack[-1].append(element)
        self._stack.append(element)

    def _end_element(self, name: str):
        self._stack.pop()
        self._scopes.pop()

    def _add_text(self, data: str, node_type=Text):
        parent = self._stack[-1]
        last = parent.children[-1] if parent.children else None
        if type(last) is node_type and (node_type is Text or self._in_cdata):
            last.value += data
        else:
            parent.append(node_type(data, line=self._line))

    def _characters(self, data: str):
        if self._in_cdata:
            self._add_text(data, CData)
        else:
            self._add_text(data)

    def _start_cdata(self):
        self._in_cdata = True
        self._stack[-1].append(CData("", line=self._line))

    def _end_cdata(self):
        self._in_cdata = False

    def _comment(self, data: str):
        if not self._in_doctype:
            self._stack[-1].append(Comment(data, line=self._line))

    def _processing_instruction(self, target: str, data: str):
        if not self._in_doctype:
            self._stack[-1].append(ProcessingInstruction(target, data, line=self._line))

    def _default(self, data: str):
        if self._in_doctype or len(self._stack) != 1:
            return
        if data.strip() == "":
            self._add_text(data)

    def feed(self, data: Union[str, bytes]) -> Document:
        self.parser.Parse(data, True)
        return self.document


def parse_document(data: Union[str, bytes], source: Optional[str] = None) -> LoadResult:
    """
    Parse XML text into a ``Document``.

    Args:
        data: XML source as text or encoded bytes
        source: Identifier used in diagnostics (usually the file path)

    Returns:
        LoadResult; malformed input yields ``FailureKind.MALFORMED_INPUT``
    """
    builder = _TreeBuilder(source)
    try:
        document = builder.feed(data)
    except expat.ExpatError as e:
        return LoadResult(failure=FailureKind.MALFORMED_INPUT,
                          detail=expat.ErrorString(e.code), line=e.lineno)
    except NamespaceError as e:
        return LoadResult(failure=FailureKind.MALFORMED_INPUT, detail=str(e), line=e.line)
    except UnicodeError as e:
        return LoadResult(failure=FailureKind.MALFORMED_INPUT, detail=str(e))

    return LoadResult(document=document)


def load_document(path: Union[str, Path]) -> LoadResult:
    """
    Read and parse an XML file.

    Args:
        path: File to read

    Returns:
        LoadResult describing the parsed document or the failure
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except FileNotFoundError as e:
        return LoadResult(failure=FailureKind.NOT_FOUND, detail=str(e))
    except PermissionError as e:
        return LoadResult(failure=FailureKind.ACCESS_DENIED, detail=str(e))
    except OSError as e:
        return LoadResult(failure=FailureKind.IO_ERROR, detail=str(e))

    result = parse_document(data, source=str(path))
    if result.ok:
        logger.debug(f"Loaded {path} ({len(data)} bytes)")
    return result
