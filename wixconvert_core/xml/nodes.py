"""
XML Node Model
==============

A small, mutable XML tree that keeps every node the converter cares about:
whitespace text, CDATA sections, comments and processing instructions, each
with the source line it was read from.

Names are resolved to ``QName`` values (namespace URI plus local name) at
parse time, so the tree can be compared and rewritten without caring which
prefix the source used.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Union

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"
XMLNS_NAMESPACE = "http://www.w3.org/2000/xmlns/"


@dataclass(frozen=True)
class QName:
    """
    Qualified name of an element or attribute.

    Attributes:
        namespace: Namespace URI, or "" for no namespace
        local: Local name
    """
    namespace: str
    local: str

    @classmethod
    def parse(cls, name: str) -> "QName":
        """Create from Clark notation (``{uri}local``) or a bare local name."""
        if name.startswith("{"):
            namespace, local = name[1:].split("}", 1)
            return cls(namespace, local)
        return cls("", name)

    def __str__(self) -> str:
        if self.namespace:
            return f"{{{self.namespace}}}{self.local}"
        return self.local


XMLNS_ATTRIBUTE = QName("", "xmlns")


def is_namespace_declaration(name: QName) -> bool:
    """Check whether an attribute name is an ``xmlns`` or ``xmlns:prefix`` declaration."""
    return name == XMLNS_ATTRIBUTE or name.namespace == XMLNS_NAMESPACE


def declaration_name(prefix: Optional[str]) -> QName:
    """Attribute name declaring ``prefix`` (None or "" declares the default namespace)."""
    if prefix:
        return QName(XMLNS_NAMESPACE, prefix)
    return XMLNS_ATTRIBUTE


class Node:
    """Base class for every node in the tree."""

    def __init__(self, line: Optional[int] = None):
        self.parent: Optional["Container"] = None
        self.line = line

    def _index(self) -> int:
        if self.parent is None:
            return -1
        for index, sibling in enumerate(self.parent.children):
            if sibling is self:
                return index
        return -1

    @property
    def next_sibling(self) -> Optional["Node"]:
        index = self._index()
        if index < 0 or index + 1 >= len(self.parent.children):
            return None
        return self.parent.children[index + 1]

    @property
    def previous_sibling(self) -> Optional["Node"]:
        index = self._index()
        if index <= 0:
            return None
        return self.parent.children[index - 1]

    def detach(self) -> None:
        """Remove this node from its parent (no-op when already detached)."""
        if self.parent is not None:
            self.parent.remove(self)


class Text(Node):
    """Character data, including whitespace-only runs between elements."""

    def __init__(self, value: str = "", line: Optional[int] = None):
        super().__init__(line)
        self.value = value

    def __repr__(self) -> str:
        return f"Text({self.value!r})"


class CData(Text):
    """A ``<![CDATA[...]]>`` section."""

    def __repr__(self) -> str:
        return f"CData({self.value!r})"


class Comment(Node):
    def __init__(self, value: str = "", line: Optional[int] = None):
        super().__init__(line)
        self.value = value


class ProcessingInstruction(Node):
    def __init__(self, target: str, data: str = "", line: Optional[int] = None):
        super().__init__(line)
        self.target = target
        self.data = data


class DocumentType(Node):
    """``<!DOCTYPE>`` declaration (the internal subset is not retained)."""

    def __init__(self, name: str, public_id: Optional[str] = None,
                 system_id: Optional[str] = None, line: Optional[int] = None):
        super().__init__(line)
        self.name = name
        self.public_id = public_id
        self.system_id = system_id


class Container(Node):
    """Node that owns an ordered list of children."""

    def __init__(self, line: Optional[int] = None):
        super().__init__(line)
        self.children: List[Node] = []

    def append(self, node: Node) -> Node:
        node.detach()
        node.parent = self
        self.children.append(node)
        return node

    def insert(self, index: int, node: Node) -> Node:
        node.detach()
        node.parent = self
        self.children.insert(index, node)
        return node

    def remove(self, node: Node) -> None:
        for index, child in enumerate(self.children):
            if child is node:
                del self.children[index]
                node.parent = None
                return
        raise ValueError("node is not a child of this container")

    def elements(self) -> List["Element"]:
        """Element children only."""
        return [child for child in self.children if isinstance(child, Element)]


class Element(Container):
    """
    An XML element.

    Attributes:
        name: Qualified element name
        attributes: Attribute name to value, in document order
        prefix: Prefix used in the source text, kept as a serialization hint
    """

    def __init__(self, name: Union[QName, str],
                 attributes: Optional[Dict[QName, str]] = None,
                 line: Optional[int] = None,
                 prefix: Optional[str] = None):
        super().__init__(line)
        self.name = name if isinstance(name, QName) else QName.parse(name)
        self.attributes: Dict[QName, str] = dict(attributes or {})
        self.prefix = prefix

    def __repr__(self) -> str:
        return f"Element({str(self.name)!r})"

    @staticmethod
    def _key(name: Union[QName, str]) -> QName:
        return name if isinstance(name, QName) else QName.parse(name)

    def get(self, name: Union[QName, str], default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(self._key(name), default)

    def set(self, name: Union[QName, str], value: str) -> None:
        """Set an attribute; new attributes are appended after existing ones."""
        self.attributes[self._key(name)] = value

    def remove_attribute(self, name: Union[QName, str]) -> Optional[str]:
        return self.attributes.pop(self._key(name), None)

    def has_attribute(self, name: Union[QName, str]) -> bool:
        return self._key(name) in self.attributes

    def namespace_declarations(self) -> List[QName]:
        return [name for name in self.attributes if is_namespace_declaration(name)]

    def iter(self) -> Iterator["Element"]:
        """This element and all descendant elements, in document order."""
        yield self
        for child in self.children:
            if isinstance(child, Element):
                yield from child.iter()


@dataclass
class XmlDeclaration:
    version: str = "1.0"
    encoding: Optional[str] = "utf-8"
    standalone: Optional[str] = None


class Document(Container):
    """
    A parsed XML document.

    Top-level nodes (comments, whitespace, processing instructions and the
    root element) are held in ``children``; exactly one of them is an Element.
    """

    def __init__(self, declaration: Optional[XmlDeclaration] = None,
                 source: Optional[str] = None):
        super().__init__(None)
        self.declaration = declaration
        self.source = source

    @property
    def root(self) -> Optional[Element]:
        for child in self.children:
            if isinstance(child, Element):
                return child
        return None
