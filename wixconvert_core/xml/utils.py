"""
XML Utility Functions
=====================

Helpers shared by the converter for walking and describing the node tree.
"""

from typing import Iterator, List, Optional
import logging

from wixconvert_core.xml.nodes import Container, Element, Node, Text, CData

logger = logging.getLogger(__name__)


def local_name(element: Element) -> str:
    """
    Local name of an element, without namespace.

    Example:
        >>> local_name(Element("{http://wixtoolset.org/schemas/v4/wxs}File"))
        'File'
    """
    return element.name.local


def is_whitespace(value: Optional[str]) -> bool:
    """True for None, empty or whitespace-only strings."""
    return not value or not value.strip()


def is_whitespace_text(node: Optional[Node]) -> bool:
    """True for a plain text node (not CDATA) holding only whitespace."""
    return isinstance(node, Text) and not isinstance(node, CData) and is_whitespace(node.value)


def iter_elements(container: Container) -> Iterator[Element]:
    """
    Iterate over all elements below a container, in document order.

    Args:
        container: Document or element to search

    Yields:
        Element nodes
    """
    for child in container.children:
        if isinstance(child, Element):
            yield from child.iter()


def find_elements_by_local_name(container: Container, name: str) -> List[Element]:
    """Find all elements with a given local name (ignoring namespace)."""
    return [elem for elem in iter_elements(container) if elem.name.local == name]


def get_element_path(element: Element) -> str:
    """
    Get XPath-like path to an element for debugging.

    Args:
        element: XML element

    Returns:
        Path string like "/Wix/Package[1]/Directory[2]"
    """
    parts = []
    current: Optional[Node] = element

    while isinstance(current, Element):
        name = local_name(current)
        parent = current.parent

        if isinstance(parent, Element):
            # Count same-named siblings
            index = 1
            for sibling in parent.elements():
                if sibling is current:
                    break
                if local_name(sibling) == name:
                    index += 1
            parts.append(f"{name}[{index}]")
        else:
            parts.append(name)

        current = parent

    return "/" + "/".join(reversed(parts))


def element_depth(node: Node) -> int:
    """Nesting depth of a node; the document root element is depth 0."""
    depth = -1
    current = node.parent
    while current is not None:
        depth += 1
        current = current.parent
    return depth
