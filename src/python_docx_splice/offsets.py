"""
Character offset model for WordprocessingML trees.

Every position used by the editing code is a character offset into the text
that Word would show for an element: ``w:t`` and ``w:delText`` contribute their
text, ``w:tab`` and ``w:br`` contribute one character each ("\\t" and "\\n"),
and every other element is a transparent container whose length is the sum of
the leaves below it.

Nothing here is cached. Offsets must be recomputed after every mutation.
"""

from __future__ import annotations

from collections.abc import Iterator

from lxml import etree

from .constants import ATOMIC_LEAVES, ATOMIC_VALUES, LEAF_NAMES, TAB_STOPS, TEXT_LEAVES


def local_name(element: etree._Element) -> str:
    """Get the namespace-free name of an element.

    Comments and processing instructions have no name and return "".
    """
    tag = element.tag
    if not isinstance(tag, str):
        return ""
    return etree.QName(tag).localname


def is_leaf(element: etree._Element) -> bool:
    """Check whether an element is one of w:t, w:delText, w:tab, w:br."""
    return local_name(element) in LEAF_NAMES


def _iter_leaf_elements(element: etree._Element) -> Iterator[etree._Element]:
    name = local_name(element)
    if name in LEAF_NAMES:
        yield element
        return
    # tab stops in paragraph properties are not text
    if name == TAB_STOPS:
        return
    for child in element.iterchildren(tag=etree.Element):
        yield from _iter_leaf_elements(child)


def leaf_value(element: etree._Element) -> str:
    """Get the characters a leaf element contributes to the text.

    Args:
        element: Any element

    Returns:
        "\\t" for w:tab, "\\n" for w:br, the text of w:t/w:delText,
        and "" for every other element
    """
    name = local_name(element)
    if name in TEXT_LEAVES:
        return element.text or ""
    return ATOMIC_VALUES.get(name, "")


def size_of(element: etree._Element) -> int:
    """Get the number of characters an element contributes.

    w:tab and w:br count 1, w:t and w:delText count their text length, and any
    other element counts the sum of its leaf descendants.

    Args:
        element: Any element

    Returns:
        Non-negative character count
    """
    name = local_name(element)
    if name in ATOMIC_LEAVES:
        return 1
    if name in TEXT_LEAVES:
        return len(element.text or "")
    return sum(size_of(leaf) for leaf in _iter_leaf_elements(element))


def iter_leaves(
    element: etree._Element, start: int = 0
) -> Iterator[tuple[etree._Element, int]]:
    """Iterate over the leaves below an element in document order.

    The running offset is threaded through the traversal and reported with
    each leaf, so callers never need an external counter.

    Args:
        element: Root of the subtree to walk (included if it is itself a leaf)
        start: Offset of the first character of ``element``

    Yields:
        (leaf, leaf_start) pairs
    """
    position = start
    for leaf in _iter_leaf_elements(element):
        yield leaf, position
        position += size_of(leaf)


def text_length(element: etree._Element | None) -> int:
    """Get the total text length of an element (0 for None)."""
    if element is None:
        return 0
    return size_of(element)


def get_text(element: etree._Element | None) -> str:
    """Get the text of an element with tabs and breaks mapped to characters."""
    if element is None:
        return ""
    return "".join(leaf_value(leaf) for leaf in _iter_leaf_elements(element))


def offset_within(element: etree._Element, root: etree._Element) -> int:
    """Get the number of characters that precede ``element`` inside ``root``.

    Args:
        element: A descendant of ``root`` (or ``root`` itself)
        root: The element offsets are measured from

    Returns:
        Character offset of ``element``'s first character

    Raises:
        ValueError: If ``element`` is not inside ``root``
    """
    offset = 0
    node = element
    while node is not root:
        parent = node.getparent()
        if parent is None:
            raise ValueError("Element is not a descendant of the given root")
        for sibling in node.itersiblings(preceding=True):
            if isinstance(sibling.tag, str):
                offset += size_of(sibling)
        node = parent
    return offset


def path_between(ancestor: etree._Element, element: etree._Element) -> list[etree._Element]:
    """Get the chain of elements leading from ``ancestor`` down to ``element``.

    Args:
        ancestor: The upper end of the chain (excluded)
        element: A descendant of ``ancestor`` (included)

    Returns:
        Elements from a child of ``ancestor`` down to ``element``

    Raises:
        ValueError: If ``element`` is not inside ``ancestor``
    """
    path = [element]
    parent = element.getparent()
    while parent is not ancestor:
        if parent is None:
            raise ValueError("Element is not a descendant of the given ancestor")
        path.insert(0, parent)
        parent = parent.getparent()
    return path
