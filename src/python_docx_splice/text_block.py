"""
Text blocks: single text-bearing leaves of a run and how they split.
"""

from __future__ import annotations

import copy

from lxml import etree

from .constants import TEXT_LEAVES
from .errors import OutOfRangeError, UnsupportedLeafKindError
from .offsets import is_leaf, leaf_value, local_name
from .run_properties import preserve_space


class TextBlock:
    """One w:t, w:delText, w:tab or w:br element with its character offsets.

    The block is a read-only view. Splitting it produces new elements and
    leaves the wrapped element untouched.

    Attributes:
        start_index: Offset of the block's first character
        end_index: Offset just past the block's last character
        value: Text of the block ("\\t" for tabs, "\\n" for breaks)
    """

    def __init__(self, element: etree._Element, start_index: int = 0):
        """Initialize TextBlock wrapper.

        Args:
            element: The leaf element to wrap
            start_index: Offset of the leaf's first character

        Raises:
            UnsupportedLeafKindError: If the element is not a text leaf
        """
        if not is_leaf(element):
            raise UnsupportedLeafKindError(str(element.tag))
        self._element = element
        self.start_index = start_index
        self.value = leaf_value(element)
        self.end_index = start_index + len(self.value)

    @property
    def element(self) -> etree._Element:
        """Get the underlying XML element."""
        return self._element

    @property
    def is_atomic(self) -> bool:
        """Whether the block is a tab or break, which can never be divided."""
        return local_name(self._element) not in TEXT_LEAVES

    def split(self, index: int) -> tuple[etree._Element | None, etree._Element | None]:
        """Split this block at an offset. See :func:`split_text`."""
        return split_text(self, index)

    def __len__(self) -> int:
        return self.end_index - self.start_index

    def __repr__(self) -> str:
        return (
            f"<TextBlock {local_name(self._element)} "
            f"[{self.start_index}:{self.end_index}] {self.value!r}>"
        )


def _copy_leaf(element: etree._Element) -> etree._Element:
    leaf = copy.deepcopy(element)
    leaf.tail = None
    return leaf


def split_text(
    block: TextBlock, index: int
) -> tuple[etree._Element | None, etree._Element | None]:
    """Split a text block into left and right fragments at an offset.

    w:t and w:delText are divided into two new elements with the same tag and
    attributes; an empty half is returned as None and a non-empty half is
    always marked xml:space="preserve". Tabs and breaks are never divided:
    the whole leaf goes left when ``index`` is the block's end and right
    otherwise.

    Args:
        block: The block to split
        index: Offset in the same coordinates as the block's start/end

    Returns:
        (left, right) tuple of new elements, either of which may be None

    Raises:
        OutOfRangeError: If ``index`` is outside [start_index, end_index]
    """
    if index < block.start_index or index > block.end_index:
        raise OutOfRangeError(index, len(block), target="text block")

    if block.is_atomic:
        if index == block.end_index:
            return _copy_leaf(block.element), None
        return None, _copy_leaf(block.element)

    offset = index - block.start_index
    halves = []
    for text in (block.value[:offset], block.value[offset:]):
        if not text:
            halves.append(None)
            continue
        half = _copy_leaf(block.element)
        half.text = text
        halves.append(preserve_space(half, force=True))

    return halves[0], halves[1]
