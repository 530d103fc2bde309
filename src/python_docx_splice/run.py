"""
Runs of formatted text and the run-level split engine.

A run (w:r) is split at a character offset by finding the leaf the edit
lands in, splitting that leaf, and rebuilding two runs around the halves.
Both new runs keep the original run's attributes and a copy of its w:rPr, so
a split never changes how the text looks.
"""

from __future__ import annotations

import copy
import logging
from enum import Enum

from lxml import etree

from .constants import RUN, RUN_PROPERTIES
from .errors import OutOfRangeError
from .offsets import get_text, iter_leaves, local_name, path_between, size_of, text_length
from .run_properties import copy_run_props, get_run_props
from .text_block import TextBlock, split_text

logger = logging.getLogger(__name__)


class EditType(Enum):
    """Kind of edit a split is performed for.

    The kind decides which leaf owns an offset that sits exactly on the
    boundary between two leaves.

    Attributes:
        INSERT: Boundary belongs to the leaf that ends there, so inserted
            text extends the preceding content
        DELETE: Boundary belongs to the leaf that starts there, so deletion
            begins with the following content
    """

    INSERT = "insert"
    DELETE = "delete"


class Run:
    """Wrapper around a w:r (run) element.

    Attributes:
        start_index: Offset of the run's first character in its paragraph
        end_index: Offset just past the run's last character
        value: Text of the run, tabs as "\\t" and breaks as "\\n"
    """

    def __init__(self, element: etree._Element, start_index: int = 0):
        """Initialize Run wrapper.

        Args:
            element: The w:r XML element to wrap
            start_index: Offset of the run's first character

        Raises:
            ValueError: If the element is not a w:r
        """
        if local_name(element) != RUN:
            raise ValueError(f"Expected w:r element, got {element.tag}")
        self._element = element
        self.start_index = start_index
        self.value = get_text(element)
        self.end_index = start_index + len(self.value)

    @property
    def element(self) -> etree._Element:
        """Get the underlying XML element."""
        return self._element

    @property
    def properties(self) -> etree._Element | None:
        """Get the run's w:rPr element, if any."""
        return get_run_props(self._element)

    @property
    def text_blocks(self) -> list[TextBlock]:
        """Get the run's leaves as text blocks with absolute offsets."""
        return [
            TextBlock(leaf, start) for leaf, start in iter_leaves(self._element, self.start_index)
        ]

    def find_edit_target(self, index: int, edit_type: EditType = EditType.INSERT) -> TextBlock | None:
        """Find the leaf affected by an edit. See :func:`find_edit_target`."""
        return find_edit_target(self, index, edit_type)

    def split(
        self, index: int, edit_type: EditType = EditType.INSERT
    ) -> tuple[etree._Element | None, etree._Element | None]:
        """Split this run at an absolute offset. See :func:`split_run`."""
        return split_run(self, index, edit_type)

    def __len__(self) -> int:
        return self.end_index - self.start_index

    def __repr__(self) -> str:
        preview = self.value[:40] + "..." if len(self.value) > 40 else self.value
        return f"<Run [{self.start_index}:{self.end_index}]: {preview!r}>"


def find_edit_target(
    run: Run, index: int, edit_type: EditType = EditType.INSERT
) -> TextBlock | None:
    """Find the leaf of a run that an edit at ``index`` lands in.

    Leaves are visited in document order while the number of characters seen
    so far (including the current leaf) is tracked. The first leaf with a
    non-zero count that is ``>= index`` (insert) or ``> index`` (delete) is
    the target. A delete at the very end of the run has no following
    content and is treated like an insert.

    Args:
        run: The run to search
        index: Offset relative to the run's start
        edit_type: Kind of edit, which decides boundary ownership

    Returns:
        TextBlock with offsets relative to the run's start, or None if the
        run has no text

    Raises:
        OutOfRangeError: If ``index`` is negative or past the end of the run
    """
    length = len(run.value)
    if index < 0 or index > length:
        raise OutOfRangeError(index, length, target="run")

    last_text_leaf = None
    for leaf, start in iter_leaves(run.element):
        size = size_of(leaf)
        count = start + size
        if count == 0:
            continue
        if edit_type is EditType.DELETE:
            found = count > index
        else:
            found = count >= index
        if found:
            return TextBlock(leaf, start)
        if size > 0:
            last_text_leaf = (leaf, start)

    if last_text_leaf is not None:
        return TextBlock(*last_text_leaf)
    return None


def _shallow_copy(element: etree._Element) -> etree._Element:
    qname = etree.QName(element)
    nsmap = {element.prefix: qname.namespace} if qname.namespace else None
    return etree.Element(element.tag, attrib=dict(element.attrib), nsmap=nsmap)


def _copy_node(node: etree._Element) -> etree._Element:
    node_copy = copy.deepcopy(node)
    node_copy.tail = None
    return node_copy


def split_around(
    container: etree._Element,
    path: list[etree._Element],
    left_part: etree._Element | None,
    right_part: etree._Element | None,
    skip: str | None = None,
) -> tuple[etree._Element, etree._Element]:
    """Rebuild ``container`` as two copies divided at the end of ``path``.

    ``path`` runs from a child of ``container`` down to the element being
    split. Each level keeps copies of what precedes the path on the left and
    of what follows it on the right; the last element of the path is replaced
    by ``left_part`` and ``right_part``. Children of ``container`` named
    ``skip`` (such as w:rPr) are left out of both copies.

    Args:
        container: Element to divide
        path: Elements from a child of ``container`` down to the split point
        left_part: Replacement on the left side (None for nothing)
        right_part: Replacement on the right side (None for nothing)
        skip: Local name of children to leave out

    Returns:
        (left, right) tuple of new elements shaped like ``container``
    """
    head = path[0]
    if len(path) == 1:
        left_inner, right_inner = left_part, right_part
    else:
        left_inner, right_inner = split_around(head, path[1:], left_part, right_part)
        # a nested container with nothing on one side disappears from that side
        if len(left_inner) == 0:
            left_inner = None
        if len(right_inner) == 0:
            right_inner = None

    before: list[etree._Element] = []
    after: list[etree._Element] = []
    seen = False
    for child in container:
        if child is head:
            seen = True
            continue
        if skip is not None and local_name(child) == skip:
            continue
        (after if seen else before).append(_copy_node(child))

    left = _shallow_copy(container)
    for child in before:
        left.append(child)
    if left_inner is not None:
        left.append(left_inner)

    right = _shallow_copy(container)
    if right_inner is not None:
        right.append(right_inner)
    for child in after:
        right.append(child)

    return left, right


def split_run(
    run: Run, index: int, edit_type: EditType = EditType.INSERT
) -> tuple[etree._Element | None, etree._Element | None]:
    """Split a run into two new runs at an absolute offset.

    The left run holds everything before ``index`` and the right run
    everything after it. Both carry the original run's attributes and a copy
    of its w:rPr. A side with no text is returned as None, so splitting at
    the run's start gives ``(None, right)`` and at its end ``(left, None)``.
    Joining the text of the returned runs always reproduces ``run.value``.

    The source run is not modified; replacing it with the fragments is up to
    the caller.

    Args:
        run: The run to split
        index: Absolute offset, in the same coordinates as ``run.start_index``
        edit_type: Kind of edit, which decides boundary ownership

    Returns:
        (left, right) tuple of new w:r elements, either of which may be None

    Raises:
        OutOfRangeError: If ``index`` falls outside the run
    """
    relative = index - run.start_index
    target = find_edit_target(run, relative, edit_type)
    if target is None:
        logger.debug("Run at %d has no text, nothing to split", run.start_index)
        return None, None

    left_leaf, right_leaf = split_text(target, relative)

    path = path_between(run.element, target.element)
    left, right = split_around(run.element, path, left_leaf, right_leaf, skip=RUN_PROPERTIES)

    for fragment in (left, right):
        rpr = copy_run_props(run.element)
        if rpr is not None:
            fragment.insert(0, rpr)

    logger.debug(
        "Split run [%d:%d] at %d (%s) inside %r",
        run.start_index,
        run.end_index,
        index,
        edit_type.value,
        target,
    )

    return (
        left if text_length(left) > 0 else None,
        right if text_length(right) > 0 else None,
    )
