"""
Paragraph wrapper class with character-offset text editing.

Paragraph edits are built on the run split engine: the run (or tracked change
wrapper) an offset lands in is split into two fragments, and the fragments
are spliced back into the paragraph around the new or removed content.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator

from lxml import etree

from python_docx_splice.constants import (
    DEFAULT_AUTHOR,
    DELETION,
    INSERTION,
    PARAGRAPH,
    PARAGRAPH_PROPERTIES,
    RUN,
    TRACKED_WRAPPERS,
    w,
)
from python_docx_splice.errors import OutOfRangeError
from python_docx_splice.offsets import (
    get_text,
    local_name,
    offset_within,
    path_between,
    size_of,
    text_length,
)
from python_docx_splice.run import EditType, Run, split_around, split_run
from python_docx_splice.run_properties import preserve_space
from python_docx_splice.tracked_xml import TrackedXMLGenerator

logger = logging.getLogger(__name__)


def format_input(text: str, run_props: etree._Element | None = None) -> list[etree._Element]:
    """Build runs for a piece of plain text.

    Tabs become w:tab runs and line breaks become w:br runs; everything else
    is collected into w:t runs. Every run gets its own copy of ``run_props``.

    Args:
        text: Text to convert ("\\r\\n" counts as a single break)
        run_props: Optional w:rPr to apply to every run

    Returns:
        List of new w:r elements (empty for empty text)
    """
    runs: list[etree._Element] = []
    buffer: list[str] = []

    def new_run(child: str) -> etree._Element:
        run = etree.Element(w(RUN))
        if run_props is not None:
            run.append(copy.deepcopy(run_props))
        etree.SubElement(run, w(child))
        runs.append(run)
        return run

    def flush() -> None:
        if not buffer:
            return
        t = new_run("t")[-1]
        t.text = "".join(buffer)
        preserve_space(t)
        buffer.clear()

    for char in text.replace("\r\n", "\n"):
        if char == "\t":
            flush()
            new_run("tab")
        elif char in "\r\n":
            flush()
            new_run("br")
        else:
            buffer.append(char)
    flush()

    return runs


def _iter_runs(element: etree._Element, start: int = 0) -> Iterator[Run]:
    """Yield the runs below an element in document order with their offsets."""
    position = start
    for child in element.iterchildren(tag=etree.Element):
        if local_name(child) == RUN:
            run = Run(child, position)
            yield run
            position = run.end_index
        else:
            yield from _iter_runs(child, position)
            position += size_of(child)


def _find_run(
    element: etree._Element, start: int, index: int, edit_type: EditType
) -> Run | None:
    """Find the first run with text that owns ``index`` for this kind of edit."""
    last_run = None
    for run in _iter_runs(element, start):
        if run.end_index == run.start_index:
            continue
        if edit_type is EditType.DELETE:
            found = run.end_index > index
        else:
            found = run.end_index >= index
        if found:
            return run
        last_run = run
    # a delete at the very end belongs to the last run
    return last_run if edit_type is EditType.DELETE else None


def _replace(target: etree._Element, nodes: list[etree._Element | None]) -> None:
    """Replace ``target`` in its parent with the non-None ``nodes``."""
    parent = target.getparent()
    position = parent.index(target)
    for node in [n for n in nodes if n is not None]:
        parent.insert(position, node)
        position += 1
    parent.remove(target)


def _renumber_divided(
    target: etree._Element,
    left: etree._Element | None,
    right: etree._Element | None,
    generator: TrackedXMLGenerator,
) -> None:
    """Give the second half of a divided w:ins/w:del a change ID of its own."""
    if left is None or right is None or local_name(target) not in TRACKED_WRAPPERS:
        return
    right.set(w("id"), str(generator.new_change_id()))


class Paragraph:
    """Wrapper around a w:p (paragraph) element.

    Offsets count the characters of the paragraph's text as returned by
    :attr:`text`: tabs and breaks count one character each, and text inside
    tracked deletions is included.

    Example:
        >>> para = Paragraph(p_element)
        >>> para.insert_text(5, ", dear")
        >>> para.remove_text(0, 6, track=True, author="Reviewer")
    """

    def __init__(self, element: etree._Element):
        """Initialize Paragraph wrapper.

        Args:
            element: The w:p XML element to wrap
        """
        if local_name(element) != PARAGRAPH:
            raise ValueError(f"Expected w:p element, got {element.tag}")
        self._element = element

    @property
    def element(self) -> etree._Element:
        """Get the underlying XML element."""
        return self._element

    @property
    def text(self) -> str:
        """Get all text content from the paragraph.

        Tabs are returned as "\\t" and breaks as "\\n". Text from tracked
        deletions (w:delText) is included so that offsets stay stable while
        changes are pending.
        """
        return get_text(self._element)

    @property
    def style(self) -> str | None:
        """Get the paragraph style.

        Returns:
            Style name (e.g., 'Heading1', 'Normal') or None if no style set
        """
        p_pr = self._element.find(w(PARAGRAPH_PROPERTIES))
        if p_pr is None:
            return None

        p_style = p_pr.find(w("pStyle"))
        if p_style is None:
            return None

        return p_style.get(w("val"))

    @property
    def runs(self) -> list[Run]:
        """Get all runs in this paragraph with their offsets.

        Runs nested in tracked changes, hyperlinks and other inline containers
        are included in document order.
        """
        return list(_iter_runs(self._element))

    def get_first_run_affected_by_edit(
        self, index: int, edit_type: EditType = EditType.INSERT
    ) -> Run | None:
        """Find the run an edit at ``index`` lands in.

        Args:
            index: Character offset in the paragraph
            edit_type: Kind of edit, which decides boundary ownership

        Returns:
            The affected Run, or None if the paragraph has no text

        Raises:
            OutOfRangeError: If ``index`` is negative, past the end (insert),
                or at/past the end (delete)
        """
        length = text_length(self._element)
        if (
            index < 0
            or (edit_type is EditType.INSERT and index > length)
            or (edit_type is EditType.DELETE and index >= length)
        ):
            raise OutOfRangeError(index, length, target="paragraph")

        return _find_run(self._element, 0, index, edit_type)

    def split_edit(
        self, wrapper: etree._Element, index: int, edit_type: EditType = EditType.INSERT
    ) -> tuple[etree._Element | None, etree._Element | None]:
        """Split a tracked change wrapper (w:ins or w:del) at an offset.

        Args:
            wrapper: w:ins or w:del element inside this paragraph
            index: Character offset in the paragraph
            edit_type: Kind of edit, which decides boundary ownership

        Returns:
            (left, right) tuple of new wrappers with the original attributes,
            either of which may be None when it would hold no text

        Raises:
            ValueError: If ``wrapper`` is not a w:ins or w:del
            OutOfRangeError: If ``index`` falls outside the wrapper
        """
        if local_name(wrapper) not in TRACKED_WRAPPERS:
            raise ValueError(f"Expected w:ins or w:del element, got {wrapper.tag}")
        return self._split_wrapper(wrapper, offset_within(wrapper, self._element), index, edit_type)

    @staticmethod
    def _split_wrapper(
        wrapper: etree._Element, start: int, index: int, edit_type: EditType
    ) -> tuple[etree._Element | None, etree._Element | None]:
        length = text_length(wrapper)
        if index < start or index > start + length:
            raise OutOfRangeError(index - start, length, target=f"w:{local_name(wrapper)}")

        run = _find_run(wrapper, start, index, edit_type)
        if run is None:
            return None, None

        left_run, right_run = split_run(run, index, edit_type)
        left, right = split_around(
            wrapper, path_between(wrapper, run.element), left_run, right_run
        )
        return (
            left if text_length(left) > 0 else None,
            right if text_length(right) > 0 else None,
        )

    def _split_at(
        self, target: etree._Element, start: int, index: int, edit_type: EditType
    ) -> tuple[etree._Element | None, etree._Element | None]:
        """Split a run or tracked change wrapper that starts at ``start``."""
        if local_name(target) in TRACKED_WRAPPERS:
            return self._split_wrapper(target, start, index, edit_type)
        return split_run(Run(target, start), index, edit_type)

    def _edit_target(self, run: Run) -> tuple[etree._Element, int]:
        """Get the element an edit in ``run`` replaces and its offset."""
        parent = run.element.getparent()
        if parent is not None and local_name(parent) in TRACKED_WRAPPERS:
            return parent, offset_within(parent, self._element)
        return run.element, run.start_index

    def _generator(self, author: str | None) -> TrackedXMLGenerator:
        return TrackedXMLGenerator(
            self._element.getroottree().getroot(), author=author or DEFAULT_AUTHOR
        )

    def insert_text(
        self,
        index: int,
        value: str,
        run_props: etree._Element | None = None,
        track: bool = False,
        author: str | None = None,
    ) -> None:
        """Insert text at a character offset.

        The run the offset lands in is split and the new runs are placed
        between the halves. Offsets inside a tracked change split the
        w:ins/w:del wrapper instead, so the new text never ends up inside
        someone else's change; its second half is given a new change ID.

        Args:
            index: Character offset to insert at (0 to len(text))
            value: Text to insert; tabs and newlines become w:tab and w:br
            run_props: Optional w:rPr for the new runs
            track: Wrap the new runs in a tracked insertion
            author: Author of the tracked insertion

        Raises:
            OutOfRangeError: If ``index`` is outside the paragraph
        """
        run = self.get_first_run_affected_by_edit(index, EditType.INSERT)

        new_runs: list[etree._Element] = format_input(value, run_props)
        if not new_runs:
            return
        generator = self._generator(author)
        if track:
            new_runs = [generator.create_insertion(new_runs)]

        if run is None:
            for node in new_runs:
                self._element.append(node)
            logger.debug("Appended %d node(s) to paragraph without text", len(new_runs))
            return

        target, start = self._edit_target(run)
        left, right = self._split_at(target, start, index, EditType.INSERT)
        _renumber_divided(target, left, right, generator)
        _replace(target, [left, *new_runs, right])
        logger.debug("Inserted %d character(s) at %d (tracked=%s)", len(value), index, track)

    def append_text(
        self,
        value: str,
        run_props: etree._Element | None = None,
        track: bool = False,
        author: str | None = None,
    ) -> None:
        """Append text to the end of the paragraph.

        Args:
            value: Text to append; tabs and newlines become w:tab and w:br
            run_props: Optional w:rPr for the new runs
            track: Wrap the new runs in a tracked insertion
            author: Author of the tracked insertion
        """
        new_runs: list[etree._Element] = format_input(value, run_props)
        if not new_runs:
            return
        if track:
            new_runs = [self._generator(author).create_insertion(new_runs)]
        for node in new_runs:
            self._element.append(node)

    def remove_text(
        self, index: int, count: int, track: bool = False, author: str | None = None
    ) -> None:
        """Remove characters starting at a character offset.

        Without tracking the characters are removed from the tree. With
        tracking, characters in ordinary runs are moved into a w:del (their
        w:t become w:delText and still count towards :attr:`text`),
        characters inside a tracked insertion are removed outright, and
        characters that are already inside a tracked deletion are left alone.

        Args:
            index: Character offset of the first character to remove
            count: Number of characters to remove
            track: Record the removal as a tracked deletion
            author: Author of the tracked deletion

        Raises:
            OutOfRangeError: If the range is not inside the paragraph
        """
        length = text_length(self._element)
        if index < 0 or index > length:
            raise OutOfRangeError(index, length, target="paragraph")
        if count < 0 or index + count > length:
            raise OutOfRangeError(index + count, length, target="paragraph")
        if count == 0:
            return

        generator = self._generator(author)
        remaining = count

        while remaining > 0:
            run = self.get_first_run_affected_by_edit(index, EditType.DELETE)
            target, start = self._edit_target(run)
            wrapper = local_name(target) if target is not run.element else None

            if track and wrapper == DELETION:
                skipped = min(remaining, run.end_index - index)
                index += skipped
                remaining -= skipped
                continue

            end = min(index + remaining, start + text_length(target))
            before, rest = self._split_at(target, start, index, EditType.DELETE)
            middle, after = self._split_at(rest, index, end, EditType.DELETE)
            removed = end - index

            _renumber_divided(target, before, after, generator)
            if track and wrapper is None:
                _replace(target, [before, generator.create_deletion([middle]), after])
                index = end
            else:
                _replace(target, [before, after])
                if wrapper == INSERTION and track:
                    logger.debug("Dropped %d character(s) of a tracked insertion", removed)

            remaining -= removed

        logger.debug("Removed %d character(s) (tracked=%s)", count, track)

    def split(self, index: int) -> tuple[etree._Element | None, etree._Element | None]:
        """Split the paragraph into two new paragraphs at a character offset.

        Both paragraphs copy the original's attributes and w:pPr. The original
        paragraph is not modified.

        Args:
            index: Character offset to split at (0 to len(text))

        Returns:
            (before, after) tuple of new w:p elements; a side with no content
            besides w:pPr is None

        Raises:
            OutOfRangeError: If ``index`` is outside the paragraph
        """
        run = self.get_first_run_affected_by_edit(index, EditType.INSERT)
        if run is None:
            before = copy.deepcopy(self._element)
            before.tail = None
            return before, None

        target, start = self._edit_target(run)
        left, right = self._split_at(target, start, index, EditType.INSERT)
        _renumber_divided(target, left, right, self._generator(None))
        before, after = split_around(
            self._element,
            path_between(self._element, target),
            left,
            right,
            skip=PARAGRAPH_PROPERTIES,
        )

        p_pr = self._element.find(w(PARAGRAPH_PROPERTIES))
        results: list[etree._Element | None] = []
        for fragment in (before, after):
            if len(fragment) == 0:
                results.append(None)
                continue
            if p_pr is not None:
                p_pr_copy = copy.deepcopy(p_pr)
                p_pr_copy.tail = None
                fragment.insert(0, p_pr_copy)
            results.append(fragment)

        return results[0], results[1]

    def __len__(self) -> int:
        return text_length(self._element)

    def __repr__(self) -> str:
        """String representation of the paragraph."""
        text = self.text
        text_preview = text[:50] + "..." if len(text) > 50 else text
        style_info = f" style={self.style}" if self.style else ""
        return f"<Paragraph{style_info}: {text_preview!r}>"
