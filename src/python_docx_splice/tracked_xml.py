"""
Tracked change markup for spliced text.

TrackedXMLGenerator wraps runs produced by the editing engine in <w:ins> or
<w:del> elements carrying every attribute Word expects:
- Auto-incrementing change IDs that continue the document's sequence
- ISO 8601 timestamps
- Author information
- RSID (Revision Save ID) on the wrapped runs
"""

import random
from collections.abc import Iterable
from datetime import datetime, timezone

from lxml import etree

from .constants import (
    CHANGE_DATE_FORMAT,
    CHANGE_ID_ELEMENTS,
    DEFAULT_AUTHOR,
    DELETION,
    INSERTION,
    NSMAP,
    RUN,
    w,
)
from .offsets import local_name


class TrackedXMLGenerator:
    """Builds <w:ins> and <w:del> elements around runs.

    Example:
        >>> generator = TrackedXMLGenerator(doc.xml_root, author="Reviewer")
        >>> ins = generator.create_insertion(runs)
        >>> paragraph.element.append(ins)
    """

    def __init__(
        self,
        root: etree._Element | None = None,
        author: str = DEFAULT_AUTHOR,
        rsid: str | None = None,
    ) -> None:
        """Initialize the XML generator.

        Args:
            root: Optional tree to continue the change ID sequence of
            author: Author name for tracked changes
            rsid: Revision Save ID - 8 hex characters (auto-generated if None)
        """
        self.author = author
        self.rsid = rsid if rsid else self._generate_rsid()
        self.next_change_id = self._get_max_change_id(root) + 1

    def create_insertion(
        self, runs: Iterable[etree._Element], author: str | None = None
    ) -> etree._Element:
        """Wrap runs in a tracked insertion.

        Args:
            runs: w:r elements to wrap (moved into the new element)
            author: Override author (uses default if None)

        Returns:
            The new w:ins element
        """
        ins = self._create_wrapper(INSERTION, author)
        for run in runs:
            if local_name(run) == RUN:
                run.set(w("rsidR"), self.rsid)
            ins.append(run)
        return ins

    def create_deletion(
        self, runs: Iterable[etree._Element], author: str | None = None
    ) -> etree._Element:
        """Wrap runs in a tracked deletion.

        Deleted text must live in w:delText, so every w:t inside the runs is
        renamed.

        Args:
            runs: w:r elements to wrap (moved into the new element)
            author: Override author (uses default if None)

        Returns:
            The new w:del element
        """
        deletion = self._create_wrapper(DELETION, author)
        for run in runs:
            if local_name(run) == RUN:
                run.set(w("rsidDel"), self.rsid)
            for text in run.iter(w("t")):
                text.tag = w("delText")
            deletion.append(run)
        return deletion

    def new_change_id(self) -> int:
        """Reserve the next change ID of the sequence."""
        change_id = self.next_change_id
        self.next_change_id += 1
        return change_id

    def _create_wrapper(self, name: str, author: str | None) -> etree._Element:
        author = author if author is not None else self.author
        timestamp = datetime.now(timezone.utc).strftime(CHANGE_DATE_FORMAT)
        change_id = self.new_change_id()

        wrapper = etree.Element(w(name), nsmap=NSMAP)
        wrapper.set(w("id"), str(change_id))
        wrapper.set(w("author"), author)
        wrapper.set(w("date"), timestamp)
        return wrapper

    @staticmethod
    def _generate_rsid() -> str:
        """Generate a random 8-character hex RSID.

        Returns:
            8-character hex string (e.g., "F3F4F4B4")
        """
        return "".join(random.choices("0123456789ABCDEF", k=8))

    @staticmethod
    def _get_max_change_id(root: etree._Element | None) -> int:
        """Find the maximum change ID in a tree.

        Args:
            root: Tree to scan (None means an empty sequence)

        Returns:
            Maximum change ID found, or 0 if none exist
        """
        if root is None:
            return 0

        max_id = 0
        for elem in root.iter(tag=etree.Element):
            if local_name(elem) not in CHANGE_ID_ELEMENTS:
                continue
            id_attr = elem.get(w("id"))
            if id_attr is None:
                continue
            try:
                max_id = max(max_id, int(id_attr))
            except ValueError:
                # Non-integer ID, skip
                pass

        return max_id
