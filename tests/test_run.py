"""
Tests for Run, find_edit_target and split_run.
"""

import pytest
from lxml import etree

from python_docx_splice.constants import WORD_NAMESPACE
from python_docx_splice.errors import OutOfRangeError
from python_docx_splice.offsets import get_text
from python_docx_splice.run import EditType, Run, find_edit_target, split_run

W = f"{{{WORD_NAMESPACE}}}"
XML_SPACE = "{http://www.w3.org/XML/1998/namespace}space"


def make_run(body: str, attrs: str = "") -> etree._Element:
    """Helper to create a w:r element from its inner XML."""
    return etree.fromstring(f'<w:r xmlns:w="{WORD_NAMESPACE}"{attrs}>{body}</w:r>')


def fragment_text(fragment: etree._Element | None) -> str:
    """Get the text of a fragment, treating None as empty."""
    return get_text(fragment) if fragment is not None else ""


def child_names(element: etree._Element) -> list[str]:
    """Get the local names of an element's children."""
    return [etree.QName(child).localname for child in element]


class TestRunValue:
    """Tests for building a run's value and offsets."""

    def test_value_and_offsets(self):
        """Test text, tabs and breaks are concatenated in order."""
        run = Run(
            make_run("<w:rPr><w:b/></w:rPr><w:t>Hi</w:t><w:tab/><w:t>there</w:t><w:br/>"), 10
        )
        assert run.value == "Hi\tthere\n"
        assert run.start_index == 10
        assert run.end_index == 19
        assert len(run) == len(run.value)

    def test_deleted_text_counts(self):
        """Test w:delText contributes to the value."""
        run = Run(make_run("<w:delText>old</w:delText>"))
        assert run.value == "old"

    def test_rejects_non_run(self):
        """Test wrapping a non-run element raises."""
        p = etree.Element(f"{W}p")
        with pytest.raises(ValueError, match="Expected w:r element"):
            Run(p)

    def test_properties(self):
        """Test the run's w:rPr is exposed."""
        run = Run(make_run("<w:rPr><w:i/></w:rPr><w:t>x</w:t>"))
        assert run.properties is not None
        assert run.properties[0].tag == f"{W}i"
        assert Run(make_run("<w:t>x</w:t>")).properties is None

    def test_text_blocks(self):
        """Test leaves are listed with absolute offsets."""
        run = Run(make_run("<w:t>AB</w:t><w:tab/><w:t>CD</w:t>"), 4)
        assert [(b.start_index, b.end_index, b.value) for b in run.text_blocks] == [
            (4, 6, "AB"),
            (6, 7, "\t"),
            (7, 9, "CD"),
        ]

    def test_repr(self):
        """Test string representation."""
        assert repr(Run(make_run("<w:t>Hi</w:t>"), 2)) == "<Run [2:4]: 'Hi'>"


class TestFindEditTarget:
    """Tests for locating the leaf an edit lands in."""

    def test_insert_boundary_attaches_to_preceding_leaf(self):
        """Test an insert at a boundary extends the leaf ending there."""
        run = Run(make_run("<w:t>AB</w:t><w:t>CD</w:t>"))
        target = find_edit_target(run, 2, EditType.INSERT)
        assert target.value == "AB"
        assert (target.start_index, target.end_index) == (0, 2)

    def test_delete_boundary_attaches_to_following_leaf(self):
        """Test a delete at a boundary starts with the following leaf."""
        run = Run(make_run("<w:t>AB</w:t><w:t>CD</w:t>"))
        target = find_edit_target(run, 2, EditType.DELETE)
        assert target.value == "CD"
        assert (target.start_index, target.end_index) == (2, 4)

    def test_edit_type_applies_to_nested_leaves(self):
        """Test the delete rule also holds for leaves below containers."""
        run = Run(
            make_run(
                "<w:container><w:t>AB</w:t></w:container><w:container><w:t>CD</w:t></w:container>"
            )
        )
        assert find_edit_target(run, 2, EditType.DELETE).value == "CD"
        assert find_edit_target(run, 2, EditType.INSERT).value == "AB"

    def test_insert_is_default(self):
        """Test the default edit type is insert."""
        run = Run(make_run("<w:t>AB</w:t><w:t>CD</w:t>"))
        assert run.find_edit_target(2).value == "AB"

    def test_start_of_run_skips_empty_leaves(self):
        """Test an edit at 0 lands in the first leaf with text."""
        run = Run(make_run("<w:t/><w:t>AB</w:t>"))
        assert find_edit_target(run, 0).value == "AB"
        assert find_edit_target(run, 0, EditType.DELETE).value == "AB"

    def test_delete_at_end_uses_last_leaf(self):
        """Test a delete at the very end falls back to the last leaf."""
        run = Run(make_run("<w:t>AB</w:t><w:tab/>"))
        target = find_edit_target(run, 3, EditType.DELETE)
        assert target.value == "\t"

    def test_relative_to_run_start(self):
        """Test offsets are relative to the run, whatever its start index."""
        run = Run(make_run("<w:t>AB</w:t><w:t>CD</w:t>"), 100)
        assert find_edit_target(run, 3).value == "CD"

    def test_run_without_text(self):
        """Test a run without text has no target."""
        run = Run(make_run("<w:rPr><w:b/></w:rPr>"))
        assert find_edit_target(run, 0) is None

    @pytest.mark.parametrize("index", [-1, 5])
    def test_out_of_range(self, index):
        """Test offsets outside the run are rejected."""
        run = Run(make_run("<w:t>ABCD</w:t>"))
        with pytest.raises(OutOfRangeError) as exc_info:
            find_edit_target(run, index)
        assert exc_info.value.index == index
        assert exc_info.value.length == 4


class TestSplitRun:
    """Tests for splitting a run into two runs."""

    def test_hello_world(self):
        """Test splitting a single w:t run after 'Hello'."""
        run = Run(make_run("<w:t>Hello World</w:t>"))
        left, right = split_run(run, 5, EditType.INSERT)
        assert fragment_text(left) == "Hello"
        assert fragment_text(right) == " World"
        assert right.find(f"{W}t").get(XML_SPACE) == "preserve"

    @pytest.mark.parametrize("edit_type", [EditType.INSERT, EditType.DELETE])
    def test_length_conservation(self, edit_type):
        """Test the fragments always add up to the original text."""
        run = Run(
            make_run(
                "<w:rPr><w:b/></w:rPr><w:t xml:space='preserve'> A </w:t><w:tab/>"
                "<w:t>BC</w:t><w:br/><w:delText>D</w:delText><w:t>EF</w:t>"
            ),
            7,
        )
        for index in range(run.start_index, run.end_index + 1):
            left, right = split_run(run, index, edit_type)
            assert fragment_text(left) + fragment_text(right) == run.value
            assert len(fragment_text(left)) == index - run.start_index

    @pytest.mark.parametrize("edit_type", [EditType.INSERT, EditType.DELETE])
    def test_split_at_start(self, edit_type):
        """Test splitting at the start leaves nothing on the left."""
        run = Run(make_run("<w:t>AB</w:t><w:tab/><w:t>CD</w:t>"), 3)
        left, right = split_run(run, 3, edit_type)
        assert left is None
        assert fragment_text(right) == run.value
        assert child_names(right) == ["t", "tab", "t"]

    @pytest.mark.parametrize("edit_type", [EditType.INSERT, EditType.DELETE])
    def test_split_at_end(self, edit_type):
        """Test splitting at the end leaves nothing on the right."""
        run = Run(make_run("<w:t>AB</w:t><w:tab/><w:t>CD</w:t>"), 3)
        left, right = split_run(run, 8, edit_type)
        assert right is None
        assert fragment_text(left) == run.value

    def test_split_between_leaves(self):
        """Test an insert between two leaves keeps them whole."""
        run = Run(make_run("<w:t>AB</w:t><w:t>CD</w:t>"))
        left, right = split_run(run, 2, EditType.INSERT)
        assert [t.text for t in left.iter(f"{W}t")] == ["AB"]
        assert [t.text for t in right.iter(f"{W}t")] == ["CD"]

    def test_split_at_atomic_leaf(self):
        """Test a tab is never divided."""
        run = Run(make_run("<w:t>A</w:t><w:tab/><w:t>B</w:t>"))
        left, right = split_run(run, 2, EditType.DELETE)
        assert fragment_text(left) == "A\t"
        assert fragment_text(right) == "B"

        left, right = split_run(run, 1, EditType.DELETE)
        assert fragment_text(left) == "A"
        assert fragment_text(right) == "\tB"

    def test_run_properties_replicated(self):
        """Test both fragments carry a copy of the run properties."""
        element = make_run("<w:rPr><w:b/><w:sz w:val='28'/></w:rPr><w:t>Hello</w:t>")
        left, right = split_run(Run(element), 2)

        for fragment in (left, right):
            assert child_names(fragment)[0] == "rPr"
            rpr = fragment[0]
            assert rpr is not element[0]
            assert rpr.find(f"{W}b") is not None
            assert rpr.find(f"{W}sz").get(f"{W}val") == "28"
            # exactly one rPr
            assert child_names(fragment).count("rPr") == 1

    def test_run_attributes_copied(self):
        """Test fragments keep the run's own attributes."""
        element = make_run("<w:t>Hello</w:t>", attrs=' w:rsidR="00AB12CD"')
        left, right = split_run(Run(element), 3)
        assert left.get(f"{W}rsidR") == "00AB12CD"
        assert right.get(f"{W}rsidR") == "00AB12CD"
        assert left.tag == right.tag == f"{W}r"

    def test_surrounding_content_kept_in_order(self):
        """Test non-text children stay on their side of the split."""
        element = make_run(
            "<w:t>AB</w:t><w:fldChar w:fldCharType='begin'/><w:t>CD</w:t><w:lastRenderedPageBreak/>"
        )
        left, right = split_run(Run(element), 3)
        assert child_names(left) == ["t", "fldChar", "t"]
        assert child_names(right) == ["t", "lastRenderedPageBreak"]
        assert fragment_text(left) == "ABC"
        assert fragment_text(right) == "D"

    def test_nested_leaf_splits_container(self):
        """Test a leaf below a container splits the container too."""
        element = make_run(
            "<w:t>AB</w:t><w:container><w:t>CD</w:t><w:t>EF</w:t></w:container><w:t>GH</w:t>"
        )
        left, right = split_run(Run(element), 3)
        assert fragment_text(left) == "ABC"
        assert fragment_text(right) == "DEFGH"
        assert child_names(left) == ["t", "container"]
        assert child_names(right) == ["container", "t"]

    def test_empty_fragment_dropped(self):
        """Test a side holding only empty leaves is None."""
        run = Run(make_run("<w:t/><w:t>AB</w:t>"))
        left, right = split_run(run, 0)
        assert left is None
        assert fragment_text(right) == "AB"

    def test_run_without_text(self):
        """Test a run without text produces no fragments."""
        run = Run(make_run("<w:rPr><w:b/></w:rPr><w:t/>"))
        assert split_run(run, 0) == (None, None)

    def test_source_unchanged_and_idempotent(self):
        """Test splitting twice gives equal fragments and leaves the run alone."""
        element = make_run("<w:rPr><w:i/></w:rPr><w:t>Hello</w:t><w:tab/><w:t>World</w:t>")
        before = etree.tostring(element)
        run = Run(element)

        first = split_run(run, 7)
        second = run.split(7)

        assert etree.tostring(element) == before
        assert [etree.tostring(f) for f in first] == [etree.tostring(f) for f in second]

    def test_absolute_index(self):
        """Test the split offset is absolute when the run starts later."""
        run = Run(make_run("<w:t>Hello</w:t>"), 20)
        left, right = split_run(run, 22)
        assert (fragment_text(left), fragment_text(right)) == ("He", "llo")

    @pytest.mark.parametrize("index", [19, 26])
    def test_out_of_range(self, index):
        """Test offsets outside the run are rejected."""
        run = Run(make_run("<w:t>Hello</w:t>"), 20)
        with pytest.raises(OutOfRangeError):
            split_run(run, index)
