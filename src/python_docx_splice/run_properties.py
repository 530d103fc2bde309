"""
Run properties (w:rPr) carrier.

Formatting is opaque to the editing engine: a run's w:rPr is located, copied
onto every fragment produced from that run, and never inspected.
"""

from __future__ import annotations

import copy

from lxml import etree

from .constants import RUN_PROPERTIES, TEXT_LEAVES, w, xml
from .offsets import local_name


def get_run_props(run: etree._Element, create: bool = False) -> etree._Element | None:
    """Get the w:rPr child of a run.

    Args:
        run: The w:r element
        create: Create an empty w:rPr as the first child if none exists

    Returns:
        The w:rPr element, or None if absent and ``create`` is False
    """
    for child in run.iterchildren(tag=etree.Element):
        if local_name(child) == RUN_PROPERTIES:
            return child

    if not create:
        return None

    rpr = etree.Element(w(RUN_PROPERTIES))
    run.insert(0, rpr)
    return rpr


def copy_run_props(run: etree._Element) -> etree._Element | None:
    """Get an independent copy of a run's w:rPr (None if the run has none)."""
    rpr = get_run_props(run)
    if rpr is None:
        return None
    rpr_copy = copy.deepcopy(rpr)
    rpr_copy.tail = None
    return rpr_copy


def preserve_space(element: etree._Element, force: bool = False) -> etree._Element:
    """Mark a w:t or w:delText element with xml:space="preserve".

    Without ``force`` the marker is only added when the text starts or ends
    with whitespace, which is when Word would otherwise collapse it.

    Args:
        element: The w:t or w:delText element
        force: Add the marker regardless of the text

    Returns:
        The same element, for chaining

    Raises:
        ValueError: If the element is not w:t or w:delText
    """
    if local_name(element) not in TEXT_LEAVES:
        raise ValueError(
            f"preserve_space only works with w:t or w:delText elements, got {element.tag}"
        )

    text = element.text or ""
    if force or (text and (text[0].isspace() or text[-1].isspace())):
        element.set(xml("space"), "preserve")
    return element
