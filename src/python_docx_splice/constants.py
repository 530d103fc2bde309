"""
Centralized constants for OOXML namespaces and element names.

The split/splice engine matches elements by local name, so the sets below are
plain local names. New elements are always created in the main
WordprocessingML namespace through :func:`w`.
"""

# =============================================================================
# Namespaces
# =============================================================================

# Main WordprocessingML namespace (Word 2007+)
WORD_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

# Package namespaces used when reading .docx archives
PACKAGE_RELATIONSHIPS_NAMESPACE = "http://schemas.openxmlformats.org/package/2006/relationships"
CONTENT_TYPES_NAMESPACE = "http://schemas.openxmlformats.org/package/2006/content-types"

# XML namespace (xml:space)
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

NSMAP = {"w": WORD_NAMESPACE}

# Main document part inside a .docx package
DOCUMENT_PART = "word/document.xml"


# =============================================================================
# Element names
# =============================================================================

# Leaves that carry variable-length text
TEXT_LEAVES = frozenset({"t", "delText"})

# Leaves that always count as a single character
ATOMIC_LEAVES = frozenset({"tab", "br"})

LEAF_NAMES = TEXT_LEAVES | ATOMIC_LEAVES

# Characters contributed by atomic leaves
ATOMIC_VALUES = {"tab": "\t", "br": "\n"}

RUN = "r"
RUN_PROPERTIES = "rPr"
PARAGRAPH = "p"
PARAGRAPH_PROPERTIES = "pPr"

# Tab-stop definitions; the w:tab children of this element are not text
TAB_STOPS = "tabs"

# Tracked change wrappers that hold runs
INSERTION = "ins"
DELETION = "del"
TRACKED_WRAPPERS = frozenset({INSERTION, DELETION})

# Elements whose w:id attribute belongs to the tracked change id sequence
CHANGE_ID_ELEMENTS = frozenset(
    {
        "ins",
        "del",
        "moveFrom",
        "moveTo",
        "pPrChange",
        "rPrChange",
        "sectPrChange",
        "tblPrChange",
        "trPrChange",
        "tcPrChange",
    }
)

# Date format used for w:date on tracked changes
CHANGE_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

DEFAULT_AUTHOR = "python-docx-splice"


# =============================================================================
# Helper Functions
# =============================================================================


def w(tag: str) -> str:
    """Create a fully qualified Word namespace tag.

    Args:
        tag: Tag name without namespace prefix (e.g., "p", "r", "t")

    Returns:
        Fully qualified tag (e.g., "{http://...wordprocessingml/2006/main}p")

    Example:
        >>> w("p")
        '{http://schemas.openxmlformats.org/wordprocessingml/2006/main}p'
    """
    return f"{{{WORD_NAMESPACE}}}{tag}"


def xml(tag: str) -> str:
    """Create a fully qualified tag in the XML namespace (e.g. ``xml:space``)."""
    return f"{{{XML_NAMESPACE}}}{tag}"
