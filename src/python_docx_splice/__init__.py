"""
python_docx_splice - Character-offset text editing for Word documents.

This package splits formatted runs of a WordprocessingML paragraph at any
character offset, so that text can be inserted or removed in place without
losing whitespace or formatting. Edits can optionally be recorded as tracked
changes.

Example:
    >>> from python_docx_splice import Document
    >>> doc = Document("contract.docx", author="Reviewer")
    >>> doc.insert_text(0, 5, " (amended)", track=True)
    >>> doc.save("contract_edited.docx")
"""

__version__ = "0.1.0"
__all__ = [
    "Document",
    "OOXMLPackage",
    "Paragraph",
    "Run",
    "TextBlock",
    "EditType",
    "TrackedXMLGenerator",
    "DocxSpliceError",
    "OutOfRangeError",
    "UnsupportedLeafKindError",
    "ValidationError",
    "find_edit_target",
    "split_run",
    "split_text",
    "format_input",
    "size_of",
    "get_text",
]

from .document import Document
from .errors import DocxSpliceError, OutOfRangeError, UnsupportedLeafKindError, ValidationError
from .models.paragraph import Paragraph, format_input
from .offsets import get_text, size_of
from .package import OOXMLPackage
from .run import EditType, Run, find_edit_target, split_run
from .text_block import TextBlock, split_text
from .tracked_xml import TrackedXMLGenerator
