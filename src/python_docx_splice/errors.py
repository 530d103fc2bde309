"""
Custom exception classes for python_docx_splice package.

Every check that can fail runs before the document tree is touched, so an
exception from this package always leaves the tree unchanged.
"""


class DocxSpliceError(Exception):
    """Base exception for all python_docx_splice errors."""

    pass


class OutOfRangeError(DocxSpliceError, IndexError):
    """Raised when an edit offset falls outside the addressable text.

    Offsets are never clamped: a negative offset, or one past the end of the
    run, text block or paragraph being edited, is always reported.

    Attributes:
        index: The offending offset
        length: Number of addressable characters (None if not known)
        target: Short description of what was being edited
    """

    def __init__(self, index: int, length: int | None = None, target: str = "text") -> None:
        self.index = index
        self.length = length
        self.target = target
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format an error message naming the valid range."""
        msg = f"Index {self.index} is out of range for {self.target}"
        if self.length is not None:
            msg += f" of length {self.length}"
        return msg


class UnsupportedLeafKindError(DocxSpliceError, ValueError):
    """Raised when an element that does not carry text is treated as a text leaf.

    Only w:t, w:delText, w:tab and w:br can be wrapped as text blocks. Seeing
    anything else means a caller routed the wrong element into the engine.

    Attributes:
        tag: The element tag that was rejected
    """

    def __init__(self, tag: str) -> None:
        self.tag = tag
        super().__init__(
            f"Unsupported text leaf {tag!r}: expected one of w:t, w:delText, w:tab, w:br"
        )


class ValidationError(DocxSpliceError):
    """Raised when a package or document cannot be loaded or saved.

    Attributes:
        errors: List of specific error messages (optional)
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or []
        super().__init__(message)

    def __str__(self) -> str:
        """Format error with all details."""
        if not self.errors:
            return super().__str__()

        error_details = "\n  - " + "\n  - ".join(self.errors)
        return f"{super().__str__()}{error_details}"
