"""
Document class for splicing text in Word documents.

This module provides the Document class which loads a .docx package, exposes
its paragraphs for character-offset editing, and saves the result.
"""

import io
import logging
from pathlib import Path
from typing import Any, BinaryIO

from lxml import etree

from .constants import DEFAULT_AUTHOR, DOCUMENT_PART, w
from .errors import ValidationError
from .models.paragraph import Paragraph
from .package import OOXMLPackage

logger = logging.getLogger(__name__)


class Document:
    """Main class for working with Word documents.

    Documents can be loaded from:
    - File paths (str or Path)
    - Raw bytes
    - BytesIO objects
    - Open file objects (in binary mode)

    Example:
        >>> doc = Document("contract.docx", author="Reviewer")
        >>> doc.insert_text(0, 12, " (amended)", track=True)
        >>> doc.save("contract_edited.docx")

    Attributes:
        path: Path to the document file (None for in-memory documents)
        author: Author name for tracked changes
        xml_tree: Parsed XML tree of word/document.xml
        xml_root: Root element of the XML tree
    """

    def __init__(
        self,
        source: str | Path | bytes | BinaryIO,
        author: str = DEFAULT_AUTHOR,
    ) -> None:
        """Initialize a Document from a .docx file or in-memory data.

        Args:
            source: Path to a .docx file, its raw bytes, or a binary stream
            author: Author name used for tracked changes

        Raises:
            ValidationError: If the document cannot be loaded or is invalid
        """
        if isinstance(source, bytes):
            stream: BinaryIO | None = io.BytesIO(source)
            self.path: Path | None = None
        elif hasattr(source, "read"):
            stream = source  # type: ignore[assignment]
            self.path = None
        else:
            stream = None
            self.path = Path(source)

        self.author = author
        self._package: OOXMLPackage | None = None
        self._load_document(stream)

    def _load_document(self, stream: BinaryIO | None) -> None:
        """Read the package and parse word/document.xml.

        Raises:
            ValidationError: If the package or its main part cannot be read
        """
        source: Path | BinaryIO = stream if stream is not None else self.path  # type: ignore
        self._package = OOXMLPackage.open(source)

        root = self._package.read_xml(DOCUMENT_PART)
        if root is None:
            source_desc = str(self.path) if self.path is not None else "<in-memory document>"
            raise ValidationError(f"{DOCUMENT_PART} not found in {source_desc}")

        self.xml_root = root
        self.xml_tree = root.getroottree()
        logger.debug("Loaded document with %d paragraph(s)", len(self.paragraphs))

    @property
    def paragraphs(self) -> list[Paragraph]:
        """Get all paragraphs in the document in document order.

        Paragraphs inside tables and other block containers are included.

        Returns:
            List of Paragraph objects
        """
        return [Paragraph(p) for p in self.xml_root.iter(w("p"))]

    def paragraph(self, number: int) -> Paragraph:
        """Get one paragraph by its position in :attr:`paragraphs`.

        Args:
            number: 0-based paragraph number

        Raises:
            IndexError: If there is no paragraph with that number
        """
        paragraphs = self.paragraphs
        if number < 0 or number >= len(paragraphs):
            raise IndexError(
                f"Paragraph {number} does not exist (document has {len(paragraphs)})"
            )
        return paragraphs[number]

    @property
    def text(self) -> str:
        """Get the text of all paragraphs, one per line."""
        return "\n".join(p.text for p in self.paragraphs)

    def insert_text(
        self,
        paragraph: int,
        index: int,
        text: str,
        track: bool = False,
        author: str | None = None,
    ) -> None:
        """Insert text into a paragraph at a character offset.

        Args:
            paragraph: 0-based paragraph number
            index: Character offset inside the paragraph
            text: Text to insert
            track: Record the insertion as a tracked change
            author: Override the document's author
        """
        self.paragraph(paragraph).insert_text(
            index, text, track=track, author=author or self.author
        )

    def remove_text(
        self,
        paragraph: int,
        index: int,
        count: int,
        track: bool = False,
        author: str | None = None,
    ) -> None:
        """Remove characters from a paragraph.

        Args:
            paragraph: 0-based paragraph number
            index: Character offset of the first character to remove
            count: Number of characters to remove
            track: Record the removal as a tracked change
            author: Override the document's author
        """
        self.paragraph(paragraph).remove_text(
            index, count, track=track, author=author or self.author
        )

    def _open_package(self) -> OOXMLPackage:
        """Get the package, refusing to work on a closed document.

        Raises:
            ValidationError: If the document has been closed
        """
        if self._package is None or self._package.closed:
            raise ValidationError("Document is closed")
        return self._package

    def save(self, output_path: str | Path | None = None) -> None:
        """Save the document to a file.

        Args:
            output_path: Path to save the document. If None, saves to original path.

        Raises:
            ValueError: If output_path is not provided for in-memory documents
            ValidationError: If the document is closed or cannot be written
        """
        if output_path is None:
            if self.path is None:
                raise ValueError(
                    "output_path is required for in-memory documents. "
                    "Use doc.save(path) or doc.save_to_bytes() instead."
                )
            output_path = self.path

        package = self._open_package()
        package.write_xml(DOCUMENT_PART, self.xml_root)
        try:
            package.save(output_path)
        except OSError as e:
            raise ValidationError(f"Failed to save document: {e}") from e

    def save_to_bytes(self) -> bytes:
        """Save the document to bytes (in-memory).

        Returns:
            bytes: The complete .docx file as bytes

        Raises:
            ValidationError: If the document is closed
        """
        package = self._open_package()
        package.write_xml(DOCUMENT_PART, self.xml_root)
        return package.save_to_bytes()

    def xml(self) -> str:
        """Serialize word/document.xml to a string."""
        return etree.tostring(self.xml_root, encoding="unicode")

    def close(self) -> None:
        """Release the package; the document can no longer be saved."""
        if self._package is not None:
            self._package.close()

    def __enter__(self) -> "Document":
        """Context manager support."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager cleanup."""
        self.close()
