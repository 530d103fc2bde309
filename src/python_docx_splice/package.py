"""
In-memory .docx archive.

A .docx is a ZIP archive of parts. Editing text only ever touches the main
document part, so every part is kept as raw bytes and only the parts asked
for are parsed with lxml. Saving writes the parts back in their original
order, with [Content_Types].xml first.
"""

from __future__ import annotations

import io
import logging
import zipfile
from pathlib import Path
from typing import Any, BinaryIO

from lxml import etree

from .errors import ValidationError

logger = logging.getLogger(__name__)

CONTENT_TYPES_PART = "[Content_Types].xml"


class OOXMLPackage:
    """The parts of a .docx archive, keyed by part name.

    Example:
        >>> with OOXMLPackage.open("contract.docx") as pkg:
        ...     root = pkg.read_xml("word/document.xml")
        ...     pkg.write_xml("word/document.xml", root)
        ...     pkg.save("contract_edited.docx")
    """

    def __init__(self, parts: dict[str, bytes]) -> None:
        self._parts = parts
        self.closed = False

    @classmethod
    def open(cls, source: str | Path | BinaryIO) -> OOXMLPackage:
        """Read every part of a .docx file or binary stream.

        Raises:
            ValidationError: If the file is missing or is not a ZIP archive
        """
        if isinstance(source, str | Path):
            source = Path(source)
            if not source.exists():
                raise ValidationError(f"Document not found: {source}")

        try:
            with zipfile.ZipFile(source) as archive:
                parts = {
                    info.filename: archive.read(info)
                    for info in archive.infolist()
                    if not info.is_dir()
                }
        except (zipfile.BadZipFile, OSError) as e:
            raise ValidationError(f"Source must be a valid .docx (ZIP) file: {e}") from e

        logger.debug("Read %d part(s) from %s", len(parts), source)
        return cls(parts)

    @classmethod
    def from_bytes(cls, data: bytes) -> OOXMLPackage:
        """Read every part of a .docx held in memory."""
        return cls.open(io.BytesIO(data))

    @property
    def part_names(self) -> list[str]:
        """Get the part names in archive order."""
        return list(self._parts)

    def read_xml(self, part_name: str) -> etree._Element | None:
        """Parse a part.

        Args:
            part_name: Name inside the archive (e.g., "word/document.xml")

        Returns:
            Root element of the part, or None if the archive has no such part

        Raises:
            ValidationError: If the part is not well-formed XML
        """
        data = self._parts.get(part_name)
        if data is None:
            return None
        try:
            return etree.fromstring(data)
        except etree.XMLSyntaxError as e:
            raise ValidationError(f"Invalid XML in {part_name}: {e}") from e

    def write_xml(self, part_name: str, element: etree._Element) -> None:
        """Serialize the tree holding ``element`` into a part."""
        self._parts[part_name] = etree.tostring(
            element.getroottree(), encoding="UTF-8", xml_declaration=True, standalone=True
        )

    def save(self, target: str | Path | BinaryIO) -> None:
        """Write the archive to a path or binary stream.

        Raises:
            ValidationError: If the package has been closed
        """
        if self.closed:
            raise ValidationError("Package is closed")

        names = sorted(self._parts, key=lambda name: name != CONTENT_TYPES_PART)
        with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as archive:
            for name in names:
                archive.writestr(name, self._parts[name])
        logger.debug("Wrote %d part(s) to %s", len(names), target)

    def save_to_bytes(self) -> bytes:
        """Write the archive to bytes."""
        buffer = io.BytesIO()
        self.save(buffer)
        return buffer.getvalue()

    def close(self) -> None:
        """Drop the parts held in memory."""
        self._parts = {}
        self.closed = True

    def __enter__(self) -> OOXMLPackage:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
