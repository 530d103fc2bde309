"""
Shared fixtures for building minimal .docx files.
"""

import io
import zipfile
from collections.abc import Callable
from pathlib import Path

import pytest

WORD_NAMESPACE = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

CONTENT_TYPES = """<?xml version="1.0" encoding="UTF-8"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
<Default Extension="xml" ContentType="application/xml"/>
<Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""

RELS = """<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>"""


def build_docx(body: str) -> bytes:
    """Build a minimal but valid .docx whose w:body holds ``body``.

    [Content_Types].xml is written last so that saving has to reorder it.
    """
    document_xml = f"""<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<w:document xmlns:w="{WORD_NAMESPACE}">
  <w:body>{body}</w:body>
</w:document>"""

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as docx:
        docx.writestr("word/document.xml", document_xml)
        docx.writestr("_rels/.rels", RELS)
        docx.writestr("[Content_Types].xml", CONTENT_TYPES)
    return buffer.getvalue()


@pytest.fixture
def docx_bytes() -> Callable[[str], bytes]:
    """Factory for .docx bytes from w:body content."""
    return build_docx


@pytest.fixture
def docx_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a .docx from w:body content into a temporary directory."""

    def create(body: str, name: str = "test.docx") -> Path:
        path = tmp_path / name
        path.write_bytes(build_docx(body))
        return path

    return create
