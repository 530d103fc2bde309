"""
Document model classes for python_docx_splice.

These classes provide convenient wrappers around OOXML elements.
"""

from python_docx_splice.models.paragraph import Paragraph, format_input

__all__ = [
    "Paragraph",
    "format_input",
]
