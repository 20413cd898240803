"""
Output Package

PDF and DOCX renderers plus the on-disk paper registry.
"""

from .pdf_renderer import render_pdf
from .docx_renderer import render_docx
from .registry import PaperRecord, PaperRegistry, RegistryError, make_paper_id

__all__ = [
    "render_pdf",
    "render_docx",
    "PaperRecord",
    "PaperRegistry",
    "RegistryError",
    "make_paper_id",
]
