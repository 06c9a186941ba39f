"""Utilities package - PDF inspection helpers."""

from .pdf_utils import (
    get_page_count,
    get_outline,
    get_pdf_summary
)

__all__ = [
    'get_page_count',
    'get_outline',
    'get_pdf_summary'
]
