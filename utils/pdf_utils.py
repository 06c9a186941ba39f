"""
PDF inspection utilities.

Opens PDFs with PyMuPDF to report page geometry and the outline (TOC),
independently of the merge codec.
"""
from typing import Dict, List

import fitz  # PyMuPDF

from core.exceptions import ParseError


def _open_pdf(pdf_bytes: bytes) -> fitz.Document:
    """Open PDF bytes with PyMuPDF, mapping failures to ParseError."""
    try:
        return fitz.open(stream=pdf_bytes, filetype="pdf")
    except (RuntimeError, ValueError) as e:
        raise ParseError(f"PyMuPDF cannot open document: {e}") from e


def get_page_count(pdf_bytes: bytes) -> int:
    """
    Count pages of a PDF.

    Args:
        pdf_bytes: Complete PDF file contents

    Returns:
        Number of pages
    """
    doc = _open_pdf(pdf_bytes)
    try:
        return doc.page_count
    finally:
        doc.close()


def get_outline(pdf_bytes: bytes) -> List[Dict]:
    """
    Read the outline (bookmarks) of a PDF.

    Returns:
        List of dicts with 'level' (1-based), 'title' and 'page' (1-indexed)
    """
    doc = _open_pdf(pdf_bytes)
    try:
        return [
            {'level': level, 'title': title, 'page': page}
            for level, title, page in doc.get_toc(simple=True)
        ]
    finally:
        doc.close()


def get_pdf_summary(pdf_bytes: bytes) -> Dict:
    """
    Summarize a PDF: page count, page sizes and outline.

    Args:
        pdf_bytes: Complete PDF file contents

    Returns:
        Dict with 'page_count', 'pages' and 'outline'
    """
    doc = _open_pdf(pdf_bytes)
    try:
        pages = [
            {
                'page_number': index + 1,
                'width': round(page.rect.width, 2),
                'height': round(page.rect.height, 2),
                'rotation': page.rotation
            }
            for index, page in enumerate(doc)
        ]
        outline = [
            {'level': level, 'title': title, 'page': page}
            for level, title, page in doc.get_toc(simple=True)
        ]
        return {
            'page_count': doc.page_count,
            'pages': pages,
            'outline': outline
        }
    finally:
        doc.close()
