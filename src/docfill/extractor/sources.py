"""
Module: extractor.sources

Purpose:
    Read template text from disk. Plain text files are read as-is; PDF
    templates go through PyMuPDF with one form feed between pages so the
    composer can keep the original page breaks.

Key Functions:
    - read_document_text(): Text of a .txt/.md/.pdf template

Dependencies:
    - fitz (pymupdf): PDF text extraction

Used By:
    - docfill.cli: Template loading
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import fitz

from docfill.core.errors import InvalidInput

logger = logging.getLogger(__name__)

PAGE_SEPARATOR = "\f"
TEXT_SUFFIXES = {".txt", ".md", ".text"}


def read_document_text(path: Path) -> str:
    """
    Read a template's text.

    Args:
        path: Path to a text or PDF template

    Returns:
        Document text; PDF pages are joined with a form feed

    Raises:
        InvalidInput: If the file type is not supported
        FileNotFoundError: If the file does not exist

    Example:
        >>> text = read_document_text(Path("lease.pdf"))
        >>> text.count("\\f")  # page breaks
        3
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Template not found: {path}")

    suffix = path.suffix.lower()
    if suffix in TEXT_SUFFIXES:
        return path.read_text(encoding="utf-8")
    if suffix == ".pdf":
        return _read_pdf_text(path)
    raise InvalidInput(f"Unsupported template type: {path.suffix or path.name}")


def _read_pdf_text(path: Path) -> str:
    pages: List[str] = []
    with fitz.open(str(path)) as doc:
        for page in doc:
            try:
                pages.append(page.get_text("text").rstrip("\n"))
            except (RuntimeError, ValueError) as e:
                logger.warning(f"Failed to extract text from page {page.number} of {path.name}: {e}")
                pages.append("")
    logger.debug(f"Read {len(pages)} pages from {path.name}")
    return PAGE_SEPARATOR.join(pages)
