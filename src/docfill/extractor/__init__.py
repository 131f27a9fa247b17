"""
Module: extractor

Purpose:
    Field extraction for document templates. Locates labeled blanks in raw
    text and classifies them as signature, date, currency, checkbox or
    generic fields.

Key Functions:
    - extract_fields(): Fields plus warnings
    - extract(): Fields only
    - read_document_text(): Template text from .txt or .pdf

Key Classes:
    - ExtractionConfig: Extraction settings
    - ExtractionResult: Ordered fields with warnings

Dependencies:
    - fitz (PyMuPDF): PDF template text

Used By:
    - docfill.builder.controller
    - docfill.cli
"""

from .config import ExtractionConfig
from .pipeline import ExtractionResult, extract, extract_fields, normalize_label
from .sources import read_document_text

__all__ = [
    "ExtractionConfig",
    "ExtractionResult",
    "extract",
    "extract_fields",
    "normalize_label",
    "read_document_text",
]
