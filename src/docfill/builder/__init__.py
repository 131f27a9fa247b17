"""
Module: builder

Purpose:
    Fill pipeline for document templates. Substitutes values into the
    extracted blanks, paginates the result and renders it to PDF.

Key Functions:
    - fill_document(): Main entry point for filling a template
    - compose_elements(): Template text to layout elements
    - paginate(): Arrange elements onto pages

Key Classes:
    - FillConfig: Configuration for filling
    - LayoutConfig: Page geometry and text styles

Dependencies:
    - reportlab: Font metrics and PDF output
    - PIL: Signature images

Used By:
    - docfill.cli: Command-line interface
"""

from .config import FillConfig
from .layout import LayoutConfig, LayoutResult, compose_elements, paginate
from .controller import fill_document, FillResult, FillError

__all__ = [
    # Config
    "FillConfig",
    "LayoutConfig",
    # Layout
    "LayoutResult",
    "compose_elements",
    "paginate",
    # Controller
    "fill_document",
    "FillResult",
    "FillError",
]
