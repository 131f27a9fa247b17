"""
Module: builder.layout

Purpose:
    Page layout for filled templates.
    Converts template text and field values into positioned page layouts.

Key Functions:
    - compose_elements(): Template text to ContentElements
    - paginate(): Arrange elements onto pages

Key Classes:
    - LayoutConfig: Configuration for page layout
    - ContentElement: One unit of layout with its directives
    - Page: Single page layout
    - Measurer: Height measurement protocol

Dependencies:
    - reportlab: Font metrics and page sizes
    - PIL: Signature images

Used By:
    - builder.controller: End-to-end fill
"""

from .config import LayoutConfig, TextStyle, PAGE_SIZES
from .models import ContentElement, ElementKind, Placement, Page, LayoutResult
from .measure import Measurer, ReportLabMeasurer, wrap_text
from .composer import compose_elements, format_value, missing_values
from .paginator import paginate

__all__ = [
    # Config
    "LayoutConfig",
    "TextStyle",
    "PAGE_SIZES",
    # Models
    "ContentElement",
    "ElementKind",
    "Placement",
    "Page",
    "LayoutResult",
    # Measurement
    "Measurer",
    "ReportLabMeasurer",
    "wrap_text",
    # Functions
    "compose_elements",
    "format_value",
    "missing_values",
    "paginate",
]
