"""
Module: builder.output

Purpose:
    PDF rendering for filled templates.
    Converts LayoutResult to PDF files using ReportLab.

Key Functions:
    - render_to_pdf(): Render layout to PDF, return SHA-256 digest
    - render_to_bytes(): Render layout to PDF bytes

Dependencies:
    - reportlab: PDF generation
    - PIL: Signature images
    - builder.layout.models: LayoutResult

Used By:
    - builder.controller: Pipeline orchestration
"""

from .renderer import render_to_bytes, render_to_pdf

__all__ = [
    "render_to_bytes",
    "render_to_pdf",
]
