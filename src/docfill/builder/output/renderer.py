"""
Module: builder.output.renderer

Purpose:
    Render LayoutResult to PDF using ReportLab.
    Each Page becomes one PDF page with elements drawn at the offsets the
    paginator assigned. Text is wrapped with the same helper the measurer
    uses, so drawn heights match measured heights.

Key Functions:
    - render_to_pdf(): Write PDF file, return its SHA-256 digest
    - render_to_bytes(): PDF as bytes

Dependencies:
    - reportlab: PDF generation
    - PIL: Signature images
    - builder.layout: LayoutResult, LayoutConfig, wrap_text

Used By:
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

import hashlib
import io
import logging
from pathlib import Path
from typing import Optional

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from docfill.builder.layout.config import LayoutConfig
from docfill.builder.layout.measure import (
    SIGNATURE_CAPTION_GAP,
    ReportLabMeasurer,
    resolve_style,
    signature_image_size,
    wrap_text,
)
from docfill.builder.layout.models import ElementKind, LayoutResult, Page, Placement

logger = logging.getLogger(__name__)

# Footer configuration
FOOTER_FONT_NAME = "Helvetica"
FOOTER_FONT_SIZE = 9

# Longest signature rule, in points (3 inches)
SIGNATURE_RULE_WIDTH = 216.0

# Glyphs the standard PDF fonts cannot draw
_GLYPH_FALLBACKS = {
    "☐": "[ ]",
    "☑": "[X]",
    "☒": "[X]",
    "□": "[ ]",
}


def render_to_bytes(layout: LayoutResult, config: Optional[LayoutConfig] = None) -> bytes:
    """
    Render layout result to PDF bytes.

    Output is byte-for-byte reproducible for the same layout and config
    (ReportLab invariant mode).

    Args:
        layout: Layout result from paginator
        config: Layout config the layout was computed with

    Returns:
        PDF document bytes
    """
    config = config or LayoutConfig()
    if layout.page_count == 0:
        logger.warning("Empty layout, creating empty PDF")

    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=(config.page_width, config.page_height), invariant=1)
    measurer = ReportLabMeasurer.from_config(config)

    for page in layout.pages:
        _render_page(c, page, layout.page_count, config, measurer)
        c.showPage()

    c.save()
    return buf.getvalue()


def render_to_pdf(
    layout: LayoutResult,
    output_path: Path,
    config: Optional[LayoutConfig] = None,
) -> str:
    """
    Render layout result to PDF file.

    Args:
        layout: Layout result from paginator
        output_path: Path to write PDF
        config: Layout config the layout was computed with

    Returns:
        SHA-256 hex digest of the written file

    Raises:
        OSError: If PDF cannot be written

    Example:
        >>> digest = render_to_pdf(layout, Path("output/lease.pdf"), config)
        >>> len(digest)
        64
    """
    data = render_to_bytes(layout, config)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)

    digest = hashlib.sha256(data).hexdigest()
    logger.info(f"Rendered {layout.page_count} pages to {output_path} (sha256 {digest[:12]})")
    return digest


def _render_page(
    c: canvas.Canvas,
    page: Page,
    page_count: int,
    config: LayoutConfig,
    measurer: ReportLabMeasurer,
) -> None:
    """Draw every placement on a page, then the footer."""
    for placement in page.placements:
        _draw_placement(c, placement, config, measurer)

    if config.show_page_numbers:
        _draw_footer(c, page.index, page_count, config)


def _draw_placement(
    c: canvas.Canvas,
    placement: Placement,
    config: LayoutConfig,
    measurer: ReportLabMeasurer,
) -> None:
    element = placement.element
    if element.kind == ElementKind.SPACER:
        return

    style = resolve_style(element, config)
    lines = wrap_text(_printable(element.text), style, config.available_width)

    text_obj = c.beginText()
    # First baseline sits one font size below the element top
    text_obj.setTextOrigin(
        config.margin_left,
        _transform_y(config.page_height, placement.top + style.font_size, 0),
    )
    text_obj.setFont(style.font_name, style.font_size, style.leading)
    text_obj.setFillColorRGB(0, 0, 0)
    for line in lines:
        text_obj.textLine(line)
    c.drawText(text_obj)

    if element.kind == ElementKind.SIGNATURE_BLOCK:
        area_top = placement.top + len(lines) * style.leading + SIGNATURE_CAPTION_GAP
        area_height = measurer.signature_area_height(element, config.available_width)
        _draw_signature(c, element.image, area_top, area_height, config)


def _draw_signature(
    c: canvas.Canvas,
    image: Optional[Image.Image],
    area_top: float,
    area_height: float,
    config: LayoutConfig,
) -> None:
    """Draw the signature rule with the captured image resting on it."""
    rule_y = _transform_y(config.page_height, area_top, area_height)
    rule_width = min(SIGNATURE_RULE_WIDTH, config.available_width)

    if image is not None:
        width_pt, height_pt = signature_image_size(image, rule_width)
        c.drawImage(
            _pil_to_reader(image),
            config.margin_left,
            rule_y,
            width=width_pt,
            height=height_pt,
            preserveAspectRatio=True,
            mask="auto",
        )

    c.saveState()
    c.setLineWidth(0.75)
    c.line(config.margin_left, rule_y, config.margin_left + rule_width, rule_y)
    c.restoreState()


def _draw_footer(c: canvas.Canvas, page_index: int, page_count: int, config: LayoutConfig) -> None:
    """
    Draw centered "Page X of Y" in the bottom margin.

    Uses 9pt Helvetica in gray, halfway down the bottom margin.
    """
    footer_text = f"Page {page_index + 1} of {page_count}"

    c.saveState()
    c.setFont(FOOTER_FONT_NAME, FOOTER_FONT_SIZE)
    c.setFillColorRGB(0.4, 0.4, 0.4)

    text_width = c.stringWidth(footer_text, FOOTER_FONT_NAME, FOOTER_FONT_SIZE)
    x_pt = (config.page_width - text_width) / 2
    y_pt = max(config.margin_bottom / 2 - FOOTER_FONT_SIZE / 2, 4)

    c.drawString(x_pt, y_pt, footer_text)
    c.restoreState()


def _printable(text: str) -> str:
    for glyph, fallback in _GLYPH_FALLBACKS.items():
        text = text.replace(glyph, fallback)
    return text


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Args:
        img: PIL Image object

    Returns:
        ImageReader for use with ReportLab
    """
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)


def _transform_y(page_height_pt: float, y_top_pt: float, height_pt: float) -> float:
    """
    Convert a top-down Y coordinate to bottom-up PDF Y.

    Args:
        page_height_pt: Page height in points
        y_top_pt: Y position from page top in points
        height_pt: Height of the drawn item in points

    Returns:
        Y of the item's bottom edge, from the page bottom
    """
    return page_height_pt - y_top_pt - height_pt
