"""
Module: builder.layout.measure

Purpose:
    Height measurement for content elements. The paginator only ever sees
    the Measurer protocol, so any text engine (or a fake in tests) can be
    plugged in. The default implementation uses ReportLab font metrics,
    which are the same metrics the renderer draws with.

Key Functions:
    - wrap_text(): Split text into lines that fit a width
    - resolve_style(): Effective TextStyle for an element
    - signature_image_size(): Drawn size of a signature image

Key Classes:
    - Measurer: Protocol with one method, measure()
    - ReportLabMeasurer: Font-metric based measurer
    - HeightCache: Per-call memo of measured heights

Dependencies:
    - reportlab.lib.utils: simpleSplit line wrapping
    - PIL: Signature image dimensions

Used By:
    - builder.layout.paginator: Measures units before placing them
    - builder.output.renderer: Wraps text identically when drawing
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional, Protocol, Sequence, Tuple, runtime_checkable

from PIL import Image
from reportlab.lib.utils import simpleSplit

from docfill.core.errors import InvalidInput

from .config import LayoutConfig, TextStyle
from .models import ContentElement, ElementKind

logger = logging.getLogger(__name__)

# Tallest a captured signature image is drawn, in points
MAX_SIGNATURE_IMAGE_HEIGHT = 72.0
# Gap between a signature rule and its caption
SIGNATURE_CAPTION_GAP = 4.0


@runtime_checkable
class Measurer(Protocol):
    """Anything that can report an element's rendered height."""

    def measure(self, element: ContentElement, style: TextStyle, available_width: float) -> float:
        ...


def resolve_style(element: ContentElement, config: LayoutConfig) -> TextStyle:
    """Element override, else the heading or body style from config."""
    if element.style is not None:
        return element.style
    if element.kind == ElementKind.HEADING:
        return config.heading_style
    return config.body_style


def wrap_text(text: str, style: TextStyle, width: float) -> List[str]:
    """
    Wrap text to `width`, honoring explicit line breaks.

    Empty source lines are kept so blank lines inside a block still take
    vertical space.

    Example:
        >>> wrap_text("Name: Jane Doe", TextStyle(), 500)
        ['Name: Jane Doe']
    """
    if not text:
        return []
    lines: List[str] = []
    for source_line in text.split("\n"):
        wrapped = simpleSplit(source_line, style.font_name, style.font_size, width)
        lines.extend(wrapped or [""])
    return lines


def signature_image_size(
    image: Image.Image,
    available_width: float,
    max_height: float = MAX_SIGNATURE_IMAGE_HEIGHT,
) -> Tuple[float, float]:
    """Scale an image down (never up) to fit width and max height."""
    width, height = image.size
    if width <= 0 or height <= 0:
        return 0.0, 0.0
    scale = min(1.0, available_width / width, max_height / height)
    return width * scale, height * scale


class ReportLabMeasurer:
    """
    Measures elements with ReportLab font metrics.

    Stateless, so one instance can be shared across threads.

    Heights:
        - spacer / fixed_height: the fixed height
        - text kinds: wrapped line count * leading
        - signature block: caption lines + signature area (rule height or
          scaled image, whichever is taller) + caption gap
    """

    def __init__(self, signature_line_height: float = 36.0) -> None:
        self.signature_line_height = signature_line_height

    @classmethod
    def from_config(cls, config: LayoutConfig) -> ReportLabMeasurer:
        return cls(signature_line_height=config.signature_line_height)

    def measure(self, element: ContentElement, style: TextStyle, available_width: float) -> float:
        if element.fixed_height is not None:
            return float(element.fixed_height)

        height = len(wrap_text(element.text, style, available_width)) * style.leading
        if element.kind == ElementKind.SIGNATURE_BLOCK:
            height += self.signature_area_height(element, available_width) + SIGNATURE_CAPTION_GAP
        return height

    def signature_area_height(self, element: ContentElement, available_width: float) -> float:
        area = self.signature_line_height
        if element.image is not None:
            _, image_height = signature_image_size(element.image, available_width)
            area = max(area, image_height)
        return area


class HeightCache:
    """
    Measured heights for one pagination call, keyed by input index.

    Each element is measured at most once even when it is evaluated
    repeatedly as part of a keep-with-next chain.
    """

    def __init__(
        self,
        elements: Sequence[ContentElement],
        config: LayoutConfig,
        measurer: Measurer,
    ) -> None:
        self._elements = elements
        self._config = config
        self._measurer = measurer
        self._heights: Dict[int, float] = {}

    def __len__(self) -> int:
        return len(self._heights)

    def element(self, index: int) -> ContentElement:
        return self._elements[index]

    def height(self, index: int) -> float:
        cached: Optional[float] = self._heights.get(index)
        if cached is not None:
            return cached

        element = self._elements[index]
        style = resolve_style(element, self._config)
        value = self._measurer.measure(element, style, self._config.available_width)
        if value is None or not math.isfinite(value) or value < 0:
            raise InvalidInput(f"Element {index} measured to invalid height: {value!r}")

        self._heights[index] = float(value)
        logger.debug(f"Measured element {index} ({element.kind.value}): {value:g}pt")
        return self._heights[index]
