"""
Module: builder.layout.config

Purpose:
    Configuration for the page layout engine.
    Defines page dimensions, margins, spacing and text styles.
    All lengths are PDF points (1/72 inch).

Key Classes:
    - TextStyle: Font and leading for measured text
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - reportlab.lib.pagesizes: Named page sizes

Used By:
    - builder.layout.measure: Height measurement
    - builder.layout.paginator: Page arrangement
    - builder.output.renderer: Drawing
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from reportlab.lib.pagesizes import A4, legal, letter

from docfill.core.errors import InvalidInput

PAGE_SIZES = {
    "letter": letter,
    "a4": A4,
    "legal": legal,
}

# One inch
DEFAULT_MARGIN_PT = 72.0


@dataclass(frozen=True)
class TextStyle:
    """
    Font settings used to measure and draw text (immutable).

    Attributes:
        font_name: Standard PDF font name
        font_size: Size in points
        leading: Baseline-to-baseline distance in points
    """
    font_name: str = "Helvetica"
    font_size: float = 11.0
    leading: float = 14.0

    def __post_init__(self) -> None:
        if self.font_size <= 0:
            raise InvalidInput(f"font_size must be positive: {self.font_size}")
        if self.leading < self.font_size:
            raise InvalidInput(
                f"leading ({self.leading}) must not be smaller than font_size ({self.font_size})"
            )


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for page layout (immutable).

    Controls page dimensions, margins, spacing and text styles.

    Attributes:
        page_width: Page width in points
        page_height: Page height in points
        margin_top: Top margin in points
        margin_bottom: Bottom margin in points
        margin_left: Left margin in points
        margin_right: Right margin in points
        element_spacing: Vertical gap between consecutive elements on a page
        body_style: Style for paragraphs, field and signature blocks
        heading_style: Style for headings
        signature_line_height: Space reserved above a signature rule
        show_page_numbers: Draw "Page X of Y" in the bottom margin

    Example:
        >>> config = LayoutConfig()
        >>> config.content_height
        648.0  # US Letter minus 1-inch margins
    """

    # Page dimensions (US Letter)
    page_width: float = letter[0]
    page_height: float = letter[1]

    # Margins
    margin_top: float = DEFAULT_MARGIN_PT
    margin_bottom: float = DEFAULT_MARGIN_PT
    margin_left: float = DEFAULT_MARGIN_PT
    margin_right: float = DEFAULT_MARGIN_PT

    # Spacing
    element_spacing: float = 8.0
    signature_line_height: float = 36.0

    # Text
    body_style: TextStyle = field(default_factory=TextStyle)
    heading_style: TextStyle = field(
        default_factory=lambda: TextStyle("Helvetica-Bold", 14.0, 18.0)
    )

    # Behavior
    show_page_numbers: bool = True

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise InvalidInput(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise InvalidInput(f"page_height must be positive: {self.page_height}")
        for name in ("margin_top", "margin_bottom", "margin_left", "margin_right"):
            if getattr(self, name) < 0:
                raise InvalidInput(f"{name} must be non-negative: {getattr(self, name)}")
        if self.element_spacing < 0:
            raise InvalidInput(f"element_spacing must be non-negative: {self.element_spacing}")
        if self.available_width <= 0:
            raise InvalidInput("Margins exceed page width")
        if self.content_height <= 0:
            raise InvalidInput("Margins exceed page height")

    @property
    def available_width(self) -> float:
        """Width available for content (excluding margins)."""
        return self.page_width - self.margin_left - self.margin_right

    @property
    def content_height(self) -> float:
        """Height available for content (excluding margins)."""
        return self.page_height - self.margin_top - self.margin_bottom

    @property
    def content_bottom(self) -> float:
        """Y offset from the page top where content must end."""
        return self.page_height - self.margin_bottom

    @classmethod
    def with_content_height(cls, content_height: float, **overrides: Any) -> LayoutConfig:
        """
        Build a config whose printable height is exactly `content_height`.

        Raises:
            InvalidInput: If content_height is not positive

        Example:
            >>> LayoutConfig.with_content_height(500, margin_top=0, margin_bottom=0).page_height
            500
        """
        if content_height is None or content_height <= 0:
            raise InvalidInput(f"content_height must be positive: {content_height}")
        top = overrides.get("margin_top", DEFAULT_MARGIN_PT)
        bottom = overrides.get("margin_bottom", DEFAULT_MARGIN_PT)
        return cls(page_height=content_height + top + bottom, **overrides)

    @classmethod
    def for_page_size(cls, name: str, margin: float = DEFAULT_MARGIN_PT, **overrides: Any) -> LayoutConfig:
        """
        Build a config for a named page size with uniform margins.

        Args:
            name: "letter", "a4" or "legal" (case-insensitive)
            margin: Margin on all four sides in points
        """
        try:
            width, height = PAGE_SIZES[name.lower()]
        except KeyError:
            raise InvalidInput(
                f"Unknown page size {name!r}; expected one of {sorted(PAGE_SIZES)}"
            ) from None
        return cls(
            page_width=width,
            page_height=height,
            margin_top=margin,
            margin_bottom=margin,
            margin_left=margin,
            margin_right=margin,
            **overrides,
        )
