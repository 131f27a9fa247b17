"""
Module: builder.layout.models

Purpose:
    Data models for page layout.
    Immutable dataclasses representing content elements, placements and pages.

Key Classes:
    - ElementKind: Kind of layout unit
    - ContentElement: One unit of layout with its directives
    - Placement: Element positioned on a page
    - Page: Complete page layout
    - LayoutResult: Final layout output with warnings

Dependencies:
    - PIL: Signature image type
    - dataclasses (std)

Used By:
    - builder.layout.composer: Creates ContentElements
    - builder.layout.paginator: Creates Pages
    - builder.output.renderer: Draws Pages
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

from PIL import Image

from docfill.core.errors import InvalidInput, OversizedElementWarning
from docfill.core.models import Field

from .config import TextStyle


class ElementKind(str, Enum):
    """Type of layout unit."""
    PARAGRAPH = "paragraph"
    FIELD_BLOCK = "field_block"
    SIGNATURE_BLOCK = "signature_block"
    HEADING = "heading"
    SPACER = "spacer"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ContentElement:
    """
    One unit of layout (immutable).

    Elements are never split; directives decide which elements travel
    together.

    Attributes:
        kind: Element type
        text: Text to draw (filled values already substituted)
        fields: Fields whose values appear in this element
        keep_with_next: Must share a page with the following element
        keep_together: Atomic unit, never broken even when oversized
        break_before: Must start a new page
        fixed_height: Explicit height in points (spacers, overrides)
        image: Captured signature image (signature blocks only)
        style: Text style override

    Example:
        >>> h = ContentElement.heading("1. TERMS")
        >>> h.keep_with_next
        True
    """

    kind: ElementKind
    text: str = ""
    fields: Tuple[Field, ...] = ()
    keep_with_next: bool = False
    keep_together: bool = False
    break_before: bool = False
    fixed_height: Optional[float] = None
    image: Optional[Image.Image] = None
    style: Optional[TextStyle] = None

    def __post_init__(self) -> None:
        """Reject structurally invalid elements."""
        if not isinstance(self.kind, ElementKind):
            raise InvalidInput(f"Unknown element kind: {self.kind!r}")
        if self.text is None:
            raise InvalidInput("Element text must not be None")
        if self.fixed_height is not None:
            if not math.isfinite(self.fixed_height) or self.fixed_height < 0:
                raise InvalidInput(f"fixed_height must be a non-negative number: {self.fixed_height}")
        if self.kind == ElementKind.SPACER and self.fixed_height is None:
            raise InvalidInput("Spacer elements need a fixed_height")

    @classmethod
    def paragraph(cls, text: str, **kwargs: Any) -> ContentElement:
        return cls(ElementKind.PARAGRAPH, text, **kwargs)

    @classmethod
    def heading(cls, text: str, **kwargs: Any) -> ContentElement:
        kwargs.setdefault("keep_with_next", True)
        return cls(ElementKind.HEADING, text, **kwargs)

    @classmethod
    def field_block(cls, text: str, fields: Tuple[Field, ...] = (), **kwargs: Any) -> ContentElement:
        return cls(ElementKind.FIELD_BLOCK, text, fields=tuple(fields), **kwargs)

    @classmethod
    def signature_block(cls, text: str, fields: Tuple[Field, ...] = (), **kwargs: Any) -> ContentElement:
        kwargs.setdefault("keep_together", True)
        return cls(ElementKind.SIGNATURE_BLOCK, text, fields=tuple(fields), **kwargs)

    @classmethod
    def spacer(cls, height: float, **kwargs: Any) -> ContentElement:
        return cls(ElementKind.SPACER, fixed_height=height, **kwargs)


@dataclass(frozen=True)
class Placement:
    """
    An element positioned on a page.

    Attributes:
        element: The ContentElement to draw
        index: Position of the element in the paginated input
        top: Y offset from page top (in points)
        height: Measured height (in points)

    Example:
        >>> placement = Placement(element, index=0, top=72, height=100)
        >>> placement.bottom
        172
    """

    element: ContentElement
    index: int
    top: float
    height: float

    @property
    def bottom(self) -> float:
        """Bottom Y coordinate (top + height)."""
        return self.top + self.height


@dataclass(frozen=True)
class Page:
    """
    Complete layout for a single page.

    Attributes:
        index: Page number (0-indexed)
        placements: Placements in reading order
        height_used: Content height consumed, including spacing
    """

    index: int
    placements: Tuple[Placement, ...]
    height_used: float

    @property
    def elements(self) -> Tuple[ContentElement, ...]:
        return tuple(p.element for p in self.placements)

    @property
    def element_indices(self) -> Tuple[int, ...]:
        return tuple(p.index for p in self.placements)

    @property
    def placement_count(self) -> int:
        """Number of elements on this page."""
        return len(self.placements)

    @property
    def is_empty(self) -> bool:
        return len(self.placements) == 0


@dataclass(frozen=True)
class LayoutResult:
    """
    Final layout output with diagnostics.

    Attributes:
        pages: Pages in order
        warnings: Oversized units that were placed alone
        content_height: Content height the layout was computed for

    Example:
        >>> result = paginate(elements, config)
        >>> result.page_count
        2
    """

    pages: Tuple[Page, ...]
    warnings: List[OversizedElementWarning] = field(default_factory=list)
    content_height: float = 0.0

    @property
    def page_count(self) -> int:
        """Number of pages in layout."""
        return len(self.pages)

    @property
    def total_placements(self) -> int:
        """Total number of placements across all pages."""
        return sum(p.placement_count for p in self.pages)

    @property
    def has_oversized(self) -> bool:
        return bool(self.warnings)

    def page_of(self, element_index: int) -> Optional[int]:
        """Page index holding the input element at `element_index`."""
        for page in self.pages:
            if element_index in page.element_indices:
                return page.index
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "content_height": self.content_height,
            "pages": [
                {
                    "index": page.index,
                    "height_used": page.height_used,
                    "placements": [
                        {
                            "index": p.index,
                            "kind": p.element.kind.value,
                            "top": p.top,
                            "height": p.height,
                            "text": p.element.text,
                        }
                        for p in page.placements
                    ],
                }
                for page in self.pages
            ],
            "warnings": [w.message for w in self.warnings],
        }
