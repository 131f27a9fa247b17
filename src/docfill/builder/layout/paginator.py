"""
Module: builder.layout.paginator

Purpose:
    Arrange content elements onto pages in a single greedy forward pass.
    Elements are never reordered or split; directives decide which
    elements travel together.

Key Functions:
    - paginate(): Main pagination function

Algorithm:
    1. A break-before element on a non-empty page closes the page.
    2. The unit to place is the element plus its transitive
       keep-with-next chain.
    3. Place the unit on the current page if it fits (with spacing).
    4. Otherwise start a new page and place it there.
    5. A unit taller than the content area is placed alone with a
       warning. A multi-element chain that is too tall is broken at its
       element boundaries; a single element is never broken.

Dependencies:
    - builder.layout.models: ContentElement, Page, LayoutResult
    - builder.layout.measure: Measurer, HeightCache
    - builder.layout.config: LayoutConfig

Used By:
    - builder.controller: End-to-end fill
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from docfill.core.errors import InvalidInput, OversizedElementWarning

from .config import LayoutConfig
from .measure import HeightCache, Measurer, ReportLabMeasurer
from .models import ContentElement, LayoutResult, Page, Placement

logger = logging.getLogger(__name__)

# Float slack when comparing accumulated heights
_EPSILON = 1e-6


def paginate(
    elements: Sequence[ContentElement],
    config: LayoutConfig,
    measurer: Optional[Measurer] = None,
) -> LayoutResult:
    """
    Arrange elements onto pages.

    Rules:
    1. Element order is preserved within and across pages.
    2. keep_with_next chains are placed as one unit.
    3. keep_together elements are atomic, even when oversized.
    4. break_before starts a new page unless the page is already empty.

    Args:
        elements: Elements in reading order
        config: Layout configuration (content height, spacing, styles)
        measurer: Height measurement strategy (defaults to ReportLab metrics)

    Returns:
        LayoutResult with pages and oversized-unit warnings

    Raises:
        InvalidInput: If config or an element is malformed, or a measured
            height is negative or not finite

    Example:
        >>> result = paginate(elements, LayoutConfig.with_content_height(500))
        >>> [len(p.placements) for p in result.pages]
        [2, 1]
    """
    if not isinstance(config, LayoutConfig):
        raise InvalidInput(f"config must be a LayoutConfig, got {type(config).__name__}")
    for i, element in enumerate(elements):
        if not isinstance(element, ContentElement):
            raise InvalidInput(f"Element {i} is not a ContentElement: {element!r}")

    content_height = config.content_height
    if not elements:
        return LayoutResult(pages=(), warnings=[], content_height=content_height)

    measurer = measurer or ReportLabMeasurer.from_config(config)
    heights = HeightCache(elements, config, measurer)
    builder = _PageBuilder(config)
    warnings: List[OversizedElementWarning] = []

    i = 0
    while i < len(elements):
        if elements[i].break_before and builder.has_content:
            builder.close_page()

        unit = _get_unit(i, elements)
        _place_unit(unit, heights, builder, warnings)
        i += len(unit)

    pages = builder.finish()

    logger.info(f"Paginated {len(elements)} elements onto {len(pages)} pages")
    return LayoutResult(pages=pages, warnings=warnings, content_height=content_height)


def _get_unit(start_idx: int, elements: Sequence[ContentElement]) -> List[int]:
    """
    Get the indices of the unit starting at start_idx.

    A unit is the element plus every following element reached through
    keep_with_next. The chain stops before an element that forces a
    page break, since the break wins over keep-with-next.

    Args:
        start_idx: Current index in elements
        elements: Full element list

    Returns:
        Indices of elements that must share a page
    """
    unit = [start_idx]
    current_idx = start_idx

    while current_idx + 1 < len(elements):
        if not elements[current_idx].keep_with_next:
            break
        if elements[current_idx + 1].break_before:
            break
        current_idx += 1
        unit.append(current_idx)

    return unit


def _unit_height(unit: Sequence[int], heights: HeightCache, spacing: float) -> float:
    """Combined height of a unit including spacing between its members."""
    return sum(heights.height(i) for i in unit) + spacing * (len(unit) - 1)


def _place_unit(
    unit: List[int],
    heights: HeightCache,
    builder: _PageBuilder,
    warnings: List[OversizedElementWarning],
) -> None:
    """Place a unit on the current page, or on a new one."""
    spacing = builder.config.element_spacing
    content_height = builder.config.content_height
    unit_height = _unit_height(unit, heights, spacing)

    if builder.fits(unit_height):
        builder.add(unit, heights)
        return

    # Oversized chain: broken between elements, each placed against the open page
    if len(unit) > 1 and unit_height > content_height + _EPSILON:
        warning = OversizedElementWarning(
            page_index=builder.page_index,
            element_indices=tuple(unit),
            height=unit_height,
            content_height=content_height,
            chain_broken=True,
        )
        warnings.append(warning)
        logger.warning(f"Oversized unit: {warning.message}")
        for index in unit:
            _place_unit([index], heights, builder, warnings)
        return

    if builder.has_content:
        builder.close_page()

    if unit_height <= content_height + _EPSILON:
        builder.add(unit, heights)
        return

    # A single element is never broken
    warning = OversizedElementWarning(
        page_index=builder.page_index,
        element_indices=tuple(unit),
        height=unit_height,
        content_height=content_height,
    )
    warnings.append(warning)
    logger.warning(f"Oversized unit: {warning.message}")
    builder.add(unit, heights)


class _PageBuilder:
    """Accumulates placements for the page being filled."""

    def __init__(self, config: LayoutConfig) -> None:
        self.config = config
        self._pages: List[Page] = []
        self._current: List[Placement] = []
        self._used = 0.0

    @property
    def has_content(self) -> bool:
        return bool(self._current)

    @property
    def page_index(self) -> int:
        return len(self._pages)

    def _gap(self) -> float:
        return self.config.element_spacing if self._current else 0.0

    def fits(self, height: float) -> bool:
        return self._used + self._gap() + height <= self.config.content_height + _EPSILON

    def add(self, unit: Sequence[int], heights: HeightCache) -> None:
        y = self.config.margin_top + self._used + self._gap()
        for j, index in enumerate(unit):
            if j > 0:
                y += self.config.element_spacing
            height = heights.height(index)
            self._current.append(Placement(
                element=heights.element(index),
                index=index,
                top=y,
                height=height,
            ))
            y += height
        self._used = y - self.config.margin_top

    def close_page(self) -> None:
        if not self._current:
            return
        self._pages.append(Page(
            index=len(self._pages),
            placements=tuple(self._current),
            height_used=self._used,
        ))
        self._current = []
        self._used = 0.0

    def finish(self) -> tuple[Page, ...]:
        self.close_page()
        return tuple(self._pages)
