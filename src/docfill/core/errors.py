"""
Module: core.errors

Purpose:
    Error and warning types shared by the extractor and the layout engine.
    Warnings are plain immutable records collected alongside results;
    only InvalidInput is raised.

Key Classes:
    - InvalidInput: Structurally invalid configuration or element
    - ExtractionWarning: Empty or ambiguous field label
    - OversizedElementWarning: Unit taller than the content area

Used By:
    - docfill.extractor.pipeline
    - docfill.builder.layout.paginator
    - docfill.builder.controller
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


class InvalidInput(ValueError):
    """Raised for non-positive page geometry or malformed elements."""
    pass


@dataclass(frozen=True)
class ExtractionWarning:
    """
    Non-fatal extraction issue (immutable).

    Attributes:
        reason: "empty_label" or "ambiguous_label"
        span: (start, end) offsets of the offending match
        detail: Human-readable description
    """
    reason: str
    span: Tuple[int, int]
    detail: str = ""

    @property
    def message(self) -> str:
        text = f"{self.reason} at {self.span[0]}-{self.span[1]}"
        return f"{text}: {self.detail}" if self.detail else text

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class OversizedElementWarning:
    """
    A unit whose height alone exceeds the content area (immutable).

    The unit is still placed, alone, starting on a fresh page.

    Attributes:
        page_index: Page the unit starts on
        element_indices: Input indices of the elements in the unit
        height: Measured height of the unit
        content_height: Available content height
        chain_broken: True when a keep-with-next chain had to be split
    """
    page_index: int
    element_indices: Tuple[int, ...]
    height: float
    content_height: float
    chain_broken: bool = False

    @property
    def message(self) -> str:
        first, last = self.element_indices[0], self.element_indices[-1]
        which = f"element {first}" if first == last else f"elements {first}-{last}"
        text = (
            f"{which} on page {self.page_index} needs {self.height:g}pt, "
            f"only {self.content_height:g}pt available"
        )
        if self.chain_broken:
            text += " (keep-with-next chain broken)"
        return text

    def __str__(self) -> str:
        return self.message
