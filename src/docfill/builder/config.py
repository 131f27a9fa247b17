"""
Module: builder.config

Purpose:
    Configuration dataclass for the fill pipeline. Immutable
    configuration with validation on construction.

Key Classes:
    - FillConfig: Main configuration for filling a template

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - builder.controller: Main fill controller
    - docfill.cli: Command-line options
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from docfill.core.errors import InvalidInput
from docfill.extractor.config import ExtractionConfig

from .layout.composer import CHECKED_MARK, DEFAULT_DATE_FORMAT
from .layout.config import LayoutConfig


@dataclass(frozen=True)
class FillConfig:
    """
    Configuration for filling a template (immutable).

    Attributes:
        layout: Page geometry and text styles
        extraction: Field extraction settings
        date_format: strftime format for date values
        checkbox_mark: Text drawn for a ticked checkbox
        output_path: Where to write the PDF; no PDF is rendered when None

    Example:
        >>> config = FillConfig(
        ...     layout=LayoutConfig.for_page_size("a4"),
        ...     output_path=Path("out/lease.pdf"),
        ... )
    """

    layout: LayoutConfig = field(default_factory=LayoutConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)

    # Value formatting
    date_format: str = DEFAULT_DATE_FORMAT
    checkbox_mark: str = CHECKED_MARK

    # Output
    output_path: Optional[Path] = None

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not isinstance(self.layout, LayoutConfig):
            raise InvalidInput(f"layout must be a LayoutConfig: {self.layout!r}")
        if not isinstance(self.extraction, ExtractionConfig):
            raise InvalidInput(f"extraction must be an ExtractionConfig: {self.extraction!r}")
        if not self.date_format:
            raise InvalidInput("date_format must not be empty")
        if not self.checkbox_mark:
            raise InvalidInput("checkbox_mark must not be empty")
        if self.output_path is not None and not isinstance(self.output_path, Path):
            object.__setattr__(self, "output_path", Path(self.output_path))
