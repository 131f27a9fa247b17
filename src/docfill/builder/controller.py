"""
Module: builder.controller

Purpose:
    Orchestrate the complete fill pipeline.
    Extract → Compose → Paginate → Render

Key Functions:
    - fill_document(): Main entry point for filling a template

Key Classes:
    - FillResult: Complete fill result
    - FillError: Exception for fill failures

Dependencies:
    - docfill.extractor: Field extraction
    - builder.layout: Composition and pagination
    - builder.output: PDF rendering

Used By:
    - docfill.cli: Command-line interface
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple

from docfill.core.errors import InvalidInput
from docfill.core.models import Field
from docfill.extractor import extract_fields

from .config import FillConfig
from .layout import LayoutResult, compose_elements, missing_values, paginate
from .output.renderer import render_to_pdf

logger = logging.getLogger(__name__)


class FillError(Exception):
    """Error during fill pipeline."""
    pass


@dataclass(frozen=True)
class FillResult:
    """
    Complete fill result (immutable).

    Attributes:
        fields: Extracted fields in document order
        layout: Paginated layout
        output_path: Path to generated PDF (if rendered)
        digest: SHA-256 hex digest of the PDF (if rendered)
        missing_fields: Keys of required fields with no value
        warnings: Extraction and pagination warning messages

    Example:
        >>> result = fill_document(text, {"tenant_name": "Jo"}, config)
        >>> print(f"Generated {result.page_count} pages")
    """
    fields: Tuple[Field, ...]
    layout: LayoutResult
    output_path: Optional[Path]
    digest: Optional[str]
    missing_fields: Tuple[str, ...]
    warnings: Tuple[str, ...]

    @property
    def page_count(self) -> int:
        return self.layout.page_count

    @property
    def is_complete(self) -> bool:
        """True when every required field received a value."""
        return not self.missing_fields


def fill_document(
    text: str,
    values: Optional[Mapping[str, Any]] = None,
    config: Optional[FillConfig] = None,
) -> FillResult:
    """
    Fill a template from start to finish.

    Pipeline:
    1. Extract fields from the template text
    2. Compose content elements with values substituted
    3. Paginate elements onto pages
    4. Render to PDF (when config.output_path is set)

    Args:
        text: Template text
        values: Fill values keyed by field key or label
        config: Fill configuration

    Returns:
        FillResult with fields, layout and output details

    Raises:
        InvalidInput: If text, values or config are malformed
        FillError: If the PDF cannot be written

    Example:
        >>> result = fill_document(text, values, FillConfig(output_path=Path("out.pdf")))
        >>> result.digest[:8]
        '3f2a9c1e'
    """
    config = config or FillConfig()
    values = dict(values or {})
    warnings: List[str] = []
    start_time = time.perf_counter()

    if not isinstance(config, FillConfig):
        raise InvalidInput(f"config must be a FillConfig, got {type(config).__name__}")

    # 1. Extract fields
    extraction = extract_fields(text, config.extraction)
    warnings.extend(w.message for w in extraction.warnings)
    logger.info(f"Extracted {extraction.field_count} fields")

    unknown = _unknown_keys(values, extraction.fields)
    if unknown:
        logger.warning(f"Values with no matching field: {', '.join(sorted(unknown))}")

    # 2. Compose elements
    elements = compose_elements(
        text,
        extraction.fields,
        values,
        config.layout,
        date_format=config.date_format,
        checkbox_mark=config.checkbox_mark,
    )
    missing = missing_values(extraction.fields, values)
    if missing:
        logger.warning(f"Missing values for required fields: {', '.join(missing)}")

    # 3. Paginate
    layout = paginate(elements, config.layout)
    warnings.extend(w.message for w in layout.warnings)

    # 4. Render
    digest = None
    if config.output_path is not None:
        try:
            digest = render_to_pdf(layout, config.output_path, config.layout)
        except OSError as e:
            raise FillError(f"Failed to write PDF to {config.output_path}: {e}") from e

    elapsed = time.perf_counter() - start_time
    logger.info(f"Fill completed in {elapsed:.2f}s ({layout.page_count} pages)")

    return FillResult(
        fields=tuple(extraction.fields),
        layout=layout,
        output_path=config.output_path,
        digest=digest,
        missing_fields=missing,
        warnings=tuple(warnings),
    )


def _unknown_keys(values: Mapping[str, Any], fields: Tuple[Field, ...]) -> List[str]:
    """Value keys that match no field key or label."""
    known = set()
    for f in fields:
        known.update((f.key, f.label, f.label.lower()))
    return [k for k in values if k not in known]
