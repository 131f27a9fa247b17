"""
Module: builder.layout.composer

Purpose:
    Compose ContentElements from template text and extracted fields.
    Splits the text into blocks, fills blanks with supplied values and
    attaches layout directives:

    - headings keep with the next element
    - blocks holding a signature field are kept together
    - a paragraph ending in ':' keeps with what it introduces
    - form feeds and [[PAGE BREAK]] lines force a break before the next block
    - three or more blank lines become a spacer

Key Functions:
    - compose_elements(): Elements for a filled template
    - format_value(): Render a value for its field kind
    - lookup_value(): Value for a field from a values mapping
    - missing_values(): Required fields without a value

Dependencies:
    - PIL: Captured signature images passed as values
    - builder.layout.models: ContentElement

Used By:
    - builder.controller: End-to-end fill
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from PIL import Image

from docfill.core.models import Field, FieldKind

from .config import LayoutConfig
from .models import ContentElement

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%B %d, %Y"
CHECKED_MARK = "[X]"
UNCHECKED_MARK = "[ ]"

# Blank lines before a block that turn into a spacer
SPACER_MIN_BLANK_LINES = 3

_PAGE_BREAK = re.compile(r"^[ \t]*\[\[[ \t]*page[ \t]*break[ \t]*\]\][ \t]*$", re.IGNORECASE)
_NUMBERED_HEADING = re.compile(
    r"^(?:\d+(?:\.\d+)*\.?|[IVXLC]+\.|(?:section|article)[ \t]+[\dIVXLC]+[.:]?)[ \t]+\S",
    re.IGNORECASE,
)
_MARKDOWN_HEADING = re.compile(r"^#{1,6}[ \t]+")
_LINE_TERMINATORS = "\r\n\f\v\x1c\x1d\x1e\x85\u2028\u2029"
_TRUTHY = {"1", "true", "yes", "y", "x", "on", "checked"}

HEADING_MAX_CHARS = 80
HEADING_MAX_WORDS = 10


@dataclass
class _Block:
    """Contiguous non-blank lines of the source text."""
    start: int
    end: int
    break_before: bool = False
    blank_lines_before: int = 0
    fields: List[Field] = field(default_factory=list)


def compose_elements(
    text: str,
    fields: Sequence[Field],
    values: Optional[Mapping[str, Any]] = None,
    config: Optional[LayoutConfig] = None,
    *,
    date_format: str = DEFAULT_DATE_FORMAT,
    checkbox_mark: str = CHECKED_MARK,
) -> List[ContentElement]:
    """
    Create layout elements for a filled template.

    Args:
        text: Template text the fields were extracted from
        fields: Fields from the extractor (offsets into `text`)
        values: Fill values keyed by field key or label; a PIL image
            under a signature field's key becomes the signature image
        config: Layout config (spacer line height)
        date_format: strftime format for date values
        checkbox_mark: Text drawn for a ticked checkbox

    Returns:
        Elements in reading order with layout directives set

    Example:
        >>> fields = extract("Name: ____\\n\\nSignature: ____")
        >>> [e.kind.value for e in compose_elements(text, fields, {"name": "Jo"})]
        ['field_block', 'signature_block']
    """
    config = config or LayoutConfig()
    values = values or {}

    blocks = _split_blocks(text)
    _assign_fields(blocks, fields)

    elements: List[ContentElement] = []
    for block in blocks:
        if block.blank_lines_before >= SPACER_MIN_BLANK_LINES and elements and not block.break_before:
            height = (block.blank_lines_before - 1) * config.body_style.leading
            elements.append(ContentElement.spacer(height))

        element = _compose_block(text, block, values, date_format, checkbox_mark)
        elements.append(element)

    logger.info(
        f"Composed {len(elements)} elements from {len(blocks)} blocks "
        f"({len(fields)} fields)"
    )
    return elements


def lookup_value(values: Mapping[str, Any], field: Field) -> Any:
    """Value for a field by key, then exact label, then lower-case label."""
    for key in (field.key, field.label, field.label.lower()):
        if key and key in values:
            return values[key]
    return None


def missing_values(fields: Sequence[Field], values: Mapping[str, Any]) -> Tuple[str, ...]:
    """Keys (or labels) of required fields that have no value."""
    missing: List[str] = []
    for f in fields:
        if not f.required:
            continue
        value = lookup_value(values, f)
        if value is None or value == "":
            name = f.key or f"{f.kind.value}@{f.start}"
            if name not in missing:
                missing.append(name)
    return tuple(missing)


def format_value(
    field: Field,
    value: Any,
    date_format: str = DEFAULT_DATE_FORMAT,
    checkbox_mark: str = CHECKED_MARK,
) -> str:
    """
    Render a fill value as text for its field kind.

    Example:
        >>> format_value(Field("Amount", FieldKind.CURRENCY, (0, 10)), 1250)
        '1,250.00'
    """
    if field.kind == FieldKind.CHECKBOX:
        return checkbox_mark if _is_truthy(value) else UNCHECKED_MARK

    if field.kind == FieldKind.CURRENCY and not isinstance(value, bool):
        amount = _to_decimal(value)
        if amount is not None:
            return f"{amount:,.2f}"

    if isinstance(value, (date, datetime)):
        return value.strftime(date_format)

    return str(value)


def _is_truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def _to_decimal(value: Any) -> Optional[Decimal]:
    if isinstance(value, (int, float, Decimal)):
        return Decimal(str(value))
    if isinstance(value, str):
        cleaned = value.strip().lstrip("$€£").replace(",", "").strip()
        try:
            return Decimal(cleaned)
        except InvalidOperation:
            return None
    return None


def _split_blocks(text: str) -> List[_Block]:
    """Split text into blocks on blank lines and page breaks."""
    blocks: List[_Block] = []
    current: Optional[_Block] = None
    blank_run = 0
    pending_break = False
    pos = 0

    for raw in text.splitlines(keepends=True):
        line_start = pos
        pos += len(raw)
        content = raw.rstrip(_LINE_TERMINATORS)

        if _PAGE_BREAK.match(content):
            current = None
            pending_break = True
            blank_run = 0
        elif not content.strip():
            current = None
            blank_run += 1
        else:
            if current is None:
                current = _Block(
                    start=line_start,
                    end=line_start,
                    break_before=pending_break,
                    blank_lines_before=blank_run,
                )
                blocks.append(current)
                pending_break = False
                blank_run = 0
            current.end = line_start + len(content)

        if raw.endswith("\f"):
            current = None
            pending_break = True
            blank_run = 0

    return blocks


def _assign_fields(blocks: Sequence[_Block], fields: Sequence[Field]) -> None:
    for f in sorted(fields, key=lambda f: f.source_span):
        for block in blocks:
            if block.start <= f.start < block.end:
                block.fields.append(f)
                break
        else:
            logger.debug(f"Field {f.label!r} at {f.start} falls outside any block")


def _compose_block(
    text: str,
    block: _Block,
    values: Mapping[str, Any],
    date_format: str,
    checkbox_mark: str,
) -> ContentElement:
    filled, image = _fill_block(text, block, values, date_format, checkbox_mark)
    fields = tuple(block.fields)
    kinds = {f.kind for f in fields}

    if FieldKind.SIGNATURE in kinds or image is not None:
        return ContentElement.signature_block(
            filled, fields, image=image, break_before=block.break_before,
        )
    if fields:
        return ContentElement.field_block(filled, fields, break_before=block.break_before)
    if _is_heading(filled):
        return ContentElement.heading(
            _MARKDOWN_HEADING.sub("", filled), break_before=block.break_before,
        )
    return ContentElement.paragraph(
        filled,
        keep_with_next=filled.rstrip().endswith(":"),
        break_before=block.break_before,
    )


def _fill_block(
    text: str,
    block: _Block,
    values: Mapping[str, Any],
    date_format: str,
    checkbox_mark: str,
) -> Tuple[str, Optional[Image.Image]]:
    """Substitute values into the block; returns text and any signature image."""
    chunk = text[block.start:block.end]
    image: Optional[Image.Image] = None

    # Right to left so earlier offsets stay valid
    for f in sorted(block.fields, key=lambda f: f.start, reverse=True):
        start, end = f.value_span
        start -= block.start
        end -= block.start
        value = lookup_value(values, f)

        if isinstance(value, Image.Image):
            if f.kind == FieldKind.SIGNATURE and image is None:
                image = value
                chunk = chunk[:start] + chunk[end:]
            else:
                logger.warning(f"Ignoring image value for {f.kind.value} field {f.label!r}")
            continue

        if value is None or value == "":
            if f.kind != FieldKind.CHECKBOX:
                continue
            replacement = UNCHECKED_MARK
        else:
            replacement = format_value(f, value, date_format, checkbox_mark)

        if chunk[start:end].strip() == "":
            # Whitespace blank: keep one space after the colon
            replacement = " " + replacement
        chunk = chunk[:start] + replacement + chunk[end:]

    chunk = chunk.replace("\r\n", "\n").replace("\r", "\n").replace("\t", "    ")
    return chunk, image


def _is_heading(text: str) -> bool:
    """Short single line that reads like a title or numbered section."""
    if "\n" in text:
        return False
    line = text.strip()
    if not line or len(line) > HEADING_MAX_CHARS:
        return False
    if _MARKDOWN_HEADING.match(line):
        return True
    if len(line.split()) > HEADING_MAX_WORDS or line[-1] in ".,;":
        return False
    letters = [c for c in line if c.isalpha()]
    if letters and all(c.isupper() for c in letters):
        return True
    return bool(_NUMBERED_HEADING.match(line))
