"""
Module: extractor.pipeline

Purpose:
    Multi-pass field extraction. Recognizers run in fixed priority order
    (signature, date, currency, checkbox, generic-blank); each pass only
    records matches whose span is still unclaimed, so a region is never
    reported twice and the catch-all generic pass only sees leftovers.

Key Functions:
    - extract_fields(): Fields plus warnings
    - extract(): Fields only
    - normalize_label(): Collapse whitespace and trim separators

Key Classes:
    - ExtractionResult: Ordered fields with accumulated warnings

Dependencies:
    - docfill.extractor.detection.recognizers: Category recognizers
    - docfill.extractor.spans: Interval exclusion

Used By:
    - docfill.builder.controller: End-to-end fill
    - docfill.cli: `docfill extract`
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from docfill.core.errors import ExtractionWarning, InvalidInput
from docfill.core.models import Field, FieldKind

from .config import ExtractionConfig
from .detection.recognizers import KEYWORD_PATTERNS, Candidate, build_recognizers
from .spans import SpanSet

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")
_SENTENCE_BREAK = re.compile(r"[.?!;]\s+")
# "e.g", "U.S", or a short capitalized word such as "Apt" or "No"
_ABBREVIATION = re.compile(r"^(?:\w+(?:\.\w+)+|[A-Z][a-z]{0,2})$")
_WORD_CHAR = re.compile(r"[^\W_]")
_TRAILING_SEPARATORS = " \t:-–"


@dataclass(frozen=True)
class ExtractionResult:
    """
    Extraction output with diagnostics.

    Attributes:
        fields: Fields ordered by source offset
        warnings: Non-fatal issues (empty or ambiguous labels)

    Example:
        >>> result = extract_fields("Name: ______")
        >>> result.fields[0].label
        'Name'
    """

    fields: Tuple[Field, ...]
    warnings: Tuple[ExtractionWarning, ...] = ()

    @property
    def field_count(self) -> int:
        return len(self.fields)

    def by_kind(self, kind: FieldKind) -> Tuple[Field, ...]:
        return tuple(f for f in self.fields if f.kind == kind)


def normalize_label(raw: str) -> str:
    """
    Normalize label text for storage.

    Collapses internal whitespace, trims, and strips trailing separators.

    Example:
        >>> normalize_label("  Full   Name :")
        'Full Name'
    """
    label = _WHITESPACE.sub(" ", raw).strip()
    return label.rstrip(_TRAILING_SEPARATORS).strip()


def extract_fields(
    text: str,
    config: Optional[ExtractionConfig] = None,
) -> ExtractionResult:
    """
    Detect fillable regions in document text.

    Pure and deterministic. Each recognizer scans the full text once;
    lower-priority recognizers cannot claim spans a higher-priority one
    already took.

    Args:
        text: Raw document text
        config: Extraction settings (defaults to ExtractionConfig())

    Returns:
        ExtractionResult with fields ordered by source offset

    Raises:
        InvalidInput: If text is not a string

    Example:
        >>> result = extract_fields("Signature: ____\\nDate: ____")
        >>> [f.kind.value for f in result.fields]
        ['signature', 'date']
    """
    if not isinstance(text, str):
        raise InvalidInput(f"text must be a string, got {type(text).__name__}")
    config = config or ExtractionConfig()

    if not text.strip():
        return ExtractionResult(fields=())

    claimed = SpanSet()
    fields: List[Field] = []
    warnings: List[ExtractionWarning] = []

    for recognizer in build_recognizers(config):
        accepted = 0
        for candidate in recognizer.candidates(text):
            field = _build_field(text, candidate, config)
            if field is None:
                continue
            if not claimed.claim(*field.source_span):
                continue
            fields.append(field)
            accepted += 1
            warning = _check_label(field)
            if warning is not None:
                warnings.append(warning)
        logger.debug(f"{recognizer.kind.value} pass claimed {accepted} fields")

    fields.sort(key=lambda f: f.source_span)
    warnings.sort(key=lambda w: w.span)

    for warning in warnings:
        logger.warning(f"Extraction: {warning.message}")
    logger.info(f"Extracted {len(fields)} fields ({len(warnings)} warnings)")

    return ExtractionResult(fields=tuple(fields), warnings=tuple(warnings))


def extract(text: str, config: Optional[ExtractionConfig] = None) -> List[Field]:
    """Detect fillable regions and return the ordered field list only."""
    return list(extract_fields(text, config).fields)


def _build_field(
    text: str,
    candidate: Candidate,
    config: ExtractionConfig,
) -> Optional[Field]:
    """
    Turn a candidate into a Field.

    Returns None when the narrowed label is too short, or when the
    candidate was matched on a keyword the narrowed label no longer holds.
    """
    label_start, label_end = _label_bounds(text, candidate.label_span, config.max_label_words)
    label = normalize_label(text[label_start:label_end])

    required = candidate.kind != FieldKind.CHECKBOX
    marker = config.optional_marker
    if marker and label.lower().endswith(marker.lower()):
        label = normalize_label(label[: -len(marker)])
        required = False

    if len(_WORD_CHAR.findall(label)) < config.min_label_chars:
        return None

    if candidate.needs_keyword and not KEYWORD_PATTERNS[candidate.kind].search(label):
        # Keyword fell in text trimmed off the label; later passes may claim it
        logger.debug(f"Dropping {candidate.kind.value} candidate, label {label!r} has no keyword")
        return None

    blank_start, blank_end = candidate.blank_span
    if label:
        span = (min(label_start, blank_start), max(label_end, blank_end))
    else:
        span = (blank_start, blank_end)

    return Field(
        label=label,
        kind=candidate.kind,
        source_span=span,
        required=required,
        blank_span=candidate.blank_span,
    )


def _label_bounds(
    text: str,
    label_span: Tuple[int, int],
    max_words: int,
) -> Tuple[int, int]:
    """
    Narrow a raw label span to the caption proper.

    Drops any leading sentence ("Please sign below. Name") and keeps at
    most `max_words` trailing words.
    """
    start, end = label_span
    raw = text[start:end]

    sentence_start = _sentence_start(raw)
    if sentence_start:
        start += sentence_start
        raw = text[start:end]

    words = list(re.finditer(r"\S+", raw))
    if len(words) > max_words:
        start += words[-max_words].start()
        raw = text[start:end]

    # Skip leading whitespace so the span begins at the caption
    stripped = len(raw) - len(raw.lstrip())
    return start + stripped, end


def _check_label(field: Field) -> Optional[ExtractionWarning]:
    """Flag empty labels and labels that match more than one category."""
    if not field.label:
        return ExtractionWarning(
            reason="empty_label",
            span=field.source_span,
            detail=f"{field.kind.value} field has no caption",
        )

    others = [
        kind.value for kind, pattern in KEYWORD_PATTERNS.items()
        if kind != field.kind and pattern.search(field.label)
    ]
    if others:
        return ExtractionWarning(
            reason="ambiguous_label",
            span=field.source_span,
            detail=f"{field.label!r} classified {field.kind.value}, also matches {', '.join(others)}",
        )
    return None


def _sentence_start(raw: str) -> int:
    """Offset just past the last real sentence end in raw, or 0 if none."""
    start = 0
    segment_start = 0
    for match in _SENTENCE_BREAK.finditer(raw):
        segment = raw[segment_start:match.start()]
        segment_start = match.end()
        if _ends_sentence(raw[:match.start()], segment, match.group()[0]):
            start = match.end()
    return start


def _ends_sentence(head: str, segment: str, mark: str) -> bool:
    """
    Whether punctuation after `head` closes a sentence.

    Marks inside open brackets never do. A period needs at least two words
    since the previous break and must not follow an abbreviation
    ("Apt. No.", "Approx. Value", "e.g. spouse").
    """
    if head.count("(") > head.count(")") or head.count("[") > head.count("]"):
        return False
    if mark != ".":
        return True
    words = segment.split()
    if len(words) < 2:
        return False
    return not _ABBREVIATION.match(words[-1].strip("()[]\"'"))
