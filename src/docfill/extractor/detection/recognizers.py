"""
Module: extractor.detection.recognizers

Purpose:
    One recognizer per field category. A recognizer owns the compiled
    patterns for its category and turns regex matches into candidate
    spans; it knows nothing about other categories or claimed spans.

Key Functions:
    - build_recognizers(): Ordered recognizers for a config (cached)

Key Classes:
    - Candidate: Raw match offsets for one fillable region
    - Recognizer: Category plus its compiled patterns

Dependencies:
    - re (std)
    - docfill.extractor.detection.patterns: Pattern fragments

Used By:
    - extractor.pipeline: Priority-ordered extraction passes
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Tuple

from docfill.core.models import FieldKind
from docfill.extractor.config import ExtractionConfig

from . import patterns as p


@dataclass(frozen=True)
class Candidate:
    """
    Offsets of one recognized region, before label normalization.

    Attributes:
        kind: Category that produced the match
        label_span: (start, end) of the raw label text (may be empty)
        blank_span: (start, end) of the blank indicator
        needs_keyword: The match was made on a category keyword, so the
            final label must still contain one
    """
    kind: FieldKind
    label_span: Tuple[int, int]
    blank_span: Tuple[int, int]
    needs_keyword: bool = False

    @property
    def span(self) -> Tuple[int, int]:
        if self.label_span[0] == self.label_span[1]:
            return self.blank_span
        return (
            min(self.label_span[0], self.blank_span[0]),
            max(self.label_span[1], self.blank_span[1]),
        )


@dataclass(frozen=True)
class Recognizer:
    """
    Pattern set for a single field category.

    Attributes:
        kind: Field category emitted for every match
        patterns: Compiled patterns, each with `label` and `blank` groups
        keyword_patterns: Patterns whose label must hold a category keyword
    """
    kind: FieldKind
    patterns: Tuple[re.Pattern[str], ...] = ()
    keyword_patterns: Tuple[re.Pattern[str], ...] = ()

    def candidates(self, text: str) -> List[Candidate]:
        """
        Scan the full text once per pattern.

        Returns:
            Candidates sorted by start offset, longest first on ties.
        """
        found: List[Candidate] = []
        tagged = [(pat, False) for pat in self.patterns]
        tagged += [(pat, True) for pat in self.keyword_patterns]
        for pattern, needs_keyword in tagged:
            for match in pattern.finditer(text):
                found.append(Candidate(
                    kind=self.kind,
                    label_span=match.span("label"),
                    blank_span=match.span("blank"),
                    needs_keyword=needs_keyword,
                ))
        found.sort(key=lambda c: (c.span[0], -(c.span[1] - c.span[0])))
        return found


# Categories whose labels are recognized by keyword; used to flag ambiguity
KEYWORD_PATTERNS: Dict[FieldKind, re.Pattern[str]] = {
    FieldKind.SIGNATURE: p.compile_pattern(p.keyword_regex(p.SIGNATURE_KEYWORDS)),
    FieldKind.DATE: p.compile_pattern(p.keyword_regex(p.DATE_KEYWORDS)),
    FieldKind.CURRENCY: p.compile_pattern(p.keyword_regex(p.CURRENCY_KEYWORDS)),
}


@lru_cache(maxsize=16)
def build_recognizers(config: ExtractionConfig) -> Tuple[Recognizer, ...]:
    """
    Build recognizers in fixed priority order.

    Order: signature, date, currency, checkbox, generic-blank.

    Args:
        config: Extraction configuration (blank length)

    Returns:
        Tuple of Recognizers, highest priority first
    """
    n = config.min_blank_length
    marks = p.mark_blank(n)
    date_blank = rf"{p.DATE_MASK}|{marks}"
    symbol = rf"[{re.escape(p.CURRENCY_SYMBOLS)}][ \t]*"

    def compiled(*sources: str) -> Tuple[re.Pattern[str], ...]:
        return tuple(p.compile_pattern(src) for src in sources)

    signature = p.keyword_label(p.SIGNATURE_KEYWORDS)
    date = p.keyword_label(p.DATE_KEYWORDS)
    currency = p.keyword_label(p.CURRENCY_KEYWORDS)

    return (
        Recognizer(FieldKind.SIGNATURE, keyword_patterns=compiled(
            p.inline(signature, marks),
            p.inline_whitespace(signature, n),
            p.caption_below(p.SIGNATURE_KEYWORDS, n),
        )),
        Recognizer(
            FieldKind.DATE,
            patterns=compiled(p.inline(p.any_label(optional=True), p.DATE_MASK)),
            keyword_patterns=compiled(
                p.inline(date, date_blank),
                p.inline_whitespace(date, n),
                p.caption_below(p.DATE_KEYWORDS, n),
            ),
        ),
        Recognizer(
            FieldKind.CURRENCY,
            patterns=compiled(p.inline(p.any_label(optional=True), marks, symbol=symbol)),
            keyword_patterns=compiled(
                p.inline(currency, marks, symbol=f"(?:{symbol})?"),
                p.inline_whitespace(currency, n),
            ),
        ),
        Recognizer(FieldKind.CHECKBOX, compiled(
            p.checkbox(),
        )),
        Recognizer(FieldKind.GENERIC, compiled(
            p.inline(p.any_label(), marks),
            p.inline_whitespace(p.any_label(), n),
            p.inline("", marks),
        )),
    )
