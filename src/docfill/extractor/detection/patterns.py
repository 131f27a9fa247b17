"""Regular expression building blocks for fillable-region detection.

Every fragment here is line-anchored: label characters never cross a line
break, so a label always sits on the same line as its blank (or on the line
directly below it for caption-below signature and date lines).
"""

from __future__ import annotations

import re
from typing import Iterable

CURRENCY_SYMBOLS = "$€£"
BOX_GLYPHS = "☐☑☒"

# Characters allowed inside an inline label
LABEL_CHAR = rf"[^\n\r\f\v:_*{re.escape(CURRENCY_SYMBOLS)}\[\]{BOX_GLYPHS}]"
WORD_START = r"[^\W_]"
SEPARATOR = r"[ \t]*[:\-–]?[ \t]*"
LINE_END = r"(?=\r?\n|\f|\Z)"

CHECKBOX = r"(?:\[[ x✓✔]?\]|[☐☑☒]|\([ ]?\))"
CHECKBOX_LABEL_CHAR = rf"[^\n\r\f\v_\[\]{BOX_GLYPHS}]"

DATE_MASK = (
    r"(?:_{1,4}[ \t]*/[ \t]*_{1,4}[ \t]*/[ \t]*_{2,4}"
    r"|(?:mm|dd)[ \t]*/[ \t]*(?:dd|mm)[ \t]*/[ \t]*(?:yyyy|yy)"
    r"|yyyy[ \t]*-[ \t]*mm[ \t]*-[ \t]*dd)"
)

SIGNATURE_KEYWORDS = (
    r"signature",
    r"signatory",
    r"sign(?:ed)?[ \t]+(?:here|by)",
    r"initials?",
    r"autograph",
)
DATE_KEYWORDS = (
    r"dated?",
    r"dates",
    r"d\.?o\.?b\.?",
    r"birth(?:day|date)?",
    r"expir(?:y|es|ation)",
    r"effective",
)
CURRENCY_KEYWORDS = (
    r"amount",
    r"price",
    r"cost",
    r"fees?",
    r"total",
    r"payment",
    r"salary",
    r"wages?",
    r"rent",
    r"deposit",
    r"sum",
    r"balance",
    r"compensation",
    r"premium",
)

FLAGS = re.IGNORECASE | re.MULTILINE


def keyword_regex(keywords: Iterable[str]) -> str:
    """Whole-word alternation of keyword fragments."""
    return rf"\b(?:{'|'.join(keywords)})(?!\w)"


def mark_blank(min_length: int) -> str:
    """Run of underscores or asterisks."""
    n = int(min_length)
    return rf"(?:_{{{n},}}|\*{{{n},}})"


def any_label(optional: bool = False) -> str:
    label = rf"{WORD_START}{LABEL_CHAR}*?"
    return rf"(?:{label})?" if optional else label


def keyword_label(keywords: Iterable[str]) -> str:
    """Label that contains at least one of the keywords."""
    return rf"(?={LABEL_CHAR}*?{keyword_regex(keywords)}){WORD_START}{LABEL_CHAR}*?"


def inline(label: str, blank: str, symbol: str = "") -> str:
    """Label, optional punctuation, optional symbol, then a blank on one line."""
    return rf"(?P<label>{label}){SEPARATOR}{symbol}(?P<blank>{blank})"


def inline_whitespace(label: str, min_length: int) -> str:
    """Label and colon followed by trailing whitespace to end of line."""
    n = int(min_length)
    return rf"(?P<label>{label})[ \t]*:(?P<blank>[ \t]{{{n},}}){LINE_END}"


def caption_below(keywords: Iterable[str], min_length: int) -> str:
    """A line holding only a blank, captioned by the line directly below."""
    n = int(min_length)
    caption = rf"(?=[^\n\r\f_]*?{keyword_regex(keywords)}){WORD_START}[^\n\r\f_]*?"
    return (
        rf"^[ \t]*(?P<blank>_{{{n},}})[ \t]*\r?\n"
        rf"[ \t]*(?P<label>{caption})[ \t]*:?[ \t]*{LINE_END}"
    )


def checkbox() -> str:
    """Box glyph followed by its label, up to the next box or end of line."""
    return (
        rf"(?P<blank>{CHECKBOX})[ \t]*"
        rf"(?P<label>{WORD_START}{CHECKBOX_LABEL_CHAR}*?)"
        rf"(?=[ \t]*(?:{CHECKBOX}|\r?\n|\f|\Z))"
    )


def compile_pattern(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, FLAGS)
