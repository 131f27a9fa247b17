"""
Module: fields

Purpose:
    Provides the Field dataclass - an immutable record of a fillable region
    detected in template text. Fields are created once by the extractor and
    consumed once by the composer.

Key Classes:
    - FieldKind: Category of fillable region
    - Field: Detected fillable region with label and source offsets

Key Functions:
    - Field.key: Slug used to look up fill values
    - Field.to_dict() / Field.from_dict(): Serialization

Dependencies:
    - dataclasses (std)
    - re (std)

Used By:
    - docfill.extractor.pipeline
    - docfill.builder.layout.composer
    - docfill.cli
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from ..errors import InvalidInput

_KEY_STRIP = re.compile(r"[^0-9a-z]+")


class FieldKind(str, Enum):
    """Category of fillable region, in extraction priority order."""
    SIGNATURE = "signature"
    DATE = "date"
    CURRENCY = "currency"
    CHECKBOX = "checkbox"
    GENERIC = "generic-blank"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Field:
    """
    Detected fillable region (immutable).

    Attributes:
        label: Caption for the blank, trimmed with whitespace collapsed
        kind: Field category
        source_span: (start, end) of label plus blank in the source text
        required: Whether a value must be supplied
        blank_span: (start, end) of the blank indicator a value replaces

    Invariants:
        - 0 <= start < end for both spans
        - blank_span lies inside source_span

    Example:
        >>> f = Field("Date of Birth", FieldKind.DATE, (0, 20), blank_span=(15, 20))
        >>> f.key
        'date_of_birth'
    """

    label: str
    kind: FieldKind
    source_span: Tuple[int, int]
    required: bool = True
    blank_span: Optional[Tuple[int, int]] = None

    def __post_init__(self) -> None:
        start, end = self.source_span
        if start < 0 or end <= start:
            raise InvalidInput(f"Invalid source_span: {self.source_span}")
        if self.blank_span is not None:
            b_start, b_end = self.blank_span
            if b_start < start or b_end > end or b_end <= b_start:
                raise InvalidInput(
                    f"blank_span {self.blank_span} outside source_span {self.source_span}"
                )

    @property
    def start(self) -> int:
        return self.source_span[0]

    @property
    def end(self) -> int:
        return self.source_span[1]

    @property
    def key(self) -> str:
        """Lower-case slug of the label ('' for unlabeled blanks)."""
        return _KEY_STRIP.sub("_", self.label.lower()).strip("_")

    @property
    def value_span(self) -> Tuple[int, int]:
        """Span a filled value replaces (falls back to the whole field)."""
        return self.blank_span if self.blank_span is not None else self.source_span

    def overlaps(self, other: Field) -> bool:
        return self.start < other.end and other.start < self.end

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "label": self.label,
            "kind": self.kind.value,
            "source_span": list(self.source_span),
            "required": self.required,
        }
        if self.blank_span is not None:
            d["blank_span"] = list(self.blank_span)
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Field:
        blank = data.get("blank_span")
        return cls(
            label=data["label"],
            kind=FieldKind(data["kind"]),
            source_span=tuple(data["source_span"]),
            required=data.get("required", True),
            blank_span=tuple(blank) if blank else None,
        )
