"""
Module: extractor.config

Purpose:
    Configuration for the field extraction pipeline. Passed explicitly into
    every extraction call; there is no module-level state.

Key Classes:
    - ExtractionConfig: Immutable extraction settings

Dependencies:
    - dataclasses (std)

Used By:
    - extractor.pipeline: Field extraction
    - extractor.detection.recognizers: Pattern construction
"""

from __future__ import annotations

from dataclasses import dataclass

from docfill.core.errors import InvalidInput


@dataclass(frozen=True)
class ExtractionConfig:
    """
    Configuration for field extraction (immutable).

    Attributes:
        min_blank_length: Minimum run of underscores, asterisks or trailing
            whitespace that counts as a blank (default 3)
        min_label_chars: Minimum word characters a label needs. 0 keeps
            unlabeled blanks as generic fields with an empty label.
        max_label_words: Labels longer than this keep only their last words
        optional_marker: Trailing label text that marks a field optional
    """
    min_blank_length: int = 3
    min_label_chars: int = 0
    max_label_words: int = 8
    optional_marker: str = "(optional)"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.min_blank_length < 1:
            raise InvalidInput(f"min_blank_length must be positive: {self.min_blank_length}")
        if self.min_label_chars < 0:
            raise InvalidInput(f"min_label_chars must be non-negative: {self.min_label_chars}")
        if self.max_label_words < 1:
            raise InvalidInput(f"max_label_words must be positive: {self.max_label_words}")
