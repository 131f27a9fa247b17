"""
Module: extractor.spans

Purpose:
    Interval exclusion for multi-pass extraction. Each recognizer pass
    consults the set of spans already claimed by higher-priority passes
    and only records matches that fall in the residual text.

Key Classes:
    - SpanSet: Sorted set of non-overlapping half-open intervals

Dependencies:
    - bisect (std)

Used By:
    - extractor.pipeline: Claim tracking across passes
"""

from __future__ import annotations

from bisect import bisect_right
from typing import Iterator, List, Tuple


class SpanSet:
    """
    Sorted, non-overlapping set of half-open [start, end) intervals.

    Example:
        >>> spans = SpanSet()
        >>> spans.claim(0, 10)
        True
        >>> spans.overlaps(5, 12)
        True
        >>> spans.claim(10, 20)
        True
    """

    def __init__(self) -> None:
        self._starts: List[int] = []
        self._ends: List[int] = []

    def __len__(self) -> int:
        return len(self._starts)

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        return iter(zip(self._starts, self._ends))

    def overlaps(self, start: int, end: int) -> bool:
        """Check whether [start, end) intersects any claimed interval."""
        idx = bisect_right(self._starts, start)
        # Interval starting at or before `start` may extend past it
        if idx > 0 and self._ends[idx - 1] > start:
            return True
        # Next interval may begin before `end`
        if idx < len(self._starts) and self._starts[idx] < end:
            return True
        return False

    def claim(self, start: int, end: int) -> bool:
        """
        Claim [start, end) if it is free.

        Returns:
            True if claimed, False if it overlapped an existing interval.
        """
        if end <= start:
            raise ValueError(f"Empty or inverted span: ({start}, {end})")
        if self.overlaps(start, end):
            return False
        idx = bisect_right(self._starts, start)
        self._starts.insert(idx, start)
        self._ends.insert(idx, end)
        return True
