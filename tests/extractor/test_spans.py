"""
Unit tests for interval exclusion.
"""

import pytest

from docfill.extractor.spans import SpanSet


class TestSpanSet:

    def test_claim_free_span(self):
        spans = SpanSet()
        assert spans.claim(0, 10) is True
        assert len(spans) == 1

    def test_overlapping_claim_is_rejected(self):
        spans = SpanSet()
        spans.claim(10, 20)
        assert spans.claim(5, 11) is False
        assert spans.claim(19, 25) is False
        assert spans.claim(12, 15) is False
        assert spans.claim(0, 30) is False
        assert len(spans) == 1

    def test_adjacent_spans_do_not_overlap(self):
        spans = SpanSet()
        spans.claim(10, 20)
        assert spans.claim(0, 10) is True
        assert spans.claim(20, 30) is True

    def test_iteration_is_sorted(self):
        spans = SpanSet()
        for start, end in [(40, 50), (0, 5), (20, 30)]:
            spans.claim(start, end)
        assert list(spans) == [(0, 5), (20, 30), (40, 50)]

    def test_empty_span_raises(self):
        with pytest.raises(ValueError):
            SpanSet().claim(5, 5)

    def test_overlaps_without_claiming(self):
        spans = SpanSet()
        spans.claim(10, 20)
        assert spans.overlaps(15, 16)
        assert not spans.overlaps(20, 21)
        assert len(spans) == 1
