"""
Unit tests for the paginator layout engine.
"""

import pytest

from docfill.builder.layout import ContentElement, LayoutConfig, paginate
from docfill.core.errors import InvalidInput


@pytest.fixture
def config_500():
    """500pt content area, no inter-element spacing."""
    return LayoutConfig.with_content_height(500, element_spacing=0)


def _paragraphs(*names):
    return [ContentElement.paragraph(name) for name in names]


def _page_indices(result):
    return [list(page.element_indices) for page in result.pages]


class TestGreedyFill:

    def test_three_paragraphs_split_two_and_one(self, config_500, fake_measurer):
        # Arrange
        elements = _paragraphs("p1", "p2", "p3")
        measurer = fake_measurer({"p1": 200, "p2": 200, "p3": 200})

        # Act
        result = paginate(elements, config_500, measurer)

        # Assert
        assert _page_indices(result) == [[0, 1], [2]]
        assert result.pages[0].height_used == pytest.approx(400)
        assert result.warnings == []

    def test_exact_fit_stays_on_page(self, config_500, fake_measurer):
        measurer = fake_measurer({"a": 250, "b": 250})
        result = paginate(_paragraphs("a", "b"), config_500, measurer)
        assert result.page_count == 1

    def test_placement_tops_start_at_margin(self, fake_measurer):
        config = LayoutConfig.with_content_height(500, margin_top=40, element_spacing=20)
        measurer = fake_measurer({"a": 240, "b": 240})

        result = paginate(_paragraphs("a", "b"), config, measurer)

        tops = [p.top for p in result.pages[0].placements]
        assert tops == [40, 300]

    def test_spacing_counts_toward_height(self, fake_measurer):
        config = LayoutConfig.with_content_height(500, element_spacing=20)
        measurer = fake_measurer({"a": 240, "b": 241})

        result = paginate(_paragraphs("a", "b"), config, measurer)

        assert _page_indices(result) == [[0], [1]]

    def test_no_spacing_before_first_element_on_page(self, fake_measurer):
        config = LayoutConfig.with_content_height(500, element_spacing=20)
        measurer = fake_measurer({"a": 400, "b": 500})

        result = paginate(_paragraphs("a", "b"), config, measurer)

        assert _page_indices(result) == [[0], [1]]
        assert result.pages[1].placements[0].top == config.margin_top
        assert result.warnings == []

    def test_empty_input_yields_no_pages(self, config_500):
        result = paginate([], config_500)
        assert result.pages == ()
        assert result.page_count == 0


class TestOversized:

    def test_oversized_signature_block_alone_with_warning(self, config_500, fake_measurer):
        # Arrange
        block = ContentElement.signature_block("Signature: ____")
        measurer = fake_measurer({"Signature: ____": 600})

        # Act
        result = paginate([block], config_500, measurer)

        # Assert
        assert result.page_count == 1
        assert result.pages[0].elements == (block,)
        assert len(result.warnings) == 1
        warning = result.warnings[0]
        assert warning.element_indices == (0,)
        assert warning.height == 600
        assert warning.content_height == pytest.approx(500)
        assert warning.chain_broken is False

    def test_oversized_element_starts_fresh_page(self, config_500, fake_measurer):
        elements = _paragraphs("before", "huge", "after")
        measurer = fake_measurer({"before": 100, "huge": 600, "after": 100})

        result = paginate(elements, config_500, measurer)

        assert _page_indices(result) == [[0], [1], [2]]
        assert result.warnings[0].page_index == 1

    def test_oversized_chain_is_broken_between_elements(self, config_500, fake_measurer):
        elements = [ContentElement.heading("h"), ContentElement.paragraph("body")]
        measurer = fake_measurer({"h": 100, "body": 450})

        result = paginate(elements, config_500, measurer)

        assert _page_indices(result) == [[0], [1]]
        assert [w.chain_broken for w in result.warnings] == [True]
        assert result.warnings[0].element_indices == (0, 1)

    def test_broken_chain_starts_on_open_page(self, config_500, fake_measurer):
        # Arrange
        elements = [
            ContentElement.paragraph("before"),
            ContentElement.heading("h"),
            ContentElement.paragraph("body"),
        ]
        measurer = fake_measurer({"before": 100, "h": 100, "body": 450})

        # Act
        result = paginate(elements, config_500, measurer)

        # Assert
        assert _page_indices(result) == [[0, 1], [2]]
        assert len(result.warnings) == 1
        assert result.warnings[0].chain_broken is True
        assert result.warnings[0].page_index == 0

    def test_pages_within_height_unless_oversized(self, config_500, fake_measurer):
        heights = {f"p{i}": h for i, h in enumerate([120, 300, 90, 480, 60, 610, 200, 30])}
        elements = _paragraphs(*heights)

        result = paginate(elements, config_500, fake_measurer(heights))

        oversized = {i for w in result.warnings for i in w.element_indices}
        for page in result.pages:
            if not oversized.intersection(page.element_indices):
                assert page.height_used <= 500


class TestDirectives:

    def test_keep_with_next_moves_pair_to_next_page(self, config_500, fake_measurer):
        elements = [
            ContentElement.paragraph("intro"),
            ContentElement.heading("heading"),
            ContentElement.paragraph("body"),
        ]
        measurer = fake_measurer({"intro": 200, "heading": 100, "body": 300})

        result = paginate(elements, config_500, measurer)

        assert _page_indices(result) == [[0], [1, 2]]

    def test_keep_with_next_chain_is_transitive(self, config_500, fake_measurer):
        elements = [
            ContentElement.paragraph("intro"),
            ContentElement.heading("h1"),
            ContentElement.heading("h2"),
            ContentElement.paragraph("body"),
        ]
        measurer = fake_measurer({"intro": 300, "h1": 50, "h2": 50, "body": 150})

        result = paginate(elements, config_500, measurer)

        assert _page_indices(result) == [[0], [1, 2, 3]]

    def test_break_before_starts_new_page(self, config_500, fake_measurer):
        elements = [
            ContentElement.paragraph("a"),
            ContentElement.paragraph("b", break_before=True),
        ]

        result = paginate(elements, config_500, fake_measurer())

        assert _page_indices(result) == [[0], [1]]

    def test_break_before_on_first_element_adds_no_blank_page(self, config_500, fake_measurer):
        elements = [ContentElement.paragraph("a", break_before=True)]
        result = paginate(elements, config_500, fake_measurer())
        assert result.page_count == 1

    def test_break_before_wins_over_keep_with_next(self, config_500, fake_measurer):
        elements = [
            ContentElement.heading("h"),
            ContentElement.paragraph("b", break_before=True),
        ]

        result = paginate(elements, config_500, fake_measurer())

        assert _page_indices(result) == [[0], [1]]

    def test_keep_together_block_on_one_page(self, config_500, fake_measurer):
        elements = [
            ContentElement.paragraph("terms"),
            ContentElement.signature_block("sig"),
        ]
        measurer = fake_measurer({"terms": 400, "sig": 150})

        result = paginate(elements, config_500, measurer)

        pages_with_sig = [p.index for p in result.pages if 1 in p.element_indices]
        assert pages_with_sig == [1]


class TestInvariants:

    def _mixed(self):
        return [
            ContentElement.heading("title"),
            ContentElement.paragraph("p1"),
            ContentElement.paragraph("p2", break_before=True),
            ContentElement.spacer(40),
            ContentElement.heading("h2"),
            ContentElement.paragraph("p3"),
            ContentElement.signature_block("sig"),
            ContentElement.paragraph("p4"),
        ]

    def _heights(self):
        return {"title": 30, "p1": 320, "p2": 260, "h2": 30, "p3": 200, "sig": 120, "p4": 90}

    def test_order_preserved_without_loss_or_duplication(self, config_500, fake_measurer):
        elements = self._mixed()
        result = paginate(elements, config_500, fake_measurer(self._heights()))

        flattened = [i for page in result.pages for i in page.element_indices]
        assert flattened == list(range(len(elements)))
        assert [e for page in result.pages for e in page.elements] == elements

    def test_deterministic(self, config_500, fake_measurer):
        first = paginate(self._mixed(), config_500, fake_measurer(self._heights()))
        second = paginate(self._mixed(), config_500, fake_measurer(self._heights()))
        assert first.to_dict() == second.to_dict()

    def test_each_element_measured_once(self, config_500, fake_measurer):
        elements = self._mixed()
        measurer = fake_measurer(self._heights())

        paginate(elements, config_500, measurer)

        assert len(measurer.calls) == len(elements)

    def test_keep_with_next_pairs_share_page(self, config_500, fake_measurer):
        elements = self._mixed()
        result = paginate(elements, config_500, fake_measurer(self._heights()))

        for i, element in enumerate(elements[:-1]):
            if element.keep_with_next and not elements[i + 1].break_before:
                assert result.page_of(i) == result.page_of(i + 1)


class TestInvalidInput:

    def test_zero_content_height(self):
        with pytest.raises(InvalidInput):
            paginate(_paragraphs("a"), LayoutConfig.with_content_height(0))

    def test_config_must_be_layout_config(self):
        with pytest.raises(InvalidInput):
            paginate(_paragraphs("a"), 500)

    def test_non_element_raises(self, config_500):
        with pytest.raises(InvalidInput):
            paginate(["not an element"], config_500)

    def test_negative_measurement_raises(self, config_500, fake_measurer):
        with pytest.raises(InvalidInput):
            paginate(_paragraphs("a"), config_500, fake_measurer({"a": -5}))


class TestDefaultMeasurer:

    def test_reportlab_metrics_used_when_no_measurer(self):
        config = LayoutConfig.with_content_height(100, element_spacing=0)
        elements = _paragraphs(*[f"Line {i}" for i in range(10)])

        result = paginate(elements, config)

        # 14pt leading: seven one-line paragraphs fit in 100pt
        assert _page_indices(result)[0] == list(range(7))
        assert result.page_count == 2
