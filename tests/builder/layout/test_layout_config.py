"""
Unit tests for layout configuration.
"""

import pytest
from reportlab.lib.pagesizes import A4, letter

from docfill.builder.layout import LayoutConfig, TextStyle
from docfill.core.errors import InvalidInput


class TestLayoutConfigDefaults:

    def test_us_letter_with_inch_margins(self):
        config = LayoutConfig()
        assert (config.page_width, config.page_height) == letter
        assert config.content_height == pytest.approx(648.0)
        assert config.available_width == pytest.approx(468.0)
        assert config.content_bottom == pytest.approx(720.0)

    def test_heading_style_is_bold(self):
        assert LayoutConfig().heading_style.font_name == "Helvetica-Bold"


class TestLayoutConfigValidation:

    @pytest.mark.parametrize("content_height", [0, -10, None])
    def test_with_content_height_rejects_non_positive(self, content_height):
        with pytest.raises(InvalidInput):
            LayoutConfig.with_content_height(content_height)

    def test_margins_consuming_page_height_raise(self):
        with pytest.raises(InvalidInput, match="page height"):
            LayoutConfig(page_height=144)

    def test_margins_consuming_page_width_raise(self):
        with pytest.raises(InvalidInput, match="page width"):
            LayoutConfig(page_width=100, margin_left=50, margin_right=50)

    def test_negative_spacing_raises(self):
        with pytest.raises(InvalidInput):
            LayoutConfig(element_spacing=-1)

    def test_negative_margin_raises(self):
        with pytest.raises(InvalidInput):
            LayoutConfig(margin_top=-5)


class TestLayoutConfigConstructors:

    def test_with_content_height_is_exact(self):
        config = LayoutConfig.with_content_height(500, margin_top=36)
        assert config.content_height == pytest.approx(500)
        assert config.margin_top == 36

    def test_for_page_size_a4(self):
        config = LayoutConfig.for_page_size("A4", margin=36)
        assert (config.page_width, config.page_height) == A4
        assert config.margin_left == 36
        assert config.content_height == pytest.approx(A4[1] - 72)

    def test_for_page_size_unknown(self):
        with pytest.raises(InvalidInput, match="Unknown page size"):
            LayoutConfig.for_page_size("tabloid")


class TestTextStyle:

    def test_leading_smaller_than_size_raises(self):
        with pytest.raises(InvalidInput):
            TextStyle(font_size=12, leading=10)

    def test_zero_size_raises(self):
        with pytest.raises(InvalidInput):
            TextStyle(font_size=0)
