"""
Unit tests for LayoutConfig validation.
"""

import pytest
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

from paper_composer.layout import LayoutConfig


class TestLayoutConfig:
    """Tests for LayoutConfig defaults and validation."""

    def test_defaults_are_a4_portrait_points(self):
        config = LayoutConfig()

        assert (config.page_width, config.page_height) == A4
        assert config.margin_top == pytest.approx(20 * mm)
        assert config.margin_left == pytest.approx(25 * mm)

    def test_available_area_excludes_margins(self):
        config = LayoutConfig()

        assert config.available_width == pytest.approx(A4[0] - 50 * mm)
        assert config.available_height == pytest.approx(A4[1] - 45 * mm)
        assert config.body_width == pytest.approx(
            config.available_width - config.label_width - config.marks_width
        )

    @pytest.mark.parametrize("kwargs", [
        {"page_width": 0},
        {"page_height": -1},
        {"margin_top": -5},
        {"block_spacing": -1},
        {"margin_left": 300, "margin_right": 300},
        {"margin_top": 500, "margin_bottom": 500},
        {"label_width": 300, "marks_width": 300},
    ])
    def test_when_invalid_geometry_then_value_error(self, kwargs):
        with pytest.raises(ValueError):
            LayoutConfig(**kwargs)
