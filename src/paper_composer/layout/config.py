"""
Module: layout.config

Purpose:
    Configuration for the print layout engine.
    Defines page dimensions, margins and vertical rhythm in PDF points.

Key Classes:
    - LayoutConfig: Immutable layout configuration

Dependencies:
    - dataclasses (std)
    - reportlab.lib.pagesizes: A4 dimensions
    - reportlab.lib.units: mm

Used By:
    - layout.composer: Block measurement
    - layout.paginator: Page arrangement
    - output.renderer: Drawing
"""

from __future__ import annotations

from dataclasses import dataclass

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm

DEFAULT_PAGE_WIDTH_PT, DEFAULT_PAGE_HEIGHT_PT = A4


@dataclass(frozen=True)
class LayoutConfig:
    """
    Configuration for page layout (immutable).

    All lengths are PDF points (1/72 inch). Y offsets used by the paginator
    are measured from the top of the page.

    Attributes:
        page_width: Page width
        page_height: Page height
        margin_top: Top margin (20mm)
        margin_bottom: Bottom margin (25mm, leaves room for the footer)
        margin_left: Left margin (25mm)
        margin_right: Right margin (25mm)
        block_spacing: Gap between consecutive questions
        section_spacing: Extra gap above a section title
        header_spacing: Gap between the header block and the first section
        label_width: Column reserved for the "Q 1." label
        marks_width: Column reserved for the marks annotation
        sub_indent: Indent of sub-question rows
        footer_font_size: Size of the per-page credit line

    Example:
        >>> config = LayoutConfig()
        >>> round(config.available_width, 2)
        453.54
    """

    # Page dimensions
    page_width: float = DEFAULT_PAGE_WIDTH_PT
    page_height: float = DEFAULT_PAGE_HEIGHT_PT

    # Margins
    margin_top: float = 20 * mm
    margin_bottom: float = 25 * mm
    margin_left: float = 25 * mm
    margin_right: float = 25 * mm

    # Spacing
    block_spacing: float = 14.0
    section_spacing: float = 22.0
    header_spacing: float = 18.0

    # Question row geometry
    label_width: float = 42.0
    marks_width: float = 40.0
    sub_indent: float = 24.0

    footer_font_size: float = 7.0

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.page_width <= 0:
            raise ValueError(f"page_width must be positive: {self.page_width}")
        if self.page_height <= 0:
            raise ValueError(f"page_height must be positive: {self.page_height}")
        for name in ("margin_top", "margin_bottom", "margin_left", "margin_right",
                     "block_spacing", "section_spacing", "header_spacing"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative: {getattr(self, name)}")
        if self.available_width <= 0:
            raise ValueError("Margins exceed page width")
        if self.available_height <= 0:
            raise ValueError("Margins exceed page height")
        if self.body_width <= 0:
            raise ValueError("Label and marks columns exceed available width")

    @property
    def available_width(self) -> float:
        """Width available for content (excluding margins)."""
        return self.page_width - self.margin_left - self.margin_right

    @property
    def available_height(self) -> float:
        """Height available for content (excluding margins)."""
        return self.page_height - self.margin_top - self.margin_bottom

    @property
    def body_width(self) -> float:
        """Width of a question body between label and marks columns."""
        return self.available_width - self.label_width - self.marks_width
