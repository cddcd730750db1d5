"""
Module: output.renderer

Purpose:
    Render LayoutResult to PDF using ReportLab.
    Each PagePlan becomes one PDF page with its blocks drawn at their
    paginated positions, mirrored for right-to-left profiles.

Key Functions:
    - render_pdf_bytes(): Render to an in-memory PDF
    - render_to_pdf(): Render and write a PDF file

Dependencies:
    - reportlab: PDF generation
    - layout.models: LayoutResult, PagePlan, blocks
    - layout.composer: TEMPLATE_SPECS (header geometry)

Used By:
    - controller: PDF export
"""

from __future__ import annotations

import io
import logging
import re
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from reportlab.lib import colors
from reportlab.pdfgen import canvas

from paper_composer import __version__
from paper_composer.core.models import HeaderTemplate
from paper_composer.layout.composer import (
    BADGE_PADDING_Y,
    END_MARKER_GAP,
    END_MARKER_PADDING,
    FIELD_LABEL_SIZE,
    INSTRUCTIONS_PADDING,
    QUESTION_LABEL_SIZE,
    SUB_AREA_GAP,
    SUB_ITEM_SIZE,
    TEMPLATE_SPECS,
)
from paper_composer.layout.config import LayoutConfig
from paper_composer.layout.metrics import (
    FALLBACK_BOLD,
    FALLBACK_ITALIC,
    FALLBACK_REGULAR,
    FontSet,
    FlowLine,
    Fragment,
    measure,
    resolve_fonts,
    shape_rtl,
)
from paper_composer.layout.models import (
    EndMarkerBlock,
    HeaderBlock,
    HeaderField,
    InstructionsBlock,
    LayoutResult,
    PagePlan,
    QuestionBlock,
    SectionTitleBlock,
)

logger = logging.getLogger(__name__)

# Footer configuration
FOOTER_FONT = "Helvetica"
FOOTER_Y_PT = 15

INK = colors.HexColor("#0f172a")
ACCENT = colors.HexColor("#047857")
MUTED = colors.HexColor("#64748b")
RULE = colors.HexColor("#cbd5e1")
BADGE_FILL = colors.HexColor("#f8fafc")


_RTL_RE = re.compile(r"[\u0590-\u08FF\uFB1D-\uFDFF\uFE70-\uFEFF]")
_LTR_RE = re.compile(r"[A-Za-z0-9]")


def visual_order(fragments: Sequence[Fragment]) -> List[Fragment]:
    """
    Order a right-to-left line's fragments for left-to-right painting.

    Left-to-right islands (Latin words, numbers, formulas) keep their
    internal order; neutral fragments between two Latin fragments join
    the island. Everything else is reversed. Each fragment is shaped
    separately with shape_rtl() when drawn.
    """
    strong = []
    for fragment in fragments:
        if _RTL_RE.search(fragment.text):
            strong.append("R")
        elif _LTR_RE.search(fragment.text) or fragment.rise:
            strong.append("L")
        else:
            strong.append("N")

    for i, kind in enumerate(strong):
        if kind != "N":
            continue
        before = next((k for k in reversed(strong[:i]) if k != "N"), "R")
        after = next((k for k in strong[i + 1:] if k != "N"), "R")
        strong[i] = "L" if before == after == "L" else "R"

    segments: List[List[Fragment]] = []
    previous = ""
    for fragment, kind in zip(fragments, strong):
        if kind == "L" and previous == "L":
            segments[-1].append(fragment)
        else:
            segments.append([fragment])
        previous = kind

    return [fragment for segment in reversed(segments) for fragment in segment]


def _get_footer_text() -> str:
    """Get footer text with current version number."""
    return f"Generated with Paper Composer v{__version__} | A4 Standard Format"


class _Painter:
    """
    Draws blocks for one document direction.

    Holds the canvas, page geometry and direction so the per-block
    drawing functions only deal with their own content.
    """

    def __init__(self, c: canvas.Canvas, config: LayoutConfig, fonts: FontSet, rtl: bool):
        self.c = c
        self.config = config
        self.fonts = fonts
        self.rtl = rtl
        self.left = config.margin_left
        self.right = config.page_width - config.margin_right
        self.width = config.available_width

    # Coordinates -------------------------------------------------------

    def y(self, top: float) -> float:
        """Convert a top-down offset to PDF's bottom-up Y."""
        return self.config.page_height - top

    def start_x(self, offset: float, width: float = 0.0) -> float:
        """Left X of a box of width placed offset from the start edge."""
        if self.rtl:
            return self.right - offset - width
        return self.left + offset

    # Text --------------------------------------------------------------

    def line(self, line: FlowLine, top: float, x: float, width: float, align: str = "start") -> None:
        """
        Draw one flowed line inside the box [x, x + width].

        Right-to-left lines are aligned to the end of the box and painted
        in visual order.
        """
        if self.rtl and align == "start":
            align = "end"
        if align == "center":
            left = x + (width - line.width) / 2
        elif align == "end":
            left = x + width - line.width
        else:
            left = x

        size = max((f.size for f in line.fragments), default=0.0)
        baseline = self.y(top) - line.height / 2 - 0.35 * size
        fragments = visual_order(line.fragments) if self.rtl else line.fragments
        cursor = left
        for fragment in fragments:
            if not fragment.is_space:
                self.c.setFont(fragment.font, fragment.size)
                self.c.drawString(cursor + fragment.padding, baseline + fragment.rise, shape_rtl(fragment.text))
            cursor += fragment.width

    def lines(self, lines: Iterable[FlowLine], top: float, x: float, width: float,
              align: str = "start") -> float:
        """Draw lines downward from top; returns the Y offset below them."""
        for flow_line in lines:
            self.line(flow_line, top, x, width, align)
            top += flow_line.height
        return top

    def text(self, text: str, font: str, size: float, top: float, x: float, width: float,
             align: str = "start") -> None:
        """Draw a single unflowed string with its baseline below top."""
        if self.rtl and align == "start":
            align = "end"
        text = shape_rtl(text)
        self.c.setFont(font, size)
        baseline = self.y(top) - size
        if align == "center":
            self.c.drawCentredString(x + width / 2, baseline, text)
        elif align == "end":
            self.c.drawRightString(x + width, baseline, text)
        else:
            self.c.drawString(x, baseline, text)

    def rule(self, top: float, x: float, width: float, thickness: float, color) -> None:
        self.c.saveState()
        self.c.setStrokeColor(color)
        self.c.setLineWidth(thickness)
        self.c.line(x, self.y(top), x + width, self.y(top))
        self.c.restoreState()

    # Blocks ------------------------------------------------------------

    def header(self, block: HeaderBlock, top: float) -> None:
        spec = TEMPLATE_SPECS[block.template]
        c = self.c
        pad = spec.frame_padding
        inner_x = self.start_x(pad + spec.side_bar, self.width - 2 * pad - spec.side_bar)
        inner_width = self.width - 2 * pad - spec.side_bar
        title_align = "center" if (spec.centered and not self.rtl) else "start"

        if block.template is HeaderTemplate.BOXED:
            c.saveState()
            c.setStrokeColor(INK)
            c.setLineWidth(2)
            c.roundRect(self.left, self.y(top + block.height), self.width, block.height, 8, stroke=1, fill=0)
            c.restoreState()
        if block.template is HeaderTemplate.ACADEMIC:
            c.saveState()
            c.setFillColor(ACCENT)
            bar_x = self.start_x(0, spec.side_bar / 2)
            c.roundRect(bar_x, self.y(top + block.height), spec.side_bar / 2, block.height, 3, stroke=0, fill=1)
            c.restoreState()

        c.setFillColor(INK)
        y = self.lines(block.title_lines, top + pad, inner_x, inner_width, title_align)

        if block.template is HeaderTemplate.CLASSIC:
            self.rule(y + 4, inner_x, inner_width, 3, INK)
            self.rule(y + 9, inner_x, inner_width, 1, RULE)
        elif block.template is HeaderTemplate.MODERN:
            bar = 72.0
            c.saveState()
            c.setFillColor(ACCENT)
            c.roundRect(inner_x + (inner_width - bar) / 2, self.y(y + 7), bar, 3, 1.5, stroke=0, fill=1)
            c.restoreState()
            self.rule(y + spec.title_gap - 2, inner_x, inner_width, 1.5, RULE)
        else:
            self.rule(y + spec.title_gap / 2, inner_x, inner_width, 1.5 if pad else 1, INK if pad else RULE)

        grid_top = y + spec.title_gap
        value_size = (spec.value_size[1] if self.rtl else spec.value_size[0])
        cell_width = inner_width / block.columns
        for index, header_field in enumerate(block.fields):
            row, col = divmod(index, block.columns)
            cell_top = grid_top + row * block.row_height
            cell_x = (inner_x + inner_width - (col + 1) * cell_width) if self.rtl else inner_x + col * cell_width
            self._field(block.template, header_field, cell_top, cell_x + 4, cell_width - 8,
                        block.row_height, value_size)

        if block.template is HeaderTemplate.MODERN:
            self.rule(grid_top + block.row_height * -(-len(block.fields) // block.columns),
                      inner_x, inner_width, 1.5, RULE)

    def _field(self, template: HeaderTemplate, header_field: HeaderField, top: float, x: float,
               width: float, row_height: float, value_size: float) -> None:
        align = "center" if template is HeaderTemplate.MODERN else "start"
        value = f"({header_field.value})" if header_field.bracketed and header_field.value else header_field.value

        self.c.setFillColor(ACCENT)
        self.text(header_field.label.upper(), self.fonts.bold, FIELD_LABEL_SIZE, top, x, width, align)
        self.c.setFillColor(INK)
        value_top = top + FIELD_LABEL_SIZE * 1.6
        if value:
            self.text(value, self.fonts.bold, value_size, value_top, x, width, align)
        if header_field.placeholder or template is HeaderTemplate.CLASSIC:
            self.rule(top + row_height - 4, x, width, 1, RULE)

    def section_title(self, block: SectionTitleBlock, top: float) -> None:
        c = self.c
        if self.rtl:
            badge_x = self.right - block.badge_width
        else:
            badge_x = self.left + (self.width - block.badge_width) / 2
        c.saveState()
        c.setStrokeColor(INK)
        c.setFillColor(BADGE_FILL)
        c.setLineWidth(2)
        c.roundRect(badge_x, self.y(top + block.height), block.badge_width, block.height, 8, stroke=1, fill=1)
        c.restoreState()
        c.setFillColor(INK)
        self.lines(block.lines, top + BADGE_PADDING_Y, badge_x, block.badge_width, "center")

    def instructions(self, block: InstructionsBlock, top: float) -> None:
        self.rule(top, self.left, self.width, 1, RULE)
        self.rule(top + block.height, self.left, self.width, 1, RULE)
        align = "start" if self.rtl else "center"
        inner_x = self.left + INSTRUCTIONS_PADDING
        inner_width = self.width - 2 * INSTRUCTIONS_PADDING

        self.c.setFillColor(ACCENT)
        self.text(block.label.upper(), self.fonts.bold, FIELD_LABEL_SIZE, top + INSTRUCTIONS_PADDING,
                  inner_x, inner_width, align)
        self.c.setFillColor(MUTED)
        self.lines(block.lines, top + INSTRUCTIONS_PADDING + FIELD_LABEL_SIZE * 1.8,
                   inner_x, inner_width, align)

    def question(self, block: QuestionBlock, top: float) -> None:
        label_size = QUESTION_LABEL_SIZE[1] if self.rtl else QUESTION_LABEL_SIZE[0]
        body_size = max((f.size for line in block.body_lines for f in line.fragments), default=label_size)
        marks_width = self.config.marks_width
        body_width = self.width - block.label_width - marks_width

        self.c.setFillColor(ACCENT)
        self.text(block.heading, self.fonts.bold, label_size, top + 2,
                  self.start_x(0, block.label_width), block.label_width)

        self.c.setFillColor(INK)
        self.lines(block.body_lines, top, self.start_x(block.label_width, body_width), body_width)

        if block.marks:
            # Drawn as one left-to-right string so digits are never reordered
            self.c.setFillColor(MUTED)
            marks_x = self.start_x(block.label_width + body_width, marks_width)
            marks_text = f"({block.marks})"
            self.c.setFont(self.fonts.bold, body_size)
            baseline = self.y(top + 2) - body_size
            if self.rtl:
                self.c.drawString(marks_x, baseline, marks_text)
            else:
                self.c.drawRightString(marks_x + marks_width, baseline, marks_text)

        if not block.sub_items:
            return
        sub_size = SUB_ITEM_SIZE[1] if self.rtl else SUB_ITEM_SIZE[0]
        area_top = top + block.row_height + SUB_AREA_GAP
        indent = self.config.sub_indent
        area_width = self.width - indent
        for item in block.sub_items:
            item_top = area_top + item.y
            text_width = max(area_width - item.x - item.marker_width, 1.0)
            self.c.setFillColor(ACCENT)
            self.text(item.marker, self.fonts.bold, sub_size, item_top + 2,
                      self.start_x(indent + item.x, item.marker_width), item.marker_width)
            self.c.setFillColor(INK)
            self.lines(item.lines, item_top,
                       self.start_x(indent + item.x + item.marker_width, text_width), text_width)

    def end_marker(self, block: EndMarkerBlock, top: float) -> None:
        box_top = top + END_MARKER_GAP
        width = max((line.width for line in block.lines), default=0.0) + 80
        x = self.right - width if self.rtl else self.left + (self.width - width) / 2
        self.rule(box_top, x, width, 2, INK)
        self.rule(top + block.height, x, width, 2, INK)
        self.c.setFillColor(INK)
        self.lines(block.lines, box_top + END_MARKER_PADDING, x, width, "center")


def render_pdf_bytes(
    layout: LayoutResult,
    *,
    config: Optional[LayoutConfig] = None,
    show_footer: bool = True,
    title: str = "",
) -> bytes:
    """
    Render a layout result to PDF bytes.

    The whole document is assembled in memory, so a failure never leaves
    a partial file behind.

    Args:
        layout: Layout result from paginator
        config: Layout configuration the layout was paginated with
        show_footer: Draw the credit line on every page
        title: PDF document title metadata

    Returns:
        PDF file content
    """
    config = config or LayoutConfig()
    if layout.page_count == 0:
        logger.warning("Empty layout, creating empty PDF")

    if layout.fonts:
        fonts = layout.fonts
    elif layout.profile:
        fonts = resolve_fonts(layout.profile)
    else:
        fonts = FontSet(FALLBACK_REGULAR, FALLBACK_BOLD, FALLBACK_ITALIC)
    rtl = bool(layout.profile and layout.profile.is_rtl)

    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=(config.page_width, config.page_height))
    if title:
        c.setTitle(title)
    painter = _Painter(c, config, fonts, rtl)

    for page in layout.pages:
        _render_page(painter, page, show_footer)
        c.showPage()

    c.save()
    return buffer.getvalue()


def render_to_pdf(
    layout: LayoutResult,
    output_path: Path,
    *,
    config: Optional[LayoutConfig] = None,
    show_footer: bool = True,
    title: str = "",
) -> None:
    """
    Render layout result to PDF file.

    Args:
        layout: Layout result from paginator
        output_path: Path to write PDF
        config: Layout configuration the layout was paginated with
        show_footer: Draw the credit line on every page
        title: PDF document title metadata

    Raises:
        IOError: If PDF cannot be written

    Example:
        >>> render_to_pdf(layout, Path("output/paper.pdf"))
    """
    data = render_pdf_bytes(layout, config=config, show_footer=show_footer, title=title)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)

    logger.info(f"Rendered {layout.page_count} pages to {output_path}")


def _render_page(painter: _Painter, page: PagePlan, show_footer: bool = True) -> None:
    """
    Render a single page to the canvas.

    Args:
        painter: Painter bound to the canvas
        page: Page plan with placements
        show_footer: Draw the credit line
    """
    for placement in page.placements:
        block = placement.block
        painter.c.saveState()
        if isinstance(block, HeaderBlock):
            painter.header(block, placement.top)
        elif isinstance(block, SectionTitleBlock):
            painter.section_title(block, placement.top)
        elif isinstance(block, InstructionsBlock):
            painter.instructions(block, placement.top)
        elif isinstance(block, QuestionBlock):
            painter.question(block, placement.top)
        elif isinstance(block, EndMarkerBlock):
            painter.end_marker(block, placement.top)
        painter.c.restoreState()

    # Draw footer at bottom of page (after all content)
    if show_footer:
        _draw_footer(painter.c, painter.config)


def _draw_footer(c: canvas.Canvas, config: LayoutConfig) -> None:
    """
    Draw centered footer with version info.

    Always left-to-right, positioned in the bottom margin.
    """
    footer_text = _get_footer_text()

    c.saveState()
    c.setFont(FOOTER_FONT, config.footer_font_size)
    c.setFillColorRGB(0.4, 0.4, 0.4)

    text_width = measure(footer_text, FOOTER_FONT, config.footer_font_size)
    x_pt = (config.page_width - text_width) / 2
    c.drawString(x_pt, FOOTER_Y_PT, footer_text)
    c.restoreState()
