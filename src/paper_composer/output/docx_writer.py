"""
Module: output.docx_writer

Purpose:
    Render an ExamDocument to a Word document (DOCX) with python-docx.
    Same semantic content as the print layout: questions, normalized
    numbers and marks come from the shared normalizer, and math styling
    from the shared formatter, mapped onto run-level flags.

    Export is left-to-right only; right-to-left papers are written with
    their own labels but without paragraph bidi settings.

Key Functions:
    - build_docx(): Assemble the document in memory, return bytes
    - docx_filename(): Download filename derived from the subject

Dependencies:
    - python-docx: Document assembly
    - text: normalizer + formatter

Used By:
    - controller: DOCX export
"""

from __future__ import annotations

import io
import logging
import re
from typing import Iterable

from docx import Document
from docx.enum.table import WD_TABLE_ALIGNMENT
from docx.enum.text import WD_ALIGN_PARAGRAPH, WD_TAB_ALIGNMENT
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Emu, Pt, Twips

from paper_composer.core.models import ExamDocument, Section, get_profile, letter_label
from paper_composer.core.models.profiles import ScriptProfile
from paper_composer.text import StyledRun, VerticalAlign, format_text, normalize_question

logger = logging.getLogger(__name__)

DEFAULT_FONT = "Times New Roman"
BASE_SIZE_PT = 12
TITLE_SIZE_PT = 20
SECTION_TITLE_SIZE_PT = 13
INSTRUCTIONS_SIZE_PT = 10
END_MARKER_SIZE_PT = 11

PAGE_MARGIN_TWIPS = 1140
NUMBER_TAB_TWIPS = 720
MARKS_TAB_TWIPS = 9000
SUB_INDENT_TWIPS = 1080
SECTION_TABLE_WIDTH = 0.6
CELL_MARGIN_TWIPS = 100

ROLL_NO_BLANK = "__________"
FALLBACK_FILENAME = "Exam_Paper"
FILENAME_SUFFIX = "_Professional.docx"
THIN_SPACE = "\u2009"

_RESERVED_CHARS_RE = re.compile(r'[\\/:*?"<>|]')


def docx_filename(subject: str) -> str:
    """
    Download filename for a document subject.

    Whitespace runs become "_" and path-reserved characters are dropped;
    an empty result falls back to "Exam_Paper".

    Example:
        >>> docx_filename("  Physics  Paper 1 ")
        'Physics_Paper_1_Professional.docx'
        >>> docx_filename("")
        'Exam_Paper_Professional.docx'
    """
    stem = _RESERVED_CHARS_RE.sub("", "_".join((subject or "").split()))
    return f"{stem or FALLBACK_FILENAME}{FILENAME_SUFFIX}"


# ─────────────────────────────────────────────────────────────────────────────
# Low-level XML helpers
# ─────────────────────────────────────────────────────────────────────────────

def _set_cell_borders(cell, val: str = "single", size_eighths: int = 12) -> None:
    """Set all four borders of a table cell ("nil" removes them)."""
    tc_pr = cell._tc.get_or_add_tcPr()
    borders = OxmlElement("w:tcBorders")
    for edge in ("top", "left", "bottom", "right"):
        element = OxmlElement(f"w:{edge}")
        element.set(qn("w:val"), val)
        if val != "nil":
            element.set(qn("w:sz"), str(size_eighths))
            element.set(qn("w:color"), "000000")
            element.set(qn("w:space"), "0")
        borders.append(element)
    tc_pr.append(borders)


def _set_cell_margins(cell, twips: int) -> None:
    tc_pr = cell._tc.get_or_add_tcPr()
    margins = OxmlElement("w:tcMar")
    for edge in ("top", "left", "bottom", "right"):
        element = OxmlElement(f"w:{edge}")
        element.set(qn("w:w"), str(twips))
        element.set(qn("w:type"), "dxa")
        margins.append(element)
    tc_pr.append(margins)


def _set_paragraph_borders(paragraph, edges: Iterable[str], size_eighths: int) -> None:
    p_pr = paragraph._p.get_or_add_pPr()
    borders = OxmlElement("w:pBdr")
    for edge in edges:
        element = OxmlElement(f"w:{edge}")
        element.set(qn("w:val"), "single")
        element.set(qn("w:sz"), str(size_eighths))
        element.set(qn("w:space"), "1")
        element.set(qn("w:color"), "000000")
        borders.append(element)
    p_pr.append(borders)


# ─────────────────────────────────────────────────────────────────────────────
# Runs
# ─────────────────────────────────────────────────────────────────────────────

def add_styled_runs(paragraph, runs: Iterable[StyledRun], base_size: float, *, italic: bool = False) -> None:
    """
    Append formatter runs to a paragraph.

    italic -> run italic, super/sub -> font superscript/subscript,
    scale -> font size, padded -> thin spaces around the operator.
    """
    for styled in runs:
        style = styled.style
        text = f"{THIN_SPACE}{styled.text}{THIN_SPACE}" if style.padded else styled.text
        run = paragraph.add_run(text)
        run.italic = style.italic or italic or None
        run.font.size = Pt(base_size * style.scale)
        if style.vertical is VerticalAlign.SUPER:
            run.font.superscript = True
        elif style.vertical is VerticalAlign.SUB:
            run.font.subscript = True


def _add_text_run(paragraph, text: str, *, bold: bool = False, italic: bool = False,
                  underline: bool = False, size: float | None = None):
    run = paragraph.add_run(text)
    if bold:
        run.bold = True
    if italic:
        run.italic = True
    if underline:
        run.underline = True
    if size is not None:
        run.font.size = Pt(size)
    return run


# ─────────────────────────────────────────────────────────────────────────────
# Document parts
# ─────────────────────────────────────────────────────────────────────────────

def _add_header(doc, document: ExamDocument, profile: ScriptProfile) -> None:
    labels = profile.labels

    title = doc.add_paragraph()
    title.alignment = WD_ALIGN_PARAGRAPH.CENTER
    title.paragraph_format.space_after = Pt(6)
    _add_text_run(title, document.title.upper(), bold=True, size=TITLE_SIZE_PT)

    divider = doc.add_paragraph()
    divider.paragraph_format.space_after = Pt(12)
    _set_paragraph_borders(divider, ("bottom",), 12)

    table = doc.add_table(rows=2, cols=2)
    cells = [
        (labels.subject, document.subject, WD_ALIGN_PARAGRAPH.LEFT),
        (labels.total_marks, document.total_marks, WD_ALIGN_PARAGRAPH.RIGHT),
        (labels.time_allowed, document.time_allowed, WD_ALIGN_PARAGRAPH.LEFT),
        (labels.roll_no, ROLL_NO_BLANK, WD_ALIGN_PARAGRAPH.RIGHT),
    ]
    for index, (label, value, alignment) in enumerate(cells):
        cell = table.cell(index // 2, index % 2)
        _set_cell_borders(cell, "nil")
        paragraph = cell.paragraphs[0]
        paragraph.alignment = alignment
        if index >= 2:
            paragraph.paragraph_format.space_before = Pt(6)
        _add_text_run(paragraph, f"{label}: ", bold=True)
        _add_text_run(paragraph, value, underline=True)

    spacer = doc.add_paragraph()
    spacer.paragraph_format.space_before = Pt(20)


def _add_section(doc, section: Section, profile: ScriptProfile, content_width: int) -> None:
    table = doc.add_table(rows=1, cols=1)
    table.alignment = WD_TABLE_ALIGNMENT.CENTER
    cell = table.cell(0, 0)
    cell.width = Twips(int(content_width * SECTION_TABLE_WIDTH))
    _set_cell_borders(cell, "single", 12)
    _set_cell_margins(cell, CELL_MARGIN_TWIPS)
    heading = cell.paragraphs[0]
    heading.alignment = WD_ALIGN_PARAGRAPH.CENTER
    _add_text_run(heading, section.title.upper(), bold=True, size=SECTION_TITLE_SIZE_PT)

    if section.instructions:
        paragraph = doc.add_paragraph()
        paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
        paragraph.paragraph_format.space_before = Pt(10)
        paragraph.paragraph_format.space_after = Pt(10)
        _add_text_run(paragraph, f"({profile.labels.instructions} ", italic=True, size=INSTRUCTIONS_SIZE_PT)
        add_styled_runs(paragraph, format_text(section.instructions), INSTRUCTIONS_SIZE_PT, italic=True)
        _add_text_run(paragraph, ")", italic=True, size=INSTRUCTIONS_SIZE_PT)
    else:
        doc.add_paragraph().paragraph_format.space_before = Pt(10)

    for question in section.questions:
        normalized = normalize_question(question)
        paragraph = doc.add_paragraph()
        fmt = paragraph.paragraph_format
        fmt.space_before = Pt(10)
        fmt.space_after = Pt(5)
        fmt.tab_stops.add_tab_stop(Twips(NUMBER_TAB_TWIPS), WD_TAB_ALIGNMENT.LEFT)
        fmt.tab_stops.add_tab_stop(Twips(MARKS_TAB_TWIPS), WD_TAB_ALIGNMENT.RIGHT)

        _add_text_run(paragraph, f"{profile.labels.question}.{normalized.number}\t", bold=True)
        add_styled_runs(paragraph, format_text(normalized.text), BASE_SIZE_PT)
        if normalized.marks:
            _add_text_run(paragraph, f"\t({normalized.marks})", bold=True)

        for index, sub in enumerate(normalized.sub_questions):
            sub_paragraph = doc.add_paragraph()
            sub_paragraph.paragraph_format.left_indent = Twips(SUB_INDENT_TWIPS)
            sub_paragraph.paragraph_format.space_before = Pt(5)
            _add_text_run(sub_paragraph, f"({letter_label(index)})  ", bold=True)
            add_styled_runs(sub_paragraph, format_text(sub), BASE_SIZE_PT)

    doc.add_paragraph().paragraph_format.space_before = Pt(20)


def _add_end_marker(doc, profile: ScriptProfile) -> None:
    paragraph = doc.add_paragraph()
    paragraph.alignment = WD_ALIGN_PARAGRAPH.CENTER
    paragraph.paragraph_format.space_before = Pt(30)
    _set_paragraph_borders(paragraph, ("top", "bottom"), 6)
    _add_text_run(paragraph, f"   {profile.labels.end_of_paper}   ", bold=True, size=END_MARKER_SIZE_PT)


def build_docx(document: ExamDocument) -> bytes:
    """
    Assemble the Word document for an exam paper.

    The document is built and saved entirely in memory; callers write
    the returned bytes only after assembly succeeded.

    Args:
        document: Document to export (read only)

    Returns:
        DOCX file content

    Example:
        >>> data = build_docx(doc)
        >>> data[:2]
        b'PK'
    """
    profile = get_profile(document.language)
    doc = Document()

    normal = doc.styles["Normal"]
    normal.font.name = DEFAULT_FONT
    normal.font.size = Pt(BASE_SIZE_PT)

    page = doc.sections[0]
    for side in ("top_margin", "bottom_margin", "left_margin", "right_margin"):
        setattr(page, side, Twips(PAGE_MARGIN_TWIPS))
    content_width = Emu(page.page_width - page.left_margin - page.right_margin).twips

    doc.core_properties.title = document.title
    doc.core_properties.subject = document.subject

    _add_header(doc, document, profile)
    for section in document.sections:
        _add_section(doc, section, profile, content_width)
    _add_end_marker(doc, profile)

    buffer = io.BytesIO()
    doc.save(buffer)
    logger.info(
        f"Built DOCX: {len(document.sections)} sections, {document.question_count} questions"
    )
    return buffer.getvalue()
