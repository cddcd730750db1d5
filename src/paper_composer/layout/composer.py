"""
Module: layout.composer

Purpose:
    Compose layout blocks from an ExamDocument.
    Normalizes and formats every text field, measures it with the
    profile's fonts and returns the flat, ordered block list the
    paginator arranges onto pages.

Key Functions:
    - compose_document(): Create blocks for an entire document
    - compose_header(): Header block for the selected template
    - compose_question(): Question row with its sub-questions

Block order:
    [Header] ([SectionTitle] [Instructions]? [Question]*)* [EndMarker]

Dependencies:
    - core.models: ExamDocument, ScriptProfile
    - text: normalizer + formatter
    - layout.metrics: Line flow

Used By:
    - layout.paginator: Page layout
    - controller: Preview and PDF export
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Optional

from paper_composer.core.models import (
    ExamDocument,
    HeaderTemplate,
    Question,
    ScriptProfile,
    Section,
    get_profile,
)
from paper_composer.text import StyledRun, format_text, normalize_question

from .config import LayoutConfig
from .metrics import FontSet, flow_runs, lines_height, measure, resolve_fonts
from .models import (
    EndMarkerBlock,
    HeaderBlock,
    HeaderField,
    InstructionsBlock,
    LayoutBlock,
    QuestionBlock,
    SectionTitleBlock,
    SubItem,
    format_heading,
)

logger = logging.getLogger(__name__)

# Font sizes (points) as (LTR, RTL)
FIELD_LABEL_SIZE = 7.5
SECTION_TITLE_SIZE = (13.0, 18.0)
INSTRUCTIONS_SIZE = (11.0, 13.0)
QUESTION_LABEL_SIZE = (12.0, 15.0)
SUB_ITEM_SIZE = (11.0, 14.0)
END_MARKER_SIZE = (12.0, 15.0)

BADGE_PADDING_X = 30.0
BADGE_PADDING_Y = 7.0
INSTRUCTIONS_PADDING = 8.0
SUB_ITEM_GAP_X = 36.0
SUB_ITEM_GAP_Y = 6.0
SUB_AREA_GAP = 8.0
END_MARKER_PADDING = 12.0
END_MARKER_GAP = 30.0


@dataclass(frozen=True)
class TemplateSpec:
    """
    Geometry of one header template.

    Attributes:
        title_size: Title size (LTR, RTL)
        value_size: Field value size (LTR, RTL)
        columns: Fields per grid row
        include_roll_no: Add a blank write-in roll number field
        bracket_total: Show total marks as "(N)"
        uppercase_title: Title is upper-cased
        centered: Title centered for LTR (RTL always start-aligned)
        frame_padding: Inner padding of a framed header (0 = no frame)
        side_bar: Width reserved for an accent bar at the start edge
        title_gap: Space between title and field grid
    """

    title_size: tuple[float, float]
    value_size: tuple[float, float]
    columns: int
    include_roll_no: bool
    bracket_total: bool = False
    uppercase_title: bool = False
    centered: bool = True
    frame_padding: float = 0.0
    side_bar: float = 0.0
    title_gap: float = 14.0


TEMPLATE_SPECS: dict[HeaderTemplate, TemplateSpec] = {
    HeaderTemplate.CLASSIC: TemplateSpec(
        title_size=(28.0, 34.0),
        value_size=(12.0, 16.0),
        columns=2,
        include_roll_no=True,
        bracket_total=True,
        title_gap=18.0,
    ),
    HeaderTemplate.MODERN: TemplateSpec(
        title_size=(24.0, 28.0),
        value_size=(11.0, 14.0),
        columns=3,
        include_roll_no=False,
        uppercase_title=True,
        title_gap=22.0,
    ),
    HeaderTemplate.BOXED: TemplateSpec(
        title_size=(22.0, 26.0),
        value_size=(11.0, 14.0),
        columns=2,
        include_roll_no=True,
        frame_padding=12.0,
    ),
    HeaderTemplate.ACADEMIC: TemplateSpec(
        title_size=(26.0, 32.0),
        value_size=(12.0, 16.0),
        columns=3,
        include_roll_no=False,
        centered=False,
        side_bar=16.0,
    ),
}


def _size(sizes: tuple[float, float], profile: ScriptProfile) -> float:
    return sizes[1] if profile.is_rtl else sizes[0]


def compose_header(
    document: ExamDocument,
    profile: ScriptProfile,
    fonts: FontSet,
    config: LayoutConfig,
) -> HeaderBlock:
    """
    Create the header block for the document's template.

    Unknown templates were already mapped to CLASSIC on load.
    """
    spec = TEMPLATE_SPECS[document.header_template]
    labels = profile.labels

    title = document.title.upper() if spec.uppercase_title else document.title
    title_size = _size(spec.title_size, profile)
    inner_width = config.available_width - 2 * spec.frame_padding - spec.side_bar
    title_lines = tuple(
        flow_runs([StyledRun(title)], inner_width, fonts, title_size,
                  line_height=max(1.2, profile.line_height - 0.4), bold=True)
    )

    fields = [
        HeaderField("subject", labels.subject, document.subject),
        HeaderField("total_marks", labels.total_marks, document.total_marks,
                    bracketed=spec.bracket_total),
        HeaderField("time_allowed", labels.time_allowed, document.time_allowed),
    ]
    if spec.include_roll_no:
        fields.append(HeaderField("roll_no", labels.roll_no, "", placeholder=True))

    value_size = _size(spec.value_size, profile)
    row_height = FIELD_LABEL_SIZE * 1.6 + value_size * profile.line_height + 6.0
    rows = -(-len(fields) // spec.columns)

    height = (
        2 * spec.frame_padding
        + lines_height(title_lines)
        + spec.title_gap
        + rows * row_height
    )
    return HeaderBlock(
        template=document.header_template,
        title=title,
        title_lines=title_lines,
        title_size=title_size,
        fields=tuple(fields),
        columns=spec.columns,
        row_height=row_height,
        height=height,
    )


def compose_section_title(
    section: Section,
    section_index: int,
    profile: ScriptProfile,
    fonts: FontSet,
    config: LayoutConfig,
    *,
    keep_with_next: bool = True,
) -> SectionTitleBlock:
    """Create the bordered badge for a section title."""
    size = _size(SECTION_TITLE_SIZE, profile)
    title = section.title if profile.is_rtl else section.title.upper()
    lines = tuple(
        flow_runs([StyledRun(title)], config.available_width - 2 * BADGE_PADDING_X,
                  fonts, size, line_height=1.5, bold=True)
    )
    text_width = max((line.width for line in lines), default=0.0)
    return SectionTitleBlock(
        section_index=section_index,
        title=title,
        lines=lines,
        badge_width=text_width + 2 * BADGE_PADDING_X,
        height=lines_height(lines) + 2 * BADGE_PADDING_Y,
        keep_with_next=keep_with_next,
    )


def compose_instructions(
    section: Section,
    section_index: int,
    profile: ScriptProfile,
    fonts: FontSet,
    config: LayoutConfig,
) -> InstructionsBlock:
    """Create the italic instructions block (label on its own line)."""
    size = _size(INSTRUCTIONS_SIZE, profile)
    runs = tuple(
        replace(run, style=replace(run.style, italic=True))
        for run in format_text(section.instructions)
    )
    lines = tuple(
        flow_runs(runs, config.available_width - 2 * INSTRUCTIONS_PADDING, fonts, size,
                  line_height=profile.line_height)
    )
    label_height = FIELD_LABEL_SIZE * 1.8
    return InstructionsBlock(
        section_index=section_index,
        label=profile.labels.instructions,
        runs=runs,
        lines=lines,
        height=label_height + lines_height(lines) + 2 * INSTRUCTIONS_PADDING,
    )


def compose_question(
    question: Question,
    section_index: int,
    profile: ScriptProfile,
    fonts: FontSet,
    config: LayoutConfig,
) -> QuestionBlock:
    """
    Create one question row.

    The label column grows when the localized heading is wider than the
    configured label width; the body column shrinks to match.

    Returns:
        QuestionBlock with body and sub-items flowed to their columns
    """
    normalized = normalize_question(question)
    label_size = _size(QUESTION_LABEL_SIZE, profile)
    heading = question_heading(profile, normalized.number)
    label_width = max(config.label_width, measure(heading, fonts.bold, label_size) + 8.0)
    body_width = max(config.available_width - label_width - config.marks_width, 1.0)

    runs = tuple(format_text(normalized.text))
    body_lines = tuple(
        flow_runs(runs, body_width, fonts, profile.base_font_size, line_height=profile.line_height)
    )
    row_height = max(lines_height(body_lines), label_size * profile.line_height)

    sub_items = _compose_sub_items(normalized.sub_questions, profile, fonts, config)
    height = row_height
    if sub_items:
        height += SUB_AREA_GAP + _sub_area_height(sub_items)

    logger.debug(f"Composed question {normalized.number!r} ({question.id}): {height:.1f}pt")
    return QuestionBlock(
        question_id=question.id,
        section_index=section_index,
        label=profile.labels.question,
        number=normalized.number,
        marks=normalized.marks,
        runs=runs,
        body_lines=body_lines,
        sub_items=sub_items,
        height=height,
        label_width=label_width,
        row_height=row_height,
    )


def question_heading(profile: ScriptProfile, number: str) -> str:
    """Localized row heading, e.g. "Q. 3:"."""
    return format_heading(profile.labels.question, number)


def _compose_sub_items(
    sub_questions: tuple[str, ...],
    profile: ScriptProfile,
    fonts: FontSet,
    config: LayoutConfig,
) -> tuple[SubItem, ...]:
    """
    Lay out sub-questions as a wrapped list.

    Items that fit on one line are packed side by side; a row wraps when
    the next item does not fit. Multi-line items take a row of their own.
    """
    size = _size(SUB_ITEM_SIZE, profile)
    area_width = config.available_width - config.sub_indent
    items: List[SubItem] = []
    x = 0.0
    y = 0.0
    row_height = 0.0

    for index, text in enumerate(sub_questions):
        marker = profile.sub_marker(index)
        marker_width = measure(marker, fonts.bold, size) + 6.0
        runs = tuple(format_text(text))
        lines = tuple(
            flow_runs(runs, area_width - marker_width, fonts, size, line_height=profile.line_height)
        )
        item_height = max(lines_height(lines), size * profile.line_height)
        item_width = marker_width + max((line.width for line in lines), default=0.0)

        if x > 0 and (len(lines) > 1 or x + item_width > area_width):
            y += row_height + SUB_ITEM_GAP_Y
            x = 0.0
            row_height = 0.0

        items.append(SubItem(
            marker=marker,
            runs=runs,
            lines=lines,
            x=x,
            y=y,
            marker_width=marker_width,
            item_height=item_height,
        ))
        row_height = max(row_height, item_height)
        x += item_width + SUB_ITEM_GAP_X
        if len(lines) > 1:
            x = area_width

    return tuple(items)


def _sub_area_height(items: tuple[SubItem, ...]) -> float:
    return max(item.y + item.item_height for item in items)


def compose_end_marker(profile: ScriptProfile, fonts: FontSet, config: LayoutConfig) -> EndMarkerBlock:
    size = _size(END_MARKER_SIZE, profile)
    text = profile.labels.end_of_paper
    lines = tuple(flow_runs([StyledRun(text)], config.available_width, fonts, size,
                            line_height=1.5, bold=True))
    return EndMarkerBlock(
        text=text,
        lines=lines,
        height=END_MARKER_GAP + lines_height(lines) + 2 * END_MARKER_PADDING,
    )


def compose_document(
    document: ExamDocument,
    config: Optional[LayoutConfig] = None,
    fonts: Optional[FontSet] = None,
) -> List[LayoutBlock]:
    """
    Create layout blocks for an entire document.

    Args:
        document: Document to lay out (read only)
        config: Layout configuration (defaults to A4)
        fonts: Fonts to measure with (defaults to resolve_fonts(profile))

    Returns:
        Blocks in render order, ending with the end-of-paper marker

    Example:
        >>> blocks = compose_document(doc)
        >>> [b.kind for b in blocks]
        ['header', 'section', 'question', 'end']
    """
    config = config or LayoutConfig()
    profile = get_profile(document.language)
    fonts = fonts or resolve_fonts(profile)

    blocks: List[LayoutBlock] = [compose_header(document, profile, fonts, config)]

    for s_idx, section in enumerate(document.sections):
        has_body = bool(section.questions) or bool(section.instructions)
        if section.title:
            blocks.append(compose_section_title(
                section, s_idx, profile, fonts, config, keep_with_next=has_body,
            ))
        if section.instructions:
            block = compose_instructions(section, s_idx, profile, fonts, config)
            blocks.append(replace(block, keep_with_next=bool(section.questions)))
        for question in section.questions:
            blocks.append(compose_question(question, s_idx, profile, fonts, config))

    blocks.append(compose_end_marker(profile, fonts, config))

    logger.info(
        f"Composed {len(blocks)} blocks for {document.question_count} questions "
        f"({profile.language.value}, {document.header_template.value})"
    )
    return blocks
