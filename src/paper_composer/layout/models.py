"""
Module: layout.models

Purpose:
    Data models for the print layout.
    Immutable dataclasses representing layout blocks, placements and pages:
    the visual layout tree consumed by the print renderer.

Key Classes:
    - HeaderBlock: Title and metadata block (one of four templates)
    - SectionTitleBlock: Section title badge
    - InstructionsBlock: Localized "Instructions:" paragraph
    - QuestionBlock: One question row with its sub-questions
    - EndMarkerBlock: Closing "End of Paper" marker
    - BlockPlacement: Block positioned on a page
    - PagePlan: Complete page layout
    - LayoutResult: Final layout output

Dependencies:
    - dataclasses (std)
    - layout.metrics: FlowLine, FontSet

Used By:
    - layout.composer: Creates blocks
    - layout.paginator: Creates PagePlans
    - output.renderer: Draws pages
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union

from paper_composer.core.models import HeaderTemplate, ScriptProfile
from paper_composer.text.formatter import StyledRun, display_text

from .metrics import FlowLine, FontSet

# Unicode LEFT-TO-RIGHT ISOLATE / POP DIRECTIONAL ISOLATE
LRI = "\u2066"
PDI = "\u2069"


def format_heading(label: str, number: str) -> str:
    """Question row heading: "Q. 3:", or "Q." when the number is empty."""
    return f"{label}. {number}:" if number else f"{label}."


@dataclass(frozen=True)
class HeaderField:
    """
    One labelled value in the header grid.

    Attributes:
        key: Stable field key (subject, total_marks, time_allowed, roll_no)
        label: Localized label
        value: Value text ("" for write-in fields)
        bracketed: Value is shown as "(value)" inside a direction isolate
        placeholder: Write-in field drawn as a blank line
    """

    key: str
    label: str
    value: str
    bracketed: bool = False
    placeholder: bool = False

    @property
    def display_value(self) -> str:
        if self.bracketed and self.value:
            return f"{LRI}({self.value}){PDI}"
        return self.value


@dataclass(frozen=True)
class HeaderBlock:
    """
    Title/metadata block.

    Attributes:
        template: Header layout variant
        title_lines: Title laid out in the template's title font
        fields: Metadata fields in reading order
        columns: Fields per grid row
        height: Total block height in points
    """

    kind: ClassVar[str] = "header"

    template: HeaderTemplate
    title: str
    title_lines: tuple[FlowLine, ...]
    title_size: float
    fields: tuple[HeaderField, ...]
    columns: int
    row_height: float
    height: float
    keep_with_next: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "template": self.template.value,
            "title": self.title,
            "fields": [
                {"key": f.key, "label": f.label, "value": f.display_value}
                for f in self.fields
            ],
            "height": round(self.height, 2),
        }


@dataclass(frozen=True)
class SectionTitleBlock:
    """Section title drawn inside a bordered badge."""

    kind: ClassVar[str] = "section"

    section_index: int
    title: str
    lines: tuple[FlowLine, ...]
    badge_width: float
    height: float
    keep_with_next: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "section": self.section_index,
            "title": self.title,
            "height": round(self.height, 2),
        }


@dataclass(frozen=True)
class InstructionsBlock:
    """Italic instructions paragraph with its localized label."""

    kind: ClassVar[str] = "instructions"

    section_index: int
    label: str
    runs: tuple[StyledRun, ...]
    lines: tuple[FlowLine, ...]
    height: float
    keep_with_next: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "section": self.section_index,
            "label": self.label,
            "text": display_text(self.runs),
            "height": round(self.height, 2),
        }


@dataclass(frozen=True)
class SubItem:
    """
    Sub-question item: per-script marker plus formatted body.

    Offsets are relative to the start of the sub-question area, measured
    from the start edge (left for LTR, right for RTL).
    """

    marker: str
    runs: tuple[StyledRun, ...]
    lines: tuple[FlowLine, ...]
    x: float = 0.0
    y: float = 0.0
    marker_width: float = 0.0
    item_height: float = 0.0


@dataclass(frozen=True)
class QuestionBlock:
    """
    One question row (never split across pages).

    Attributes:
        question_id: Source question id
        section_index: Owning section
        label: Localized question label ("Q", "سوال", "س")
        number: Normalized number
        marks: Normalized marks ("" when absent)
        runs: Formatted body
        body_lines: Body flowed to the body column width
        sub_items: Sub-question items
        height: Total block height in points
        label_width: Width of the heading column
        row_height: Height of the heading/body/marks row
    """

    kind: ClassVar[str] = "question"

    question_id: str
    section_index: int
    label: str
    number: str
    marks: str
    runs: tuple[StyledRun, ...]
    body_lines: tuple[FlowLine, ...]
    sub_items: tuple[SubItem, ...]
    height: float
    label_width: float = 0.0
    row_height: float = 0.0
    keep_with_next: bool = False

    @property
    def heading(self) -> str:
        return format_heading(self.label, self.number)

    @property
    def body_text(self) -> str:
        return display_text(self.runs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "id": self.question_id,
            "section": self.section_index,
            "label": self.label,
            "number": self.number,
            "text": self.body_text,
            "marks": self.marks,
            "subQuestions": [
                {"marker": s.marker, "text": display_text(s.runs)} for s in self.sub_items
            ],
            "height": round(self.height, 2),
        }


@dataclass(frozen=True)
class EndMarkerBlock:
    """Centered closing marker in the active script."""

    kind: ClassVar[str] = "end"

    text: str
    lines: tuple[FlowLine, ...]
    height: float
    keep_with_next: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "text": self.text, "height": round(self.height, 2)}


LayoutBlock = Union[HeaderBlock, SectionTitleBlock, InstructionsBlock, QuestionBlock, EndMarkerBlock]


@dataclass(frozen=True)
class BlockPlacement:
    """
    A block positioned on a page.

    Attributes:
        block: The layout block to place
        top: Y offset from page top (in points)
    """

    block: LayoutBlock
    top: float

    def to_dict(self) -> dict[str, Any]:
        return {**self.block.to_dict(), "top": round(self.top, 2)}


@dataclass(frozen=True)
class PagePlan:
    """
    Complete layout plan for a single page.

    Attributes:
        index: Page number (0-indexed)
        placements: Tuple of BlockPlacements on this page
        height_used: Total vertical space used
    """

    index: int
    placements: tuple[BlockPlacement, ...]
    height_used: float

    @property
    def placement_count(self) -> int:
        """Number of blocks on this page."""
        return len(self.placements)


@dataclass(frozen=True)
class LayoutResult:
    """
    Final layout output with diagnostics.

    Attributes:
        pages: Tuple of PagePlans
        warnings: List of warning messages
        question_page_map: Mapping of question_id to page indices
        profile: Script profile the layout was composed with
        fonts: PDF fonts resolved for the profile

    Example:
        >>> result = LayoutResult(pages=(page1, page2), warnings=[])
        >>> result.page_count
        2
    """

    pages: tuple[PagePlan, ...]
    warnings: list[str] = field(default_factory=list)
    question_page_map: dict[str, list[int]] = field(default_factory=dict)
    profile: Optional[ScriptProfile] = None
    fonts: Optional[FontSet] = None

    @property
    def page_count(self) -> int:
        """Number of pages in layout."""
        return len(self.pages)

    @property
    def direction(self) -> str:
        return self.profile.direction if self.profile else "ltr"

    def iter_blocks(self):
        """Yield every placed block in render order."""
        for page in self.pages:
            for placement in page.placements:
                yield placement.block

    def questions(self) -> list[QuestionBlock]:
        """Question blocks in render order."""
        return [b for b in self.iter_blocks() if isinstance(b, QuestionBlock)]

    def to_dict(self) -> dict[str, Any]:
        """Visual layout tree as plain data (pages -> placed blocks)."""
        return {
            "direction": self.direction,
            "language": self.profile.language.value if self.profile else None,
            "fontFamily": self.profile.font_family if self.profile else None,
            "lineHeight": self.profile.line_height if self.profile else None,
            "pages": [
                {
                    "index": page.index,
                    "blocks": [p.to_dict() for p in page.placements],
                }
                for page in self.pages
            ],
            "warnings": list(self.warnings),
        }
