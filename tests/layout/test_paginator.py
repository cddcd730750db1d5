"""
Unit tests for paginator layout engine.

Blocks are built directly with fixed heights so page arithmetic is exact.
"""

import pytest

from paper_composer.core.models import HeaderTemplate, Language, get_profile
from paper_composer.layout import (
    EndMarkerBlock,
    HeaderBlock,
    LayoutConfig,
    QuestionBlock,
    SectionTitleBlock,
    compose_document,
    paginate,
)


@pytest.fixture
def config():
    # Content area: top 50, bottom 350 -> 300pt per page
    return LayoutConfig(
        page_height=400,
        margin_top=50,
        margin_bottom=50,
        block_spacing=10,
        section_spacing=20,
        header_spacing=15,
    )


@pytest.fixture
def block_factory():
    """Factory to create blocks with fixed heights."""
    def _question(height: float, question_id: str = "q1") -> QuestionBlock:
        return QuestionBlock(
            question_id=question_id,
            section_index=0,
            label="Q",
            number=question_id.lstrip("q"),
            marks="",
            runs=(),
            body_lines=(),
            sub_items=(),
            height=height,
        )

    def _section(height: float) -> SectionTitleBlock:
        return SectionTitleBlock(section_index=0, title="A", lines=(), badge_width=60, height=height)

    def _header(height: float) -> HeaderBlock:
        return HeaderBlock(
            template=HeaderTemplate.CLASSIC,
            title="Paper",
            title_lines=(),
            title_size=28,
            fields=(),
            columns=2,
            row_height=20,
            height=height,
        )

    def _end(height: float) -> EndMarkerBlock:
        return EndMarkerBlock(text="END", lines=(), height=height)

    return {"question": _question, "section": _section, "header": _header, "end": _end}


class TestPaginateBasics:
    """Placement arithmetic and page breaks."""

    def test_when_no_blocks_then_no_pages(self, config):
        result = paginate([], config)

        assert result.page_count == 0
        assert result.warnings == []

    def test_when_blocks_fit_then_stacked_with_spacing(self, config, block_factory):
        q = block_factory["question"]
        blocks = [q(100, "q1"), q(100, "q2")]

        result = paginate(blocks, config)

        assert result.page_count == 1
        tops = [p.top for p in result.pages[0].placements]
        assert tops == [50, 160]

    def test_when_block_does_not_fit_then_new_page_at_top_margin(self, config, block_factory):
        q = block_factory["question"]
        blocks = [q(100, "q1"), q(100, "q2"), q(100, "q3")]

        result = paginate(blocks, config)

        assert result.page_count == 2
        assert [p.block.question_id for p in result.pages[1].placements] == ["q3"]
        assert result.pages[1].placements[0].top == 50
        assert result.question_page_map == {"q1": [0], "q2": [0], "q3": [1]}

    def test_when_header_then_header_spacing_before_next(self, config, block_factory):
        blocks = [block_factory["header"](80), block_factory["section"](30)]

        result = paginate(blocks, config)

        assert result.pages[0].placements[1].top == 50 + 80 + 15

    def test_when_section_title_follows_question_then_section_spacing(self, config, block_factory):
        blocks = [block_factory["question"](40), block_factory["section"](30), block_factory["question"](40, "q2")]

        result = paginate(blocks, config)

        tops = [p.top for p in result.pages[0].placements]
        assert tops == [50, 50 + 40 + 20, 50 + 40 + 20 + 30 + 10]

    def test_placements_never_exceed_bottom_margin(self, config, block_factory):
        q = block_factory["question"]
        blocks = [q(70, f"q{i}") for i in range(12)]

        result = paginate(blocks, config)

        for page in result.pages:
            assert all(
                p.top + p.block.height <= config.page_height - config.margin_bottom for p in page.placements
            )
        assert sum(page.placement_count for page in result.pages) == 12


class TestKeepWithNext:
    """Section title stays with the block after it."""

    def test_when_title_and_question_do_not_fit_then_both_move(self, config, block_factory):
        # Arrange
        q = block_factory["question"]
        blocks = [q(150, "q1"), block_factory["section"](40), q(150, "q2")]

        # Act
        result = paginate(blocks, config)

        # Assert
        assert result.page_count == 2
        assert len(result.pages[0].placements) == 1
        moved = result.pages[1].placements
        assert isinstance(moved[0].block, SectionTitleBlock)
        assert moved[0].top == 50
        assert moved[1].top == 50 + 40 + 10

    def test_when_title_alone_would_fit_then_still_not_orphaned(self, config, block_factory):
        q = block_factory["question"]
        blocks = [q(200, "q1"), block_factory["section"](30), q(120, "q2")]

        result = paginate(blocks, config)

        last_on_first_page = result.pages[0].placements[-1].block
        assert not isinstance(last_on_first_page, SectionTitleBlock)


class TestOverflow:
    """Groups taller than a page."""

    def test_when_group_taller_than_page_then_placed_with_warning(self, config, block_factory, caplog):
        blocks = [block_factory["question"](500)]

        with caplog.at_level("WARNING"):
            result = paginate(blocks, config)

        assert result.page_count == 1
        assert len(result.warnings) == 1
        assert "overflows page 0" in result.warnings[0]
        assert "overflows" in caplog.text

    def test_when_oversized_block_after_content_then_moves_to_new_page_first(self, config, block_factory):
        q = block_factory["question"]
        blocks = [q(50, "q1"), q(500, "q2")]

        result = paginate(blocks, config)

        assert result.page_count == 2
        assert result.question_page_map["q2"] == [1]
        assert len(result.warnings) == 1


class TestLayoutResult:
    """LayoutResult accessors over a composed document."""

    def test_when_profile_given_then_direction_exposed(self, config, block_factory):
        result = paginate([block_factory["end"](20)], config, get_profile(Language.UR))

        assert result.direction == "rtl"
        assert result.to_dict()["direction"] == "rtl"

    def test_when_many_questions_then_multiple_pages_in_order(self, document_factory):
        doc = document_factory(40, text="Describe the process of photosynthesis in green plants in detail.")
        config = LayoutConfig()

        result = paginate(compose_document(doc, config), config, get_profile(doc.language))

        assert result.page_count > 1
        numbers = [q.number for q in result.questions()]
        assert numbers == [str(i) for i in range(1, 41)]
        assert result.warnings == []

    def test_to_dict_lists_blocks_per_page(self, scenario_document):
        config = LayoutConfig()
        result = paginate(compose_document(scenario_document, config), config, get_profile(Language.EN))

        tree = result.to_dict()

        assert tree["direction"] == "ltr"
        kinds = [b["kind"] for page in tree["pages"] for b in page["blocks"]]
        assert kinds == ["header", "section", "question", "end"]
        question = tree["pages"][0]["blocks"][2]
        assert question["number"] == "1"
        assert question["marks"] == "10"
        assert question["text"] == "Define x² + y² = r²."
