"""
Unit tests for the layout composer (document -> measured blocks).
"""

import pytest

from paper_composer.core.editing import update_document, update_section
from paper_composer.core.models import ExamDocument, HeaderTemplate, Language, Question, Section
from paper_composer.layout import (
    EndMarkerBlock,
    HeaderBlock,
    InstructionsBlock,
    LayoutConfig,
    QuestionBlock,
    SectionTitleBlock,
    compose_document,
)
from paper_composer.layout.models import LRI, PDI


def _kinds(blocks):
    return [b.kind for b in blocks]


class TestComposeDocument:
    """Tests for block order and flags."""

    def test_when_scenario_document_then_header_section_question_end(self, scenario_document):
        blocks = compose_document(scenario_document)

        assert _kinds(blocks) == ["header", "section", "question", "end"]
        assert all(b.height > 0 for b in blocks)

    def test_when_instructions_present_then_block_between_title_and_questions(self, sample_document):
        blocks = compose_document(sample_document)

        assert _kinds(blocks) == [
            "header", "section", "instructions", "question", "question",
            "section", "question", "end",
        ]
        instructions = blocks[2]
        assert isinstance(instructions, InstructionsBlock)
        assert instructions.label == "Instructions:"
        assert all(run.italic for run in instructions.runs)

    def test_keep_with_next_chains_title_instructions_first_question(self, sample_document):
        blocks = compose_document(sample_document)

        assert [b.keep_with_next for b in blocks] == [
            False, True, True, False, False, True, False, False,
        ]

    def test_when_section_title_empty_then_no_title_block(self, sample_document):
        doc = update_section(sample_document, 1, title="")

        blocks = compose_document(doc)

        assert _kinds(blocks).count("section") == 1

    def test_when_section_has_no_body_then_title_not_kept_with_next(self):
        doc = ExamDocument(title="T", sections=(Section(title="Empty"),))

        blocks = compose_document(doc)

        assert isinstance(blocks[1], SectionTitleBlock)
        assert blocks[1].keep_with_next is False

    def test_when_latin_then_section_title_uppercase(self, scenario_document):
        section = compose_document(scenario_document)[1]

        assert section.title == "SECTION A"

    def test_when_rtl_then_section_title_unchanged(self, scenario_document):
        doc = update_document(scenario_document, language="UR")

        section = compose_document(doc)[1]

        assert section.title == "Section A"

    def test_end_marker_uses_profile_label(self, scenario_document):
        end = compose_document(update_document(scenario_document, language="AR"))[-1]

        assert isinstance(end, EndMarkerBlock)
        assert end.text == "*** انتهت الأسئلة ***"


class TestQuestionBlock:
    """Tests for question rows."""

    def test_when_scenario_question_then_normalized_row(self, scenario_document):
        question = compose_document(scenario_document)[2]

        assert isinstance(question, QuestionBlock)
        assert question.question_id == "q1"
        assert question.label == "Q"
        assert question.number == "1"
        assert question.heading == "Q. 1:"
        assert question.body_text == "Define x² + y² = r²."
        assert question.marks == "10"

    def test_when_no_marks_then_marks_empty(self, document_factory):
        doc = document_factory(1)
        doc = update_section(doc, 0, questions=[Question(id="q1", number="1", text="Explain.")])

        question = compose_document(doc)[2]

        assert question.marks == ""
        assert question.to_dict()["marks"] == ""

    def test_when_latin_sub_questions_then_lettered_markers_packed_in_row(self, sample_document):
        question = compose_document(sample_document)[4]

        markers = [item.marker for item in question.sub_items]
        assert markers == ["a)", "b)", "c)"]
        assert [item.y for item in question.sub_items] == [0.0, 0.0, 0.0]
        xs = [item.x for item in question.sub_items]
        assert xs == sorted(xs) and xs[0] == 0.0

    def test_when_rtl_sub_questions_then_numbered_markers(self, sample_document):
        doc = update_document(sample_document, language="UR")

        question = compose_document(doc)[4]

        assert [item.marker for item in question.sub_items] == ["1-", "2-", "3-"]
        assert question.label == "سوال"

    def test_when_sub_questions_long_then_wrapped_rows(self):
        long_text = " ".join(["word"] * 60)
        doc = ExamDocument(sections=(Section(title="A", questions=(
            Question(id="q1", number="1", text="Pick.", sub_questions=("(a) short", f"(b) {long_text}", "(c) x")),
        )),))

        question = compose_document(doc)[2]

        first, second, third = question.sub_items
        assert second.y > first.y
        assert len(second.lines) > 1
        assert third.y > second.y

    def test_when_sub_questions_present_then_block_taller_than_row(self, sample_document):
        question = compose_document(sample_document)[4]

        assert question.height > question.row_height

    def test_when_body_longer_then_block_taller(self, document_factory):
        short = compose_document(document_factory(1, text="Short."))[2]
        long = compose_document(document_factory(1, text=" ".join(["Explain"] * 80)))[2]

        assert long.height > short.height
        assert len(long.body_lines) > 1

    def test_when_narrow_config_then_more_lines(self, document_factory):
        doc = document_factory(1, text=" ".join(["Explain"] * 40))
        wide = LayoutConfig()
        narrow = LayoutConfig(margin_left=150, margin_right=150)

        wide_q = compose_document(doc, wide)[2]
        narrow_q = compose_document(doc, narrow)[2]

        assert len(narrow_q.body_lines) > len(wide_q.body_lines)


class TestHeaderTemplates:
    """Tests for the four header variants."""

    def test_when_classic_then_grid_with_bracketed_total_and_roll_no(self, scenario_document):
        header = compose_document(scenario_document)[0]

        assert isinstance(header, HeaderBlock)
        assert header.template is HeaderTemplate.CLASSIC
        assert header.columns == 2
        assert [f.key for f in header.fields] == ["subject", "total_marks", "time_allowed", "roll_no"]
        assert header.fields[1].display_value == f"{LRI}(10){PDI}"
        assert header.fields[3].placeholder and header.fields[3].value == ""

    def test_when_modern_then_uppercase_title_three_columns(self, scenario_document):
        doc = update_document(scenario_document, header_template="MODERN")

        header = compose_document(doc)[0]

        assert header.title == "CENTRAL BOARD"
        assert header.columns == 3
        assert [f.key for f in header.fields] == ["subject", "total_marks", "time_allowed"]

    @pytest.mark.parametrize("template, roll_no", [
        (HeaderTemplate.BOXED, True),
        (HeaderTemplate.ACADEMIC, False),
    ])
    def test_when_other_templates_then_fields_per_variant(self, scenario_document, template, roll_no):
        doc = update_document(scenario_document, header_template=template)

        header = compose_document(doc)[0]

        assert header.template is template
        assert ("roll_no" in [f.key for f in header.fields]) is roll_no

    def test_when_template_unknown_then_classic(self, scenario_document):
        doc = ExamDocument.from_dict(dict(scenario_document.to_dict(), headerTemplate="GALAXY"))

        header = compose_document(doc)[0]

        assert header.template is HeaderTemplate.CLASSIC

    def test_when_rtl_then_localized_field_labels(self, scenario_document):
        doc = update_document(scenario_document, language=Language.AR)

        header = compose_document(doc)[0]

        assert [f.label for f in header.fields][:3] == ["المادة", "الدرجة الكلية", "الوقت"]
