"""
Unit tests for the immutable editing helpers.
"""

import pytest

from paper_composer.core.editing import (
    DEFAULT_NEW_MARKS,
    add_question,
    update_document,
    update_question,
    update_section,
)
from paper_composer.core.models import HeaderTemplate, Language


class TestUpdateDocument:
    """Tests for update_document()."""

    def test_when_field_changed_then_new_instance_and_original_untouched(self, sample_document):
        updated = update_document(sample_document, subject="Chemistry")

        assert updated.subject == "Chemistry"
        assert sample_document.subject == "Physics"
        assert updated.sections is sample_document.sections

    def test_when_raw_tags_given_then_coerced_with_fallback(self, sample_document):
        updated = update_document(sample_document, language="ar", header_template="nonsense")

        assert updated.language is Language.AR
        assert updated.header_template is HeaderTemplate.CLASSIC

    def test_when_sections_list_given_then_stored_as_tuple(self, sample_document):
        updated = update_document(sample_document, sections=list(sample_document.sections[:1]))

        assert isinstance(updated.sections, tuple)
        assert len(updated.sections) == 1


class TestUpdateSectionAndQuestion:
    """Tests for update_section() / update_question()."""

    def test_update_section_replaces_only_target(self, sample_document):
        updated = update_section(sample_document, 1, instructions="Show working.")

        assert updated.sections[1].instructions == "Show working."
        assert updated.sections[0] == sample_document.sections[0]

    def test_update_question_keeps_id_and_position(self, sample_document):
        original = sample_document.sections[0].questions[1]

        updated = update_question(sample_document, 0, 1, text="Choose the SI unit.", sub_questions=["(a) N"])

        question = updated.sections[0].questions[1]
        assert question.id == original.id
        assert question.text == "Choose the SI unit."
        assert question.sub_questions == ("(a) N",)
        assert updated.sections[0].questions[0] == sample_document.sections[0].questions[0]

    @pytest.mark.parametrize("s_idx, q_idx", [(5, 0), (0, 9), (-1, 0), (0, -1)])
    def test_when_index_out_of_range_then_index_error(self, sample_document, s_idx, q_idx):
        with pytest.raises(IndexError):
            update_question(sample_document, s_idx, q_idx, text="x")


class TestAddQuestion:
    """Tests for add_question()."""

    def test_when_added_then_numbered_after_existing(self, sample_document):
        updated = add_question(sample_document, 0)

        questions = updated.sections[0].questions
        assert len(questions) == 3
        new = questions[-1]
        assert new.number == "3"
        assert new.marks == DEFAULT_NEW_MARKS == "5"
        assert new.text == "Enter question text..."
        assert len(new.id) == 9
        assert new.id not in {q.id for q in sample_document.sections[0].questions}

    def test_when_rtl_document_then_localized_placeholder(self, sample_document):
        doc = update_document(sample_document, language="UR")

        updated = add_question(doc, 1)

        assert updated.sections[1].questions[-1].text == "نیا سوال درج کریں..."
        assert updated.sections[1].questions[-1].number == "2"

    def test_when_section_missing_then_index_error(self, sample_document):
        with pytest.raises(IndexError):
            add_question(sample_document, 2)
