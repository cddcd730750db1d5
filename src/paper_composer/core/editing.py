"""
Module: core.editing

Purpose:
    Immutable editing primitives used by the editing surface. Every
    operation returns a new ExamDocument; the input is never modified.

Key Functions:
    - update_document(): Replace top-level fields
    - update_section(): Replace fields of one section
    - update_question(): Replace fields of one question
    - add_question(): Append a placeholder question to a section

Dependencies:
    - dataclasses (std)
    - core.models: ExamDocument, Section, Question, get_profile

Used By:
    - cli (template/language overrides)
    - External editing surface
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from .models.document import ExamDocument, HeaderTemplate, Language, Question, new_question_id
from .models.profiles import get_profile

logger = logging.getLogger(__name__)

DEFAULT_NEW_MARKS = "5"


def update_document(document: ExamDocument, **changes: Any) -> ExamDocument:
    """
    Return a copy of the document with top-level fields replaced.

    ``language`` and ``header_template`` accept raw tags and fall back
    the same way deserialization does.

    Example:
        >>> doc = update_document(doc, subject="Physics", language="ur")
        >>> doc.language
        <Language.UR: 'UR'>
    """
    if "language" in changes:
        changes["language"] = Language.from_tag(changes["language"])
    if "header_template" in changes:
        changes["header_template"] = HeaderTemplate.from_value(changes["header_template"])
    if "sections" in changes:
        changes["sections"] = tuple(changes["sections"])
    return replace(document, **changes)


def update_section(document: ExamDocument, section_index: int, **changes: Any) -> ExamDocument:
    """Return a copy with one section's fields replaced."""
    _check_index(section_index, len(document.sections), "section")
    if "questions" in changes:
        changes["questions"] = tuple(changes["questions"])
    sections = list(document.sections)
    sections[section_index] = replace(sections[section_index], **changes)
    return replace(document, sections=tuple(sections))


def update_question(
    document: ExamDocument,
    section_index: int,
    question_index: int,
    **changes: Any,
) -> ExamDocument:
    """
    Return a copy with one question's fields replaced.

    The question keeps its id unless ``id`` is passed explicitly.
    """
    _check_index(section_index, len(document.sections), "section")
    section = document.sections[section_index]
    _check_index(question_index, len(section.questions), "question")

    if "sub_questions" in changes:
        changes["sub_questions"] = tuple(changes["sub_questions"])
    questions = list(section.questions)
    questions[question_index] = replace(questions[question_index], **changes)
    return update_section(document, section_index, questions=questions)


def add_question(document: ExamDocument, section_index: int) -> ExamDocument:
    """
    Append a placeholder question to a section.

    The new question is numbered after the existing ones, carries the
    localized placeholder text and default marks, and gets a fresh id.
    """
    _check_index(section_index, len(document.sections), "section")
    section = document.sections[section_index]
    question = Question(
        id=new_question_id(),
        number=str(len(section.questions) + 1),
        text=get_profile(document.language).labels.new_question,
        marks=DEFAULT_NEW_MARKS,
    )
    logger.debug(f"Adding question {question.number} ({question.id}) to section {section_index}")
    return update_section(document, section_index, questions=section.questions + (question,))


def _check_index(index: int, length: int, kind: str) -> None:
    # Negative indices are rejected too; editing addresses rows by position.
    if not 0 <= index < length:
        raise IndexError(f"{kind} index {index} out of range (0..{length - 1})")
