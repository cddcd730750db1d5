"""
Module: document

Purpose:
    Provides the exam document model - ExamDocument, Section and Question.
    A document is created once per transcription (or decoded from a share
    link) and is read-only input to both renderers.

Key Classes:
    - Language: Script/direction profile tag (EN, UR, AR)
    - HeaderTemplate: One of four header layout variants
    - Question: A single question with raw (pre-normalization) fields
    - Section: Titled group of questions
    - ExamDocument: Complete paper with header metadata and sections

Key Functions:
    - new_question_id(): Fresh short identifier for a question
    - ExamDocument.to_dict() / ExamDocument.from_dict(): External shape

Dependencies:
    - dataclasses (std)
    - enum (std)
    - uuid (std)

Used By:
    - core.utils.serialization
    - core.editing
    - text.normalizer
    - layout.composer
    - output.docx_writer
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)

QUESTION_ID_LENGTH = 9


class Language(str, Enum):
    """Script profile tag carried by a document."""

    EN = "EN"
    UR = "UR"
    AR = "AR"

    @classmethod
    def from_tag(cls, tag: Any) -> Language:
        """
        Resolve a language tag, falling back to EN.

        Unknown or empty tags never fail; they select the Latin profile.

        Example:
            >>> Language.from_tag(" ur ")
            <Language.UR: 'UR'>
            >>> Language.from_tag("fr")
            <Language.EN: 'EN'>
        """
        if isinstance(tag, cls):
            return tag
        value = str(tag or "").strip().upper()
        try:
            return cls(value)
        except ValueError:
            if value:
                logger.warning(f"Unknown language tag {tag!r}, using {cls.EN.value}")
            return cls.EN


class HeaderTemplate(str, Enum):
    """Header layout variant for the title/metadata block."""

    CLASSIC = "CLASSIC"
    MODERN = "MODERN"
    BOXED = "BOXED"
    ACADEMIC = "ACADEMIC"

    @classmethod
    def from_value(cls, value: Any) -> HeaderTemplate:
        """Resolve a template name, falling back to CLASSIC."""
        if isinstance(value, cls):
            return value
        name = str(value or "").strip().upper()
        try:
            return cls(name)
        except ValueError:
            if name:
                logger.warning(f"Unknown header template {value!r}, using {cls.CLASSIC.value}")
            return cls.CLASSIC


def new_question_id() -> str:
    """Return a fresh short question identifier."""
    return uuid.uuid4().hex[:QUESTION_ID_LENGTH]


def _text(value: Any) -> str:
    """Coerce an untrusted scalar to text (None -> "")."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class Question:
    """
    Single exam question (immutable, raw fields).

    Attributes:
        id: Stable identifier (survives edits and reordering)
        number: Raw question number, e.g. "Q.3" or "سوال 2"
        text: Raw body markup, may contain ^/_ math markup
        marks: Raw marks annotation, "" when absent
        sub_questions: Raw option/sub-question markup strings, in order
    """

    id: str
    number: str
    text: str
    marks: str = ""
    sub_questions: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "number": self.number,
            "text": self.text,
            "marks": self.marks,
        }
        if self.sub_questions:
            d["subQuestions"] = list(self.sub_questions)
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Question:
        return cls(
            id=_text(data.get("id")) or new_question_id(),
            number=_text(data.get("number")),
            text=_text(data.get("text")),
            marks=_text(data.get("marks")),
            sub_questions=tuple(_text(s) for s in (data.get("subQuestions") or [])),
        )


@dataclass(frozen=True)
class Section:
    """
    Titled group of questions (immutable).

    Attributes:
        title: Section heading, e.g. "Section A"
        questions: Questions in render order
        instructions: Optional raw instruction markup ("" when absent)
    """

    title: str
    questions: tuple[Question, ...] = ()
    instructions: str = ""

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"title": self.title}
        if self.instructions:
            d["instructions"] = self.instructions
        d["questions"] = [q.to_dict() for q in self.questions]
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Section:
        return cls(
            title=_text(data.get("title")),
            questions=tuple(Question.from_dict(q) for q in (data.get("questions") or [])),
            instructions=_text(data.get("instructions")),
        )


@dataclass(frozen=True)
class ExamDocument:
    """
    Complete exam paper (immutable).

    The single semantic representation rendered by both the print layout
    and the DOCX export. Renderers only read it.

    Attributes:
        title: Institution / paper title
        subject: Subject name (also drives the export filename)
        total_marks: Total marks annotation as transcribed
        time_allowed: Time annotation as transcribed
        language: Script profile tag
        header_template: Header layout variant
        sections: Sections in render order

    Example:
        >>> doc = ExamDocument.from_dict({"title": "Board", "sections": []})
        >>> doc.language
        <Language.EN: 'EN'>
    """

    title: str = ""
    subject: str = ""
    total_marks: str = ""
    time_allowed: str = ""
    language: Language = Language.EN
    header_template: HeaderTemplate = HeaderTemplate.CLASSIC
    sections: tuple[Section, ...] = field(default_factory=tuple)

    @property
    def question_count(self) -> int:
        """Number of questions across all sections."""
        return sum(len(s.questions) for s in self.sections)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize to the external camelCase shape.

        Returns:
            Dict accepted by from_dict() and by the share-link codec
        """
        return {
            "title": self.title,
            "subject": self.subject,
            "totalMarks": self.total_marks,
            "timeAllowed": self.time_allowed,
            "language": self.language.value,
            "headerTemplate": self.header_template.value,
            "sections": [s.to_dict() for s in self.sections],
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        language: Optional[Any] = None,
    ) -> ExamDocument:
        """
        Deserialize from the external camelCase shape.

        Args:
            data: Transcription result or shared document
            language: Optional tag overriding data["language"]

        Returns:
            ExamDocument instance (missing fields become empty strings)
        """
        tag = language if language is not None else data.get("language")
        return cls(
            title=_text(data.get("title")),
            subject=_text(data.get("subject")),
            total_marks=_text(data.get("totalMarks")),
            time_allowed=_text(data.get("timeAllowed")),
            language=Language.from_tag(tag),
            header_template=HeaderTemplate.from_value(data.get("headerTemplate")),
            sections=tuple(Section.from_dict(s) for s in (data.get("sections") or [])),
        )
