"""
Module: text.normalizer

Purpose:
    Remove redundant numbering, option labels and mark annotations from
    raw transcribed strings before rendering. The transcription service
    often repeats decoration that the layout adds itself ("Q.3", "(a)",
    a trailing "(5)" in the question body).

Key Functions:
    - strip_question_prefix(): "Q.3" -> "3", "سوال 2۔" -> "2"
    - strip_option_label(): "(a) Paris" -> "Paris"
    - clean_question_text(): "1) What is gravity? (5)" -> "What is gravity?"
    - normalize_marks(): "(10)" -> "10"
    - extract_trailing_marks(): "... (10)" -> "10"
    - normalize_question(): All of the above for one Question

Policy:
    Only the outermost decoration is removed; nothing recurses into the
    body, so parentheticals mid-sentence survive. None/empty input gives
    "" and no function raises.

Dependencies:
    - re (std)
    - core.models: Question

Used By:
    - layout.composer
    - output.docx_writer
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from paper_composer.core.models import Question

# ASCII, Eastern Arabic (U+0660-0669) and Extended Arabic-Indic (U+06F0-06F9)
DIGITS = r"0-9٠-٩۰-۹"
OPEN = r"\(\[\{"
CLOSE = r"\)\]\}"

# Longest first so "Question" is never matched as "Q" + "uestion"
QUESTION_LABELS = ("Question", "Quest", "السؤال", "سوال", "نمبر", "Q", "س")

_LABEL_ALT = "|".join(re.escape(label) for label in QUESTION_LABELS)
_QUESTION_PREFIX_RE = re.compile(
    rf"^\s*(?:(?:{_LABEL_ALT})(?![^\W\d_])\s*[-.:۔]?\s*)+",
    re.IGNORECASE,
)
_TRAILING_SEPARATOR_RE = re.compile(r"\s*[-.:۔]+$")

_OPTION_LABEL_RE = re.compile(
    rf"^\s*(?:"
    rf"[{OPEN}](?:[A-Za-z]|[{DIGITS}]+)[{CLOSE}]\s*[-.:۔]?"
    rf"|(?:[A-Za-z]|[{DIGITS}]+)\s*[-.:۔{CLOSE}](?=\s|$)"
    rf")\s*"
)
_LEADING_NUMERAL_RE = re.compile(
    rf"^\s*(?:"
    rf"[{OPEN}][{DIGITS}]+[{CLOSE}]\s*[-.۔]?"
    rf"|[{DIGITS}]+\s*[-.۔{CLOSE}](?![{DIGITS}])"
    rf")\s*"
)
# A letter directly before the bracket marks a call such as f(2)
_TRAILING_NUMERAL_RE = re.compile(rf"(?<![A-Za-z])[{OPEN}]\s*([{DIGITS}]+)\s*[{CLOSE}]\s*$")
_BRACKETED_RE = re.compile(rf"^[{OPEN}]\s*(.*?)\s*[{CLOSE}]$")


def strip_question_prefix(number: Optional[str]) -> str:
    """
    Remove a leading question label from a raw question number.

    Args:
        number: Raw number, e.g. "Q.3", "Question 5:", "سوال 2۔", "7"

    Returns:
        Bare number ("3", "5", "2", "7"), "" for empty input

    Example:
        >>> strip_question_prefix("Q.3")
        '3'
        >>> strip_question_prefix("Quiz")
        'Quiz'
    """
    if not number:
        return ""
    stripped = _QUESTION_PREFIX_RE.sub("", number, count=1).strip()
    return _TRAILING_SEPARATOR_RE.sub("", stripped).strip()


def strip_option_label(text: Optional[str]) -> str:
    """
    Remove a leading option label and a trailing bracketed numeral.

    A label is a bracketed token ("(a)", "[2]", "{١}") or a token followed
    by a closing bracket or separator ("a)", "b.", "1-", "٣۔"). A token is
    one Latin letter or a run of digits.

    Example:
        >>> strip_option_label("(a) Paris")
        'Paris'
        >>> strip_option_label("Paris is the capital")
        'Paris is the capital'
    """
    if not text:
        return ""
    stripped = _OPTION_LABEL_RE.sub("", text, count=1)
    return _TRAILING_NUMERAL_RE.sub("", stripped).strip()


def clean_question_text(text: Optional[str]) -> str:
    """
    Remove a leading numeral label and a trailing mark annotation.

    Example:
        >>> clean_question_text("1) What is gravity? (5)")
        'What is gravity?'
        >>> clean_question_text("Evaluate f(2) when x = 3")
        'Evaluate f(2) when x = 3'
    """
    if not text:
        return ""
    stripped = _LEADING_NUMERAL_RE.sub("", text, count=1)
    return _TRAILING_NUMERAL_RE.sub("", stripped).strip()


def normalize_marks(marks: Optional[str]) -> str:
    """Strip whitespace and one layer of brackets: " (10) " -> "10"."""
    if not marks:
        return ""
    value = marks.strip()
    match = _BRACKETED_RE.match(value)
    return match.group(1) if match else value


def extract_trailing_marks(text: Optional[str]) -> str:
    """Return the numeral of a trailing "(N)" annotation, or ""."""
    if not text:
        return ""
    match = _TRAILING_NUMERAL_RE.search(text)
    return match.group(1) if match else ""


@dataclass(frozen=True)
class NormalizedQuestion:
    """
    Render-ready question fields shared by both renderers.

    Attributes:
        question_id: Id of the source question
        number: Number without label decoration
        text: Body markup without leading label or trailing marks
        marks: Marks value without brackets ("" when absent)
        sub_questions: Sub-question markup without option labels
    """

    question_id: str
    number: str
    text: str
    marks: str
    sub_questions: tuple[str, ...]


def normalize_question(question: Question) -> NormalizedQuestion:
    """
    Normalize one question.

    Marks come from the marks field when it has a value, otherwise from a
    trailing bracketed numeral left in the body.

    Example:
        >>> q = Question(id="q1", number="Q.1", text="(1) Define x^2. (10)")
        >>> n = normalize_question(q)
        >>> (n.number, n.text, n.marks)
        ('1', 'Define x^2.', '10')
    """
    return NormalizedQuestion(
        question_id=question.id,
        number=strip_question_prefix(question.number),
        text=clean_question_text(question.text),
        marks=normalize_marks(question.marks) or extract_trailing_marks(question.text),
        sub_questions=tuple(strip_option_label(s) for s in question.sub_questions),
    )
