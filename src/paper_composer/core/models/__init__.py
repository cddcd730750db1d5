"""
Core Models Package

Immutable data models shared by the text pipeline and both renderers.

All models in this package are frozen dataclasses. Editing produces new
instances (see core.editing); renderers never write back.
"""

from .document import ExamDocument, HeaderTemplate, Language, Question, Section, new_question_id
from .profiles import LabelSet, ScriptProfile, get_profile, letter_label, PROFILES
from .tokens import MathToken, PlainRun, Subscript, Superscript

__all__ = [
    "ExamDocument",
    "Section",
    "Question",
    "Language",
    "HeaderTemplate",
    "new_question_id",
    "LabelSet",
    "ScriptProfile",
    "get_profile",
    "letter_label",
    "PROFILES",
    "MathToken",
    "PlainRun",
    "Superscript",
    "Subscript",
]
