"""
Module: profiles

Purpose:
    Script profiles - the bundle of direction, font, line-height and
    localized labels selected once per document language. Renderers
    receive a profile instead of branching on the language tag.

Key Classes:
    - LabelSet: Localized strings used by the print layout
    - ScriptProfile: Direction, fonts, sizing and labels for one script

Key Functions:
    - get_profile(): Profile for a language (falls back to EN)

Dependencies:
    - dataclasses (std)
    - .document.Language

Used By:
    - layout.composer
    - layout.metrics
    - output.renderer
    - core.editing
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from .document import Language

Direction = Literal["ltr", "rtl"]
SubMarkerStyle = Literal["letter", "number"]


@dataclass(frozen=True)
class LabelSet:
    """Localized labels for one script."""

    question: str
    subject: str
    total_marks: str
    time_allowed: str
    roll_no: str
    instructions: str
    end_of_paper: str
    new_question: str


@dataclass(frozen=True)
class ScriptProfile:
    """
    Rendering profile for one script (immutable).

    Attributes:
        language: Language tag this profile serves
        direction: "ltr" or "rtl"
        font_family: CSS-style family list for screen consumers
        font_name: PDF font name (registered TTF or built-in fallback)
        line_height: Line-height multiplier
        base_font_size: Body size in points
        labels: Localized labels
        sub_marker_style: "letter" -> a), b)...; "number" -> 1-, 2-...
    """

    language: Language
    direction: Direction
    font_family: str
    font_name: str
    line_height: float
    base_font_size: float
    labels: LabelSet
    sub_marker_style: SubMarkerStyle

    @property
    def is_rtl(self) -> bool:
        return self.direction == "rtl"

    def sub_marker(self, index: int) -> str:
        """
        Marker for the sub-question at 0-based index.

        Example:
            >>> get_profile(Language.EN).sub_marker(1)
            'b)'
            >>> get_profile(Language.UR).sub_marker(1)
            '2-'
        """
        if self.sub_marker_style == "number":
            return f"{index + 1}-"
        return f"{letter_label(index)})"


def letter_label(index: int) -> str:
    """0 -> a, 25 -> z, 26 -> aa (bijective base 26)."""
    out = ""
    n = index + 1
    while n > 0:
        n, rem = divmod(n - 1, 26)
        out = chr(ord("a") + rem) + out
    return out


PROFILES: dict[Language, ScriptProfile] = {
    Language.EN: ScriptProfile(
        language=Language.EN,
        direction="ltr",
        font_family="'Inter', sans-serif",
        font_name="Helvetica",
        line_height=1.6,
        base_font_size=11.5,
        labels=LabelSet(
            question="Q",
            subject="Subject",
            total_marks="Total Marks",
            time_allowed="Time Allowed",
            roll_no="Roll No",
            instructions="Instructions:",
            end_of_paper="*** END OF PAPER ***",
            new_question="Enter question text...",
        ),
        sub_marker_style="letter",
    ),
    Language.UR: ScriptProfile(
        language=Language.UR,
        direction="rtl",
        font_family="'Noto Nastaliq Urdu', serif",
        font_name="NotoNastaliqUrdu",
        line_height=2.1,
        base_font_size=14.0,
        labels=LabelSet(
            question="سوال",
            subject="مضمون",
            total_marks="کل نمبر",
            time_allowed="وقت",
            roll_no="رول نمبر",
            instructions="ہدایات:",
            end_of_paper="*** پیپر ختم ہوا ***",
            new_question="نیا سوال درج کریں...",
        ),
        sub_marker_style="number",
    ),
    Language.AR: ScriptProfile(
        language=Language.AR,
        direction="rtl",
        font_family="'Noto Naskh Arabic', serif",
        font_name="NotoNaskhArabic",
        line_height=1.8,
        base_font_size=14.0,
        labels=LabelSet(
            question="س",
            subject="المادة",
            total_marks="الدرجة الكلية",
            time_allowed="الوقت",
            roll_no="رقم الجلوس",
            instructions="تعليمات:",
            end_of_paper="*** انتهت الأسئلة ***",
            new_question="أدخل نص السؤال...",
        ),
        sub_marker_style="number",
    ),
}


def get_profile(language: Any) -> ScriptProfile:
    """Return the profile for a language tag (unknown tags -> EN)."""
    return PROFILES[Language.from_tag(language)]
