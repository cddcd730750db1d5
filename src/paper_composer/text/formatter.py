"""
Module: text.formatter

Purpose:
    Turn math tokens into styled runs. This is the one formatting
    implementation behind both renderers; each renderer maps the abstract
    style flags onto its own primitives (PDF font/rise, DOCX run flags).

Rules:
    - Superscript/subscript content is always math, scaled to 0.75x and
      raised/lowered.
    - A top-level plain run is math only if it has a Latin letter AND one
      of the operators + - = / *.
    - In math, every Latin letter and operator is its own run: letters
      are italic, operators are padded, everything else stays grouped.
    - A plain run directly before a script token gets its trailing
      isolated letter italicized (the base of "x^2").

Key Classes:
    - VerticalAlign: baseline / super / sub
    - RunStyle: Abstract style flags
    - StyledRun: Text with its style

Key Functions:
    - is_math_context(): Letter + operator test
    - format_run(): Style one segment
    - format_tokens(): Style a token sequence
    - format_text(): tokenize() + format_tokens()

Dependencies:
    - text.tokenizer

Used By:
    - layout.composer
    - output.docx_writer
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from paper_composer.core.models import MathToken, PlainRun, Subscript, Superscript

from .tokenizer import iter_tokens, to_script_glyphs

SCRIPT_SCALE = 0.75
OPERATORS = "+-=/*"

_LETTER_RE = re.compile(r"[A-Za-z]")
_OPERATOR_RE = re.compile(r"[+\-=/*]")
_MATH_SPLIT_RE = re.compile(r"([A-Za-z]|[+\-=/*])")
_BASE_LETTER_RE = re.compile(r"(?<![A-Za-z])[A-Za-z]$")


class VerticalAlign(str, Enum):
    BASELINE = "baseline"
    SUPER = "super"
    SUB = "sub"


@dataclass(frozen=True)
class RunStyle:
    """
    Renderer-agnostic style flags.

    Attributes:
        italic: Variable convention
        padded: Operator with surrounding space
        scale: Size relative to the base font size
        vertical: Baseline, raised or lowered
    """

    italic: bool = False
    padded: bool = False
    scale: float = 1.0
    vertical: VerticalAlign = VerticalAlign.BASELINE

    @property
    def is_script(self) -> bool:
        return self.vertical is not VerticalAlign.BASELINE


@dataclass(frozen=True)
class StyledRun:
    text: str
    style: RunStyle = RunStyle()

    @property
    def italic(self) -> bool:
        return self.style.italic

    @property
    def padded(self) -> bool:
        return self.style.padded


def is_math_context(text: Optional[str]) -> bool:
    """
    True if text has at least one Latin letter and one operator.

    Example:
        >>> is_math_context("x+y=z")
        True
        >>> is_math_context("Hello World")
        False
    """
    if not text:
        return False
    return bool(_LETTER_RE.search(text)) and bool(_OPERATOR_RE.search(text))


def format_run(
    text: str,
    *,
    math: bool,
    vertical: VerticalAlign = VerticalAlign.BASELINE,
) -> List[StyledRun]:
    """
    Style one text segment.

    Args:
        text: Segment content
        math: Whether the segment is in math context
        vertical: Vertical placement (scripts are scaled)

    Returns:
        Styled runs in order; [] for empty text

    Example:
        >>> [(r.text, r.italic, r.padded) for r in format_run("x+y", math=True)]
        [('x', True, False), ('+', False, True), ('y', True, False)]
    """
    if not text:
        return []
    scale = 1.0 if vertical is VerticalAlign.BASELINE else SCRIPT_SCALE
    if not math:
        return [StyledRun(text, RunStyle(scale=scale, vertical=vertical))]

    runs = []
    for piece in _MATH_SPLIT_RE.split(text):
        if not piece:
            continue
        style = RunStyle(
            italic=len(piece) == 1 and piece.isascii() and piece.isalpha(),
            padded=len(piece) == 1 and piece in OPERATORS,
            scale=scale,
            vertical=vertical,
        )
        runs.append(StyledRun(piece, style))
    return runs


def format_tokens(tokens: Iterable[MathToken]) -> List[StyledRun]:
    """Style a token sequence, preserving order."""
    tokens = list(tokens)
    runs: List[StyledRun] = []
    for index, token in enumerate(tokens):
        if isinstance(token, Superscript):
            runs.extend(format_run(token.content, math=True, vertical=VerticalAlign.SUPER))
        elif isinstance(token, Subscript):
            runs.extend(format_run(token.content, math=True, vertical=VerticalAlign.SUB))
        elif is_math_context(token.text):
            runs.extend(format_run(token.text, math=True))
        elif index + 1 < len(tokens) and not isinstance(tokens[index + 1], PlainRun):
            runs.extend(_format_base(token.text))
        else:
            runs.extend(format_run(token.text, math=False))
    return runs


def _format_base(text: str) -> List[StyledRun]:
    # Plain run followed by a script: italicize an isolated trailing letter
    match = _BASE_LETTER_RE.search(text)
    if match is None:
        return format_run(text, math=False)
    head = format_run(text[:match.start()], math=False)
    return head + [StyledRun(match.group(), RunStyle(italic=True))]


def format_text(text: Optional[str]) -> List[StyledRun]:
    """
    Tokenize and style raw markup.

    Example:
        >>> runs = format_text("Define x^2")
        >>> [(r.text, r.italic, r.style.vertical.value) for r in runs]
        [('Define ', False, 'baseline'), ('x', True, 'baseline'), ('2', False, 'super')]
    """
    return format_tokens(iter_tokens(text))


def plain_text(runs: Iterable[StyledRun]) -> str:
    """Concatenate raw run text."""
    return "".join(run.text for run in runs)


def display_text(runs: Iterable[StyledRun]) -> str:
    """
    Concatenate runs, showing scripts as Unicode glyphs where possible.

    Consecutive runs with the same vertical placement are mapped together
    so a script is either fully converted or left as-is.
    """
    parts = []
    group: List[str] = []
    group_vertical = VerticalAlign.BASELINE

    def flush() -> None:
        text = "".join(group)
        if group_vertical is VerticalAlign.BASELINE:
            parts.append(text)
        else:
            parts.append(to_script_glyphs(text, superscript=group_vertical is VerticalAlign.SUPER))
        group.clear()

    for run in runs:
        if run.style.vertical is not group_vertical and group:
            flush()
        group_vertical = run.style.vertical
        group.append(run.text)
    if group:
        flush()
    return "".join(parts)
