"""
Module: text.tokenizer

Purpose:
    Split a text field into plain runs, superscripts and subscripts.

    Recognized markup:
    - ^{...} / _{...}: content up to the first "}" (no nesting)
    - ^x / _x: one ASCII letter or digit

    Anything else, including a "^" or "_" with no valid operand, stays in
    the surrounding plain run. Tokenizing never fails.

Key Functions:
    - iter_tokens(): Lazy token generator
    - tokenize(): Materialized token list
    - to_script_glyphs(): Unicode super/subscript glyphs for script content

Dependencies:
    - re (std)
    - core.models: PlainRun, Superscript, Subscript

Used By:
    - text.formatter
"""

from __future__ import annotations

import re
from typing import Iterator, List, Optional

from paper_composer.core.models import MathToken, PlainRun, Subscript, Superscript

_MARKUP_RE = re.compile(r"([\^_])(?:\{([^}]+)\}|([A-Za-z0-9]))")

SUPERSCRIPT_GLYPHS = str.maketrans(
    "0123456789+-=()ni",
    "⁰¹²³⁴⁵⁶⁷⁸⁹⁺⁻⁼⁽⁾ⁿⁱ",
)
SUBSCRIPT_GLYPHS = str.maketrans(
    "0123456789+-=()aeoxhklmnpst",
    "₀₁₂₃₄₅₆₇₈₉₊₋₌₍₎ₐₑₒₓₕₖₗₘₙₚₛₜ",
)


def iter_tokens(text: Optional[str]) -> Iterator[MathToken]:
    """
    Yield tokens for text in input order.

    Empty plain runs are never yielded, so text without markup yields
    exactly one PlainRun and empty text yields nothing.

    Example:
        >>> list(iter_tokens("E = mc^2"))
        [PlainRun(text='E = mc'), Superscript(content='2')]
    """
    if not text:
        return
    position = 0
    for match in _MARKUP_RE.finditer(text):
        if match.start() > position:
            yield PlainRun(text[position:match.start()])
        marker, braced, single = match.groups()
        content = braced if braced is not None else single
        yield Superscript(content) if marker == "^" else Subscript(content)
        position = match.end()
    if position < len(text):
        yield PlainRun(text[position:])


def tokenize(text: Optional[str]) -> List[MathToken]:
    """Return iter_tokens(text) as a list."""
    return list(iter_tokens(text))


def to_script_glyphs(content: str, superscript: bool) -> str:
    """
    Map content to Unicode super/subscript glyphs.

    Falls back to the raw content when any character has no glyph.
    """
    table = SUPERSCRIPT_GLYPHS if superscript else SUBSCRIPT_GLYPHS
    mapped = content.translate(table)
    if any(a == b for a, b in zip(content, mapped)):
        return content
    return mapped

