"""
Module: tokens

Purpose:
    Math token variants produced by the tokenizer. Derived values only:
    they are never stored on the document and never mutate it.

Key Classes:
    - PlainRun: Verbatim text between markup matches
    - Superscript: Content of ^x / ^{...}
    - Subscript: Content of _x / _{...}

Dependencies:
    - dataclasses (std)

Used By:
    - text.tokenizer
    - text.formatter
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class PlainRun:
    """Plain text segment, kept verbatim (including stray ^ or _)."""

    text: str

    @property
    def content(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class Superscript:
    """Raised content of a ^ marker."""

    content: str


@dataclass(frozen=True, slots=True)
class Subscript:
    """Lowered content of a _ marker."""

    content: str


MathToken = Union[PlainRun, Superscript, Subscript]
