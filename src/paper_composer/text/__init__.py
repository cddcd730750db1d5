"""
Text Pipeline Package

Normalizer, math tokenizer and run formatter shared by both renderers.

Data flow: raw field -> normalizer -> tokenizer -> formatter -> renderer.
"""

from .formatter import (
    SCRIPT_SCALE,
    RunStyle,
    StyledRun,
    VerticalAlign,
    display_text,
    format_run,
    format_text,
    format_tokens,
    is_math_context,
    plain_text,
)
from .normalizer import (
    NormalizedQuestion,
    clean_question_text,
    extract_trailing_marks,
    normalize_marks,
    normalize_question,
    strip_option_label,
    strip_question_prefix,
)
from .tokenizer import iter_tokens, tokenize

__all__ = [
    # Normalizer
    "strip_question_prefix",
    "strip_option_label",
    "clean_question_text",
    "normalize_marks",
    "extract_trailing_marks",
    "normalize_question",
    "NormalizedQuestion",
    # Tokenizer
    "iter_tokens",
    "tokenize",
    # Formatter
    "SCRIPT_SCALE",
    "VerticalAlign",
    "RunStyle",
    "StyledRun",
    "is_math_context",
    "format_run",
    "format_tokens",
    "format_text",
    "plain_text",
    "display_text",
]
