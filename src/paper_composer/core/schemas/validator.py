"""
Schema Validation Utilities

Validates transcription results and shared documents before they are
turned into ExamDocument instances. Both sources are untrusted JSON.

Two levels:
- Basic checks (default): structure only - object with a list of
  sections, each an object with a list of questions.
- Strict checks: full JSON Schema validation against
  exam_document.schema.json using jsonschema.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def validate_document(data: Any, *, strict: bool = False) -> None:
    """
    Validate an exam document payload.

    Args:
        data: Decoded JSON value to validate
        strict: If True, also run full JSON Schema validation

    Raises:
        ValidationError: If data is invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(
            f"Document must be an object, got {type(data).__name__}",
            path="",
        )

    if "sections" not in data:
        raise ValidationError(
            "Missing required fields: ['sections']",
            path="",
            errors=["Missing field: sections"],
        )

    sections = data["sections"]
    if not isinstance(sections, list):
        raise ValidationError("sections must be a list", path="sections")

    for i, section in enumerate(sections):
        _validate_section(section, f"sections[{i}]")

    if strict:
        schema = _load_schema("exam_document")
        try:
            jsonschema.validate(data, schema)
        except jsonschema.ValidationError as e:
            raise ValidationError(
                f"Schema validation failed: {e.message}",
                path=".".join(str(p) for p in e.absolute_path),
                errors=[e.message],
            ) from e


def _validate_section(data: Any, path: str) -> None:
    """Validate one section entry."""
    if not isinstance(data, dict):
        raise ValidationError("section must be an object", path=path)

    questions = data.get("questions", [])
    if not isinstance(questions, list):
        raise ValidationError("questions must be a list", path=f"{path}.questions")

    for i, question in enumerate(questions):
        if not isinstance(question, dict):
            raise ValidationError(
                "question must be an object",
                path=f"{path}.questions[{i}]",
            )
        subs = question.get("subQuestions")
        if subs is not None and not isinstance(subs, list):
            raise ValidationError(
                "subQuestions must be a list",
                path=f"{path}.questions[{i}].subQuestions",
            )
