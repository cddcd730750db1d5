"""JSON schema validation for exam document payloads."""

from .validator import ValidationError, validate_document

__all__ = ["ValidationError", "validate_document"]
