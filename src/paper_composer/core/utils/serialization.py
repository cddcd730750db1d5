"""
Serialization Utilities

Provides to/from JSON utilities for the exam document model, plus the
share-link codec.

Inputs arrive from two untrusted sources:
- The AI transcription result (a JSON object plus a language tag)
- A share link whose URL fragment carries the base64-encoded document

Both go through the same validate -> from_dict path. Share payloads that
fail to decode are ignored (None) rather than raised, so a bad link never
blocks the application from starting.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Any, Optional
from urllib.parse import unquote

from ..models.document import ExamDocument, Language
from ..schemas.validator import validate_document, ValidationError

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Document Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_document(document: ExamDocument) -> dict[str, Any]:
    """
    Serialize an ExamDocument to a dictionary.

    The output uses the external camelCase shape and passes validation.
    """
    return document.to_dict()


def deserialize_document(
    data: Any,
    *,
    validate: bool = True,
    strict: bool = False,
    language: Optional[Any] = None,
) -> ExamDocument:
    """
    Deserialize an ExamDocument from a dictionary.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate structure first
        strict: Run full JSON Schema validation (implies validate)
        language: Optional tag overriding data["language"]

    Returns:
        ExamDocument instance

    Raises:
        ValidationError: If validation is requested and data is invalid
    """
    if validate or strict:
        validate_document(data, strict=strict)
    return ExamDocument.from_dict(data, language=language)


def document_from_transcription(
    payload: dict[str, Any],
    language: Any,
) -> ExamDocument:
    """
    Build a document from a structured transcription result.

    The caller's language tag always wins over anything in the payload;
    questions without an id get a fresh one.

    Raises:
        ValidationError: If the payload does not have the expected shape
    """
    document = deserialize_document(payload, strict=True, language=Language.from_tag(language))
    logger.info(
        f"Ingested transcription: {len(document.sections)} sections, "
        f"{document.question_count} questions ({document.language.value})"
    )
    return document


def load_document_json(path: Path, *, language: Optional[Any] = None) -> ExamDocument:
    """
    Load a document from a JSON file.

    Raises:
        OSError: If the file cannot be read
        json.JSONDecodeError: If the file is not JSON
        ValidationError: If the JSON does not have the expected shape
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return deserialize_document(data, language=language)


def save_document_json(document: ExamDocument, path: Path) -> Path:
    """Write a document as pretty-printed UTF-8 JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(serialize_document(document), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return path


# ─────────────────────────────────────────────────────────────────────────────
# Share Links
# ─────────────────────────────────────────────────────────────────────────────

def encode_share_payload(document: ExamDocument) -> str:
    """
    Encode a document for a share-link fragment.

    Standard base64 over the UTF-8 JSON text.

    Example:
        >>> payload = encode_share_payload(doc)
        >>> decode_share_payload(payload) == doc
        True
    """
    text = json.dumps(serialize_document(document), ensure_ascii=False, separators=(",", ":"))
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def build_share_url(document: ExamDocument, base_url: str) -> str:
    """Return base_url with the encoded document as its fragment."""
    return f"{base_url.split('#', 1)[0]}#{encode_share_payload(document)}"


def decode_share_payload(value: str) -> Optional[ExamDocument]:
    """
    Decode a share payload, fragment (#...) or full share URL.

    Malformed payloads are ignored: the function logs a warning and
    returns None instead of raising.

    Returns:
        ExamDocument, or None if the payload is empty or malformed
    """
    fragment = (value or "").strip()
    if "#" in fragment:
        fragment = fragment.split("#", 1)[1]
    fragment = unquote(fragment)
    if not fragment:
        return None

    try:
        padded = fragment + "=" * (-len(fragment) % 4)
        raw = base64.b64decode(padded, validate=True)
        data = json.loads(raw.decode("utf-8"))
        return deserialize_document(data)
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Ignoring malformed share payload: {e}")
        return None
