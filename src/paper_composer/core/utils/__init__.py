"""Serialization helpers for exam documents and share links."""

from .serialization import (
    build_share_url,
    decode_share_payload,
    deserialize_document,
    document_from_transcription,
    encode_share_payload,
    load_document_json,
    save_document_json,
    serialize_document,
)

__all__ = [
    "serialize_document",
    "deserialize_document",
    "document_from_transcription",
    "load_document_json",
    "save_document_json",
    "encode_share_payload",
    "decode_share_payload",
    "build_share_url",
]
