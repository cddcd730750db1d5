"""
Unit Tests for Serialization Utilities

Tests for document (de)serialization, transcription ingestion and the
share-link codec.
"""

import base64
import json

import pytest

from paper_composer.core.models import ExamDocument, Language
from paper_composer.core.schemas.validator import ValidationError
from paper_composer.core.utils.serialization import (
    build_share_url,
    decode_share_payload,
    deserialize_document,
    document_from_transcription,
    encode_share_payload,
    load_document_json,
    save_document_json,
    serialize_document,
)


class TestDocumentSerialization:
    """Tests for document serialization/deserialization."""

    def test_serialize_when_document_given_then_returns_camel_case_dict(self, sample_document):
        result = serialize_document(sample_document)

        assert isinstance(result, dict)
        assert result["totalMarks"] == "50"
        assert result["timeAllowed"] == "2 hours"
        assert result["headerTemplate"] == "CLASSIC"
        assert result["sections"][0]["questions"][1]["subQuestions"][0] == "(a) Newton"

    def test_deserialize_when_valid_data_then_returns_document(self, sample_payload):
        doc = deserialize_document(sample_payload)

        assert isinstance(doc, ExamDocument)
        assert doc.subject == "Physics"

    def test_deserialize_when_sections_missing_then_raises(self):
        with pytest.raises(ValidationError):
            deserialize_document({"title": "No sections"})

    def test_deserialize_when_validation_disabled_then_lenient(self):
        doc = deserialize_document({"title": "No sections"}, validate=False)

        assert doc.sections == ()

    def test_roundtrip_when_saved_then_loaded_equal(self, sample_document, tmp_path):
        path = save_document_json(sample_document, tmp_path / "nested" / "paper.json")

        restored = load_document_json(path)

        assert restored == sample_document

    def test_save_when_non_latin_text_then_written_unescaped(self, tmp_path):
        doc = ExamDocument(title="امتحان", language=Language.UR)

        path = save_document_json(doc, tmp_path / "ur.json")

        assert "امتحان" in path.read_text(encoding="utf-8")


class TestTranscriptionIngestion:
    """Tests for document_from_transcription()."""

    def test_when_language_given_then_overrides_payload(self, sample_payload):
        payload = dict(sample_payload, language="EN")

        doc = document_from_transcription(payload, "ur")

        assert doc.language is Language.UR

    def test_when_payload_has_wrong_types_then_raises(self, sample_payload):
        payload = dict(sample_payload, title={"nested": "object"})

        with pytest.raises(ValidationError) as exc_info:
            document_from_transcription(payload, "EN")

        assert exc_info.value.path == "title"

    def test_when_questions_lack_ids_then_ids_assigned(self, sample_payload):
        doc = document_from_transcription(sample_payload, "EN")

        assert all(q.id for s in doc.sections for q in s.questions)


class TestShareLinks:
    """Tests for the share-link codec."""

    def test_when_encoded_then_standard_base64_json(self, sample_document):
        payload = encode_share_payload(sample_document)

        data = json.loads(base64.b64decode(payload).decode("utf-8"))
        assert data["subject"] == "Physics"

    @pytest.mark.parametrize("wrap", [
        lambda p: p,
        lambda p: f"#{p}",
        lambda p: f"https://example.org/editor#{p}",
    ])
    def test_when_payload_bare_fragment_or_url_then_decoded(self, sample_document, wrap):
        payload = encode_share_payload(sample_document)

        assert decode_share_payload(wrap(payload)) == sample_document

    def test_when_rtl_document_then_roundtrip_preserves_text(self):
        doc = ExamDocument(title="اختبار", subject="الفيزياء", language=Language.AR)

        assert decode_share_payload(encode_share_payload(doc)) == doc

    def test_build_share_url_replaces_existing_fragment(self, sample_document):
        url = build_share_url(sample_document, "https://example.org/editor#old")

        assert url.startswith("https://example.org/editor#")
        assert "#old" not in url
        assert decode_share_payload(url) == sample_document

    @pytest.mark.parametrize("value", [
        "",
        "#",
        "not base64 !!!",
        base64.b64encode(b"not json").decode("ascii"),
        base64.b64encode(b"[1, 2, 3]").decode("ascii"),
        base64.b64encode(json.dumps({"title": "no sections"}).encode()).decode("ascii"),
        base64.b64encode(b"\xff\xfe\xfd").decode("ascii"),
    ])
    def test_when_payload_malformed_then_none(self, value):
        assert decode_share_payload(value) is None

    def test_when_payload_malformed_then_warning_logged(self, caplog):
        with caplog.at_level("WARNING"):
            decode_share_payload("%%%")

        assert "malformed share payload" in caplog.text
