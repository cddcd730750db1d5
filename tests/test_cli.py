"""
Tests for the paper-composer command line.
"""

import io
import json

import pytest
from docx import Document

from paper_composer.cli import EXIT_BAD_INPUT, EXIT_FAILED, EXIT_OK, main
from paper_composer.core.utils import encode_share_payload


@pytest.fixture
def payload_file(tmp_path, sample_payload):
    path = tmp_path / "paper.json"
    path.write_text(json.dumps(sample_payload, ensure_ascii=False), encoding="utf-8")
    return path


class TestRender:
    """Tests for `paper-composer render`."""

    @pytest.mark.parametrize("fmt, filename", [
        ("docx", "Physics_Professional.docx"),
        ("pdf", "Physics_Professional.pdf"),
        ("layout", "Physics_Professional.layout.json"),
    ])
    def test_when_format_given_then_file_written_and_path_printed(self, payload_file, tmp_path, capsys, fmt,
                                                                 filename):
        out = tmp_path / "out"

        code = main(["render", str(payload_file), "--format", fmt, "--out", str(out)])

        assert code == EXIT_OK
        assert (out / filename).exists()
        assert capsys.readouterr().out.strip() == str(out / filename)

    def test_when_language_override_then_localized_docx(self, payload_file, tmp_path):
        code = main(["render", str(payload_file), "-l", "ur", "-o", str(tmp_path)])

        doc = Document(io.BytesIO((tmp_path / "Physics_Professional.docx").read_bytes()))
        assert code == EXIT_OK
        assert doc.tables[0].cell(0, 0).text.startswith("مضمون")

    def test_when_template_override_then_layout_uses_it(self, payload_file, tmp_path):
        code = main(["render", str(payload_file), "-f", "layout", "-t", "BOXED", "-o", str(tmp_path)])

        tree = json.loads((tmp_path / "Physics_Professional.layout.json").read_text(encoding="utf-8"))
        header = tree["pages"][0]["blocks"][0]
        assert code == EXIT_OK
        assert header["template"] == "BOXED"

    def test_when_config_default_language_then_applied_to_payload_without_language(self, payload_file, tmp_path):
        config = tmp_path / "composer.json"
        config.write_text(json.dumps({"default_language": "AR"}), encoding="utf-8")

        main(["render", str(payload_file), "-f", "layout", "-c", str(config), "-o", str(tmp_path)])

        tree = json.loads((tmp_path / "Physics_Professional.layout.json").read_text(encoding="utf-8"))
        assert tree["direction"] == "rtl"

    def test_when_input_missing_then_bad_input_exit(self, tmp_path):
        assert main(["render", str(tmp_path / "missing.json"), "-o", str(tmp_path)]) == EXIT_BAD_INPUT

    def test_when_input_not_json_then_bad_input_exit(self, tmp_path):
        path = tmp_path / "paper.json"
        path.write_text("not json", encoding="utf-8")

        assert main(["render", str(path), "-o", str(tmp_path)]) == EXIT_BAD_INPUT

    def test_when_input_not_object_then_bad_input_exit(self, tmp_path):
        path = tmp_path / "paper.json"
        path.write_text("[]", encoding="utf-8")

        assert main(["render", str(path), "-o", str(tmp_path)]) == EXIT_BAD_INPUT

    def test_when_output_not_writable_then_failed_exit(self, payload_file, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("file")

        assert main(["render", str(payload_file), "-o", str(blocker)]) == EXIT_FAILED

    def test_when_unknown_format_then_argparse_exits(self, payload_file):
        with pytest.raises(SystemExit):
            main(["render", str(payload_file), "--format", "rtf"])


class TestShare:
    """Tests for `paper-composer share`."""

    def test_when_encode_with_base_url_then_url_printed(self, payload_file, capsys):
        code = main(["share", "encode", str(payload_file), "--base-url", "https://example.org/editor"])

        out = capsys.readouterr().out.strip()
        assert code == EXIT_OK
        assert out.startswith("https://example.org/editor#")

    def test_when_encode_without_base_url_then_bare_payload(self, payload_file, capsys):
        main(["share", "encode", str(payload_file)])

        out = capsys.readouterr().out.strip()
        assert "#" not in out

    def test_when_decode_then_document_json_printed(self, sample_document, capsys):
        payload = encode_share_payload(sample_document)

        code = main(["share", "decode", f"https://example.org/editor#{payload}"])

        data = json.loads(capsys.readouterr().out)
        assert code == EXIT_OK
        assert data["subject"] == "Physics"
        assert len(data["sections"]) == 2

    def test_when_decode_malformed_then_failed_exit(self, capsys):
        code = main(["share", "decode", "#%%%not-base64"])

        assert code == EXIT_FAILED
        assert capsys.readouterr().out == ""
