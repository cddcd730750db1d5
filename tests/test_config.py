"""
Tests for ComposerConfig and load_config().
"""

import json
from pathlib import Path

import pytest

from paper_composer.config import ComposerConfig, load_config
from paper_composer.core.models import HeaderTemplate, Language
from paper_composer.layout import LayoutConfig


class TestComposerConfig:
    """Tests for defaults and validation."""

    def test_defaults(self):
        config = ComposerConfig()

        assert config.output_dir == Path("output")
        assert config.fonts == {}
        assert config.default_language is Language.EN
        assert config.default_template is HeaderTemplate.CLASSIC
        assert config.show_footer is True
        assert config.layout == LayoutConfig()

    def test_when_language_not_enum_then_value_error(self):
        with pytest.raises(ValueError, match="default_language"):
            ComposerConfig(default_language="UR")

    def test_when_font_name_empty_then_value_error(self):
        with pytest.raises(ValueError, match="Font name"):
            ComposerConfig(fonts={"": Path("x.ttf")})


class TestFromDict:
    """Tests for ComposerConfig.from_dict()."""

    def test_when_all_keys_then_parsed(self):
        config = ComposerConfig.from_dict({
            "output_dir": "exports",
            "fonts": {"NotoNaskhArabic": "fonts/NotoNaskhArabic-Regular.ttf"},
            "default_language": "ur",
            "default_template": "boxed",
            "show_footer": False,
            "layout": {"block_spacing": 12, "margin_top": "40"},
        })

        assert config.output_dir == Path("exports")
        assert config.fonts == {"NotoNaskhArabic": Path("fonts/NotoNaskhArabic-Regular.ttf")}
        assert config.default_language is Language.UR
        assert config.default_template is HeaderTemplate.BOXED
        assert config.show_footer is False
        assert config.layout.block_spacing == 12.0
        assert config.layout.margin_top == 40.0

    def test_when_unknown_keys_then_ignored(self):
        config = ComposerConfig.from_dict({"theme": "dark", "layout": {"gutter": 3}})

        assert config == ComposerConfig()

    def test_when_unknown_language_then_english(self):
        assert ComposerConfig.from_dict({"default_language": "FR"}).default_language is Language.EN


class TestLoadConfig:
    """Tests for load_config() fallbacks."""

    def test_when_path_none_then_defaults(self):
        assert load_config(None) == ComposerConfig()

    def test_when_file_valid_then_loaded(self, tmp_path):
        path = tmp_path / "composer.json"
        path.write_text(json.dumps({"default_language": "AR", "show_footer": False}), encoding="utf-8")

        config = load_config(path)

        assert config.default_language is Language.AR
        assert config.show_footer is False

    def test_when_file_missing_then_defaults_with_warning(self, tmp_path, caplog):
        with caplog.at_level("WARNING"):
            config = load_config(tmp_path / "missing.json")

        assert config == ComposerConfig()
        assert "not found" in caplog.text

    def test_when_file_corrupted_then_defaults_with_warning(self, tmp_path, caplog):
        path = tmp_path / "composer.json"
        path.write_text("{not json", encoding="utf-8")

        with caplog.at_level("WARNING"):
            config = load_config(path)

        assert config == ComposerConfig()
        assert "corrupted" in caplog.text

    def test_when_not_object_then_defaults(self, tmp_path):
        path = tmp_path / "composer.json"
        path.write_text("[1, 2]", encoding="utf-8")

        assert load_config(path) == ComposerConfig()

    def test_when_invalid_values_then_defaults_with_warning(self, tmp_path, caplog):
        path = tmp_path / "composer.json"
        path.write_text(json.dumps({"layout": {"page_width": -10}}), encoding="utf-8")

        with caplog.at_level("WARNING"):
            config = load_config(path)

        assert config == ComposerConfig()
        assert "Invalid config values" in caplog.text
