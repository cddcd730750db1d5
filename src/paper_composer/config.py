"""
Module: paper_composer.config

Purpose:
    Configuration dataclass for the composer pipelines. Immutable
    configuration with validation on construction, loaded from an
    optional JSON file.

    A missing or malformed config file falls back to defaults with a
    logged warning; it never stops a render.

Key Classes:
    - ComposerConfig: Output directory, script fonts, document defaults

Key Functions:
    - load_config(): Read ComposerConfig from JSON

Dependencies:
    - layout.config: LayoutConfig

Used By:
    - paper_composer.cli: Command line defaults
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from paper_composer.core.models import HeaderTemplate, Language

from .layout import LayoutConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComposerConfig:
    """
    Configuration for rendering exam documents (immutable).

    Attributes:
        output_dir: Directory exports are written to
        fonts: Font name -> TTF path, registered before PDF rendering
            (e.g. {"NotoNaskhArabic": Path("fonts/NotoNaskhArabic-Regular.ttf")})
        default_language: Language used when a payload carries none
        default_template: Header template used when a payload carries none
        show_footer: Draw the credit line on printed pages
        layout: Page geometry and spacing

    Example:
        >>> config = ComposerConfig(output_dir=Path("out"), default_language=Language.AR)
        >>> config.default_language
        <Language.AR: 'AR'>
    """

    output_dir: Path = Path("output")
    fonts: Dict[str, Path] = field(default_factory=dict)
    default_language: Language = Language.EN
    default_template: HeaderTemplate = HeaderTemplate.CLASSIC

    show_footer: bool = True
    layout: LayoutConfig = field(default_factory=LayoutConfig)

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if not isinstance(self.default_language, Language):
            raise ValueError(f"default_language must be a Language: {self.default_language!r}")
        if not isinstance(self.default_template, HeaderTemplate):
            raise ValueError(f"default_template must be a HeaderTemplate: {self.default_template!r}")
        for name, path in self.fonts.items():
            if not name:
                raise ValueError(f"Font name must not be empty (path {path})")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComposerConfig":
        """
        Build a config from parsed JSON.

        Unknown keys are ignored. Language and template values use the
        same fallbacks as documents.
        """
        kwargs: Dict[str, Any] = {}
        if data.get("output_dir"):
            kwargs["output_dir"] = Path(data["output_dir"])
        if data.get("fonts"):
            kwargs["fonts"] = {str(k): Path(v) for k, v in dict(data["fonts"]).items()}
        if "default_language" in data:
            kwargs["default_language"] = Language.from_tag(data["default_language"])
        if "default_template" in data:
            kwargs["default_template"] = HeaderTemplate.from_value(data["default_template"])
        if "show_footer" in data:
            kwargs["show_footer"] = bool(data["show_footer"])
        if data.get("layout"):
            known = {f.name for f in fields(LayoutConfig)}
            kwargs["layout"] = LayoutConfig(**{
                k: float(v) for k, v in dict(data["layout"]).items() if k in known
            })
        return cls(**kwargs)


def load_config(path: Optional[Path]) -> ComposerConfig:
    """
    Load configuration from a JSON file.

    Args:
        path: Config file path (None returns defaults)

    Returns:
        Loaded config, or defaults if the file is missing or invalid
    """
    if path is None:
        return ComposerConfig()

    path = Path(path)
    if not path.exists():
        logger.warning(f"Config file not found: {path}, using defaults")
        return ComposerConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        logger.warning(f"Config file is corrupted: {path}: {e}, using defaults")
        return ComposerConfig()
    except OSError as e:
        logger.warning(f"Failed to read config {path}: {e}, using defaults")
        return ComposerConfig()

    if not isinstance(data, dict):
        logger.warning(f"Config file {path} is not a JSON object, using defaults")
        return ComposerConfig()

    try:
        config = ComposerConfig.from_dict(data)
    except (TypeError, ValueError) as e:
        logger.warning(f"Invalid config values in {path}: {e}, using defaults")
        return ComposerConfig()

    logger.debug(f"Loaded config from {path}")
    return config
