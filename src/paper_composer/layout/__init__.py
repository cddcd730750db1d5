"""
Layout Package

Screen/print layout: document -> measured blocks -> pages.

Usage:
    blocks = compose_document(document, config)
    result = paginate(blocks, config, profile)
"""

from .composer import TEMPLATE_SPECS, TemplateSpec, compose_document
from .config import LayoutConfig
from .metrics import (
    FontSet,
    FlowLine,
    Fragment,
    discover_script_fonts,
    flow_runs,
    register_fonts,
    resolve_fonts,
    shape_rtl,
)
from .models import (
    BlockPlacement,
    EndMarkerBlock,
    HeaderBlock,
    HeaderField,
    InstructionsBlock,
    LayoutBlock,
    LayoutResult,
    PagePlan,
    QuestionBlock,
    SectionTitleBlock,
    SubItem,
)
from .paginator import paginate

__all__ = [
    "LayoutConfig",
    "compose_document",
    "paginate",
    "TEMPLATE_SPECS",
    "TemplateSpec",
    "FontSet",
    "FlowLine",
    "Fragment",
    "flow_runs",
    "register_fonts",
    "discover_script_fonts",
    "resolve_fonts",
    "shape_rtl",
    "LayoutBlock",
    "HeaderBlock",
    "HeaderField",
    "SectionTitleBlock",
    "InstructionsBlock",
    "QuestionBlock",
    "SubItem",
    "EndMarkerBlock",
    "BlockPlacement",
    "PagePlan",
    "LayoutResult",
]
