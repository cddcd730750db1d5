"""
Module: layout.paginator

Purpose:
    Arrange layout blocks onto pages using simple space-based placement.
    Only rule: a block flagged keep_with_next stays with the block after it
    (section title -> instructions -> first question).

Key Functions:
    - paginate(): Main pagination function

Algorithm:
    1. Collect the next atomic group (a keep_with_next chain plus the
       block that ends it)
    2. Place the group on the current page if it fits
    3. Otherwise start a new page and place it there
    4. A group taller than an empty page is placed anyway, with a warning

Dependencies:
    - layout.models: LayoutBlock, PagePlan
    - layout.config: LayoutConfig

Used By:
    - controller: Preview and PDF export
"""

from __future__ import annotations

import logging
from typing import List, Optional

from paper_composer.core.models import ScriptProfile

from .config import LayoutConfig
from .metrics import FontSet
from .models import (
    BlockPlacement,
    HeaderBlock,
    LayoutBlock,
    LayoutResult,
    PagePlan,
    QuestionBlock,
    SectionTitleBlock,
)

logger = logging.getLogger(__name__)


def paginate(
    blocks: List[LayoutBlock],
    config: LayoutConfig,
    profile: Optional[ScriptProfile] = None,
    fonts: Optional[FontSet] = None,
) -> LayoutResult:
    """
    Arrange blocks onto pages using atomic grouping.

    Rules:
    1. Identify "Atomic Groups" of blocks that must stay together.
       - A group is a chain of keep_with_next blocks plus the next block.
       - E.g. [SectionTitle, Instructions, Question]
    2. Place entire group on current page if it fits.
    3. If group doesn't fit, move entire group to next page.

    Args:
        blocks: Blocks from compose_document()
        config: Layout configuration
        profile: Script profile (carried on the result for renderers)
        fonts: Fonts the blocks were measured with

    Returns:
        LayoutResult with page plans
    """
    if not blocks:
        return LayoutResult(pages=(), warnings=[], profile=profile, fonts=fonts)

    pages: List[PagePlan] = []
    warnings: List[str] = []
    question_page_map: dict[str, list[int]] = {}

    current_placements: List[BlockPlacement] = []
    current_height = config.margin_top
    page_index = 0
    page_bottom = config.page_height - config.margin_bottom
    previous: Optional[LayoutBlock] = None

    i = 0
    while i < len(blocks):
        group = _get_atomic_group(i, blocks)
        is_start_of_page = not current_placements

        initial_spacing = 0.0 if is_start_of_page else _spacing_before(previous, group[0], config)
        group_placements, total_group_height = _place_group(
            group, current_height + initial_spacing, config,
        )
        total_group_height += initial_spacing
        space_left = page_bottom - current_height

        if total_group_height > space_left and not is_start_of_page:
            # Group doesn't fit - start new page
            pages.append(PagePlan(
                index=page_index,
                placements=tuple(current_placements),
                height_used=current_height - config.margin_top,
            ))
            page_index += 1
            current_placements = []
            current_height = config.margin_top
            space_left = page_bottom - current_height

            # Recalculate group layout for new page (no initial spacing)
            group_placements, total_group_height = _place_group(group, current_height, config)

        if total_group_height > space_left:
            message = (
                f"Block group overflows page {page_index}: "
                f"{total_group_height:.1f}pt needed, {space_left:.1f}pt available"
            )
            logger.warning(message)
            warnings.append(message)

        current_placements.extend(group_placements)
        current_height += total_group_height

        for block in group:
            if isinstance(block, QuestionBlock):
                _track_question(question_page_map, block.question_id, page_index)

        previous = group[-1]
        i += len(group)

    if current_placements:
        pages.append(PagePlan(
            index=page_index,
            placements=tuple(current_placements),
            height_used=current_height - config.margin_top,
        ))

    logger.info(f"Paginated {len(blocks)} blocks onto {len(pages)} pages")

    return LayoutResult(
        pages=tuple(pages),
        warnings=warnings,
        question_page_map=question_page_map,
        profile=profile,
        fonts=fonts,
    )


def _place_group(
    group: List[LayoutBlock],
    top: float,
    config: LayoutConfig,
) -> tuple[List[BlockPlacement], float]:
    """Position a group starting at top; returns placements and height."""
    placements = []
    y = top
    for j, block in enumerate(group):
        if j > 0:
            y += _spacing_before(group[j - 1], block, config)
        placements.append(BlockPlacement(block=block, top=y))
        y += block.height
    return placements, y - top


def _spacing_before(
    previous: Optional[LayoutBlock],
    block: LayoutBlock,
    config: LayoutConfig,
) -> float:
    """Vertical gap between two consecutive blocks."""
    if previous is None:
        return 0.0
    if isinstance(previous, HeaderBlock):
        return config.header_spacing
    if isinstance(block, SectionTitleBlock):
        return config.section_spacing
    return config.block_spacing


def _get_atomic_group(start_idx: int, blocks: List[LayoutBlock]) -> List[LayoutBlock]:
    """
    Get the next atomic group of blocks starting at start_idx.

    A group captures a chain of keep_with_next blocks and the block that
    ends the chain. E.g. [SectionTitle, Instructions, Question].

    Args:
        start_idx: Current index in blocks list
        blocks: Full list of blocks

    Returns:
        List of blocks that must stay together
    """
    group = [blocks[start_idx]]
    current_idx = start_idx

    while current_idx + 1 < len(blocks) and blocks[current_idx].keep_with_next:
        current_idx += 1
        group.append(blocks[current_idx])

    return group


def _track_question(
    question_page_map: dict[str, list[int]],
    question_id: str,
    page_index: int,
) -> None:
    """Track which pages a question appears on."""
    if question_id not in question_page_map:
        question_page_map[question_id] = []
    if page_index not in question_page_map[question_id]:
        question_page_map[question_id].append(page_index)
