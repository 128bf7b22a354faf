"""Window totals from activity blocks."""

from __future__ import annotations

from collections.abc import Iterable

from .models import ActivityBlock, ActivityBlockSummary, BlockType


def summarize(blocks: Iterable[ActivityBlock]) -> ActivityBlockSummary:
    """Reduce blocks to sleep/walk/potty/meal totals.

    Ongoing blocks count up to their ``as_of`` instant. Empty input gives
    an all-zero summary.
    """
    sleep_minutes = 0
    walk_count = 0
    walk_minutes = 0
    outdoor = 0
    indoor = 0
    meals = 0

    for block in blocks:
        if block.type is BlockType.SLEEP:
            sleep_minutes += block.duration_minutes
        elif block.type is BlockType.WALK:
            walk_count += 1
            walk_minutes += block.duration_minutes
        elif block.type is BlockType.POTTY:
            if block.outdoor:
                outdoor += 1
            else:
                indoor += 1
        elif block.type is BlockType.MEAL:
            meals += 1

    return ActivityBlockSummary(
        total_sleep_minutes=sleep_minutes,
        walk_count=walk_count,
        total_walk_minutes=walk_minutes,
        outdoor_potty_count=outdoor,
        indoor_potty_count=indoor,
        meal_count=meals,
    )
