"""Mapping instants onto a horizontal timeline axis.

Fractions are in [0, 1] across the window; multiply by a pixel width for
screen coordinates. Degenerate (empty) windows project everything to 0.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime

from .models import ActivityBlock, TimeRange

DEFAULT_MIN_WIDTH_FRACTION = 0.005


def x_fraction(moment: datetime, window: TimeRange) -> float:
    """Horizontal position of ``moment``; 0 before the window, 1 after it."""
    if window.is_empty:
        return 0.0
    if moment <= window.start:
        return 0.0
    if moment >= window.end:
        return 1.0
    return (moment - window.start) / (window.end - window.start)


def width_fraction(
    start: datetime,
    end: datetime,
    window: TimeRange,
    min_fraction: float = DEFAULT_MIN_WIDTH_FRACTION,
) -> float:
    """Visible width of [start, end], never narrower than ``min_fraction``."""
    if window.is_empty:
        return 0.0
    span = max(x_fraction(end, window) - x_fraction(start, window), 0.0)
    return min(max(span, min_fraction), 1.0)


def window_contains_now(window: TimeRange, now: datetime) -> bool:
    """Whether a "now" marker belongs on this window."""
    return not window.is_empty and window.contains(now)


def x_position(moment: datetime, window: TimeRange, total_width: float) -> float:
    return x_fraction(moment, window) * total_width


@dataclass(frozen=True)
class BlockPlacement:
    """Where a block lands on the axis. Point blocks have zero width; bars end at or before 1."""

    block: ActivityBlock
    x: float
    width: float

    @property
    def is_point(self) -> bool:
        return not self.block.has_duration


@dataclass(frozen=True)
class TimelineLayout:
    placements: tuple[BlockPlacement, ...]
    now_x: float | None = None


def place_blocks(
    blocks: Iterable[ActivityBlock],
    window: TimeRange,
    now: datetime,
    min_fraction: float = DEFAULT_MIN_WIDTH_FRACTION,
) -> TimelineLayout:
    """Project every block (and the now marker, if visible) onto the axis."""
    placements = []
    for block in blocks:
        x = x_fraction(block.start_time, window)
        if block.has_duration:
            width = width_fraction(block.start_time, block.end_time, window, min_fraction)
            # A floored bar near the right edge slides left to stay on the axis.
            x = min(x, 1.0 - width)
        else:
            width = 0.0
        placements.append(BlockPlacement(block=block, x=x, width=width))

    now_x = x_fraction(now, window) if window_contains_now(window, now) else None
    return TimelineLayout(placements=tuple(placements), now_x=now_x)
