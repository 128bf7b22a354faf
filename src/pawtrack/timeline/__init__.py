"""
Activity timeline and pattern analysis engine.

Pure functions over an immutable snapshot of the care-event log: build
blocks for a window, summarize them, compute streaks and trigger patterns,
and project instants onto a rendering axis.
"""

from .blocks import awake_gaps, build_blocks, build_walk_blocks, timeline_bounds
from .models import (
    ActivityBlock,
    ActivityBlockSummary,
    BlockType,
    Bounded,
    CareEvent,
    EventKind,
    Ongoing,
    PatternAnalysis,
    PatternTrigger,
    StreakInfo,
    TimeRange,
    rank_triggers,
)
from .patterns import analyze_patterns
from .pipeline import EngineSettings, TimelineSnapshot, compute_snapshot
from .projection import place_blocks, width_fraction, window_contains_now, x_fraction, x_position
from .streaks import compute_streak, streak_emoji, streak_message
from .summary import summarize

__all__ = [
    "ActivityBlock",
    "ActivityBlockSummary",
    "BlockType",
    "Bounded",
    "CareEvent",
    "EngineSettings",
    "EventKind",
    "Ongoing",
    "PatternAnalysis",
    "PatternTrigger",
    "StreakInfo",
    "TimeRange",
    "TimelineSnapshot",
    "analyze_patterns",
    "awake_gaps",
    "build_blocks",
    "build_walk_blocks",
    "compute_snapshot",
    "compute_streak",
    "place_blocks",
    "rank_triggers",
    "streak_emoji",
    "streak_message",
    "summarize",
    "timeline_bounds",
    "width_fraction",
    "window_contains_now",
    "x_fraction",
    "x_position",
]
