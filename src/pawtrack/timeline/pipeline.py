"""One-shot computation of everything a timeline screen shows."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, datetime, tzinfo
from typing import TYPE_CHECKING

from .blocks import DEFAULT_DAY_END_HOUR, DEFAULT_DAY_START_HOUR, DEFAULT_WALK_MINUTES, awake_gaps, build_blocks
from .models import ActivityBlock, ActivityBlockSummary, CareEvent, PatternAnalysis, StreakInfo, TimeRange
from .patterns import DEFAULT_PERIOD_DAYS, DEFAULT_PROXIMITY_MINUTES, analyze_patterns
from .projection import DEFAULT_MIN_WIDTH_FRACTION
from .streaks import compute_streak
from .summary import summarize

if TYPE_CHECKING:
    from pawtrack.core.config_schema import PawtrackConfig


@dataclass(frozen=True)
class EngineSettings:
    """Tunables for the engine, usually taken from ``PawtrackConfig``."""

    period_days: int = DEFAULT_PERIOD_DAYS
    proximity_minutes: int = DEFAULT_PROXIMITY_MINUTES
    default_walk_minutes: int = DEFAULT_WALK_MINUTES
    day_start_hour: int = DEFAULT_DAY_START_HOUR
    day_end_hour: int = DEFAULT_DAY_END_HOUR
    min_width_fraction: float = DEFAULT_MIN_WIDTH_FRACTION
    tz: tzinfo | None = UTC

    @classmethod
    def from_config(cls, config: PawtrackConfig) -> EngineSettings:
        return cls(
            period_days=config.patterns.period_days,
            proximity_minutes=config.patterns.proximity_minutes,
            default_walk_minutes=config.timeline.default_walk_minutes,
            day_start_hour=config.timeline.day_start_hour,
            day_end_hour=config.timeline.day_end_hour,
            min_width_fraction=config.timeline.min_width_fraction,
            tz=config.timeline.tzinfo,
        )


@dataclass(frozen=True)
class TimelineSnapshot:
    """Result of one recomputation. ``generation`` orders competing results."""

    window: TimeRange
    now: datetime
    blocks: tuple[ActivityBlock, ...]
    awake: tuple[TimeRange, ...]
    summary: ActivityBlockSummary
    streak: StreakInfo
    patterns: PatternAnalysis
    generation: int = 0


def compute_snapshot(
    events: Iterable[CareEvent],
    window: TimeRange,
    now: datetime,
    settings: EngineSettings | None = None,
    generation: int = 0,
) -> TimelineSnapshot:
    """Run the whole engine over one immutable view of the event log."""
    settings = settings or EngineSettings()
    snapshot = tuple(events)

    blocks = build_blocks(snapshot, window, now, default_walk_minutes=settings.default_walk_minutes)
    today = now.astimezone(settings.tz).date() if settings.tz and now.tzinfo else now.date()

    return TimelineSnapshot(
        window=window,
        now=now,
        blocks=tuple(blocks),
        awake=tuple(awake_gaps(blocks, window)),
        summary=summarize(blocks),
        streak=compute_streak(snapshot, today, tz=settings.tz),
        patterns=analyze_patterns(
            snapshot,
            settings.period_days,
            settings.proximity_minutes,
            now=now,
            default_walk_minutes=settings.default_walk_minutes,
        ),
        generation=generation,
    )
