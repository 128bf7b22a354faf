"""
Timeline data models.

Care events come in from the persistence layer; everything else here is a
derived view computed fresh on every call and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, tzinfo
from enum import Enum, StrEnum

# ── Raw events ───────────────────────────────────────────────────────


class EventKind(StrEnum):
    """Event kinds the engine understands. Anything else is skipped."""

    SLEEP_START = "sleep_start"
    WAKE = "wake"
    WALK_START = "walk_start"
    WALK_END = "walk_end"
    WALK = "walk"  # a walk logged after the fact, self-describing span
    ELIMINATION = "elimination"
    MEAL = "meal"
    DRINK = "drink"
    TRAINING = "training"  # training and social play only feed patterns
    SOCIAL = "social"

    @classmethod
    def parse(cls, value: object) -> EventKind | None:
        """Return the matching kind, or None for unrecognized values."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value))
        except ValueError:
            return None


SLEEP_KINDS = frozenset({EventKind.SLEEP_START, EventKind.WAKE})
WALK_KINDS = frozenset({EventKind.WALK_START, EventKind.WALK_END, EventKind.WALK})
MEAL_KINDS = frozenset({EventKind.MEAL, EventKind.DRINK})


@dataclass(frozen=True)
class CareEvent:
    """A single observed care occurrence.

    Attributes:
        id: Unique identifier.
        timestamp: When it happened.
        kind: An ``EventKind`` value, or any other string (ignored by the engine).
        duration_minutes: Known length for self-describing spans (logged walks).
        is_outdoor: Location flag, meaningful only for eliminations.
    """

    id: str
    timestamp: datetime
    kind: EventKind | str
    duration_minutes: int | None = None
    is_outdoor: bool | None = None

    @property
    def known_kind(self) -> EventKind | None:
        return EventKind.parse(self.kind)


# ── Time ranges and spans ────────────────────────────────────────────


@dataclass(frozen=True)
class TimeRange:
    """A half-open-agnostic [start, end] window. Empty when end <= start."""

    start: datetime
    end: datetime

    @property
    def duration(self) -> timedelta:
        return max(self.end - self.start, timedelta(0))

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end

    def clamp(self, moment: datetime) -> datetime:
        return min(max(moment, self.start), self.end)

    @classmethod
    def for_day(cls, day: date, tz: tzinfo | None = None) -> TimeRange:
        """The full calendar day, midnight to midnight."""
        start = datetime.combine(day, time.min, tzinfo=tz)
        return cls(start=start, end=start + timedelta(days=1))

    @classmethod
    def last_days(cls, now: datetime, days: int) -> TimeRange:
        """The trailing ``days`` ending at ``now``."""
        return cls(start=now - timedelta(days=max(days, 0)), end=now)


def is_aware(moment: datetime) -> bool:
    return moment.tzinfo is not None and moment.utcoffset() is not None


def comparable(a: datetime, b: datetime) -> bool:
    """Naive and aware datetimes cannot be ordered against each other."""
    return is_aware(a) == is_aware(b)


@dataclass(frozen=True)
class Bounded:
    """A span whose end is known."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class Ongoing:
    """A span still in progress.

    ``as_of`` is the instant the span was observed through (``now``, clamped
    to the window); it is not an end time.
    """

    start: datetime
    as_of: datetime


Span = Bounded | Ongoing


# ── Derived blocks ───────────────────────────────────────────────────


class BlockType(Enum):
    """Categories of blocks on the visual timeline."""

    SLEEP = "sleep"
    WALK = "walk"
    POTTY = "potty"
    MEAL = "meal"

    @property
    def has_duration(self) -> bool:
        """Sleep and walk render as bars; potty and meal as ticks/dots."""
        return self in (BlockType.SLEEP, BlockType.WALK)


@dataclass(frozen=True)
class ActivityBlock:
    """A contiguous interval derived from one or more events.

    ``outdoor`` is set only for potty blocks.
    """

    id: str
    type: BlockType
    span: Span
    contained_event_ids: tuple[str, ...] = ()
    outdoor: bool | None = None

    @property
    def start_time(self) -> datetime:
        return self.span.start

    @property
    def end_time(self) -> datetime:
        """Visible end: the real end, or ``as_of`` for an ongoing block."""
        if isinstance(self.span, Ongoing):
            return self.span.as_of
        return self.span.end

    @property
    def is_ongoing(self) -> bool:
        return isinstance(self.span, Ongoing)

    @property
    def has_duration(self) -> bool:
        return self.type.has_duration

    @property
    def duration_minutes(self) -> int:
        return max(int((self.end_time - self.start_time).total_seconds() // 60), 0)


@dataclass(frozen=True)
class ActivityBlockSummary:
    """Aggregate totals over a window."""

    total_sleep_minutes: int = 0
    walk_count: int = 0
    total_walk_minutes: int = 0
    outdoor_potty_count: int = 0
    indoor_potty_count: int = 0
    meal_count: int = 0

    @property
    def total_potty_count(self) -> int:
        return self.outdoor_potty_count + self.indoor_potty_count

    @property
    def potty_success_rate(self) -> float | None:
        """Outdoor share of eliminations, or None when there were none."""
        if self.total_potty_count == 0:
            return None
        return self.outdoor_potty_count / self.total_potty_count


# ── Statistics ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class StreakInfo:
    """Consecutive clean-day streaks.

    A clean day has at least one outdoor elimination and no indoor ones.
    """

    current_streak: int = 0
    best_streak: int = 0
    last_outdoor_time: datetime | None = None
    last_indoor_time: datetime | None = None

    @property
    def has_active_streak(self) -> bool:
        return self.current_streak > 0

    @property
    def is_on_fire(self) -> bool:
        return self.current_streak >= 5

    @classmethod
    def empty(cls) -> StreakInfo:
        return cls()


@dataclass(frozen=True)
class PatternTrigger:
    """Outdoor/indoor tallies for eliminations following one trigger."""

    id: str
    name: str
    outdoor_count: int = 0
    indoor_count: int = 0

    @property
    def total_count(self) -> int:
        return self.outdoor_count + self.indoor_count

    @property
    def has_data(self) -> bool:
        return self.total_count > 0

    @property
    def success_rate(self) -> float | None:
        """outdoor / total, or None when nothing matched."""
        if not self.has_data:
            return None
        return self.outdoor_count / self.total_count

    @property
    def success_percent(self) -> int:
        """Whole-number percentage for display (0 when there is no data)."""
        if not self.has_data:
            return 0
        return (self.outdoor_count * 100) // self.total_count


def rank_triggers(triggers: list[PatternTrigger] | tuple[PatternTrigger, ...]) -> list[PatternTrigger]:
    """Order triggers by success rate (highest first), ties by id."""
    with_data = [t for t in triggers if t.has_data]
    return sorted(with_data, key=lambda t: (-(t.success_rate or 0.0), t.id))


@dataclass(frozen=True)
class PatternAnalysis:
    """Trigger buckets with data, plus the lookback used to build them."""

    triggers: tuple[PatternTrigger, ...] = field(default_factory=tuple)
    period_days: int = 0

    @property
    def has_triggers(self) -> bool:
        return any(t.has_data for t in self.triggers)

    def ranked(self) -> list[PatternTrigger]:
        return rank_triggers(self.triggers)

    @property
    def strongest(self) -> PatternTrigger | None:
        """The trigger with the best success rate, if any."""
        ranked = self.ranked()
        return ranked[0] if ranked else None

    @classmethod
    def empty(cls, period_days: int = 0) -> PatternAnalysis:
        return cls(triggers=(), period_days=period_days)
