"""
Clean-day streaks for outdoor elimination.

A day is clean when it has at least one outdoor elimination and no indoor
ones. A day with an indoor accident breaks the run, and so does a day
with no eliminations logged at all: missing data is not counted as success.
Eliminations with no location recorded neither help nor hurt.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from loguru import logger

from .models import CareEvent, EventKind, StreakInfo, is_aware

_ONE_DAY = timedelta(days=1)


@dataclass
class _DayTally:
    outdoor: int = 0
    indoor: int = 0
    unknown: int = 0

    @property
    def is_clean(self) -> bool:
        return self.outdoor > 0 and self.indoor == 0


def _day_of(moment: datetime, tz: tzinfo | None) -> date:
    if tz is not None and moment.tzinfo is not None:
        return moment.astimezone(tz).date()
    return moment.date()


def _tally_by_day(eliminations: list[CareEvent], tz: tzinfo | None) -> dict[date, _DayTally]:
    days: dict[date, _DayTally] = {}
    for event in eliminations:
        tally = days.setdefault(_day_of(event.timestamp, tz), _DayTally())
        if event.is_outdoor is True:
            tally.outdoor += 1
        elif event.is_outdoor is False:
            tally.indoor += 1
        else:
            tally.unknown += 1
    return days


def _best_run(days: dict[date, _DayTally]) -> int:
    best = run = 0
    previous: date | None = None
    for day in sorted(days):
        if not days[day].is_clean:
            run = 0
        elif previous is not None and day - previous == _ONE_DAY and run > 0:
            run += 1
        else:
            run = 1
        best = max(best, run)
        previous = day
    return best


def _current_run(days: dict[date, _DayTally], today: date) -> int:
    if today in days:
        cursor = today
    else:
        earlier = [d for d in days if d < today]
        if not earlier:
            return 0
        cursor = max(earlier)

    run = 0
    while cursor in days and days[cursor].is_clean:
        run += 1
        cursor -= _ONE_DAY
    return run


def compute_streak(events: Iterable[CareEvent], today: date, tz: tzinfo | None = None) -> StreakInfo:
    """Current and best clean-day streaks.

    Args:
        events: Full event history (any order).
        today: Day to count back from. If it has no eliminations yet, the
            most recent earlier day with data is used instead.
        tz: Timezone that defines calendar days. Defaults to each
            timestamp's own.

    Returns:
        StreakInfo; all-empty when there are no eliminations.
    """
    eliminations = [
        e for e in events if e.known_kind is EventKind.ELIMINATION and isinstance(e.timestamp, datetime)
    ]
    aware = [e for e in eliminations if is_aware(e.timestamp)]
    if aware and len(aware) < len(eliminations):
        logger.debug(f"Ignoring {len(eliminations) - len(aware)} elimination(s) with naive timestamps")
        eliminations = aware
    if not eliminations:
        return StreakInfo.empty()

    days = _tally_by_day(eliminations, tz)
    current = _current_run(days, today)
    best = max(_best_run(days), current)

    outdoor_times = [e.timestamp for e in eliminations if e.is_outdoor is True]
    indoor_times = [e.timestamp for e in eliminations if e.is_outdoor is False]

    logger.debug(f"Streak over {len(days)} day(s) of data: current={current} best={best}")
    return StreakInfo(
        current_streak=current,
        best_streak=best,
        last_outdoor_time=max(outdoor_times) if outdoor_times else None,
        last_indoor_time=max(indoor_times) if indoor_times else None,
    )


def streak_message(streak: int) -> str:
    """Encouragement text for a streak length."""
    if streak <= 0:
        return "Start again!"
    if streak == 1:
        return "Good start!"
    if streak < 3:
        return "Nice work!"
    if streak < 5:
        return "Super! Keep going!"
    if streak < 10:
        return "Fantastic!"
    return "Incredible!"


def streak_emoji(streak: int) -> str:
    """Badge shown next to the streak count; more fire the longer it runs."""
    if streak <= 0:
        return "\N{BROKEN HEART}"
    if streak < 3:
        return "\N{THUMBS UP SIGN}"
    if streak < 5:
        return "\N{FIRE}"
    if streak < 10:
        return "\N{FIRE}" * 2
    return "\N{FIRE}" * 3
