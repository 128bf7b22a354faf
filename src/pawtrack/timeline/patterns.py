"""
Trigger pattern analysis.

Each elimination is attributed to at most one trigger: "during walk" when
it falls inside a walk block, otherwise the nearest wake, meal, drink or
play session (training, socialising) before it within the proximity
window. Unattributed eliminations are left out entirely. Buckets that end
up empty are dropped.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from loguru import logger

from .blocks import DEFAULT_WALK_MINUTES, build_walk_blocks
from .models import (
    ActivityBlock,
    CareEvent,
    EventKind,
    PatternAnalysis,
    PatternTrigger,
    TimeRange,
    comparable,
    is_aware,
    rank_triggers,
)

DEFAULT_PERIOD_DAYS = 7
DEFAULT_PROXIMITY_MINUTES = 30


@dataclass(frozen=True)
class TriggerDefinition:
    id: str
    name: str


AFTER_SLEEP = TriggerDefinition("sleep", "After sleep")
AFTER_EATING = TriggerDefinition("meal", "After eating")
AFTER_DRINKING = TriggerDefinition("water", "After drinking")
AFTER_PLAYING = TriggerDefinition("play", "After playing")
DURING_WALK = TriggerDefinition("walk", "During walk")

# Presentation order before ranking.
TRIGGERS = (AFTER_SLEEP, AFTER_EATING, DURING_WALK, AFTER_DRINKING, AFTER_PLAYING)

_PRECEDING_TRIGGERS = {
    EventKind.WAKE: AFTER_SLEEP,
    EventKind.MEAL: AFTER_EATING,
    EventKind.DRINK: AFTER_DRINKING,
    EventKind.TRAINING: AFTER_PLAYING,
    EventKind.SOCIAL: AFTER_PLAYING,
}

__all__ = [
    "AFTER_DRINKING",
    "AFTER_EATING",
    "AFTER_PLAYING",
    "AFTER_SLEEP",
    "DURING_WALK",
    "TRIGGERS",
    "TriggerDefinition",
    "analyze_patterns",
    "attribute_trigger",
    "rank_triggers",
]


def _during_walk(moment: datetime, walks: list[ActivityBlock]) -> bool:
    return any(w.start_time <= moment <= w.end_time for w in walks)


def attribute_trigger(
    elimination: CareEvent,
    preceding: list[CareEvent],
    walks: list[ActivityBlock],
    proximity: timedelta,
) -> TriggerDefinition | None:
    """Pick the trigger an elimination is credited to.

    Args:
        elimination: The elimination event.
        preceding: Wake, meal, drink, training and social events sorted by timestamp.
        walks: Walk blocks to test containment against.
        proximity: How far back a preceding trigger may be.
    """
    moment = elimination.timestamp
    if _during_walk(moment, walks):
        return DURING_WALK

    earliest = moment - proximity
    nearest: datetime | None = None
    found: list[TriggerDefinition] = []
    for candidate in reversed(preceding):
        if candidate.timestamp >= moment:
            continue
        if candidate.timestamp < earliest:
            break
        if nearest is not None and candidate.timestamp != nearest:
            break
        nearest = candidate.timestamp
        found.append(_PRECEDING_TRIGGERS[candidate.known_kind])

    if not found:
        return None
    return min(found, key=lambda t: t.id)


def analyze_patterns(
    events: Iterable[CareEvent],
    period_days: int = DEFAULT_PERIOD_DAYS,
    proximity_minutes: int = DEFAULT_PROXIMITY_MINUTES,
    *,
    now: datetime | None = None,
    default_walk_minutes: int = DEFAULT_WALK_MINUTES,
) -> PatternAnalysis:
    """Per-trigger outdoor success over the last ``period_days``.

    Args:
        events: Event log (any order). Never modified.
        period_days: Lookback, ending at ``now``.
        proximity_minutes: Max gap between a trigger and the elimination.
        now: End of the lookback. Defaults to the latest event timestamp;
            events that are naive when ``now`` is aware (or the reverse) are ignored.
        default_walk_minutes: Length of a logged walk with no duration.

    Returns:
        PatternAnalysis holding only triggers with data, in the fixed
        ``TRIGGERS`` order. Use ``PatternAnalysis.ranked()`` for display.
    """
    usable = [e for e in events if e.known_kind is not None and isinstance(e.timestamp, datetime)]
    if now is None and usable:
        # Timezone-aware timestamps take precedence over naive ones.
        aware = [e for e in usable if is_aware(e.timestamp)]
        now = max(e.timestamp for e in (aware or usable))
    if now is not None:
        usable = [e for e in usable if comparable(e.timestamp, now)]
    if period_days <= 0 or not usable:
        return PatternAnalysis.empty(period_days=max(period_days, 0))

    window = TimeRange.last_days(now, period_days)
    in_period = sorted((e for e in usable if window.contains(e.timestamp)), key=lambda e: e.timestamp)

    preceding = [e for e in in_period if e.known_kind in _PRECEDING_TRIGGERS]
    walks = build_walk_blocks(in_period, now, default_walk_minutes=default_walk_minutes)
    proximity = timedelta(minutes=max(proximity_minutes, 0))

    counts: dict[str, list[int]] = {t.id: [0, 0] for t in TRIGGERS}
    unattributed = 0
    for event in in_period:
        if event.known_kind is not EventKind.ELIMINATION or event.is_outdoor is None:
            continue
        trigger = attribute_trigger(event, preceding, walks, proximity)
        if trigger is None:
            unattributed += 1
            continue
        counts[trigger.id][0 if event.is_outdoor else 1] += 1

    triggers = tuple(
        PatternTrigger(id=t.id, name=t.name, outdoor_count=counts[t.id][0], indoor_count=counts[t.id][1])
        for t in TRIGGERS
        if sum(counts[t.id]) > 0
    )
    logger.debug(
        f"Pattern analysis over {period_days} day(s): {len(triggers)} trigger(s) with data, "
        f"{unattributed} elimination(s) without a trigger"
    )
    return PatternAnalysis(triggers=triggers, period_days=period_days)
