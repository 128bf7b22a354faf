"""
Block building: raw care events -> non-overlapping activity blocks.

Sleep and walk spans are paired over the whole event log (so a nap that
started yesterday evening still closes correctly) and only then clipped to
the requested window. Potty ticks and meal dots are point blocks taken
straight from the events inside the window.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import replace
from datetime import date, datetime, time, timedelta

from loguru import logger

from .models import (
    MEAL_KINDS,
    SLEEP_KINDS,
    WALK_KINDS,
    ActivityBlock,
    BlockType,
    Bounded,
    CareEvent,
    EventKind,
    Ongoing,
    Span,
    TimeRange,
    comparable,
)

DEFAULT_WALK_MINUTES = 30
DEFAULT_DAY_START_HOUR = 6
DEFAULT_DAY_END_HOUR = 22

_TYPE_ORDER = {BlockType.SLEEP: 0, BlockType.WALK: 1, BlockType.POTTY: 2, BlockType.MEAL: 3}


# ── helpers ──────────────────────────────────────────────────────────


def _chronological(events: Iterable[CareEvent], reference: datetime) -> list[CareEvent]:
    """Recognized, well-formed events sorted by time (log order kept on ties).

    Events whose timestamps can't be ordered against ``reference`` (naive
    vs timezone-aware) are skipped.
    """
    usable = []
    for event in events:
        if event.known_kind is None:
            logger.debug(f"Skipping event {event.id!r} with unrecognized kind {event.kind!r}")
            continue
        if not isinstance(event.timestamp, datetime):
            logger.debug(f"Skipping event {event.id!r} without a usable timestamp")
            continue
        if not comparable(event.timestamp, reference):
            logger.debug(f"Skipping event {event.id!r}: timestamp timezone doesn't match {reference.isoformat()}")
            continue
        usable.append(event)
    return sorted(usable, key=lambda e: e.timestamp)


def _point(block_type: BlockType, event: CareEvent, outdoor: bool | None = None) -> ActivityBlock:
    return ActivityBlock(
        id=event.id,
        type=block_type,
        span=Bounded(event.timestamp, event.timestamp),
        contained_event_ids=(event.id,),
        outdoor=outdoor,
    )


def _spanning(block_type: BlockType, span: Span, event_ids: Sequence[str]) -> ActivityBlock:
    return ActivityBlock(id=event_ids[0], type=block_type, span=span, contained_event_ids=tuple(event_ids))


def _combine(first: ActivityBlock, second: ActivityBlock) -> ActivityBlock:
    """Merge two overlapping blocks of the same type into one."""
    end = max(first.end_time, second.end_time)
    span: Span
    if first.is_ongoing or second.is_ongoing:
        span = Ongoing(first.start_time, end)
    else:
        span = Bounded(first.start_time, end)
    return replace(first, span=span, contained_event_ids=first.contained_event_ids + second.contained_event_ids)


def _overlaps(block: ActivityBlock, previous: ActivityBlock) -> bool:
    # Back-to-back spans stay apart; a point on a span's edge is absorbed.
    if block.start_time < previous.end_time:
        return True
    is_point = block.end_time == block.start_time
    return is_point and block.start_time == previous.end_time


def _merge_overlapping(blocks: list[ActivityBlock]) -> list[ActivityBlock]:
    merged: list[ActivityBlock] = []
    # Longest first among equal starts, so a point lands inside its span.
    for block in sorted(blocks, key=lambda b: (b.start_time, -(b.end_time - b.start_time))):
        if merged and _overlaps(block, merged[-1]):
            logger.debug(f"Merging overlapping {block.type.value} block {block.id!r} into {merged[-1].id!r}")
            merged[-1] = _combine(merged[-1], block)
        else:
            merged.append(block)
    return merged


def _clip(block: ActivityBlock, window: TimeRange) -> ActivityBlock | None:
    """Clamp a block to the window, or None if it lies entirely outside."""
    if block.start_time > window.end or block.end_time < window.start:
        return None
    start = window.clamp(block.start_time)
    end = window.clamp(block.end_time)
    if start == block.start_time and end == block.end_time:
        return block
    span: Span = Ongoing(start, end) if block.is_ongoing else Bounded(start, end)
    return replace(block, span=span)


# ── span pairing ─────────────────────────────────────────────────────


def _sleep_blocks(events: list[CareEvent], now: datetime) -> list[ActivityBlock]:
    """Pair each sleep start with the next wake.

    A second start before the wake joins the open period (first start
    wins). A wake with nothing open becomes a zero-length block. A start
    still open at the end of the log is ongoing.
    """
    blocks: list[ActivityBlock] = []
    open_ids: list[str] = []
    open_start: datetime | None = None

    for event in events:
        if event.known_kind is EventKind.SLEEP_START:
            if open_start is None:
                open_start, open_ids = event.timestamp, [event.id]
            else:
                logger.debug(f"Sleep start {event.id!r} while {open_ids[0]!r} is open; merging into earlier start")
                open_ids.append(event.id)
        elif open_start is not None:
            blocks.append(_spanning(BlockType.SLEEP, Bounded(open_start, event.timestamp), [*open_ids, event.id]))
            open_start, open_ids = None, []
        else:
            logger.debug(f"Wake {event.id!r} has no open sleep period")
            blocks.append(_point(BlockType.SLEEP, event))

    if open_start is not None:
        blocks.append(_spanning(BlockType.SLEEP, Ongoing(open_start, max(now, open_start)), open_ids))

    return _merge_overlapping(blocks)


def _walk_blocks(events: list[CareEvent], now: datetime, default_walk_minutes: int) -> list[ActivityBlock]:
    """Turn walk events into spans.

    Logged walks and starts with a known duration describe their own span.
    A start without duration pairs with the next end; if another walk
    begins first, the start is stale and collapses to a point. An open
    start that is the latest walk event is ongoing.
    """
    blocks: list[ActivityBlock] = []
    open_start: CareEvent | None = None

    for event in events:
        kind = event.known_kind
        if kind is EventKind.WALK_END:
            if open_start is not None:
                span = Bounded(open_start.timestamp, event.timestamp)
                blocks.append(_spanning(BlockType.WALK, span, [open_start.id, event.id]))
                open_start = None
            else:
                logger.debug(f"Walk end {event.id!r} has no open walk")
                blocks.append(_point(BlockType.WALK, event))
            continue

        if open_start is not None:
            logger.debug(f"Walk start {open_start.id!r} was never ended; recording as a point")
            blocks.append(_point(BlockType.WALK, open_start))
            open_start = None

        if event.duration_minutes is not None or kind is EventKind.WALK:
            minutes = event.duration_minutes if event.duration_minutes is not None else default_walk_minutes
            end = event.timestamp + timedelta(minutes=max(minutes, 0))
            blocks.append(_spanning(BlockType.WALK, Bounded(event.timestamp, end), [event.id]))
        else:
            open_start = event

    if open_start is not None:
        span = Ongoing(open_start.timestamp, max(now, open_start.timestamp))
        blocks.append(_spanning(BlockType.WALK, span, [open_start.id]))

    return _merge_overlapping(blocks)


# ── public API ───────────────────────────────────────────────────────


def build_walk_blocks(
    events: Iterable[CareEvent],
    now: datetime,
    *,
    default_walk_minutes: int = DEFAULT_WALK_MINUTES,
) -> list[ActivityBlock]:
    """Walk blocks over the whole log, unclipped."""
    walks = [e for e in _chronological(events, now) if e.known_kind in WALK_KINDS]
    return _walk_blocks(walks, now, default_walk_minutes)


def build_blocks(
    events: Iterable[CareEvent],
    window: TimeRange,
    now: datetime,
    *,
    default_walk_minutes: int = DEFAULT_WALK_MINUTES,
) -> list[ActivityBlock]:
    """Group raw events into typed blocks for one window.

    Args:
        events: The event log (any order). Never modified.
        window: Time range to render.
        now: Current instant; ongoing spans end here (or at the window end).
        default_walk_minutes: Length of a logged walk with no duration.

    Returns:
        Blocks sorted by start time. Sleep blocks never overlap each other,
        nor do walk blocks.
    """
    if not (comparable(window.start, now) and comparable(window.end, now)):
        logger.debug(f"Window {window.start.isoformat()} and now {now.isoformat()} mix naive and aware times")
        return []
    if window.is_empty:
        return []

    ordered = _chronological(events, now)
    if not ordered:
        return []

    spans = _sleep_blocks([e for e in ordered if e.known_kind in SLEEP_KINDS], now)
    spans += _walk_blocks([e for e in ordered if e.known_kind in WALK_KINDS], now, default_walk_minutes)

    blocks = [clipped for clipped in (_clip(b, window) for b in spans) if clipped is not None]

    for event in ordered:
        if not window.contains(event.timestamp):
            continue
        if event.known_kind is EventKind.ELIMINATION:
            blocks.append(_point(BlockType.POTTY, event, outdoor=bool(event.is_outdoor)))
        elif event.known_kind in MEAL_KINDS:
            blocks.append(_point(BlockType.MEAL, event))

    return sorted(blocks, key=lambda b: (b.start_time, _TYPE_ORDER[b.type], b.id))


def awake_gaps(blocks: Iterable[ActivityBlock], window: TimeRange) -> list[TimeRange]:
    """Awake periods: the parts of the window not covered by sleep."""
    if window.is_empty:
        return []

    sleeps = sorted(
        (b for b in blocks if b.type is BlockType.SLEEP and b.end_time > b.start_time),
        key=lambda b: b.start_time,
    )
    gaps: list[TimeRange] = []
    cursor = window.start
    for block in sleeps:
        start = window.clamp(block.start_time)
        if start > cursor:
            gaps.append(TimeRange(cursor, start))
        cursor = max(cursor, window.clamp(block.end_time))
    if cursor < window.end:
        gaps.append(TimeRange(cursor, window.end))
    return gaps


def _local(moment: datetime, now: datetime) -> datetime:
    if now.tzinfo is not None and moment.tzinfo is not None:
        return moment.astimezone(now.tzinfo)
    return moment


def timeline_bounds(
    blocks: Sequence[ActivityBlock],
    day: date,
    now: datetime,
    *,
    day_start_hour: int = DEFAULT_DAY_START_HOUR,
    day_end_hour: int = DEFAULT_DAY_END_HOUR,
) -> TimeRange:
    """Display window for one day.

    Defaults to ``day_start_hour``-``day_end_hour``, widened by an hour
    around any block outside that range. For today the window ends at now.
    """
    start_hour, end_hour = day_start_hour, day_end_hour

    if blocks:
        first = min(_local(b.start_time, now) for b in blocks)
        last = max(_local(b.end_time, now) for b in blocks)
        if first.date() == day and first.hour < start_hour:
            start_hour = max(0, first.hour - 1)
        if last.date() == day and last.hour >= end_hour:
            end_hour = min(23, last.hour + 1)

    tz = now.tzinfo
    start = datetime.combine(day, time(hour=start_hour), tzinfo=tz)
    if _local(now, now).date() == day:
        return TimeRange(start, max(now, start))
    return TimeRange(start, datetime.combine(day, time(hour=end_hour), tzinfo=tz))
