"""
Reading care events from YAML or JSON files.

Stands in for the app's persistence layer when driving the engine from the
command line. Each record is a mapping with ``id``, ``timestamp`` (ISO
8601), ``kind`` and optionally ``duration_minutes`` / ``is_outdoor``.
Malformed records are skipped with a warning; an unreadable file raises
``EventLogError``.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from datetime import datetime, tzinfo
from typing import Any

import yaml
from loguru import logger

from pawtrack.core.exceptions import EventLogError
from pawtrack.core.types import PathLike

from .models import CareEvent

_TRUE = {"true", "yes", "1", "outdoor", "outside"}
_FALSE = {"false", "no", "0", "indoor", "inside"}


def _parse_timestamp(value: Any, tz: tzinfo | None) -> datetime | None:
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, str):
        try:
            moment = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None
    if moment.tzinfo is None and tz is not None:
        moment = moment.replace(tzinfo=tz)
    return moment


def _parse_flag(value: Any) -> bool | None:
    if value is None or isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return None


def _parse_minutes(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_event(record: Mapping[str, Any], tz: tzinfo | None = None) -> CareEvent | None:
    """Map one stored record to a CareEvent, or None if it is unusable.

    Naive timestamps are given ``tz`` when one is supplied.
    """
    event_id = record.get("id")
    kind = record.get("kind")
    timestamp = _parse_timestamp(record.get("timestamp"), tz)
    if event_id is None or kind is None or timestamp is None:
        return None
    return CareEvent(
        id=str(event_id),
        timestamp=timestamp,
        kind=str(kind),
        duration_minutes=_parse_minutes(record.get("duration_minutes")),
        is_outdoor=_parse_flag(record.get("is_outdoor")),
    )


def _read_records(path: str) -> Any:
    ext = os.path.splitext(path)[1].lower()
    try:
        with open(path, encoding="utf-8") as f:
            if ext == ".json":
                return json.load(f)
            return yaml.safe_load(f)
    except OSError as e:
        raise EventLogError(f"Cannot read event log {path}: {e}") from e
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise EventLogError(f"Cannot parse event log {path}: {e}") from e


def load_events(path: PathLike, tz: tzinfo | None = None) -> list[CareEvent]:
    """Load every usable event from a YAML/JSON file.

    The file holds either a list of records or a mapping with an
    ``events`` list.
    """
    data = _read_records(str(path))
    if data is None:
        return []
    if isinstance(data, Mapping):
        data = data.get("events", [])
    if not isinstance(data, list):
        raise EventLogError(f"Event log {path} must contain a list of events")

    events: list[CareEvent] = []
    for index, record in enumerate(data):
        event = parse_event(record, tz) if isinstance(record, Mapping) else None
        if event is None:
            logger.warning(f"Skipping malformed event record #{index} in {path}")
            continue
        events.append(event)

    logger.debug(f"Loaded {len(events)} event(s) from {path}")
    return events
