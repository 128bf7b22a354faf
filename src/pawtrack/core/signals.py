"""
Change notifications between the event store, a timeline view and the
``TimelineController``.

Three signals are known:

* ``eventlog.changed``: the event log after a write (payload ``events``)
* ``window.changed``: the window the view now shows (payload ``window``)
* ``timeline.recomputed``: a fresh snapshot (payload ``snapshot``)

Build them with ``events_changed()``, ``window_changed()`` and
``timeline_recomputed()``; read them back through ``Signal.events``,
``Signal.window`` and ``Signal.snapshot``.

Usage::

    bus = SignalBus()
    bus.on(TIMELINE_RECOMPUTED, lambda signal: render(signal.snapshot))
    await bus.emit(events_changed(store.all_events(), source="store"))
"""

from __future__ import annotations

import inspect
from collections import defaultdict
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from pawtrack.timeline.models import CareEvent, TimeRange
    from pawtrack.timeline.pipeline import TimelineSnapshot

EVENTS_CHANGED = "eventlog.changed"
WINDOW_CHANGED = "window.changed"
TIMELINE_RECOMPUTED = "timeline.recomputed"

# Sync, or returning an awaitable.
Hook = Callable[["Signal"], Any]


@dataclass(frozen=True)
class Signal:
    name: str
    payload: Mapping[str, Any] = field(default_factory=dict)
    source: str = ""

    @property
    def events(self) -> tuple[CareEvent, ...]:
        return tuple(self.payload.get("events", ()))

    @property
    def window(self) -> TimeRange | None:
        return self.payload.get("window")

    @property
    def snapshot(self) -> TimelineSnapshot | None:
        return self.payload.get("snapshot")


def events_changed(events: Iterable[CareEvent], source: str = "store") -> Signal:
    # Copied: hooks see the log as it was at emit time.
    return Signal(EVENTS_CHANGED, MappingProxyType({"events": tuple(events)}), source)


def window_changed(window: TimeRange, source: str = "view") -> Signal:
    return Signal(WINDOW_CHANGED, MappingProxyType({"window": window}), source)


def timeline_recomputed(snapshot: TimelineSnapshot, source: str = "timeline") -> Signal:
    return Signal(TIMELINE_RECOMPUTED, MappingProxyType({"snapshot": snapshot}), source)


class SignalBus:
    """Delivers each signal to the hooks registered for its name, in order."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = defaultdict(list)

    def on(self, name: str, hook: Hook) -> None:
        self._hooks[name].append(hook)

    def off(self, name: str, hook: Hook) -> None:
        hooks = self._hooks.get(name, [])
        if hook in hooks:
            hooks.remove(hook)

    def subscribers(self, name: str) -> int:
        return len(self._hooks.get(name, []))

    async def emit(self, signal: Signal) -> int:
        """Run every hook for ``signal.name``.

        A failing hook is logged and skipped; later hooks still run.

        Returns:
            The number of hooks that completed.
        """
        delivered = 0
        for hook in list(self._hooks.get(signal.name, [])):
            try:
                result = hook(signal)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                logger.warning(f"Hook {hook!r} failed on {signal.name} from {signal.source!r}: {exc!r}")
                continue
            delivered += 1
        return delivered
