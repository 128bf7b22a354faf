"""
Observer that keeps a timeline snapshot in step with its inputs.

The controller listens for ``eventlog.changed`` and ``window.changed`` on a
``SignalBus``, recomputes the snapshot (in the default executor unless
``offload=False``) and publishes ``timeline.recomputed``. Every request is
numbered; a result that finishes after a newer request was made is
dropped, so the last request always wins.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from datetime import UTC, datetime

from loguru import logger

from pawtrack.core.signals import (
    EVENTS_CHANGED,
    WINDOW_CHANGED,
    Signal,
    SignalBus,
    timeline_recomputed,
)

from .models import CareEvent, TimeRange
from .pipeline import EngineSettings, TimelineSnapshot, compute_snapshot

Clock = Callable[[], datetime]
Compute = Callable[..., TimelineSnapshot]


class TimelineController:
    """Recompute-on-change glue between the event store and a view."""

    def __init__(
        self,
        bus: SignalBus,
        settings: EngineSettings | None = None,
        clock: Clock | None = None,
        offload: bool = True,
        compute: Compute = compute_snapshot,
    ):
        self._bus = bus
        self._settings = settings or EngineSettings()
        self._clock = clock or (lambda: datetime.now(self._settings.tz or UTC))
        self._offload = offload
        self._compute = compute

        self._events: tuple[CareEvent, ...] = ()
        self._window: TimeRange | None = None
        self._generation = 0
        self.latest: TimelineSnapshot | None = None

        bus.on(EVENTS_CHANGED, self._on_events_changed)
        bus.on(WINDOW_CHANGED, self._on_window_changed)

    @property
    def generation(self) -> int:
        return self._generation

    def detach(self) -> None:
        """Stop listening to the bus."""
        self._bus.off(EVENTS_CHANGED, self._on_events_changed)
        self._bus.off(WINDOW_CHANGED, self._on_window_changed)

    async def _on_events_changed(self, signal: Signal) -> None:
        self.set_events(signal.events)
        await self.refresh()

    async def _on_window_changed(self, signal: Signal) -> None:
        window = signal.window
        if not isinstance(window, TimeRange):
            logger.warning(f"Ignoring {WINDOW_CHANGED} without a TimeRange payload from {signal.source!r}")
            return
        self._window = window
        await self.refresh()

    def set_events(self, events: Iterable[CareEvent]) -> None:
        # Copy so later mutation of the caller's collection can't leak in.
        self._events = tuple(events)

    def set_window(self, window: TimeRange) -> None:
        self._window = window

    async def refresh(self) -> TimelineSnapshot | None:
        """Recompute for the current inputs.

        Returns:
            The published snapshot, or None if there is no window yet or a
            newer request superseded this one.
        """
        if self._window is None:
            return None

        self._generation += 1
        generation = self._generation
        args = (self._events, self._window, self._clock(), self._settings, generation)

        if self._offload:
            loop = asyncio.get_running_loop()
            snapshot = await loop.run_in_executor(None, self._compute, *args)
        else:
            snapshot = self._compute(*args)
        return await self._publish(snapshot)

    async def _publish(self, snapshot: TimelineSnapshot) -> TimelineSnapshot | None:
        if snapshot.generation < self._generation:
            logger.debug(f"Discarding stale timeline result {snapshot.generation} (latest {self._generation})")
            return None
        self.latest = snapshot
        await self._bus.emit(timeline_recomputed(snapshot))
        return snapshot
