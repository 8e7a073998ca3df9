"""Host-app foreground sync — keeps an in-memory mirror of the handoff store.

Two kinds of trigger feed the same ``refresh``: the interval timer (bounds
worst-case staleness) and lifecycle/content signals (refresh immediately on
foreground). ``refresh`` is a short synchronous read-compare-assign, so
duplicate or reordered triggers are harmless.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from inlinewrite.scheduler import setup_scheduler
from inlinewrite.signals import LifecycleSignal, SignalBus

if TYPE_CHECKING:
    from apscheduler.schedulers.asyncio import AsyncIOScheduler

    from inlinewrite.store.handoff import HandoffStore

logger = logging.getLogger(__name__)


@dataclass
class HandoffMirror:
    timestamp: float = 0.0
    content: str | None = None


MirrorListener = Callable[[HandoffMirror], None]


class ForegroundSync:
    def __init__(
        self,
        handoff: HandoffStore,
        bus: SignalBus,
        interval_seconds: float = 2.0,
    ) -> None:
        self.handoff = handoff
        self.bus = bus
        self.interval_seconds = interval_seconds
        self.mirror = HandoffMirror()
        self._scheduler: AsyncIOScheduler | None = None
        self._listeners: list[MirrorListener] = []

    @property
    def running(self) -> bool:
        return self._scheduler is not None

    def on_change(self, listener: MirrorListener) -> None:
        self._listeners.append(listener)

    def refresh(self) -> bool:
        """Copy newer handoff content into the mirror. Returns True if it changed."""
        snapshot = self.handoff.read()
        if snapshot is None or snapshot.timestamp <= self.mirror.timestamp:
            return False

        self.mirror.timestamp = snapshot.timestamp
        self.mirror.content = snapshot.content
        logger.info(f"Content updated: {snapshot.content!r}")
        for listener in list(self._listeners):
            listener(self.mirror)
        return True

    async def tick(self) -> None:
        self.refresh()

    def _on_signal(self, signal: LifecycleSignal) -> None:
        logger.debug(f"Refresh triggered by {signal.value}")
        self.refresh()

    def start(self) -> None:
        """Subscribe to signals and start the timer. Needs a running event loop."""
        if self._scheduler is not None:
            return
        for signal in LifecycleSignal:
            self.bus.subscribe(signal, self._on_signal)
        self._scheduler = setup_scheduler(self, self.interval_seconds)
        self._scheduler.start()
        self.refresh()

    def stop(self) -> None:
        """Stop the timer and drop the signal subscriptions. Safe to call twice."""
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=False)
            self._scheduler = None
            logger.info("Foreground sync stopped")
        for signal in LifecycleSignal:
            self.bus.unsubscribe(signal, self._on_signal)
