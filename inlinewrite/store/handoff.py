"""Handoff store — externally shared content plus its freshness timestamp.

The producer (a share extension in another process) writes both fields in
one atomic replace. The consumer orders updates only by comparing
``lastUpdateTimestamp``, never by message identity.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from inlinewrite.signals import LifecycleSignal, SignalBus
from inlinewrite.store.shared import SharedStore, double_value

logger = logging.getLogger(__name__)

LAST_UPDATE_KEY = "lastUpdateTimestamp"
SHARED_CONTENT_KEY = "sharedContent"


@dataclass(frozen=True)
class HandoffSnapshot:
    timestamp: float
    content: str | None


class HandoffStore:
    def __init__(self, store: SharedStore, bus: SignalBus | None = None) -> None:
        self.store = store
        self.bus = bus

    def read(self) -> HandoffSnapshot | None:
        """One consistent read of both fields; None if the namespace is unreachable."""
        data = self.store.snapshot()
        if data is None:
            return None
        content = data.get(SHARED_CONTENT_KEY)
        return HandoffSnapshot(
            timestamp=double_value(data, LAST_UPDATE_KEY),
            content=content if isinstance(content, str) else None,
        )

    def publish(self, content: str, timestamp: float | None = None) -> float:
        """Write ``content`` with a timestamp newer than the stored one.

        Returns the timestamp written. Posts SHARED_CONTENT_UPDATED when a
        bus is attached.
        """
        if timestamp is None:
            previous = self.read()
            timestamp = time.time()
            if previous is not None and timestamp <= previous.timestamp:
                timestamp = previous.timestamp + 0.001

        self.store.update({LAST_UPDATE_KEY: timestamp, SHARED_CONTENT_KEY: content})
        logger.info(f"Published shared content ({len(content)} chars) at {timestamp:.3f}")

        if self.bus is not None:
            self.bus.post(LifecycleSignal.SHARED_CONTENT_UPDATED)
        return timestamp
