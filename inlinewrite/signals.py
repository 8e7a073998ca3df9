"""Signal bus — observer list for lifecycle and content-update signals.

Replaces broadcast notifications: producers ``post`` a signal, and every
subscriber for that signal is called synchronously, in subscription order.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)


class LifecycleSignal(str, Enum):
    APP_DID_BECOME_ACTIVE = "app_did_become_active"
    SCENE_DID_ACTIVATE = "scene_did_activate"
    SHARED_CONTENT_UPDATED = "shared_content_updated"


Listener = Callable[[LifecycleSignal], None]


class SignalBus:
    def __init__(self) -> None:
        self._listeners: dict[LifecycleSignal, list[Listener]] = {s: [] for s in LifecycleSignal}

    def subscribe(self, signal: LifecycleSignal, listener: Listener) -> None:
        if listener not in self._listeners[signal]:
            self._listeners[signal].append(listener)

    def unsubscribe(self, signal: LifecycleSignal, listener: Listener) -> None:
        try:
            self._listeners[signal].remove(listener)
        except ValueError:
            pass

    def listener_count(self, signal: LifecycleSignal) -> int:
        return len(self._listeners[signal])

    def post(self, signal: LifecycleSignal) -> None:
        listeners = list(self._listeners[signal])
        logger.debug(f"Posting {signal.value} to {len(listeners)} listener(s)")
        for listener in listeners:
            listener(signal)
