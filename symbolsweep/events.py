"""
Events pushed from the SymbolSweep core to its front ends.
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

CACHE_STATUS_UPDATE = "cache-status-update"
AUTO_CLEAN_TRIGGERED = "auto-clean-triggered"
AUTO_CLEAN_COMPLETED = "auto-clean-completed"
AUTO_CLEAN_FAILED = "auto-clean-failed"
WARNING_THRESHOLD_REACHED = "warning-threshold-reached"
CRITICAL_THRESHOLD_REACHED = "critical-threshold-reached"
SETTINGS_UPDATED = "settings-updated"


@dataclass(frozen=True)
class Event:
    name: str
    payload: Any = None


EventSink = Callable[[Event], None]


class EventBus:
    """Fans events out to subscribers; a failing subscriber never stops the others."""

    def __init__(self):
        self._subscribers: list[EventSink] = []
        self._lock = threading.Lock()

    def subscribe(self, callback: EventSink) -> None:
        with self._lock:
            self._subscribers.append(callback)

    def unsubscribe(self, callback: EventSink) -> None:
        with self._lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def __call__(self, event: Event) -> None:
        self.publish(event)

    def publish(self, event: Event) -> None:
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(event)
            except Exception as e:
                logger.warning(f"Event subscriber error on {event.name}: {e}")
