"""
Tests for the event bus.
"""

from unittest.mock import MagicMock

from symbolsweep import events
from symbolsweep.events import Event, EventBus


class TestEventBus:
    def test_fans_out(self) -> None:
        bus = EventBus()
        first, second = MagicMock(), MagicMock()
        bus.subscribe(first)
        bus.subscribe(second)

        event = Event(events.SETTINGS_UPDATED, {"debug_mode": True})
        bus.publish(event)

        first.assert_called_once_with(event)
        second.assert_called_once_with(event)

    def test_failing_subscriber_isolated(self) -> None:
        bus = EventBus()
        received = []
        bus.subscribe(MagicMock(side_effect=RuntimeError("boom")))
        bus.subscribe(received.append)

        bus(Event(events.CACHE_STATUS_UPDATE))

        assert len(received) == 1

    def test_unsubscribe(self) -> None:
        bus = EventBus()
        callback = MagicMock()
        bus.subscribe(callback)
        bus.unsubscribe(callback)
        bus.unsubscribe(callback)

        bus.publish(Event(events.CACHE_STATUS_UPDATE))

        callback.assert_not_called()
