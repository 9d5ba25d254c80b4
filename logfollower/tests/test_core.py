"""
Tests for the core module in LogFollower.

This file contains unit tests for the event bus, the data models and the
formatting helpers built on them.
"""

import threading
from datetime import datetime
from unittest.mock import Mock

from logfollower.core.event_bus import ALL_EVENTS, NEW_ENTRY, TAILER_EVENTS, Event, EventBus
from logfollower.core.models import LogEntry
from logfollower.utils.formatting import FormattingUtils


class TestEventBus:
    """Tests for the EventBus class."""

    def test_publish_to_subscribers(self):
        bus = EventBus()
        handler = Mock()
        bus.subscribe("test_event", handler)

        bus.publish("test_event", {"value": 1}, "test_source")

        handler.assert_called_once()
        event = handler.call_args[0][0]
        assert event.type == "test_event"
        assert event.data == {"value": 1}
        assert event.source == "test_source"
        assert isinstance(event.timestamp, datetime)

    def test_publish_event_object(self):
        bus = EventBus()
        handler = Mock()
        bus.subscribe(NEW_ENTRY, handler)
        event = Event(type=NEW_ENTRY, data="payload")

        bus.publish(event)

        handler.assert_called_once_with(event)

    def test_wildcard_receives_everything(self):
        bus = EventBus()
        received = []
        bus.subscribe(ALL_EVENTS, lambda event: received.append(event.type))

        for event_type in TAILER_EVENTS:
            bus.publish(event_type)

        assert received == list(TAILER_EVENTS)

    def test_unsubscribe(self):
        bus = EventBus()
        handler = Mock()
        bus.subscribe("test_event", handler)
        bus.unsubscribe("test_event", handler)
        bus.unsubscribe("test_event", handler)

        bus.publish("test_event")

        handler.assert_not_called()

    def test_failing_handler_does_not_block_others(self):
        bus = EventBus()
        failing = Mock(side_effect=RuntimeError("boom"))
        handler = Mock()
        bus.subscribe("test_event", failing)
        bus.subscribe("test_event", handler)

        bus.publish("test_event")

        failing.assert_called_once()
        handler.assert_called_once()

    def test_handler_may_subscribe_during_publish(self):
        bus = EventBus()
        late = Mock()
        bus.subscribe("test_event", lambda event: bus.subscribe("test_event", late))

        bus.publish("test_event")
        late.assert_not_called()

        bus.publish("test_event")
        late.assert_called_once()

    def test_clear_subscribers(self):
        bus = EventBus()
        first, second = Mock(), Mock()
        bus.subscribe("first", first)
        bus.subscribe("second", second)

        bus.clear_subscribers("first")
        bus.publish("first")
        bus.publish("second")
        first.assert_not_called()
        second.assert_called_once()

        bus.clear_subscribers()
        bus.publish("second")
        second.assert_called_once()

    def test_publish_from_threads(self):
        bus = EventBus()
        received = []
        lock = threading.Lock()

        def handler(event):
            with lock:
                received.append(event.data)

        bus.subscribe("test_event", handler)
        threads = [threading.Thread(target=bus.publish, args=("test_event", i)) for i in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert sorted(received) == list(range(10))


class TestLogEntry:
    """Tests for the LogEntry model."""

    def test_to_dict_serializes_timestamp(self):
        entry = LogEntry(raw="x", offset=4, timestamp=datetime(2023, 1, 1, 10, 0, 1), message="x")

        assert entry.to_dict() == {
            'raw': "x",
            'offset': 4,
            'timestamp': "2023-01-01T10:00:01",
            'level': "INFO",
            'message': "x",
        }

    def test_to_dict_without_timestamp(self):
        assert LogEntry(raw="x").to_dict()['timestamp'] is None


class TestFormattingUtils:
    """Tests for the formatting helpers."""

    def test_format_bytes(self):
        assert FormattingUtils.format_bytes(512) == "512.00 B"
        assert FormattingUtils.format_bytes(2048, decimal_places=1) == "2.0 KB"

    def test_format_log_entry(self):
        entry = LogEntry(raw="", timestamp=datetime(2023, 1, 1, 10, 0, 1), level="ERROR", message="failed")

        assert FormattingUtils.format_log_entry(entry) == "[2023-01-01 10:00:01] [ERROR] failed"
        assert FormattingUtils.format_log_entry(entry, include_timestamp=False, include_level=False) == "failed"

    def test_styled_log_entry_uses_level_color(self):
        entry = LogEntry(raw="", level="WARNING", message="careful")

        text = FormattingUtils.styled_log_entry(entry)

        assert text.plain == "[WARNING] careful"
        assert str(text.style) == "yellow"
