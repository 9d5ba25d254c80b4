"""
Pytest configuration for LogFollower tests.

This file contains fixtures and configuration for the test suite.
"""

import threading
import time

import pytest

from logfollower.config.config import Config
from logfollower.core.event_bus import ALL_EVENTS, EventBus
from logfollower.core.tailer import Tailer
from logfollower.parsers.line_parser import LineParser


class EventRecorder:
    """Event handler that records every event and lets tests wait for one."""

    def __init__(self):
        self.events = []
        self._condition = threading.Condition()

    def __call__(self, event):
        with self._condition:
            self.events.append(event)
            self._condition.notify_all()

    def snapshot(self):
        with self._condition:
            return list(self.events)

    def types(self):
        return [event.type for event in self.snapshot()]

    def data(self, event_type):
        return [event.data for event in self.snapshot() if event.type == event_type]

    def wait_for(self, predicate, timeout=5.0):
        """Wait until ``predicate(events)`` is true, returning its final value."""
        with self._condition:
            return self._condition.wait_for(lambda: predicate(list(self.events)), timeout)

    def wait_for_event(self, event_type, data=None, timeout=5.0, after=0):
        """Wait for an event of ``event_type`` (carrying ``data`` if given) at index ``after`` or later."""
        def matches(events):
            return any(event.type == event_type and (data is None or event.data == data)
                       for event in events[after:])
        return self.wait_for(matches, timeout)


def append(path, content):
    with open(path, 'ab') as f:
        f.write(content)
        f.flush()


def wait_until(condition, timeout=5.0, interval=0.01):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(interval)
    return condition()


@pytest.fixture
def append_log():
    """Append raw bytes to a file."""
    return append


@pytest.fixture
def wait():
    """Poll a condition until it holds or a timeout expires."""
    return wait_until


@pytest.fixture
def sample_config(monkeypatch):
    """Create a configuration with short intervals for testing."""
    for name in ('LOGFOLLOWER_CONFIG', 'LOGFOLLOWER_POLL_INTERVAL',
                 'LOGFOLLOWER_PAUSE_TIMEOUT', 'LOGFOLLOWER_LOG_LEVEL'):
        monkeypatch.delenv(name, raising=False)
    config = Config()
    config.tailer.poll_interval = 0.02
    config.tailer.pause_timeout = 0.05
    return config


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def event_bus(recorder):
    bus = EventBus()
    bus.subscribe(ALL_EVENTS, recorder)
    return bus


@pytest.fixture
def tailer(sample_config, event_bus):
    """Create a tailer publishing to the recording event bus."""
    tailer = Tailer(config=sample_config, event_bus=event_bus)
    yield tailer
    tailer.close()


@pytest.fixture
def line_parser(sample_config):
    return LineParser(sample_config)


@pytest.fixture
def log_file(tmp_path):
    """Create an empty log file."""
    path = tmp_path / "app.log"
    path.write_bytes(b"")
    return path


@pytest.fixture
def sample_log_content():
    return (b"2023-01-01 10:00:01 INFO Workflow started successfully\n"
            b"2023-01-01 10:05:23 INFO Task test_task1 submitted to queue\n"
            b"2023-01-01 10:10:45 ERROR Task test_task2 failed with exit code 1\n"
            b"2023-01-01 10:15:12 WARNING Resource usage high for task test_task3\n"
            b"2023-01-01 10:20:33 INFO Task test_task4 completed successfully\n")
