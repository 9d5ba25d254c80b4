"""Core functionality module for LogFollower."""

from .tailer import Tailer
from .event_bus import EventBus
from .models import LogEntry

__all__ = ['Tailer', 'EventBus', 'LogEntry']
