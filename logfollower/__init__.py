"""
LogFollower - follow a log file and report what is appended to it.

This package provides a background tailer that parses newly appended bytes
into log entries and publishes them, together with size changes, batch
ends and errors, on an event bus.
"""

from .__version__ import __version__
from .core.tailer import Tailer
from .core.event_bus import Event, EventBus
from .parsers.base_parser import StreamParser
from .parsers.line_parser import LineParser

__all__ = [
    "Tailer",
    "Event",
    "EventBus",
    "StreamParser",
    "LineParser",
    "__version__",
]


def main():
    """Main entry point for the CLI."""
    from .cli import main as cli_main
    return cli_main()
