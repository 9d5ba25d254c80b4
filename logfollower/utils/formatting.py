"""
Formatting utilities module for LogFollower.

This module provides the formatting helpers used by the command line.
"""

from typing import Union

from rich.text import Text

from ..core.models import LogEntry


class FormattingUtils:
    """
    Utility class for formatting operations.
    """

    LEVEL_STYLES = {
        'DEBUG': 'dim',
        'INFO': 'green',
        'WARNING': 'yellow',
        'ERROR': 'red',
        'CRITICAL': 'bold red',
    }

    @staticmethod
    def format_bytes(bytes_value: Union[int, float],
                     decimal_places: int = 2) -> str:
        """
        Format a byte value into human-readable format.

        Args:
            bytes_value: Number of bytes
            decimal_places: Number of decimal places in result

        Returns:
            Formatted byte string (e.g., "1.23 KB", "4.56 MB")
        """
        for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
            if bytes_value < 1024.0:
                return f"{bytes_value:.{decimal_places}f} {unit}"
            bytes_value /= 1024.0

        return f"{bytes_value:.{decimal_places}f} PB"

    @staticmethod
    def format_log_entry(entry: LogEntry,
                         include_timestamp: bool = True,
                         include_level: bool = True) -> str:
        """
        Format a log entry for display.

        Args:
            entry: Parsed log entry
            include_timestamp: Whether to include timestamp
            include_level: Whether to include log level

        Returns:
            Formatted log entry string
        """
        parts = []

        if include_timestamp and entry.timestamp is not None:
            parts.append(f"[{entry.timestamp.strftime('%Y-%m-%d %H:%M:%S')}]")

        if include_level:
            parts.append(f"[{entry.level}]")

        parts.append(entry.message)
        return " ".join(parts)

    @classmethod
    def styled_log_entry(cls, entry: LogEntry) -> Text:
        """Render a log entry as rich Text colored by level."""
        return Text(cls.format_log_entry(entry), style=cls.LEVEL_STYLES.get(entry.level, ''))
