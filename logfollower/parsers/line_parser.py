"""
Line parser module for LogFollower.

This module parses newline-delimited text logs into LogEntry objects,
keeping an incomplete trailing line buffered until its newline arrives.
"""

import re
from datetime import datetime
from typing import Optional

from ..core.models import LogEntry
from .base_parser import StreamParser


class LineParser(StreamParser):
    """
    Parser for plain text log files with one entry per line.
    """

    TIMESTAMP_PATTERN = re.compile(r'^\[?(\d{4}-\d{2}-\d{2}[ T]\d{2}:\d{2}:\d{2}(?:[.,]\d{1,6})?)\]?\s*')
    LEVEL_PATTERN = re.compile(r'^\[?(DEBUG|INFO|WARNING|WARN|ERROR|CRITICAL|FATAL)\]?[:\s]\s*', re.IGNORECASE)
    LEVEL_ALIASES = {'WARN': 'WARNING', 'FATAL': 'CRITICAL'}

    def __init__(self, config=None, encoding: Optional[str] = None):
        """
        Initialize the line parser.

        Args:
            config: Application configuration
            encoding: Text encoding of the log, overrides ``config.tailer.encoding``
        """
        super().__init__(config)
        if encoding is None:
            tailer_config = getattr(config, 'tailer', None)
            encoding = getattr(tailer_config, 'encoding', None) or 'utf-8'
        self.encoding = encoding
        self._pending = b''
        self._pending_offset = 0

    def feed(self, data: bytes, offset: int = 0) -> None:
        if not data:
            return
        if self._pending:
            buffer = self._pending + data
            line_offset = self._pending_offset
        else:
            buffer = data
            line_offset = offset

        start = 0
        while True:
            end = buffer.find(b'\n', start)
            if end < 0:
                break
            line = buffer[start:end]
            self._emit_line(line, line_offset + start)
            start = end + 1

        self._pending = buffer[start:]
        self._pending_offset = line_offset + start

    def flush(self) -> None:
        if self._pending:
            self._emit_line(self._pending, self._pending_offset)
        self.reset()

    def reset(self) -> None:
        self._pending = b''
        self._pending_offset = 0

    def _emit_line(self, line: bytes, offset: int) -> None:
        text = line.rstrip(b'\r').decode(self.encoding, errors='replace')
        if not text.strip():
            return
        self._emit(self.parse_line(text, offset))

    def parse_line(self, line: str, offset: int = 0) -> LogEntry:
        """
        Parse a single decoded log line into a LogEntry.

        Args:
            line: Log line without its line terminator
            offset: Byte offset of the line in the file

        Returns:
            Parsed LogEntry
        """
        entry = LogEntry(raw=line, offset=offset, message=line.strip())
        rest = line.strip()

        timestamp_match = self.TIMESTAMP_PATTERN.match(rest)
        if timestamp_match:
            entry.timestamp = self._parse_timestamp(timestamp_match.group(1))
            if entry.timestamp is not None:
                rest = rest[timestamp_match.end():]

        level_match = self.LEVEL_PATTERN.match(rest)
        if level_match:
            level = level_match.group(1).upper()
            entry.level = self.LEVEL_ALIASES.get(level, level)
            rest = rest[level_match.end():]

        entry.message = rest.strip()
        return entry

    @staticmethod
    def _parse_timestamp(value: str) -> Optional[datetime]:
        value = value.replace('T', ' ').replace(',', '.')
        for fmt in ('%Y-%m-%d %H:%M:%S', '%Y-%m-%d %H:%M:%S.%f'):
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue
        return None
