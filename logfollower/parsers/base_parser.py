"""
Base parser module for LogFollower.

This module defines the contract between the tailer and a stream parser:
the tailer hands over raw bytes together with their absolute file offset,
and the parser reports every complete entry through ``on_new_entry``.
"""

import io
import logging
from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Callable, List, Optional

from ..config.settings import Settings


DEFAULT_CHUNK_SIZE = Settings.DEFAULT_CHUNK_SIZE


class StreamParser(ABC):
    """
    Abstract base class for incremental log parsers.

    A parser may keep an incomplete trailing entry between calls so that an
    entry split across two reads is reported once it is complete. Anything
    else about the byte format, including how malformed input is handled,
    is the parser's own business.
    """

    def __init__(self, config=None):
        """
        Initialize the base parser.

        Args:
            config: Application configuration (optional)
        """
        self.config = config
        self.logger = logging.getLogger(self.__class__.__name__)
        self.on_new_entry: Optional[Callable[[Any], None]] = None

    @abstractmethod
    def feed(self, data: bytes, offset: int = 0) -> None:
        """
        Consume a block of raw bytes.

        Args:
            data: Bytes read from the log file
            offset: Absolute file offset of ``data[0]``
        """
        pass

    def flush(self) -> None:
        """Report a pending incomplete entry, if the format allows it."""

    def reset(self) -> None:
        """Discard any carried-over partial entry."""

    def parse_stream(self, stream: BinaryIO, offset: int = 0,
                     chunk_size: int = DEFAULT_CHUNK_SIZE, final: bool = False) -> int:
        """
        Consume a binary stream until EOF.

        Args:
            stream: Binary file-like object positioned at ``offset``
            offset: Absolute file offset of the stream's current position
            chunk_size: Number of bytes read per call to ``feed``
            final: Flush a trailing incomplete entry at EOF

        Returns:
            Offset reached
        """
        while True:
            chunk = stream.read(chunk_size)
            if not chunk:
                break
            self.feed(chunk, offset)
            offset += len(chunk)
        if final:
            self.flush()
        return offset

    def parse_bytes(self, data: bytes, offset: int = 0, final: bool = False) -> List[Any]:
        """
        Parse a byte string in one shot and return the entries produced.

        The registered ``on_new_entry`` callback is restored afterwards.
        """
        entries: List[Any] = []
        previous = self.on_new_entry
        self.on_new_entry = entries.append
        try:
            self.parse_stream(io.BytesIO(data), offset, final=final)
        finally:
            self.on_new_entry = previous
        return entries

    def _emit(self, entry: Any) -> None:
        if self.on_new_entry is not None:
            self.on_new_entry(entry)
