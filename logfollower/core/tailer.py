"""
Log tailing module for LogFollower.

This module follows a single log file from a background thread, feeding
newly appended bytes to a stream parser and publishing size changes,
parsed entries, batch ends and errors on an event bus. Rotation and
truncation are detected by the file shrinking below the read offset, by a
change of the file identity (device and inode) or by a change of the
first bytes of the file.
"""

import os
import time
import threading
import logging
from typing import Any, Callable, Optional, Tuple, Union

from ..config.config import Config
from ..parsers.base_parser import StreamParser
from ..parsers.line_parser import LineParser
from .event_bus import (
    BATCH_END, ERROR, NEW_ENTRY, PATH_CHANGED, PAUSED_CHANGED, SIZE_CHANGED,
    Event, EventBus,
)


class Tailer:
    """
    Follows one log file and reports what is appended to it.

    The worker thread is started when a path is assigned and restarted when
    the path changes. Every pass reopens the file, so a file replaced under
    the same name is picked up on the next pass. Pausing keeps the worker
    and its read position; it only suspends reading.

    All state is guarded by one lock which is never held across file I/O,
    waits or event publication.
    """

    EVENT_SOURCE = 'tailer'
    # Number of leading bytes compared between passes to spot a rewritten file
    HEAD_SIZE = 64

    def __init__(self, parser: Optional[StreamParser] = None, event_bus: Optional[EventBus] = None,
                 config: Optional[Config] = None, poll_interval: Optional[float] = None,
                 pause_timeout: Optional[float] = None, paused: Optional[bool] = None,
                 chunk_size: Optional[int] = None):
        """
        Initialize the tailer.

        Args:
            parser: Stream parser fed with the file's bytes (default: LineParser)
            event_bus: Event bus to publish on (default: a private EventBus)
            config: Application configuration supplying the defaults below
            poll_interval: Seconds to sleep between passes
            pause_timeout: Seconds per wait while paused before rechecking for stop
            paused: Initial pause state
            chunk_size: Maximum number of bytes handed to the parser at once

        Raises:
            ValueError: If poll_interval, pause_timeout or chunk_size is not positive
        """
        self.config = config or Config()
        tailer_config = self.config.tailer
        self.poll_interval = tailer_config.poll_interval if poll_interval is None else poll_interval
        self.pause_timeout = tailer_config.pause_timeout if pause_timeout is None else pause_timeout
        self.chunk_size = tailer_config.chunk_size if chunk_size is None else chunk_size

        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.pause_timeout <= 0:
            raise ValueError(f"pause_timeout must be positive, got {self.pause_timeout}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")

        self.parser = parser or LineParser(self.config)
        self.event_bus = event_bus or EventBus()
        self.logger = logging.getLogger(__name__)

        self._lock = threading.Lock()
        self._condition = threading.Condition(self._lock)
        # Serializes set_path and close so that at most one worker exists
        self._control_lock = threading.RLock()
        self._thread: Optional[threading.Thread] = None

        self._path: Optional[str] = None
        self._file_size: Optional[int] = None
        self._read_offset: Optional[int] = None
        self._identity: Optional[Tuple[int, int]] = None
        self._head: Optional[bytes] = None
        self._paused = tailer_config.start_paused if paused is None else paused
        self._stopping = False

    def __enter__(self) -> 'Tailer':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    # State accessors

    def get_path(self) -> Optional[str]:
        """
        Get the path of the followed file.

        Returns:
            The followed path, or None when idle
        """
        with self._lock:
            return self._path

    def get_file_size(self) -> int:
        """Return the last observed file size, 0 before the first pass."""
        with self._lock:
            return self._file_size or 0

    def is_paused(self) -> bool:
        """
        Check whether reading is suspended.

        Returns:
            True if paused, False otherwise
        """
        with self._lock:
            return self._paused

    def is_running(self) -> bool:
        """
        Check whether the worker thread is alive.

        Returns:
            True if a worker is following the file, False otherwise
        """
        with self._lock:
            thread = self._thread
        return thread is not None and thread.is_alive()

    path = property(get_path)
    file_size = property(get_file_size)
    paused = property(is_paused)

    # Control operations

    def set_path(self, path: Union[str, os.PathLike, None]) -> None:
        """
        Follow a different file.

        Stops the running worker, waiting for it to exit, resets the read
        position and starts a new worker on ``path``. An empty path or None
        leaves the tailer idle. Assigning the current path does nothing.

        Args:
            path: Path of the log file to follow
        """
        path = os.fspath(path) if path is not None else None
        if not path:
            path = None

        if self._on_worker_thread():
            raise RuntimeError("set_path() cannot be called from the tailer thread")

        with self._control_lock:
            with self._lock:
                if path == self._path:
                    return

            self._stop_worker()

            with self._lock:
                self._path = path
                self._reset_session()

            self.logger.debug(f"Tailer path changed to {path}")
            self._publish(PATH_CHANGED, path)

            if path is not None:
                self._start_worker(path)

    def set_paused(self, paused: bool) -> None:
        """
        Suspend or resume reading.

        Resuming wakes the worker immediately. Setting the current state
        does nothing.

        Args:
            paused: True to suspend reading, False to resume
        """
        paused = bool(paused)
        with self._condition:
            if paused == self._paused:
                return
            self._paused = paused
            if not paused:
                self._condition.notify_all()

        self._publish(PAUSED_CHANGED, paused)

    def pause(self) -> None:
        """Suspend reading. Same as ``set_paused(True)``."""
        self.set_paused(True)

    def resume(self) -> None:
        """Resume reading. Same as ``set_paused(False)``."""
        self.set_paused(False)

    def subscribe(self, event_type: str, handler: Callable[[Event], None]) -> None:
        """
        Subscribe to tailer events.

        Args:
            event_type: One of the event type constants, or '*' for all events
            handler: Callable invoked with each Event on the worker thread
        """
        self.event_bus.subscribe(event_type, handler)

    def unsubscribe(self, event_type: str, handler: Callable[[Event], None]) -> None:
        """
        Unsubscribe from tailer events.

        Args:
            event_type: Event type the handler was subscribed to
            handler: Handler to remove
        """
        self.event_bus.unsubscribe(event_type, handler)

    def close(self) -> None:
        """
        Stop the worker and wait for it to exit.

        The path is cleared, publishing ``path_changed(None)``, so assigning
        any path afterwards, the previous one included, starts a new session.
        Safe to call more than once.

        Called from an event handler running on the worker thread, it only
        requests the stop and keeps the path; the worker exits once the
        handler returns. Assign None before following the same path again.
        """
        if self._on_worker_thread():
            with self._condition:
                self._stopping = True
                self._condition.notify_all()
            return

        with self._control_lock:
            self._stop_worker()

            with self._lock:
                path, self._path = self._path, None
                self._reset_session()

            if path is not None:
                self.logger.debug(f"Tailer closed, no longer following {path}")
                self._publish(PATH_CHANGED, None)

    # Worker management

    def _on_worker_thread(self) -> bool:
        with self._lock:
            return self._thread is threading.current_thread()

    def _start_worker(self, path: str) -> None:
        thread = threading.Thread(target=self._run, args=(path,),
                                  name=f"Tailer-{os.path.basename(path)}", daemon=True)
        with self._lock:
            self._stopping = False
            self._thread = thread
        thread.start()

    def _stop_worker(self) -> None:
        with self._condition:
            thread = self._thread
            if thread is None:
                return
            self._stopping = True
            self._condition.notify_all()

        thread.join()

        with self._lock:
            self._thread = None
            self._stopping = False

    def _run(self, path: str) -> None:
        """Main tailing loop, one pass over the file per iteration."""
        self.logger.info(f"Tailing started: {path}")
        try:
            while self._wait_while_paused():
                if not self._read_pass(path):
                    break
                if not self._wait_while_paused():
                    break
                if not self._sleep(self.poll_interval):
                    break
        except Exception as e:
            self.logger.exception(f"Tailer loop failed for {path}")
            self._fail(f"Error reading file: {path}: {e}")
        self.logger.info(f"Tailing stopped: {path}")

    def _read_pass(self, path: str) -> bool:
        """
        Hand everything between the read offset and the current end of file
        to the parser.

        Returns:
            False if the loop must exit
        """
        try:
            stream = open(path, 'rb')
        except OSError as e:
            self.logger.error(f"Can't open file {path}: {e}")
            self._fail(f"Can't open file: {path}")
            return False

        with stream:
            size = stream.seek(0, os.SEEK_END)
            stat_info = os.fstat(stream.fileno())
            identity = (stat_info.st_dev, stat_info.st_ino)
            stream.seek(0)
            head = stream.read(min(self.HEAD_SIZE, size))

            with self._lock:
                size_changed = size != self._file_size
                self._file_size = size
                reason = self._rotation_reason(size, identity, head)
                if reason:
                    self.logger.debug(f"{path} {reason}, reading from the start")
                restart = self._read_offset is None or reason is not None
                start = 0 if restart else self._read_offset
                # Bytes appended after this point wait for the next pass
                self._read_offset = size
                self._identity = identity
                self._head = head

            if size_changed:
                self._publish(SIZE_CHANGED, size)

            if restart:
                self.parser.reset()
            self.parser.on_new_entry = self._on_new_entry

            stream.seek(start)
            position = start
            while position < size:
                if self._stop_requested():
                    return False
                chunk = stream.read(min(self.chunk_size, size - position))
                if not chunk:
                    break
                self.parser.feed(chunk, position)
                position += len(chunk)

        self._publish(BATCH_END, size)
        return True

    def _rotation_reason(self, size: int, identity: Tuple[int, int], head: bytes) -> Optional[str]:
        """
        Tell whether the file was truncated or replaced since the last pass.

        Must be called with the lock held. A file truncated in place and
        rewritten with the same leading bytes, up to at least the previous
        size, within one poll interval is indistinguishable from an append.

        Returns:
            A description of the change, or None if the file was only appended to
        """
        if self._read_offset is None:
            return None
        if self._read_offset > size:
            return f"shrank from {self._read_offset} to {size} bytes"
        if identity != self._identity:
            return "was replaced"
        if head[:len(self._head)] != self._head:
            return "was rewritten"
        return None

    def _reset_session(self) -> None:
        # Lock held by the caller
        self._file_size = None
        self._read_offset = None
        self._identity = None
        self._head = None

    def _wait_while_paused(self) -> bool:
        """Block while paused. Returns False once a stop is requested."""
        with self._condition:
            while self._paused and not self._stopping:
                self._condition.wait(self.pause_timeout)
            return not self._stopping

    def _sleep(self, interval: float) -> bool:
        """Sleep for ``interval`` seconds unless a stop is requested first."""
        deadline = time.monotonic() + interval
        with self._condition:
            while not self._stopping:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                self._condition.wait(remaining)
            return not self._stopping

    def _stop_requested(self) -> bool:
        with self._lock:
            return self._stopping

    def _fail(self, message: str) -> None:
        with self._lock:
            self._stopping = True
        self._publish(ERROR, message)

    def _on_new_entry(self, entry: Any) -> None:
        self._publish(NEW_ENTRY, entry)

    def _publish(self, event_type: str, data: Any) -> None:
        self.event_bus.publish(event_type, data, source=self.EVENT_SOURCE)
