#!/usr/bin/env python3
"""
Completion watcher: follows a file that another process appends to and
reports when a line matching a pattern shows up.

wkhtmltopdf 0.10 RC2 never exits after writing its output, so the only
reliable completion signal is the ``EOF`` trailer appearing in the file.

MIT License - Copyright (c) 2025 HTML to PDF Converter
"""

import os
import re
import time
from enum import Enum
from typing import Callable, Optional, Pattern, Union

from .console import ConsoleLogger
from .errors import GenerationTimeoutError, WatchIOError
from .verification import COMPLETION_PATTERN


READ_CHUNK_SIZE = 64 * 1024


class WatchState(Enum):
    IDLE = "idle"
    WAITING_FOR_DELAY = "waiting_for_delay"
    WATCHING = "watching"
    MATCHED = "matched"
    TIMED_OUT = "timed_out"
    STOPPED = "stopped"  # abort_when() fired before a match


def read_as_text(line: Optional[bytes]) -> str:
    """Decode raw bytes one byte per character."""
    if not line:
        return ''
    return line.decode('latin-1')


class Watcher:
    """Watches newly appended bytes of a file for a pattern.

    A watcher is single use: ``watch_for`` moves it from IDLE through
    WAITING_FOR_DELAY and WATCHING to MATCHED, TIMED_OUT or STOPPED.
    """

    def __init__(self, file: Union[str, os.PathLike], delay: float = 0, timeout: float = 300,
                 poll_interval: float = 0.1, logger: Optional[ConsoleLogger] = None):
        """Initialize the watcher.

        Args:
            file: File to follow
            delay: Seconds to sleep before opening the file
            timeout: Seconds, counted from the start of the watch including the delay
            poll_interval: Seconds to wait when no new data is available
            logger: Optional logger for debug output
        """
        self.file = os.fspath(file)
        self.delay = delay or 0
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.logger = logger or ConsoleLogger()
        self.state = WatchState.IDLE
        self.offset = 0
        self._start: Optional[float] = None

    @property
    def elapsed(self) -> float:
        if self._start is None:
            return 0.0
        return time.monotonic() - self._start

    def watch_for(self, pattern: Union[bytes, str, Pattern] = COMPLETION_PATTERN,
                  callback: Optional[Callable[[str, Pattern], None]] = None,
                  abort_when: Optional[Callable[[], bool]] = None,
                  confirm: Optional[Callable[[], bool]] = None) -> WatchState:
        """Block until a newly written line matches ``pattern``.

        Args:
            pattern: Bytes or text regular expression
            callback: Called with ``(line, pattern)`` on match and on timeout
            abort_when: Polled between reads; when it returns True the
                remaining data is scanned once more and the watch stops
            confirm: Polled when a line matches; a False result means the
                writer is not finished yet, so the line is skipped and the
                watch goes on

        Returns:
            The final state (MATCHED or STOPPED)

        Raises:
            GenerationTimeoutError: If no match was seen within ``timeout``
            WatchIOError: If the file is missing, truncated or deleted
        """
        if self.state is not WatchState.IDLE:
            raise RuntimeError(f"Watcher for {self.file} has already been used")

        regex = self._compile(pattern)
        self._start = time.monotonic()

        self.state = WatchState.WAITING_FOR_DELAY
        if self.delay > 0:
            time.sleep(self.delay)

        try:
            f = open(self.file, 'rb', buffering=0)
        except FileNotFoundError:
            raise WatchIOError(f"{self.file} does not exist", path=self.file)

        with f:
            f.seek(0, os.SEEK_END)
            self.offset = f.tell()
            self.state = WatchState.WATCHING
            self.logger.debug(f"Watching {self.file} from offset {self.offset} for {regex.pattern!r}")
            return self._follow(f, regex, callback, abort_when, confirm)

    def _follow(self, f, regex: Pattern, callback, abort_when, confirm) -> WatchState:
        pending = b''
        last_line = b''

        while True:
            data = self._read_available(f)
            if data:
                pending += data
                matched, pending, last_line = self._scan(regex, pending, last_line, confirm)
                if matched is not None:
                    return self._matched(matched, regex, callback)

            if abort_when is not None and not data and abort_when():
                # Writer is gone; whatever it wrote last is already on disk
                data = self._read_available(f)
                if data:
                    pending += data
                    matched, pending, last_line = self._scan(regex, pending, last_line, confirm)
                    if matched is not None:
                        return self._matched(matched, regex, callback)
                self.state = WatchState.STOPPED
                self.logger.debug(f"Stopped watching {self.file}: writer finished without a match")
                return self.state

            elapsed = self.elapsed
            if elapsed > self.timeout:
                self.state = WatchState.TIMED_OUT
                if callback:
                    callback(read_as_text(pending or last_line), regex)
                raise GenerationTimeoutError(self.file, self.timeout, elapsed)

            if not data:
                self._wait(min(self.poll_interval, self.timeout - elapsed))

    def _matched(self, line: bytes, regex: Pattern, callback) -> WatchState:
        self.state = WatchState.MATCHED
        self.logger.debug(f"Matched {regex.pattern!r} in {self.file} after {self.elapsed:.2f}s")
        if callback:
            callback(read_as_text(line), regex)
        return self.state

    def _scan(self, regex: Pattern, pending: bytes, last_line: bytes, confirm=None):
        """Test complete lines, then the unterminated tail, against the pattern."""
        *lines, tail = pending.split(b'\n')
        for line in lines:
            line += b'\n'
            if regex.search(line) and self._confirmed(line, confirm):
                return line, b'', line
            last_line = line
        if tail and regex.search(tail) and self._confirmed(tail, confirm):
            return tail, b'', tail
        return None, tail, last_line

    def _confirmed(self, line: bytes, confirm) -> bool:
        if confirm is None or confirm():
            return True
        self.logger.debug(f"Skipping unconfirmed match {line!r} in {self.file}")
        return False

    def _read_available(self, f) -> bytes:
        self._check_file(f)
        chunks = []
        while True:
            chunk = f.read(READ_CHUNK_SIZE)
            if not chunk:
                break
            chunks.append(chunk)
            if len(chunk) < READ_CHUNK_SIZE:
                break
        data = b''.join(chunks)
        self.offset += len(data)
        return data

    def _check_file(self, f) -> None:
        st = os.fstat(f.fileno())
        if st.st_nlink == 0:
            raise WatchIOError(f"{self.file} was deleted while being watched", path=self.file)
        if st.st_size < self.offset:
            raise WatchIOError(
                f"{self.file} was truncated while being watched ({st.st_size} < {self.offset} bytes)",
                path=self.file,
            )

    def _wait(self, seconds: float) -> None:
        """Wait for more data, at most ``seconds``.

        Regular files always select as readable, so waiting for appended
        data means sleeping for the poll interval.
        """
        time.sleep(max(seconds, 0.001))

    @staticmethod
    def _compile(pattern: Union[bytes, str, Pattern]) -> Pattern:
        if isinstance(pattern, re.Pattern):
            if isinstance(pattern.pattern, str):
                return re.compile(pattern.pattern.encode('latin-1'), pattern.flags & ~re.UNICODE)
            return pattern
        if isinstance(pattern, str):
            pattern = pattern.encode('latin-1')
        return re.compile(pattern)
