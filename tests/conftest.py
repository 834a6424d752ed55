"""Test fixtures including RecordingTransport and InputPipe."""

from __future__ import annotations

import os
import signal
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import pytest

from xpipe.errors import CommandFailedError
from xpipe.transport.base import FlushResult, Transport
from xpipe.transport.process import write_all


class RecordingTransport(Transport):
    """A transport that records every chunk instead of spawning a command.

    Usage:
        transport = RecordingTransport(fail_on=2, returncode=123)
        # The second flush raises CommandFailedError(returncode=123)
    """

    def __init__(
        self,
        command: tuple[str, ...] = ("recorder",),
        *,
        fail_on: int | None = None,
        returncode: int = 1,
    ) -> None:
        super().__init__(command)
        self._fail_on = fail_on
        self._returncode = returncode
        self.chunks: list[bytes] = []

    def run(self, data: bytes | memoryview) -> FlushResult:
        chunk = bytes(data)
        self.chunks.append(chunk)
        if self._fail_on is not None and len(self.chunks) == self._fail_on:
            raise CommandFailedError(self.command, self._returncode)
        return FlushResult(command=self.command, size=len(chunk), returncode=0)


class InputPipe:
    """An OS pipe standing in for stdin.

    ``feed`` writes everything up front; ``feed_slowly`` takes bytes and
    sleep durations and plays them from a background thread.
    """

    def __init__(self) -> None:
        self.read_fd, self._write_fd = os.pipe()
        self._thread: threading.Thread | None = None

    def close_writer(self) -> None:
        if self._write_fd is not None:
            os.close(self._write_fd)
            self._write_fd = None

    def write(self, data: bytes) -> None:
        assert self._write_fd is not None
        write_all(self._write_fd, data)

    def feed(self, data: bytes) -> int:
        self.write(data)
        self.close_writer()
        return self.read_fd

    def feed_slowly(self, *parts: bytes | float) -> int:
        def _play() -> None:
            for part in parts:
                if isinstance(part, bytes):
                    self.write(part)
                else:
                    time.sleep(part)
            self.close_writer()

        self._thread = threading.Thread(target=_play, daemon=True)
        self._thread.start()
        return self.read_fd

    def close(self) -> None:
        if self._thread is not None:
            self._thread.join(timeout=10)
        self.close_writer()
        os.close(self.read_fd)


@pytest.fixture
def input_pipe() -> Iterator[InputPipe]:
    pipe = InputPipe()
    yield pipe
    pipe.close()


@pytest.fixture
def recorder() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the user's environment and ~/.xpipe out of every test."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("XPIPE_BUFFER_SIZE", raising=False)
    monkeypatch.delenv("XPIPE_TIMEOUT", raising=False)
    return home


@contextmanager
def interrupting_alarm(interval: float = 0.02) -> Iterator[list[int]]:
    """Deliver SIGALRM every ``interval`` seconds to interrupt blocking calls.

    Yields the list of signals handled so far.
    """
    hits: list[int] = []

    def _handler(signum: int, frame: object) -> None:
        hits.append(signum)

    previous = signal.signal(signal.SIGALRM, _handler)
    signal.setitimer(signal.ITIMER_REAL, interval, interval)
    try:
        yield hits
    finally:
        signal.setitimer(signal.ITIMER_REAL, 0)
        signal.signal(signal.SIGALRM, previous)


@pytest.fixture
def interrupts() -> Iterator[list[int]]:
    with interrupting_alarm() as hits:
        yield hits
