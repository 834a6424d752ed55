"""Engine — accumulates input and flushes complete lines to a command.

Usage:
    from xpipe.core.engine import run
    from xpipe.types.config import XpipeConfig

    stats = run(XpipeConfig(command=("awk", "{ print NR, $0 }"), timeout=1))
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from enum import Enum
from typing import IO

from xpipe.core.clock import DeadlineClock
from xpipe.core.lines import flushable_length
from xpipe.core.reader import try_read
from xpipe.errors import BufferFullError, ConfigError
from xpipe.transport.base import Transport
from xpipe.types.config import DEFAULT_BUFFER_SIZE, XpipeConfig
from xpipe.types.io import ReadStatus

logger = logging.getLogger(__name__)


class EngineState(Enum):
    """Lifecycle of an Engine."""

    IDLE = "idle"  # Buffer empty, no deadline
    ACCUMULATING = "accumulating"
    FLUSHING = "flushing"  # Inside a transport call
    FINISHED = "finished"
    FAILED = "failed"


@dataclass(slots=True)
class EngineStats:
    """Counters for a single run."""

    bytes_read: int = 0
    bytes_flushed: int = 0
    flushes: int = 0
    timeouts: int = 0


class Engine:
    """Owns the buffer and drives the read/flush loop for one run.

    Bytes are read into a fixed-size buffer.  Complete lines are flushed
    through the transport when the buffer fills up or when the input has
    been quiet for ``timeout`` seconds.  At end-of-stream the remaining
    lines are flushed, followed by any trailing partial line as a chunk of
    its own.

    The deadline is armed when bytes arrive while none is armed and is
    disarmed after every flush attempt, so a quiet period is measured from
    its first byte and not restarted by later partial reads.
    """

    def __init__(
        self,
        transport: Transport,
        *,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        timeout: float | None = None,
        clock: DeadlineClock | None = None,
    ) -> None:
        if buffer_size <= 0:
            raise ConfigError(f"Buffer size must be positive, got {buffer_size}")
        if timeout is not None and timeout < 0:
            raise ConfigError(f"Timeout must not be negative, got {timeout}")
        self._transport = transport
        self._buffer = bytearray(buffer_size)
        self._avail = 0
        self._timeout = timeout or None
        self._clock = clock or DeadlineClock()
        self._deadline: float | None = None
        self._state = EngineState.IDLE
        self._stats = EngineStats()

    # -- Properties -------------------------------------------------------

    @property
    def capacity(self) -> int:
        return len(self._buffer)

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def stats(self) -> EngineStats:
        return self._stats

    @property
    def deadline(self) -> float | None:
        return self._deadline

    @property
    def pending(self) -> bytes:
        """Bytes read but not yet flushed."""
        return bytes(self._buffer[: self._avail])

    # -- Main loop --------------------------------------------------------

    def run(self, fd: int) -> EngineStats:
        """Consume ``fd`` to end-of-stream, flushing through the transport.

        Raises BufferFullError, the transport's XpipeErrors, or OSError on
        input failure.  Nothing is retried after a failure.
        """
        if self._state in (EngineState.FINISHED, EngineState.FAILED):
            raise RuntimeError("Engine has already run")

        try:
            while True:
                with memoryview(self._buffer)[self._avail :] as free:
                    result = try_read(fd, free, self._deadline, self._clock)

                if result.status is ReadStatus.EOF:
                    logger.debug("End of input with %d bytes buffered", self._avail)
                    break

                if result.status is ReadStatus.DATA:
                    self._absorb(result.count)
                else:
                    self._stats.timeouts += 1

                if self._avail == self.capacity or result.status is ReadStatus.TIMEOUT:
                    self._flush_lines()

                if self._avail == self.capacity:
                    raise BufferFullError(self.capacity)

            self._flush_lines()
            if self._avail:
                self._flush(self._avail)
        except BaseException:
            self._state = EngineState.FAILED
            raise

        self._state = EngineState.FINISHED
        logger.info(
            "Read %d bytes, flushed %d bytes in %d chunks",
            self._stats.bytes_read, self._stats.bytes_flushed, self._stats.flushes,
        )
        return self._stats

    def _absorb(self, count: int) -> None:
        self._avail += count
        self._stats.bytes_read += count
        self._state = EngineState.ACCUMULATING
        if self._timeout is not None and self._deadline is None:
            self._deadline = self._clock.after(self._timeout)
            logger.debug("Quiet period started, flushing in %ss", self._timeout)

    def _flush_lines(self) -> None:
        """Flush the complete lines in the buffer, if there are any."""
        size = flushable_length(self._buffer, self._avail)
        if size:
            self._flush(size)
        self._deadline = None

    def _flush(self, size: int) -> None:
        """Send the first ``size`` buffered bytes and drop them."""
        self._state = EngineState.FLUSHING
        with memoryview(self._buffer)[:size] as chunk:
            self._transport.run(chunk)
        self._stats.flushes += 1
        self._stats.bytes_flushed += size

        remaining = self._avail - size
        self._buffer[:remaining] = self._buffer[size : self._avail]
        self._avail = remaining
        self._state = EngineState.ACCUMULATING if remaining else EngineState.IDLE
        logger.debug("Flushed %d bytes, %d left in buffer", size, remaining)


def run(
    config: XpipeConfig,
    stream: IO[bytes] | IO[str] | int | None = None,
    *,
    transport: Transport | None = None,
) -> EngineStats:
    """Pipe ``stream`` (default: stdin) into ``config.command`` line by line."""
    from xpipe.transport.process import ProcessTransport

    config.validate()
    if stream is None:
        stream = sys.stdin
    fd = stream if isinstance(stream, int) else stream.fileno()

    engine = Engine(
        transport or ProcessTransport(config.command),
        buffer_size=config.buffer_size,
        timeout=config.effective_timeout,
    )
    return engine.run(fd)
