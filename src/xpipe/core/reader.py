"""Deadline-aware reads from a blocking descriptor."""

from __future__ import annotations

import logging
import os
import selectors

from xpipe.core.clock import DeadlineClock
from xpipe.types.io import EOF_RESULT, TIMEOUT_RESULT, Readiness, ReadResult

logger = logging.getLogger(__name__)

# epoll refuses regular files, poll and select accept them.
_Selector = getattr(selectors, "PollSelector", selectors.SelectSelector)


def wait_readable(
    fd: int, deadline: float | None, clock: DeadlineClock,
) -> Readiness:
    """Block until ``fd`` is readable or ``deadline`` passes.

    The wait is re-armed with the time remaining on ``clock`` each time
    round, so an early wakeup never stretches or shortens the deadline.
    With no deadline this blocks until the descriptor is readable.
    OSError from the selector propagates.
    """
    with _Selector() as selector:
        selector.register(fd, selectors.EVENT_READ)
        while True:
            timeout = None if deadline is None else clock.remaining(deadline)
            if selector.select(timeout):
                return Readiness.READY
            if deadline is not None and clock.expired(deadline):
                return Readiness.TIMED_OUT


def try_read(
    fd: int,
    buffer: memoryview,
    deadline: float | None = None,
    clock: DeadlineClock | None = None,
) -> ReadResult:
    """Read once from ``fd`` into ``buffer``.

    Returns DATA with the byte count, EOF when the stream has ended, or
    TIMEOUT when ``deadline`` passed with nothing ready.  Without a deadline
    it never times out.  Short reads are returned as they are.  Interrupted
    system calls are retried by the interpreter; any other OSError
    propagates.
    """
    if not len(buffer):
        raise ValueError("try_read needs a non-empty buffer")

    if deadline is not None:
        clock = clock or DeadlineClock()
        if wait_readable(fd, deadline, clock) is Readiness.TIMED_OUT:
            logger.debug("No input on fd %d before the deadline", fd)
            return TIMEOUT_RESULT

    count = os.readv(fd, [buffer])
    if count == 0:
        return EOF_RESULT
    return ReadResult.data(count)
