"""DeadlineClock — deadlines measured on a monotonic clock."""

from __future__ import annotations

import time
from collections.abc import Callable


class DeadlineClock:
    """Computes deadlines and remaining time on a monotonic time source.

    Wall-clock adjustments never move a deadline.  The source defaults to
    :func:`time.monotonic` and can be swapped for a fake in tests.
    """

    def __init__(self, source: Callable[[], float] | None = None) -> None:
        self._source = source or time.monotonic

    def now(self) -> float:
        return self._source()

    def after(self, duration: float) -> float:
        """Return the deadline ``duration`` seconds from now."""
        return self.now() + duration

    def remaining(self, deadline: float) -> float:
        """Return seconds left until ``deadline``, never negative."""
        return max(deadline - self.now(), 0.0)

    def expired(self, deadline: float) -> bool:
        return self.remaining(deadline) == 0.0
