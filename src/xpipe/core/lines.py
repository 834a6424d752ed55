"""Line boundary search."""

from __future__ import annotations

TERMINATOR = b"\n"


def find_last_terminator(data: bytes | bytearray, end: int | None = None) -> int | None:
    """Return the index of the last newline in ``data[:end]``, or None.

    The search runs backwards from ``end`` so a terminator near the end of
    the range is found without touching the rest of it.
    """
    if end is None:
        end = len(data)
    index = data.rfind(TERMINATOR, 0, end)
    if index == -1:
        return None
    return index


def flushable_length(data: bytes | bytearray, end: int | None = None) -> int:
    """Return how many leading bytes of ``data[:end]`` form complete lines."""
    index = find_last_terminator(data, end)
    if index is None:
        return 0
    return index + 1  # Include the terminator itself
