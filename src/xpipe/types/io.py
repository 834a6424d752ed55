"""Result types for the input side of the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Readiness(Enum):
    """Outcome of waiting for a descriptor to become readable."""

    READY = "ready"
    TIMED_OUT = "timed_out"


class ReadStatus(Enum):
    """What a single read attempt produced."""

    DATA = "data"
    EOF = "eof"
    TIMEOUT = "timeout"  # Deadline passed with nothing to read


@dataclass(frozen=True, slots=True)
class ReadResult:
    """Result of a single bounded read. ``count`` is nonzero only for DATA."""

    status: ReadStatus
    count: int = 0

    @classmethod
    def data(cls, count: int) -> ReadResult:
        return cls(ReadStatus.DATA, count)


EOF_RESULT = ReadResult(ReadStatus.EOF)
TIMEOUT_RESULT = ReadResult(ReadStatus.TIMEOUT)
