"""Exception hierarchy for xpipe.

Every fatal condition of a run derives from :class:`XpipeError`.  Each class
carries the process exit status the CLI should report for it.
"""

from __future__ import annotations

import errno
from collections.abc import Sequence


class XpipeError(Exception):
    """Base class for fatal xpipe errors."""

    exit_code: int = 1


class ConfigError(XpipeError):
    """Raised when a configuration value is missing or out of range."""

    exit_code = 2


class BufferFullError(XpipeError):
    """Raised when the buffer fills up without a line terminator in it.

    Splitting a line mid-stream is never done, so the only way out is to
    abort the run.
    """

    def __init__(self, capacity: int) -> None:
        super().__init__(
            f"Buffer full: no line terminator within {capacity} bytes "
            "(increase the buffer size)",
        )
        self.capacity = capacity


class SpawnError(XpipeError):
    """Raised when the command cannot be started."""

    def __init__(self, command: Sequence[str], cause: OSError) -> None:
        super().__init__(f"Failed to start {command[0]!r}: {cause.strerror or cause}")
        self.command = tuple(command)
        self.cause = cause

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        # Shell conventions: 127 not found, 126 found but not executable.
        if self.cause.errno == errno.ENOENT:
            return 127
        return 126


class CommandFailedError(XpipeError):
    """Raised when the command exits nonzero or is killed by a signal.

    ``returncode`` follows :mod:`subprocess`: negative values are signals.
    """

    def __init__(self, command: Sequence[str], returncode: int) -> None:
        if returncode < 0:
            detail = f"killed by signal {-returncode}"
        else:
            detail = f"exited with status {returncode}"
        super().__init__(f"Command {command[0]!r} {detail}")
        self.command = tuple(command)
        self.returncode = returncode

    @property
    def exit_code(self) -> int:  # type: ignore[override]
        if self.returncode < 0:
            return 128 - self.returncode
        return self.returncode


class PipeWriteError(XpipeError):
    """Raised when writing to the command's input pipe fails."""

    def __init__(self, command: Sequence[str], cause: OSError) -> None:
        super().__init__(f"Failed to write to {command[0]!r}: {cause.strerror or cause}")
        self.command = tuple(command)
        self.cause = cause
