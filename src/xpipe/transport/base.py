"""Transport ABC — delivers one flushed chunk to a command."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from xpipe.errors import ConfigError


@dataclass(slots=True)
class FlushResult:
    """Result of piping one chunk into a command."""

    command: tuple[str, ...]
    size: int
    returncode: int
    elapsed: float = 0.0


class Transport(ABC):
    """Abstract base for chunk transports.

    ``run`` must either deliver the whole chunk and return, or raise an
    XpipeError.  The engine keeps ownership of the chunk's memory, so a
    transport must not hold on to ``data`` after returning.
    """

    def __init__(self, command: Sequence[str]) -> None:
        if not command:
            raise ConfigError("A command to pipe lines into is required")
        self._command = tuple(command)

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    @abstractmethod
    def run(self, data: bytes | memoryview) -> FlushResult:
        """Deliver ``data`` to a fresh instance of the command."""
        ...
