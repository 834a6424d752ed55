"""Configuration types for xpipe."""

from __future__ import annotations

from dataclasses import dataclass

from xpipe.errors import ConfigError

DEFAULT_BUFFER_SIZE = 8192


@dataclass(frozen=True, slots=True)
class XpipeConfig:
    """Configuration for a single xpipe run.

    A ``timeout`` of ``None`` or ``0`` disables the quiet-period flush and
    reads block until data or end-of-stream.
    """

    command: tuple[str, ...]
    buffer_size: int = DEFAULT_BUFFER_SIZE
    timeout: float | None = None

    @property
    def effective_timeout(self) -> float | None:
        return self.timeout or None

    def validate(self) -> XpipeConfig:
        """Check every field and return self. Raises ConfigError."""
        if not self.command:
            raise ConfigError("A command to pipe lines into is required")
        if self.buffer_size <= 0:
            raise ConfigError(f"Buffer size must be positive, got {self.buffer_size}")
        if self.timeout is not None and self.timeout < 0:
            raise ConfigError(f"Timeout must not be negative, got {self.timeout}")
        return self
