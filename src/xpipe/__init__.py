"""xpipe — pipe a byte stream into a command, one chunk of lines at a time.

Usage:
    import xpipe

    config = xpipe.XpipeConfig(command=("awk", "{ print NR, $0 }"), timeout=1)
    stats = xpipe.run(config)  # reads stdin until end-of-stream
"""

__version__ = "0.3.0"

from xpipe.core.engine import Engine, EngineState, EngineStats, run
from xpipe.errors import (
    BufferFullError,
    CommandFailedError,
    ConfigError,
    PipeWriteError,
    SpawnError,
    XpipeError,
)
from xpipe.transport import FlushResult, ProcessTransport, Transport
from xpipe.types.config import XpipeConfig

__all__ = [
    # Core API
    "run",
    "Engine",
    "EngineState",
    "EngineStats",
    # Configuration
    "XpipeConfig",
    # Transports
    "FlushResult",
    "ProcessTransport",
    "Transport",
    # Errors
    "BufferFullError",
    "CommandFailedError",
    "ConfigError",
    "PipeWriteError",
    "SpawnError",
    "XpipeError",
]
