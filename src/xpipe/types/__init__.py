"""Type definitions for xpipe."""

from xpipe.types.config import DEFAULT_BUFFER_SIZE, XpipeConfig
from xpipe.types.io import EOF_RESULT, TIMEOUT_RESULT, Readiness, ReadResult, ReadStatus

__all__ = [
    "DEFAULT_BUFFER_SIZE",
    "EOF_RESULT",
    "ReadResult",
    "ReadStatus",
    "Readiness",
    "TIMEOUT_RESULT",
    "XpipeConfig",
]
