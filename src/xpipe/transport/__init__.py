"""Transports that deliver flushed chunks to a command."""

from xpipe.transport.base import FlushResult, Transport
from xpipe.transport.process import ProcessTransport, spawn_pipe, write_all

__all__ = ["FlushResult", "ProcessTransport", "Transport", "spawn_pipe", "write_all"]
