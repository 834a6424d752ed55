"""ProcessTransport — one child process per flushed chunk."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import IO, cast

from xpipe.errors import CommandFailedError, PipeWriteError, SpawnError
from xpipe.transport.base import FlushResult, Transport

logger = logging.getLogger(__name__)


@contextmanager
def spawn_pipe(command: Sequence[str]) -> Iterator[subprocess.Popen[bytes]]:
    """Start ``command`` with its stdin bound to a new pipe.

    Yields the process; its ``stdin`` is the unbuffered write end.  stdout
    and stderr are inherited.  On leaving the block, by any path, the write
    end is closed and the child is reaped, so neither the descriptor nor
    the process can leak.  Raises SpawnError if the command cannot start.
    """
    try:
        proc = subprocess.Popen(list(command), stdin=subprocess.PIPE, bufsize=0)
    except OSError as exc:
        raise SpawnError(command, exc) from exc

    logger.debug("Spawned %s (pid %d)", command[0], proc.pid)
    try:
        yield proc
    finally:
        if proc.stdin is not None and not proc.stdin.closed:
            proc.stdin.close()
        proc.wait()


def write_all(fd: int, data: bytes | memoryview) -> None:
    """Write all of ``data`` to ``fd``, repeating after partial writes.

    EINTR is retried by the interpreter; other OSErrors propagate.
    """
    view = memoryview(data)
    while view:
        written = os.write(fd, view)
        view = view[written:]


class ProcessTransport(Transport):
    """Pipes each chunk into a freshly spawned command.

    The call blocks until the child exits, so at most one child is alive at
    a time.  Anything but a zero exit status is a failure.
    """

    def run(self, data: bytes | memoryview) -> FlushResult:
        start = time.monotonic()
        write_error: OSError | None = None

        with spawn_pipe(self._command) as proc:
            stdin = cast(IO[bytes], proc.stdin)  # Always a pipe here
            try:
                write_all(stdin.fileno(), data)
            except OSError as exc:
                logger.debug("Write to pid %d failed: %s", proc.pid, exc)
                write_error = exc
            finally:
                stdin.close()  # End of input for the child
            returncode = proc.wait()

        elapsed = time.monotonic() - start
        logger.debug(
            "%s consumed %d bytes, exit %d in %.3fs",
            self._command[0], len(data), returncode, elapsed,
        )

        # A child that stops reading early usually also reports why.
        if returncode != 0:
            raise CommandFailedError(self._command, returncode) from write_error
        if write_error is not None:
            raise PipeWriteError(self._command, write_error) from write_error

        return FlushResult(
            command=self._command,
            size=len(data),
            returncode=returncode,
            elapsed=elapsed,
        )
