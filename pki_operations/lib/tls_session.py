"""Long-lived TLS peer processes exposed as duplex byte streams."""

import os
import subprocess
from collections.abc import Sequence
from typing import BinaryIO

from .errors import ExternalToolError
from .logging_config import LOGGER


class TLSSession:
    """A running TLS peer process and its stdin/stdout byte streams.

    The caller owns the session: it drives ``stdin``/``stdout`` and must
    call ``close()`` (or use the session as a context manager) to close the
    streams and terminate the process. Reads and writes block the calling
    thread; nothing here imposes a timeout.
    """

    def __init__(self, process: subprocess.Popen, stdin: BinaryIO, stdout: BinaryIO) -> None:
        self.process = process
        self.stdin = stdin
        self.stdout = stdout

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def returncode(self) -> int | None:
        return self.process.poll()

    def write(self, data: bytes) -> int:
        return self.stdin.write(data)

    def read(self, size: int = 4096) -> bytes:
        """Read up to size bytes, blocking until data arrives or the peer closes."""
        return self.stdout.read(size)

    def terminate(self) -> None:
        if self.process.poll() is None:
            self.process.terminate()

    def wait(self, timeout: float | None = None) -> int:
        return self.process.wait(timeout=timeout)

    def close(self, timeout: float = 5.0) -> int | None:
        """Close both streams, terminate the peer and reap it.

        Kills the process if it has not exited within ``timeout`` seconds.

        Returns:
            Process exit code
        """
        for stream in (self.stdin, self.stdout):
            if not stream.closed:
                stream.close()

        self.terminate()
        try:
            return self.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            self.process.kill()
            return self.process.wait()

    def __enter__(self) -> "TLSSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def spawn_session(command: Sequence[str], operation: str) -> TLSSession:
    """Start command with piped stdin/stdout and return it as a TLSSession.

    The stdout pipe is created before the stdin pipe, both before the
    process starts. Stderr is discarded.

    Raises:
        ExternalToolError: If a pipe cannot be created or the process cannot start
    """
    command = [str(arg) for arg in command]
    opened: list[int] = []

    try:
        stdout_read, stdout_write = os.pipe()
        opened += [stdout_read, stdout_write]
        stdin_read, stdin_write = os.pipe()
        opened += [stdin_read, stdin_write]
    except OSError as e:
        _close_fds(opened)
        raise ExternalToolError(f"{operation}: failed to create pipe", e) from e

    try:
        process = subprocess.Popen(
            command,
            stdin=stdin_read,
            stdout=stdout_write,
            stderr=subprocess.DEVNULL,
        )
    except OSError as e:
        _close_fds(opened)
        raise ExternalToolError(operation, e) from e

    # Child holds its own copies; parent keeps only its ends.
    _close_fds([stdin_read, stdout_write])

    LOGGER.info(
        "Started %s (pid %d)",
        command[1] if len(command) > 1 else command[0],
        process.pid,
        extra={"operation": operation, "command": " ".join(command)},
    )
    return TLSSession(
        process=process,
        stdin=os.fdopen(stdin_write, "wb", buffering=0),
        stdout=os.fdopen(stdout_read, "rb", buffering=0),
    )


def _close_fds(fds: list[int]) -> None:
    for fd in fds:
        os.close(fd)
