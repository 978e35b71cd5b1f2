"""Output sink: the single append-only log shared by the child and the tail.

The child process writes through duplicated descriptors, the tail streamer
reads with positional reads. Every descriptor onto the file is in append mode,
so writes always land at the current end no matter where anyone else has
seeked to.
"""

import fcntl
import logging
import os
import tempfile
from typing import Optional

from watchtee.constants import TEMP_LOG_PREFIX

lgr = logging.getLogger(__name__)


class SinkError(Exception):
    """Raised when the log file cannot be opened or duplicated."""
    pass


def _set_append(fd: int) -> None:
    flags = fcntl.fcntl(fd, fcntl.F_GETFL)
    fcntl.fcntl(fd, fcntl.F_SETFL, flags | os.O_APPEND)


class OutputSink:
    """One open descriptor onto the backing log file."""

    def __init__(self, fd: int, path: Optional[str] = None):
        self.fd = fd
        self.path = path
        self.closed = False

    @classmethod
    def open(cls, path: Optional[str] = None) -> "OutputSink":
        """
        Open the log file, or an anonymous temp file when no path is given.

        An existing file at path is truncated. The anonymous file is removed
        by the OS once the last descriptor onto it is closed.

        Raises:
            SinkError: If the file cannot be created or opened.
        """
        try:
            if path is not None:
                fd = os.open(
                    path,
                    os.O_RDWR | os.O_CREAT | os.O_TRUNC | os.O_APPEND,
                    0o644,
                )
            else:
                with tempfile.TemporaryFile(prefix=TEMP_LOG_PREFIX) as handle:
                    fd = os.dup(handle.fileno())
                _set_append(fd)
        except OSError as e:
            raise SinkError(f"failed to open file for logging: {e}") from e

        lgr.debug("Opened output sink fd=%d path=%s", fd, path or "<temporary>")
        return cls(fd, path)

    def duplicate(self) -> int:
        """
        Return a new descriptor onto the same file.

        The caller owns the returned descriptor and must close it.
        """
        try:
            return os.dup(self.fd)
        except OSError as e:
            raise SinkError(f"failed to duplicate log handle: {e}") from e

    def length(self) -> int:
        return os.fstat(self.fd).st_size

    def read_at(self, offset: int, size: int) -> bytes:
        """Read up to size bytes at offset without moving any file offset."""
        return os.pread(self.fd, size, offset)

    def write(self, data: bytes) -> None:
        view = memoryview(data)
        while view:
            written = os.write(self.fd, view)
            view = view[written:]

    def write_line(self, text: str = "") -> None:
        self.write((text + "\n").encode("utf-8"))

    def close(self) -> None:
        if not self.closed:
            os.close(self.fd)
            self.closed = True

    def __enter__(self) -> "OutputSink":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
