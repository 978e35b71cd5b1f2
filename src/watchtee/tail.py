"""Live tail: mirror new bytes of the output sink to the console, like `tail -f`."""

import logging
import os
import sys
import threading
from typing import BinaryIO, Callable, Optional

import click

from watchtee.constants import DEFAULT_POLL_INTERVAL_S, TAIL_CHUNK_SIZE
from watchtee.sink import OutputSink, SinkError

lgr = logging.getLogger(__name__)

# A drain from the signal handler must not block on a poll it interrupted
LOCK_TIMEOUT_S = 1.0


def _abort(exc: BaseException) -> None:
    # Raised on the tail thread; SystemExit there would only end the thread.
    click.echo(f"Error: lost the output log: {exc}", err=True)
    os._exit(1)


class TailStreamer:
    """
    Follow the output sink from its length at construction time.

    Content already in the file when the streamer is created is never
    echoed. The cursor only moves forward, except that it is clamped to the
    file size if the file is truncated behind our back.
    """

    def __init__(
        self,
        sink: OutputSink,
        out: Optional[BinaryIO] = None,
        poll_interval: float = DEFAULT_POLL_INTERVAL_S,
        on_fatal: Optional[Callable[[BaseException], None]] = None,
    ):
        self.sink = sink
        self.out = out if out is not None else sys.stdout.buffer
        self.poll_interval = poll_interval
        self.on_fatal = on_fatal or _abort
        try:
            self.cursor = sink.length()
        except OSError as e:
            raise SinkError(f"failed to read log length: {e}") from e
        self._lock = threading.Lock()
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def poll(self) -> bytes:
        """Echo whatever was appended since the last call and return it."""
        if not self._lock.acquire(timeout=LOCK_TIMEOUT_S):
            return b""
        try:
            size = self.sink.length()
            if size < self.cursor:
                lgr.debug("Log truncated from %d to %d bytes", self.cursor, size)
                self.cursor = size
            data = self.sink.read_at(self.cursor, TAIL_CHUNK_SIZE)
        except OSError as e:
            self._stopped.set()
            self._lock.release()
            self.on_fatal(e)
            return b""

        try:
            if data:
                self.cursor += len(data)
                self.out.write(data)
                self.out.flush()
            return data
        finally:
            self._lock.release()

    def run(self) -> None:
        while not self._stopped.is_set():
            if not self.poll():
                self._stopped.wait(self.poll_interval)

    def start(self) -> "TailStreamer":
        self._thread = threading.Thread(target=self.run, name="watchtee-tail", daemon=True)
        self._thread.start()
        return self

    def drain(self) -> None:
        """Poll until everything written so far has been echoed."""
        while not self._stopped.is_set() and self.cursor < self.sink.length():
            if not self.poll():
                break

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stopped.set()
        if self._thread is not None:
            self._thread.join(timeout)
