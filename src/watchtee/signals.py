"""Signal bridge: turn Ctrl-C into a SIGTERM for the whole process group."""

import logging
import os
import signal
import sys
from typing import Callable, Dict, Optional

import click

lgr = logging.getLogger(__name__)


class SignalSetupError(Exception):
    """Raised when the interrupt handler cannot be installed."""
    pass


class SignalBridge:
    """
    SIGINT handler that tears down the supervised command tree.

    On the first SIGINT the supervisor stops listening for SIGINT and
    SIGTERM, sends SIGTERM to its own process group (which includes the
    command and everything it spawned), waits for a child to be reaped and
    exits: 0 if the wait succeeded, 1 if it failed. Interrupts arriving
    during that teardown are ignored.

    The OS calls are injectable for testing.
    """

    def __init__(
        self,
        on_shutdown: Optional[Callable[[], None]] = None,
        killpg: Callable[[int, int], None] = os.killpg,
        getpgrp: Callable[[], int] = os.getpgrp,
        wait: Callable[[], tuple] = os.wait,
        exit: Callable[[int], None] = sys.exit,
    ):
        self.on_shutdown = on_shutdown
        self._killpg = killpg
        self._getpgrp = getpgrp
        self._wait = wait
        self._exit = exit
        self._previous: Dict[int, object] = {}
        self.shutting_down = False

    def install(self) -> "SignalBridge":
        """
        Install the SIGINT handler.

        Raises:
            SignalSetupError: If called off the main thread or the OS refuses.
        """
        try:
            self._previous[signal.SIGTERM] = signal.getsignal(signal.SIGTERM)
            self._previous[signal.SIGINT] = signal.signal(signal.SIGINT, self.handle)
        except (ValueError, OSError) as e:
            raise SignalSetupError(f"error setting ctrl-c handler: {e}") from e
        return self

    def restore(self) -> None:
        """Put back whatever handlers were active before install()."""
        for signum, handler in self._previous.items():
            signal.signal(signum, handler)
        self._previous.clear()

    def handle(self, signum, frame) -> None:
        if self.shutting_down:
            return
        self.shutting_down = True
        signal.signal(signal.SIGINT, signal.SIG_IGN)
        # killpg below also reaches us
        signal.signal(signal.SIGTERM, signal.SIG_IGN)

        pgrp = self._getpgrp()
        lgr.debug("Interrupted, sending SIGTERM to process group %d", pgrp)
        try:
            self._killpg(pgrp, signal.SIGTERM)
        except OSError as e:
            click.echo(f"Error: failed to terminate process group: {e}", err=True)

        try:
            self._wait()
            code = 0
        except OSError as e:
            lgr.debug("Waiting for the process group failed: %s", e)
            code = 1

        if self.on_shutdown is not None:
            self.on_shutdown()
        self._exit(code)
