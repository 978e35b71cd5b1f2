"""Command runner - one execution of the supervised command."""

import logging
import os
import subprocess
from dataclasses import dataclass
from typing import Sequence, Union

from watchtee.sink import OutputSink, SinkError

lgr = logging.getLogger(__name__)


@dataclass(frozen=True)
class Code:
    """The command exited normally with this status."""
    code: int


@dataclass(frozen=True)
class Interrupted:
    """The command was terminated by a signal and has no exit status."""
    signal: int


@dataclass(frozen=True)
class LaunchFailure:
    """The command could not be started or waited on."""
    cause: Exception


CommandResult = Union[Code, Interrupted, LaunchFailure]


def run_command(command: Sequence[str], sink: OutputSink) -> CommandResult:
    """
    Run the command once with stdout and stderr appended to the sink.

    Both streams get their own duplicate of the sink descriptor, so output
    interleaves in write order and reaches the file as it is produced. The
    child stays in our process group.
    Never retries. Never raises.
    """
    try:
        stdout = sink.duplicate()
    except SinkError as e:
        return LaunchFailure(e)
    try:
        stderr = sink.duplicate()
    except SinkError as e:
        os.close(stdout)
        return LaunchFailure(e)

    try:
        process = subprocess.Popen(list(command), stdout=stdout, stderr=stderr)
    except OSError as e:
        return LaunchFailure(e)
    finally:
        os.close(stdout)
        os.close(stderr)

    lgr.debug("Started pid=%d: %s", process.pid, " ".join(command))
    try:
        returncode = process.wait()
    except OSError as e:
        return LaunchFailure(e)

    if returncode < 0:
        return Interrupted(-returncode)
    return Code(returncode)
