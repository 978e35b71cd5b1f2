"""Supervisor loop - run the command over and over until something stops it."""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from watchtee.config import Config
from watchtee.constants import SETTLE_PAUSE_S
from watchtee.decorate import Decorator, plain
from watchtee.runner import Code, CommandResult, Interrupted, LaunchFailure, run_command
from watchtee.sink import OutputSink

lgr = logging.getLogger(__name__)


@dataclass
class SupervisorState:
    iterations: int = 0
    failures: int = 0
    status: str = "RUNNING"  # RUNNING | STOPPED
    stop_reason: Optional[str] = None  # FAILED | LAUNCH_FAILURE | INTERRUPTED
    last_result: Optional[CommandResult] = None


def format_duration(seconds: float) -> str:
    """Format duration in human-readable form."""
    if seconds < 1:
        return f"{seconds*1000:.0f}ms"
    elif seconds < 60:
        return f"{seconds:.1f}s"
    else:
        mins = int(seconds // 60)
        secs = seconds % 60
        return f"{mins}m {secs:.0f}s"


def status_line(state: SupervisorState, keep_going: bool, elapsed: float) -> str:
    if keep_going:
        counts = f"Iterations: {state.iterations}, failures: {state.failures}"
    else:
        counts = f"Iterations: {state.iterations}"
    return f"{counts}, elapsed time: {format_duration(elapsed)}"


def _stop(state: SupervisorState, reason: str) -> SupervisorState:
    state.status = "STOPPED"
    state.stop_reason = reason
    lgr.debug("Stopping after %d iteration(s): %s", state.iterations, reason)
    return state


def iteration_node(
    state: SupervisorState,
    config: Config,
    sink: OutputSink,
    decorate: Decorator,
    runner: Callable[..., CommandResult] = run_command,
    sleep: Callable[[float], None] = time.sleep,
) -> SupervisorState:
    """
    Run one iteration: execute the command, annotate, then pause.

    A non-zero exit is counted and stops the loop unless keep_going is set.
    Launch failures and interruptions always stop it. When the loop goes on,
    a blank line and a status line are appended and the configured delay is
    slept.
    """
    start = time.monotonic()
    result = runner(config.command, sink)
    state.last_result = result

    if isinstance(result, Code):
        if result.code != 0:
            state.failures += 1
            sink.write_line(decorate(f"Command exited with code: {result.code}"))
            if not config.keep_going:
                return _stop(state, "FAILED")
    elif isinstance(result, LaunchFailure):
        sink.write_line(decorate(f"Failed to launch command: {result.cause}"))
        return _stop(state, "LAUNCH_FAILURE")
    elif isinstance(result, Interrupted):
        sink.write_line(decorate("Command was interrupted!"))
        return _stop(state, "INTERRUPTED")

    state.iterations += 1

    sleep(SETTLE_PAUSE_S)
    sink.write_line()
    sink.write_line(decorate(status_line(state, config.keep_going, time.monotonic() - start)))

    sleep(config.delay)
    return state


def run_supervisor_loop(
    config: Config,
    sink: OutputSink,
    decorate: Optional[Decorator] = None,
    runner: Callable[..., CommandResult] = run_command,
    sleep: Callable[[float], None] = time.sleep,
    max_iterations: Optional[int] = None,
) -> SupervisorState:
    """
    Main supervisor loop.

    Args:
        config: Run parameters.
        sink: Where the command output and annotations go.
        decorate: Annotation formatter (sparkles unless config.decorate is off).
        runner: Executes the command once; run_command by default.
        sleep: Used for the settle pause and the inter-iteration delay.
        max_iterations: Return once this many iterations completed. None runs
            until the loop stops on its own or the process is interrupted.

    Returns:
        The final SupervisorState.
    """
    if decorate is None:
        decorate = Decorator() if config.decorate else plain()

    state = SupervisorState()
    while state.status == "RUNNING":
        state = iteration_node(state, config, sink, decorate, runner=runner, sleep=sleep)
        if max_iterations is not None and state.iterations >= max_iterations:
            break
    return state
