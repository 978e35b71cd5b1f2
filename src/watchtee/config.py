"""Configuration loading for the watchtee CLI."""

import math
import os
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from dotenv import load_dotenv

from watchtee.constants import DEFAULT_DELAY_S, DEFAULT_POLL_INTERVAL_S, TRUE_VALUES


@dataclass(frozen=True)
class Config:
    """Run parameters, fixed for the lifetime of the supervisor."""

    command: Tuple[str, ...]
    delay: float = DEFAULT_DELAY_S
    log_path: Optional[str] = None
    keep_going: bool = False
    decorate: bool = True
    poll_interval: float = DEFAULT_POLL_INTERVAL_S


class ConfigError(Exception):
    """Raised when the run parameters are missing or invalid."""
    pass


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number of seconds, got: {raw!r}")


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in TRUE_VALUES


def debug_enabled() -> bool:
    """True when WATCHTEE_DEBUG asks for internal tracing."""
    return _env_flag("WATCHTEE_DEBUG")


def load_config(
    command: Sequence[str],
    delay: Optional[float] = None,
    log_path: Optional[str] = None,
    keep_going: bool = False,
    decorate: bool = True,
) -> Config:
    """
    Build the run configuration from CLI values and environment defaults.

    Values given on the command line win. Anything left unset falls back to
    WATCHTEE_DELAY, WATCHTEE_LOG, WATCHTEE_KEEP_GOING and
    WATCHTEE_POLL_INTERVAL (a .env file in the working directory is honoured).

    Args:
        command: The command and its arguments, passed verbatim.
        delay: Seconds to sleep between iterations.
        log_path: Log file to (re)create; a temporary file is used when None.
        keep_going: Continue iterating after a non-zero exit code.
        decorate: Frame annotations with sparkles.

    Returns:
        A frozen Config.

    Raises:
        ConfigError: If the command is empty or a numeric value is invalid.
    """
    load_dotenv()

    command = tuple(command)
    if not command or not command[0]:
        raise ConfigError("A command to run is required.")

    if delay is None:
        delay = _env_float("WATCHTEE_DELAY", DEFAULT_DELAY_S)
    if not math.isfinite(delay):
        raise ConfigError(f"Delay must be a finite number of seconds, got: {delay}")
    if delay < 0:
        raise ConfigError(f"Delay must not be negative, got: {delay}")

    poll_interval = _env_float("WATCHTEE_POLL_INTERVAL", DEFAULT_POLL_INTERVAL_S)
    if not math.isfinite(poll_interval) or poll_interval < 0:
        raise ConfigError(f"WATCHTEE_POLL_INTERVAL must be a finite, non-negative number, got: {poll_interval}")

    if log_path is None:
        log_path = os.environ.get("WATCHTEE_LOG") or None

    return Config(
        command=command,
        delay=delay,
        log_path=log_path,
        keep_going=keep_going or _env_flag("WATCHTEE_KEEP_GOING"),
        decorate=decorate,
        poll_interval=poll_interval,
    )
