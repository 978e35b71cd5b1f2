"""Shared fixtures for watchtee tests."""

import pytest

from watchtee.sink import OutputSink


@pytest.fixture
def sink(tmp_path):
    """An output sink backed by a file under tmp_path."""
    with OutputSink.open(str(tmp_path / "run.log")) as opened:
        yield opened


@pytest.fixture(autouse=True)
def _no_env_config(monkeypatch):
    """Keep the caller's WATCHTEE_* variables out of the tests."""
    for name in (
        "WATCHTEE_DELAY",
        "WATCHTEE_LOG",
        "WATCHTEE_KEEP_GOING",
        "WATCHTEE_POLL_INTERVAL",
        "WATCHTEE_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
