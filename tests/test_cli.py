"""Tests for the watchtee CLI (CliRunner, real commands, zero delay)."""

import pytest
from click.testing import CliRunner

from watchtee.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestRun:
    """Whole runs that stop on their own."""

    def test_false_stops_after_one_failure(self, runner, tmp_path):
        log = tmp_path / "run.log"
        result = runner.invoke(cli, ["--plain", "--delay", "0", "--log", str(log), "false"])

        assert result.exit_code == 0
        assert log.read_text() == "Command exited with code: 1\n"
        assert "Command exited with code: 1" in result.output

    def test_output_is_mirrored_to_console(self, runner, tmp_path):
        log = tmp_path / "run.log"
        result = runner.invoke(
            cli, ["--plain", "--log", str(log), "sh", "-c", "echo hello; echo oops >&2; exit 4"],
        )

        assert result.exit_code == 0
        assert log.read_text() == "hello\noops\nCommand exited with code: 4\n"
        assert "hello\noops\n" in result.output

    def test_options_after_command_are_forwarded(self, runner, tmp_path):
        log = tmp_path / "run.log"
        result = runner.invoke(
            cli,
            ["--plain", "--log", str(log), "sh", "-c", 'echo "$@"; exit 1', "sh", "--keep-going", "-x"],
        )

        assert result.exit_code == 0
        assert log.read_text().splitlines() == ["--keep-going -x", "Command exited with code: 1"]

    def test_launch_failure_exits_zero(self, runner, tmp_path):
        log = tmp_path / "run.log"
        result = runner.invoke(
            cli, ["--plain", "--keep-going", "--log", str(log), "watchtee-no-such-command-xyz"],
        )

        assert result.exit_code == 0
        assert log.read_text().startswith("Failed to launch command:")

    def test_existing_log_is_truncated(self, runner, tmp_path):
        log = tmp_path / "run.log"
        log.write_text("stale\n")
        runner.invoke(cli, ["--plain", "--log", str(log), "false"])
        assert "stale" not in log.read_text()

    def test_temporary_log_when_no_path(self, runner):
        result = runner.invoke(cli, ["--plain", "false"])
        assert result.exit_code == 0
        assert "Command exited with code: 1" in result.output

    def test_log_path_from_environment(self, runner, tmp_path, monkeypatch):
        log = tmp_path / "env.log"
        monkeypatch.setenv("WATCHTEE_LOG", str(log))
        result = runner.invoke(cli, ["--plain", "false"])
        assert result.exit_code == 0
        assert log.read_text() == "Command exited with code: 1\n"


class TestErrors:
    """Setup errors and usage errors."""

    def test_missing_command_is_usage_error(self, runner):
        result = runner.invoke(cli, ["--delay", "1"])
        assert result.exit_code == 2

    def test_negative_delay_is_usage_error(self, runner):
        result = runner.invoke(cli, ["--delay", "-1", "true"])
        assert result.exit_code == 2

    def test_unopenable_log_is_fatal(self, runner, tmp_path):
        result = runner.invoke(cli, ["--log", str(tmp_path / "missing" / "run.log"), "true"])
        assert result.exit_code == 1
        assert "failed to open file for logging" in result.output

    def test_bad_environment_is_fatal(self, runner, monkeypatch):
        monkeypatch.setenv("WATCHTEE_DELAY", "soon")
        result = runner.invoke(cli, ["false"])
        assert result.exit_code == 1
        assert "WATCHTEE_DELAY" in result.output

    def test_nan_delay_is_fatal(self, runner, tmp_path):
        """A delay that is not a number is rejected before anything runs."""
        log = tmp_path / "run.log"
        result = runner.invoke(cli, ["--plain", "--delay", "nan", "--log", str(log), "true"])
        assert result.exit_code == 1
        assert "Error: Delay must be a finite number" in result.output
        assert not isinstance(result.exception, (ValueError, OverflowError))
        assert not log.exists()

    def test_infinite_env_delay_is_fatal(self, runner, tmp_path, monkeypatch):
        monkeypatch.setenv("WATCHTEE_DELAY", "inf")
        result = runner.invoke(cli, ["--plain", "--log", str(tmp_path / "run.log"), "true"])
        assert result.exit_code == 1
        assert "Error: Delay must be a finite number" in result.output
        assert not isinstance(result.exception, (ValueError, OverflowError))
