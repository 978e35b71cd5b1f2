"""CLI entrypoint for watchtee."""

import logging
from typing import Optional, Tuple

import click
from dotenv import load_dotenv

from watchtee.config import ConfigError, debug_enabled, load_config
from watchtee.signals import SignalBridge, SignalSetupError
from watchtee.sink import OutputSink, SinkError
from watchtee.supervisor import run_supervisor_loop
from watchtee.tail import TailStreamer

# Load .env file on CLI startup
load_dotenv()


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(1)


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
    }
)
@click.version_option(package_name="watchtee")
@click.option(
    "-d",
    "--delay",
    type=click.FloatRange(min=0),
    default=None,
    help="Seconds to wait between runs (default: 1).",
)
@click.option(
    "-l",
    "--log",
    "log_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Log file to write; truncated on start. A temporary file is used if omitted.",
)
@click.option(
    "-k",
    "--keep-going",
    is_flag=True,
    help="Keep going when the command fails.",
)
@click.option(
    "--plain",
    is_flag=True,
    help="Do not decorate status lines.",
)
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
def cli(
    delay: Optional[float],
    log_path: Optional[str],
    keep_going: bool,
    plain: bool,
    command: Tuple[str, ...],
):
    """Run COMMAND repeatedly, teeing its output to a log and the terminal.

    Everything after COMMAND is passed to it untouched. Ctrl-C terminates
    the command and everything it started.
    """
    if debug_enabled():
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )

    try:
        config = load_config(
            command,
            delay=delay,
            log_path=log_path,
            keep_going=keep_going,
            decorate=not plain,
        )
    except ConfigError as e:
        _fail(str(e))

    try:
        sink = OutputSink.open(config.log_path)
    except SinkError as e:
        _fail(str(e))

    with sink:
        try:
            streamer = TailStreamer(sink, poll_interval=config.poll_interval).start()
        except SinkError as e:
            _fail(str(e))

        bridge = SignalBridge(on_shutdown=streamer.drain)
        try:
            bridge.install()
        except SignalSetupError as e:
            streamer.stop()
            _fail(str(e))

        try:
            run_supervisor_loop(config, sink)
        except OSError as e:
            _fail(f"failed to write to log: {e}")
        finally:
            streamer.drain()
            streamer.stop()
            bridge.restore()
