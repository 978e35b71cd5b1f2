"""watchtee - run a command on repeat, tee its output to a log and the console."""

__version__ = "0.1.0"
