"""Allow ``python -m watchtee``."""

from watchtee.cli import cli

if __name__ == "__main__":
    cli(prog_name="watchtee")
