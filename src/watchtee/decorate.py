"""Decorative framing for status annotations."""

import random
from typing import Optional

from watchtee.constants import SPARKLE_SYMBOLS


class Decorator:
    """
    Frame messages with a random handful of sparkle symbols.

    The number of symbols is picked once per decorator; which symbols appear
    is picked per message. The random source is passed in so output can be
    made deterministic.
    """

    def __init__(self, rng: Optional[random.Random] = None, enabled: bool = True):
        self.rng = rng or random.Random()
        self.enabled = enabled
        self.amount = self.rng.randrange(len(SPARKLE_SYMBOLS) - 1) + 1

    def sparkles(self) -> str:
        return "".join(self.rng.sample(SPARKLE_SYMBOLS, self.amount))

    def __call__(self, message: str) -> str:
        if not self.enabled:
            return message
        return f"{self.sparkles()} {message} {self.sparkles()}"


def plain() -> Decorator:
    """A decorator that leaves messages untouched."""
    return Decorator(enabled=False)
