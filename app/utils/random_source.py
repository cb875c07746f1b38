"""
Random Source
=============
Injectable pseudorandom generator shared by file selection, rule
shuffling and symptom shuffling.

Production code builds an unseeded source per request; tests pass
RandomSource(seed=...) so every choice is reproducible.
"""
import random
import string
from typing import List, Optional, TypeVar

T = TypeVar("T")

_TOKEN_ALPHABET = string.ascii_lowercase + string.digits


class RandomSource:
    """
    Thin wrapper over random.Random exposing only what the engine needs.

    Parameters
    ----------
    seed : int or None
        Seed for reproducible sequences. None uses OS entropy.
    """

    def __init__(self, seed: Optional[int] = None) -> None:
        self._rng = random.Random(seed)

    def next_int(self, upper: int) -> int:
        """Return an integer in [0, upper)."""
        if upper <= 0:
            raise ValueError("upper must be positive")
        return self._rng.randrange(upper)

    def randint(self, low: int, high: int) -> int:
        """Return an integer in [low, high], both inclusive."""
        return low + self.next_int(high - low + 1)

    def shuffle(self, items: List[T]) -> List[T]:
        """Fisher-Yates shuffle in place. Returns the same list."""
        for i in range(len(items) - 1, 0, -1):
            j = self.next_int(i + 1)
            items[i], items[j] = items[j], items[i]
        return items

    def token(self, length: int = 13) -> str:
        """Short alphanumeric token, used as a variety seed in prompts."""
        return "".join(
            _TOKEN_ALPHABET[self.next_int(len(_TOKEN_ALPHABET))] for _ in range(length)
        )
