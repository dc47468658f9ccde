"""
Random word and spy selection.
"""

import random
from typing import Optional, Protocol, Sequence, TypeVar

from .exceptions import EmptyPoolError
from .player import Player

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything that can draw a uniform integer in ``[0, n)``."""

    def randrange(self, stop: int) -> int:
        ...


class Randomizer:
    """Uniform picks over a caller-provided pool, backed by an injectable source."""

    def __init__(self, rng: Optional[RandomSource] = None, seed: Optional[int] = None):
        # Use seeded random if seed is provided
        self.rng = rng if rng is not None else random.Random(seed)

    def _pick(self, pool: Sequence[T], pool_name: str) -> T:
        if not pool:
            raise EmptyPoolError(pool_name)
        return pool[self.rng.randrange(len(pool))]

    def pick_word(self, word_bank: Sequence[str]) -> str:
        """Pick the secret word uniformly from the word bank."""
        return self._pick(word_bank, "word")

    def pick_spy(self, players: Sequence[Player]) -> str:
        """
        Pick the spy uniformly from the roster and return their id.
        Rounds are independent: previous spies are as likely as anyone else.
        """
        return self._pick(players, "player").id
