"""Deterministic RNG for reproducible daily cases.

The generator is a 31-bit linear congruential generator using integer
arithmetic only, so a seed produces the same stream on every platform.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Sequence, TypeVar

T = TypeVar("T")

_MULTIPLIER = 1103515245
_INCREMENT = 12345
_MASK = 0x7FFFFFFF
_MODULUS = _MASK + 1


@dataclass
class Rng:
    seed: int
    _state: int = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._state = self.seed & _MASK

    def random(self) -> float:
        """Next float in [0, 1)."""
        self._state = (self._state * _MULTIPLIER + _INCREMENT) & _MASK
        return self._state / _MODULUS

    def below(self, n: int) -> int:
        if n <= 0:
            raise ValueError("below requires a positive bound")
        return int(self.random() * n)

    def randint(self, a: int, b: int) -> int:
        return a + self.below(b - a + 1)

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise IndexError("choice from an empty sequence")
        return seq[self.below(len(seq))]

    def shuffle(self, seq: list[T]) -> None:
        # Fisher-Yates: exactly len(seq) - 1 draws, last index down to 1.
        for i in range(len(seq) - 1, 0, -1):
            j = self.below(i + 1)
            seq[i], seq[j] = seq[j], seq[i]

    def shuffled(self, seq: Iterable[T]) -> list[T]:
        items = list(seq)
        self.shuffle(items)
        return items

    def sample(self, seq: Sequence[T], k: int) -> list[T]:
        if k > len(seq):
            raise ValueError("sample larger than population")
        return self.shuffled(seq)[:k]

    def weighted_choice(self, items: Iterable[tuple[T, float]]) -> T:
        items_list = list(items)
        total = sum(weight for _, weight in items_list)
        if total <= 0:
            raise ValueError("weighted_choice requires positive total weight")
        pick = self.random() * total
        cumulative = 0.0
        for value, weight in items_list:
            cumulative += weight
            if pick < cumulative:
                return value
        return items_list[-1][0]


def today_seed(today: date | None = None) -> int:
    """Seed shared by every player on the same calendar day."""
    day = today or date.today()
    return day.year * 10000 + day.month * 100 + day.day


def replay_seed(now: datetime | None = None) -> int:
    """Fresh seed for a replay, derived from the current timestamp."""
    moment = now or datetime.now()
    return int(moment.timestamp() * 1000)
