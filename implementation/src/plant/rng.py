from __future__ import annotations

import random
from typing import Iterable, List, Optional


class RandomSource:
    """Bounded integer draws, one instance shared by every pipeline stage.

    ``next(bound)`` returns an integer in ``[0, bound)``. A non-positive bound
    returns 0 and consumes no draw.
    """

    def next(self, bound: int) -> int:
        raise NotImplementedError


class SeededRandom(RandomSource):
    def __init__(self, seed: Optional[int] = None) -> None:
        self.seed = seed
        self._random = random.Random(seed)
        self.draws = 0

    def next(self, bound: int) -> int:
        if bound <= 0:
            return 0
        self.draws += 1
        return self._random.randrange(bound)


class ReplayRandom(RandomSource):
    """Plays back a scripted draw sequence, for tests that pin exact draws."""

    def __init__(self, values: Iterable[int], default: Optional[int] = None) -> None:
        self._values: List[int] = list(values)
        self._position = 0
        # Returned once the script runs out; None makes exhaustion an error.
        self.default = default
        self.bounds: List[int] = []

    @property
    def remaining(self) -> int:
        return len(self._values) - self._position

    def next(self, bound: int) -> int:
        if bound <= 0:
            return 0
        self.bounds.append(bound)
        if self._position >= len(self._values):
            if self.default is None:
                raise IndexError(f"replay exhausted after {self._position} draws")
            value = min(self.default, bound - 1)
        else:
            value = self._values[self._position]
            self._position += 1
        if not 0 <= value < bound:
            raise ValueError(f"scripted draw {value} outside [0, {bound})")
        return value
