"""
Tile spawning - where and with what value a new tile appears.

Easy mode picks uniformly from a small candidate set.
Hard mode can spawn anything up to two levels below the current maximum,
with a pool that roughly halves in weight at each level.
"""

from __future__ import annotations
import random

from .state import Difficulty, Grid, empty_indices, max_value


EASY_VALUES = (2, 4, 8)
EASY_BONUS_VALUE = 16
EASY_BONUS_THRESHOLD = 128

HARD_LOW_THRESHOLD = 16
HARD_TWO_PROBABILITY = 0.9
HARD_POOL_SCALE = 200


def level_weight(level: int) -> int:
    """Pool repetitions for level `level` (value 2**level). Never below 1."""
    return max(1, HARD_POOL_SCALE // (2 ** level))


def hard_level_pool(max_val: int) -> list[int]:
    """
    Weighted pool of levels 1..log2(max_val) - 2.

    Expects max_val >= 16 and a power of two.
    """
    max_level = max_val.bit_length() - 1 - 2
    pool = []
    for level in range(1, max_level + 1):
        pool.extend([level] * level_weight(level))
    return pool


class TileSpawner:
    """
    Chooses spawn slots and values.

    The random source is injected so spawns are reproducible in tests.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()

    def choose_slot(self, grid: Grid) -> int | None:
        empty = empty_indices(grid)
        if not empty:
            return None
        return self.rng.choice(empty)

    def choose_value(self, difficulty: Difficulty, max_val: int) -> int:
        if difficulty == Difficulty.HARD:
            return self._hard_value(max_val)
        return self._easy_value(max_val)

    def choose(self, grid: Grid, difficulty: Difficulty) -> tuple[int, int] | None:
        """Return (slot, value), or None when the grid is full."""
        slot = self.choose_slot(grid)
        if slot is None:
            return None
        return slot, self.choose_value(difficulty, max_value(grid))

    def _easy_value(self, max_val: int) -> int:
        candidates = list(EASY_VALUES)
        if max_val >= EASY_BONUS_THRESHOLD:
            candidates.append(EASY_BONUS_VALUE)
        return self.rng.choice(candidates)

    def _hard_value(self, max_val: int) -> int:
        if max_val < HARD_LOW_THRESHOLD:
            return 2 if self.rng.random() < HARD_TWO_PROBABILITY else 4
        level = self.rng.choice(hard_level_pool(max_val))
        return 2 ** level
