"""
Pytest fixtures for Tilemerge tests.
"""

import random

import pytest

from ..engine_core.engine import GameEngine
from ..engine_core.state import Tile
from ..storage import GamePersistence, MemoryStore


def grid_from_values(values: list[int], first_id: int = 0) -> list:
    """Build a grid from 16 values, 0 meaning empty. Ids count up row-major."""
    assert len(values) == 16
    grid = []
    next_id = first_id
    for value in values:
        if value:
            grid.append(Tile(value=value, id=next_id))
            next_id += 1
        else:
            grid.append(None)
    return grid


def values_of(grid: list) -> list[int]:
    return [tile.value if tile is not None else 0 for tile in grid]


# Full board, no equal neighbours.
CHECKERBOARD = [
    2, 4, 2, 4,
    4, 2, 4, 2,
    2, 4, 2, 4,
    4, 2, 4, 2,
]


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def persistence(store: MemoryStore) -> GamePersistence:
    return GamePersistence(store)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(2048)


@pytest.fixture
def engine(persistence: GamePersistence, rng: random.Random) -> GameEngine:
    """A fresh engine with a dealt game."""
    engine = GameEngine(persistence, rng=rng)
    engine.init(restore=False)
    return engine


@pytest.fixture
def set_grid():
    """Replace an engine's grid with the given values."""
    def _set_grid(engine: GameEngine, values: list[int]):
        engine.state.grid = grid_from_values(values, first_id=engine.state.tile_counter)
        engine.state.tile_counter += sum(1 for v in values if v)
        return engine.state.grid
    return _set_grid
