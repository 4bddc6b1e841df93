"""
Game State - Tiles, grid and session state for the engine.

Design principles:
- One engine instance owns one SessionState, no globals
- Slots are explicit `Tile | None`, never sentinel values
- Snapshots are explicit deep copies (see clone)
- Serializable: storage.records maps these to persisted JSON
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


SIZE = 4
CELLS = SIZE * SIZE


class Direction(str, Enum):
    """Move directions."""
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


class Difficulty(str, Enum):
    """Spawn policy selector. Doubles as the leaderboard mode."""
    EASY = "easy"
    HARD = "hard"


@dataclass
class Tile:
    """
    One occupied grid cell.

    `id` is the stable identity the view layer uses to animate motion.
    `is_new` / `is_merged` only describe the most recent move.
    """
    value: int
    id: int
    is_new: bool = False
    is_merged: bool = False

    def copy(self) -> Tile:
        return Tile(
            value=self.value,
            id=self.id,
            is_new=self.is_new,
            is_merged=self.is_merged,
        )


# Always CELLS slots long.
Grid = list[Optional[Tile]]


def empty_grid() -> Grid:
    return [None] * CELLS


def copy_grid(grid: Grid) -> Grid:
    return [tile.copy() if tile is not None else None for tile in grid]


def index(row: int, col: int) -> int:
    """Row-major slot index."""
    return row * SIZE + col


def empty_indices(grid: Grid) -> list[int]:
    return [i for i, tile in enumerate(grid) if tile is None]


def max_value(grid: Grid) -> int:
    """Largest tile value on the board, 0 when empty."""
    return max((tile.value for tile in grid if tile is not None), default=0)


def is_terminal(grid: Grid) -> bool:
    """
    True when the grid is full and no neighbours share a value.

    Only the right and down neighbours are checked for each cell, which
    covers every adjacent pair once.
    """
    if any(tile is None for tile in grid):
        return False

    for row in range(SIZE):
        for col in range(SIZE):
            current = grid[index(row, col)].value
            if col < SIZE - 1 and grid[index(row, col + 1)].value == current:
                return False
            if row < SIZE - 1 and grid[index(row + 1, col)].value == current:
                return False

    return True


@dataclass
class Snapshot:
    """
    The part of the session state an undo restores.

    Difficulty, best score and player name are not part of it.
    """
    grid: Grid
    score: int
    tile_counter: int
    celebrated_tiles: set[int] = field(default_factory=set)


@dataclass
class SessionState:
    """
    Complete session state at a point in time.

    Mutated only by GameEngine.init / move / undo.
    """
    grid: Grid = field(default_factory=empty_grid)
    score: int = 0
    best_score: int = 0
    player_name: str = "Player"
    tile_counter: int = 0
    celebrated_tiles: set[int] = field(default_factory=set)
    difficulty: Difficulty = Difficulty.EASY

    @property
    def is_over(self) -> bool:
        return is_terminal(self.grid)

    def snapshot(self) -> Snapshot:
        """Deep copy of the undoable fields."""
        return Snapshot(
            grid=copy_grid(self.grid),
            score=self.score,
            tile_counter=self.tile_counter,
            celebrated_tiles=set(self.celebrated_tiles),
        )

    def restore(self, snapshot: Snapshot):
        """Overwrite the undoable fields from a snapshot (copied again)."""
        self.grid = copy_grid(snapshot.grid)
        self.score = snapshot.score
        self.tile_counter = snapshot.tile_counter
        self.celebrated_tiles = set(snapshot.celebrated_tiles)

    def clone(self) -> SessionState:
        return clone(self)


def clone(state: SessionState) -> SessionState:
    """Structural deep copy of a session state."""
    return SessionState(
        grid=copy_grid(state.grid),
        score=state.score,
        best_score=state.best_score,
        player_name=state.player_name,
        tile_counter=state.tile_counter,
        celebrated_tiles=set(state.celebrated_tiles),
        difficulty=state.difficulty,
    )
