"""
Engine Core - Deterministic 2048 grid state and move resolution.

The engine is the runtime that:
1. Owns the SessionState (grid, score, counters)
2. Resolves moves (slide + single-pass merge)
3. Spawns tiles according to the difficulty
4. Keeps a bounded undo history
5. Writes through to the storage layer
"""

from .state import (
    SIZE,
    CELLS,
    Direction,
    Difficulty,
    Tile,
    Grid,
    Snapshot,
    SessionState,
    clone,
    is_terminal,
)
from .reducer import MoveOutcome, resolve_move, slide_line
from .spawn import TileSpawner, hard_level_pool
from .engine import GameEngine, GameConfig, MoveResult, MILESTONES

__all__ = [
    "SIZE",
    "CELLS",
    "Direction",
    "Difficulty",
    "Tile",
    "Grid",
    "Snapshot",
    "SessionState",
    "clone",
    "is_terminal",
    "MoveOutcome",
    "resolve_move",
    "slide_line",
    "TileSpawner",
    "hard_level_pool",
    "GameEngine",
    "GameConfig",
    "MoveResult",
    "MILESTONES",
]
