"""
Reducer - Resolves a move over the grid.

The reducer is the single place where sliding and merging happen.
GameEngine.move() applies its result to the session state.

Design principles:
- Pure function: (grid, direction) -> MoveOutcome
- Never mutates the input grid or its tiles
- Every line is read toward the direction of motion, so merges
  always favour the leading edge
- Single pass per line: a merged tile never merges again in the same move
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .state import SIZE, Direction, Grid, Tile, empty_grid, index


@dataclass
class LineResult:
    """Result of sliding one row or column."""
    tiles: list[Tile | None]
    score_gained: int = 0
    merged_values: list[int] = field(default_factory=list)


@dataclass
class MoveOutcome:
    """
    Result of resolving a move over the whole grid.

    `moved` compares slot occupants by tile id, so a tile sliding into a
    different slot counts even when no merge happened.
    """
    grid: Grid
    score_gained: int = 0
    moved: bool = False
    merged: bool = False
    merged_values: list[int] = field(default_factory=list)


def line_indices(direction: Direction, line: int) -> list[int]:
    """
    Slot indices of one line, ordered so index 0 is the leading edge.
    """
    if direction == Direction.LEFT:
        return [index(line, col) for col in range(SIZE)]
    if direction == Direction.RIGHT:
        return [index(line, col) for col in reversed(range(SIZE))]
    if direction == Direction.UP:
        return [index(row, line) for row in range(SIZE)]
    return [index(row, line) for row in reversed(range(SIZE))]


def slide_line(cells: list[Tile | None]) -> LineResult:
    """
    Compact a line toward index 0 and merge equal neighbours once.

    The merged tile keeps the id of the tile nearer the leading edge.
    """
    tiles = [tile for tile in cells if tile is not None]
    result = LineResult(tiles=[])

    i = 0
    while i < len(tiles):
        current = tiles[i]
        if i + 1 < len(tiles) and tiles[i + 1].value == current.value:
            new_value = current.value * 2
            result.tiles.append(Tile(
                value=new_value,
                id=current.id,
                is_new=False,
                is_merged=True,
            ))
            result.score_gained += new_value
            result.merged_values.append(new_value)
            i += 2
        else:
            result.tiles.append(Tile(value=current.value, id=current.id))
            i += 1

    result.tiles.extend([None] * (len(cells) - len(result.tiles)))
    return result


def resolve_move(grid: Grid, direction: Direction) -> MoveOutcome:
    """
    Resolve a move. Does not spawn a tile; that is the engine's job.
    """
    outcome = MoveOutcome(grid=empty_grid())

    for line in range(SIZE):
        indices = line_indices(direction, line)
        result = slide_line([grid[i] for i in indices])

        outcome.score_gained += result.score_gained
        outcome.merged_values.extend(result.merged_values)

        for slot, tile in zip(indices, result.tiles):
            before = grid[slot]
            before_id = before.id if before is not None else None
            after_id = tile.id if tile is not None else None
            if before_id != after_id:
                outcome.moved = True
            outcome.grid[slot] = tile

    outcome.merged = bool(outcome.merged_values)
    return outcome
