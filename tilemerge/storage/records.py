"""
Persisted records - pydantic models for the two durable slots.

Field names on disk are camelCase so saved games stay compatible with
the browser build of the game:

    profile:  {"score": 1234, "name": "Ada"}
    session:  {"grid": [...16 slots...], "score": 0, "tileCounter": 2,
               "celebratedTiles": [], "isOver": false, "difficulty": "easy"}
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..engine_core.state import CELLS, Difficulty, SessionState, Tile


class TileRecord(BaseModel):
    """A persisted tile."""
    model_config = ConfigDict(populate_by_name=True)

    value: int = Field(ge=2)
    id: int = Field(ge=0)
    is_new: bool = Field(False, alias="isNew")
    is_merged: bool = Field(False, alias="isMerged")

    @field_validator("value")
    @classmethod
    def _power_of_two(cls, value: int) -> int:
        if value & (value - 1):
            raise ValueError(f"tile value {value} is not a power of two")
        return value

    @classmethod
    def from_tile(cls, tile: Tile) -> "TileRecord":
        return cls(
            value=tile.value,
            id=tile.id,
            is_new=tile.is_new,
            is_merged=tile.is_merged,
        )

    def to_tile(self) -> Tile:
        return Tile(
            value=self.value,
            id=self.id,
            is_new=self.is_new,
            is_merged=self.is_merged,
        )


class ProfileRecord(BaseModel):
    """Best score and the name of the player who owns it."""
    score: int = Field(0, ge=0)
    name: str = "Player"


class SessionRecord(BaseModel):
    """An in-progress game."""
    model_config = ConfigDict(populate_by_name=True)

    grid: list[Optional[TileRecord]] = Field(min_length=CELLS, max_length=CELLS)
    score: int = Field(ge=0)
    tile_counter: int = Field(ge=0, alias="tileCounter")
    celebrated_tiles: list[int] = Field(default_factory=list, alias="celebratedTiles")
    is_over: bool = Field(False, alias="isOver")
    difficulty: Difficulty = Difficulty.EASY

    @model_validator(mode="after")
    def _ids_are_unique_and_issued(self) -> "SessionRecord":
        ids = [tile.id for tile in self.grid if tile is not None]
        if len(set(ids)) != len(ids):
            raise ValueError("duplicate tile ids in grid")
        if ids and self.tile_counter <= max(ids):
            raise ValueError(
                f"tileCounter {self.tile_counter} must exceed every tile id (max {max(ids)})"
            )
        return self

    @classmethod
    def from_state(cls, state: SessionState) -> "SessionRecord":
        return cls(
            grid=[
                TileRecord.from_tile(tile) if tile is not None else None
                for tile in state.grid
            ],
            score=state.score,
            tile_counter=state.tile_counter,
            celebrated_tiles=sorted(state.celebrated_tiles),
            is_over=state.is_over,
            difficulty=state.difficulty,
        )

    def apply_to(self, state: SessionState):
        """Load this record into a session state, leaving the profile alone."""
        state.grid = [
            record.to_tile() if record is not None else None
            for record in self.grid
        ]
        state.score = self.score
        state.tile_counter = self.tile_counter
        state.celebrated_tiles = set(self.celebrated_tiles)
        state.difficulty = self.difficulty

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
