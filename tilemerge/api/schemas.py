"""
Pydantic Schemas for API - Request/response models for the game client.

These models define the contract between a game client (browser, terminal,
bot) and the engine. Field names are snake_case; tiles carry their stable
`id` so clients can animate motion instead of re-creating tiles.

Error Codes:
- INVALID_NAME: Player name empty or too long
- VALIDATION_ERROR: Request body failed validation
- INTERNAL_ERROR: Unexpected server error
"""

from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, Field

from ..engine_core.state import Difficulty, Direction, Tile
from ..identity import MAX_NAME_LENGTH
from ..leaderboard.models import ScoreEntry, ScoreSubmission


API_VERSION = "v1"


class ErrorCode(str, Enum):
    """Structured error codes."""
    INVALID_NAME = "INVALID_NAME"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# Shared Models
# =============================================================================

class TileInfo(BaseModel):
    """A tile as the view layer sees it."""
    value: int
    id: int
    is_new: bool = False
    is_merged: bool = False

    model_config = {"from_attributes": True}

    @classmethod
    def from_tile(cls, tile: Optional[Tile]) -> Optional["TileInfo"]:
        if tile is None:
            return None
        return cls.model_validate(tile)


# =============================================================================
# Request Models
# =============================================================================

class NewGameRequest(BaseModel):
    """Start a new game, or resume the stored one."""
    restore: bool = Field(False, description="Resume an unfinished game if one is stored")
    difficulty: Optional[Difficulty] = Field(
        None, description="Spawn policy; keeps the current one when omitted"
    )


class MoveRequest(BaseModel):
    direction: Direction


class PlayerNameRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)


# =============================================================================
# Response Models
# =============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field(API_VERSION, description="API version")


class GameStateResponse(BaseModel):
    """Complete game state for display."""
    grid: list[Optional[TileInfo]] = Field(..., description="16 slots, row-major")
    score: int
    best_score: int
    player_name: str
    difficulty: Difficulty
    celebrated_tiles: list[int] = Field(default_factory=list)
    can_undo: bool = False
    is_game_over: bool = False
    api_version: str = API_VERSION


class NewGameResponse(BaseModel):
    restored: bool
    state: GameStateResponse
    api_version: str = API_VERSION


class MoveResponse(BaseModel):
    """Result of a move plus the state after it."""
    moved: bool
    merged: bool
    milestones: list[int] = Field(
        default_factory=list, description="Milestone tiles reached for the first time"
    )
    state: GameStateResponse
    api_version: str = API_VERSION


class UndoResponse(BaseModel):
    undone: bool
    state: GameStateResponse
    api_version: str = API_VERSION


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    service: str
    version: str


__all__ = [
    "API_VERSION",
    "ErrorCode",
    "TileInfo",
    "NewGameRequest",
    "MoveRequest",
    "PlayerNameRequest",
    "ErrorResponse",
    "GameStateResponse",
    "NewGameResponse",
    "MoveResponse",
    "UndoResponse",
    "HealthResponse",
    "ScoreEntry",
    "ScoreSubmission",
]
