"""
API Module - Client interface.

Exposes one local game via a REST API. A client:
1. Starts or resumes a game
2. Sends moves and undos
3. Renders the returned grid (tile ids are stable across moves)
4. Shows the leaderboard

Final scores are submitted to the leaderboard automatically on game over.
"""

from .schemas import (
    # Requests
    NewGameRequest,
    MoveRequest,
    PlayerNameRequest,
    # Responses
    GameStateResponse,
    NewGameResponse,
    MoveResponse,
    UndoResponse,
    ErrorResponse,
    HealthResponse,
    # Shared
    TileInfo,
    ErrorCode,
)
from .service import GameService
from .app import create_app, create_service

__all__ = [
    # Requests
    "NewGameRequest",
    "MoveRequest",
    "PlayerNameRequest",
    # Responses
    "GameStateResponse",
    "NewGameResponse",
    "MoveResponse",
    "UndoResponse",
    "ErrorResponse",
    "HealthResponse",
    # Shared
    "TileInfo",
    "ErrorCode",
    # Service
    "GameService",
    "create_app",
    "create_service",
]
