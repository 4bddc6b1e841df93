"""
Tests for API Pydantic schemas.

Validates that:
- Request models reject bad input
- Tiles serialize with their stable ids
- Error codes are properly structured
"""

import pytest
from pydantic import ValidationError

from ..api.schemas import (
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    MoveRequest,
    NewGameRequest,
    PlayerNameRequest,
    TileInfo,
)
from ..engine_core.state import Difficulty, Direction, Tile


class TestRequestSchemas:

    def test_move_request_parses_direction(self):
        assert MoveRequest(direction="up").direction == Direction.UP

    def test_move_request_rejects_unknown_direction(self):
        with pytest.raises(ValidationError):
            MoveRequest(direction="diagonal")

    def test_new_game_defaults(self):
        request = NewGameRequest()
        assert request.restore is False
        assert request.difficulty is None

    def test_player_name_length(self):
        with pytest.raises(ValidationError):
            PlayerNameRequest(name="")
        with pytest.raises(ValidationError):
            PlayerNameRequest(name="n" * 33)


class TestResponseSchemas:

    def test_tile_info_from_engine_tile(self):
        info = TileInfo.from_tile(Tile(value=16, id=42, is_merged=True))
        assert info.model_dump() == {"value": 16, "id": 42, "is_new": False, "is_merged": True}
        assert TileInfo.from_tile(None) is None

    def test_game_state_dump(self):
        state = GameStateResponse(
            grid=[TileInfo(value=2, id=0)] + [None] * 15,
            score=0,
            best_score=128,
            player_name="Ada",
            difficulty=Difficulty.HARD,
        )
        data = state.model_dump(mode="json")
        assert data["difficulty"] == "hard"
        assert data["grid"][1] is None
        assert data["api_version"] == "v1"
        assert data["can_undo"] is False


class TestErrorCodes:

    def test_error_response(self):
        error = ErrorResponse(error="Name is empty", error_code=ErrorCode.INVALID_NAME)
        data = error.model_dump(mode="json")
        assert data["error_code"] == "INVALID_NAME"
        assert data["details"] is None
