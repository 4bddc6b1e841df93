"""
Game Service - Business logic layer between API and engine.

The service:
1. Translates API requests to engine calls
2. Validates input the engine takes on trust (names)
3. Captures the final score of a finished game and hands it to the sink once
4. Formats engine state for clients

This layer is framework-agnostic (used by the FastAPI app and the CLI).
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from ..engine_core import Difficulty, GameEngine
from ..identity import PlayerIdentity, validate_player_name
from ..leaderboard.client import ScoreSink
from .schemas import (
    GameStateResponse,
    MoveRequest,
    MoveResponse,
    NewGameRequest,
    NewGameResponse,
    PlayerNameRequest,
    TileInfo,
    UndoResponse,
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinalScore:
    """What a finished game submits, captured by the move that ended it."""
    name: str
    score: int
    mode: Difficulty


@dataclass
class GameService:
    """
    Main service for one local player.

    Usage:
        service = GameService(engine=GameEngine(persistence))
        service.new_game(NewGameRequest(restore=True))

        response = service.move(MoveRequest(direction="left"))
        if response.state.is_game_over:
            service.submit_final_score()
    """
    engine: GameEngine = field(default_factory=GameEngine)
    score_sink: ScoreSink | None = None
    identity: PlayerIdentity | None = None

    # Final score of the last finished game, until it is submitted
    _final_score: FinalScore | None = field(default=None, init=False, repr=False)

    def new_game(self, request: NewGameRequest) -> NewGameResponse:
        restored = self.engine.init(
            restore=request.restore,
            difficulty=request.difficulty,
        )
        return NewGameResponse(restored=restored, state=self.get_state())

    def get_state(self) -> GameStateResponse:
        engine = self.engine
        return GameStateResponse(
            grid=[TileInfo.from_tile(tile) for tile in engine.grid],
            score=engine.score,
            best_score=engine.best_score,
            player_name=engine.player_name,
            difficulty=engine.difficulty,
            celebrated_tiles=sorted(engine.celebrated_tiles),
            can_undo=engine.can_undo(),
            is_game_over=engine.is_game_over(),
        )

    def move(self, request: MoveRequest) -> MoveResponse:
        result = self.engine.move(request.direction)
        if result.moved and self.engine.is_game_over():
            self._final_score = FinalScore(
                name=self.engine.player_name,
                score=self.engine.score,
                mode=self.engine.difficulty,
            )
        return MoveResponse(
            moved=result.moved,
            merged=result.merged,
            milestones=result.milestones,
            state=self.get_state(),
        )

    def undo(self) -> UndoResponse:
        undone = self.engine.undo()
        if undone:
            # Undoing out of a finished game reopens it
            self._final_score = None
        return UndoResponse(undone=undone, state=self.get_state())

    def set_player_name(self, request: PlayerNameRequest) -> GameStateResponse:
        """
        Rename the player.

        Raises InvalidPlayerName for blank or over-long names.
        """
        name = validate_player_name(request.name)
        self.engine.set_player_name(name)
        if self.identity is not None:
            self.identity.set_user_name(name)
        return self.get_state()

    def take_final_score(self) -> FinalScore | None:
        """Claim the pending final score, so it is submitted at most once."""
        final, self._final_score = self._final_score, None
        return final

    def submit_final_score(self, final: FinalScore | None = None) -> bool:
        """
        Send the final score of a finished game to the sink.

        `final` is a score already claimed with take_final_score(); without
        it the pending one is claimed here. Starting a new game does not
        drop a pending score.

        Best effort: returns False when there is nothing to send (no
        finished game, already sent, no sink, zero score) or the sink
        rejected it.
        """
        if final is None:
            final = self.take_final_score()
        if final is None or self.score_sink is None or final.score <= 0:
            return False

        accepted = self.score_sink.submit(final.name, final.score, final.mode)
        if accepted is None:
            logger.warning("Score %d was not accepted by the leaderboard", final.score)
            return False

        logger.info("Submitted final score %d", final.score)
        return True
