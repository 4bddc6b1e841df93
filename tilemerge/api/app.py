"""
FastAPI Application - REST API for game clients.

Endpoints:
    GET    /api/health               Health check
    GET    /api/v1/game              Current game state
    POST   /api/v1/game              New game (or resume the stored one)
    POST   /api/v1/game/move         Make a move
    POST   /api/v1/game/undo         Undo the last move
    PUT    /api/v1/profile/name      Rename the player
    GET    /api/leaderboard?mode=    Top 10 scores for a mode
    POST   /api/score                Submit a score

Game-over flow:
    1. POST /move returns state.is_game_over=true
    2. The final score is captured with that move and submitted to the
       score sink as a background task after the response is sent
    3. The client starts a new game with POST /game

All endpoints are async so engine calls never run concurrently.
Run with: uvicorn --factory tilemerge.api.app:create_app
"""

from typing import Annotated, Union
import logging
import os

from fastapi import BackgroundTasks, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..engine_core import Difficulty, GameEngine
from ..identity import InvalidPlayerName, PlayerIdentity
from ..leaderboard import HttpScoreSink, Leaderboard, LocalScoreSink
from ..storage import GamePersistence, JsonFileStore
from .schemas import (
    ErrorCode,
    ErrorResponse,
    GameStateResponse,
    HealthResponse,
    MoveRequest,
    MoveResponse,
    NewGameRequest,
    NewGameResponse,
    PlayerNameRequest,
    ScoreEntry,
    ScoreSubmission,
    UndoResponse,
)
from .service import GameService


logger = logging.getLogger(__name__)

# Environment configuration
TILEMERGE_DATA_DIR = os.getenv("TILEMERGE_DATA_DIR", None)
TILEMERGE_LEADERBOARD_URL = os.getenv("TILEMERGE_LEADERBOARD_URL", None)
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")


def create_service(
    data_dir: str | None = TILEMERGE_DATA_DIR,
    leaderboard: Leaderboard | None = None,
    leaderboard_url: str | None = TILEMERGE_LEADERBOARD_URL,
) -> GameService:
    """
    Wire a GameService to on-disk storage.

    Scores go to `leaderboard_url` when set, otherwise to the in-process
    leaderboard.
    """
    store = JsonFileStore(data_dir)
    identity = PlayerIdentity(store)
    engine = GameEngine(
        GamePersistence(store),
        default_player_name=identity.display_name(),
    )

    if leaderboard_url:
        sink = HttpScoreSink(leaderboard_url)
    else:
        sink = LocalScoreSink(leaderboard if leaderboard is not None else Leaderboard())

    return GameService(engine=engine, score_sink=sink, identity=identity)


def create_app(service: GameService | None = None, leaderboard: Leaderboard | None = None):
    """
    Create the FastAPI application.

    Args:
        service: Optional GameService, used as is. When omitted one is wired
            to TILEMERGE_DATA_DIR and its stored game is resumed
        leaderboard: Optional Leaderboard served under /api/leaderboard

    Returns:
        FastAPI application instance
    """
    leaderboard = leaderboard if leaderboard is not None else Leaderboard()
    if service is None:
        game_service = create_service(leaderboard=leaderboard)
        game_service.engine.init(restore=True)
    else:
        game_service = service

    app = FastAPI(
        title="Tilemerge API",
        description="""
2048 game engine with undo, persistence and a leaderboard.

## Game Over

When a move ends the game, `state.is_game_over` is true and the final
score is submitted to the leaderboard after the response is sent.
Start again with `POST /api/v1/game`.
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.service = game_service
    app.state.leaderboard = leaderboard

    # =========================================================================
    # Error helpers
    # =========================================================================

    def make_error_response(
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: dict | None = None,
    ) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=message,
                error_code=error_code,
                details=details,
            ).model_dump(mode="json"),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return make_error_response(
            ErrorCode.VALIDATION_ERROR,
            "Request failed validation",
            status_code=422,
            details={"errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return make_error_response(
            ErrorCode.INTERNAL_ERROR,
            "Internal server error",
            status_code=500,
        )

    # =========================================================================
    # Game Endpoints
    # =========================================================================

    @app.get(
        "/api/v1/game",
        response_model=GameStateResponse,
        tags=["Game"],
        summary="Get the current game state",
    )
    async def get_game() -> GameStateResponse:
        return game_service.get_state()

    @app.post(
        "/api/v1/game",
        response_model=NewGameResponse,
        tags=["Game"],
        summary="Start a new game",
    )
    async def new_game(request: NewGameRequest) -> NewGameResponse:
        """
        Start a new game.

        With `restore=true` an unfinished stored game is resumed instead
        and `difficulty` is ignored.
        """
        return game_service.new_game(request)

    @app.post(
        "/api/v1/game/move",
        response_model=MoveResponse,
        tags=["Game"],
        summary="Move the tiles",
    )
    async def move(request: MoveRequest, background_tasks: BackgroundTasks) -> MoveResponse:
        """
        Slide the tiles in a direction.

        `moved=false` means the board could not move that way and nothing
        changed.
        """
        response = game_service.move(request)
        final = game_service.take_final_score()
        if final is not None:
            background_tasks.add_task(game_service.submit_final_score, final)
        return response

    @app.post(
        "/api/v1/game/undo",
        response_model=UndoResponse,
        tags=["Game"],
        summary="Undo the last move",
    )
    async def undo() -> UndoResponse:
        return game_service.undo()

    @app.put(
        "/api/v1/profile/name",
        response_model=GameStateResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Profile"],
        summary="Set the player name",
    )
    async def set_player_name(
        request: PlayerNameRequest,
    ) -> Union[GameStateResponse, JSONResponse]:
        try:
            return game_service.set_player_name(request)
        except InvalidPlayerName as e:
            return make_error_response(ErrorCode.INVALID_NAME, str(e))

    # =========================================================================
    # Leaderboard Endpoints
    # =========================================================================

    @app.get(
        "/api/leaderboard",
        response_model=list[ScoreEntry],
        tags=["Leaderboard"],
        summary="Top scores for a mode",
    )
    async def get_leaderboard(
        mode: Annotated[Difficulty, Query(description="easy or hard")] = Difficulty.EASY,
        limit: Annotated[int, Query(ge=1, le=100)] = 10,
    ) -> list[ScoreEntry]:
        return leaderboard.top(mode, limit=limit)

    @app.post(
        "/api/score",
        response_model=ScoreEntry,
        tags=["Leaderboard"],
        summary="Submit a score",
    )
    async def submit_score(submission: ScoreSubmission) -> ScoreEntry:
        return leaderboard.submit(submission)

    # =========================================================================
    # Health Check
    # =========================================================================

    @app.get(
        "/api/health",
        response_model=HealthResponse,
        tags=["System"],
        summary="Health check",
    )
    async def health_check() -> HealthResponse:
        return HealthResponse(
            status="healthy",
            service="tilemerge",
            version=__version__,
        )

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Tilemerge API",
            "version": __version__,
            "docs": "/api/docs",
            "health": "/api/health",
        }

    logger.info("API ready (%s game loaded)", game_service.engine.difficulty.value)
    return app
