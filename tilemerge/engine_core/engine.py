"""
Game Engine - The 2048 state machine.

The engine:
1. Owns one SessionState (grid, score, counters, difficulty)
2. Resolves moves via the reducer
3. Spawns tiles via the TileSpawner
4. Keeps a bounded undo history of pre-move snapshots
5. Writes through to GamePersistence after every state change

Every operation runs to completion synchronously. Input is trusted:
callers validate directions and names before calling in.
"""

from __future__ import annotations
import logging
import random
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .reducer import resolve_move
from .spawn import TileSpawner
from .state import Difficulty, Direction, SessionState, Snapshot, Tile, empty_grid

if TYPE_CHECKING:
    from ..storage.persistence import GamePersistence


logger = logging.getLogger(__name__)

DEFAULT_PLAYER_NAME = "Player"
MILESTONES = (1024, 2048, 4096, 8192)


@dataclass
class GameConfig:
    """Engine tuning knobs."""
    history_limit: int = 20
    milestones: tuple[int, ...] = MILESTONES


@dataclass
class MoveResult:
    """
    Outcome of GameEngine.move().

    `milestones` lists milestone values reached for the first time this
    game, so the view layer celebrates each one once.
    """
    moved: bool
    merged: bool
    milestones: list[int] = field(default_factory=list)
    spawned: Tile | None = None


class GameEngine:
    """
    Single-player 2048 engine.

    Usage:
        engine = GameEngine(GamePersistence(JsonFileStore()))
        engine.init(restore=True)

        result = engine.move(Direction.LEFT)
        if result.moved and engine.is_game_over():
            ...
    """

    def __init__(
        self,
        persistence: GamePersistence | None = None,
        rng: random.Random | None = None,
        config: GameConfig | None = None,
        default_player_name: str = DEFAULT_PLAYER_NAME,
    ):
        if persistence is None:
            from ..storage.persistence import GamePersistence
            persistence = GamePersistence()

        self.persistence = persistence
        self.config = config or GameConfig()
        self.spawner = TileSpawner(rng)
        self.state = SessionState(player_name=default_player_name)
        self._history: deque[Snapshot] = deque(maxlen=self.config.history_limit)

        self._load_profile(default_player_name)

    # =========================================================================
    # Read-only accessors
    # =========================================================================

    @property
    def grid(self) -> list[Tile | None]:
        return self.state.grid

    @property
    def score(self) -> int:
        return self.state.score

    @property
    def best_score(self) -> int:
        return self.state.best_score

    @property
    def player_name(self) -> str:
        return self.state.player_name

    @property
    def difficulty(self) -> Difficulty:
        return self.state.difficulty

    @property
    def celebrated_tiles(self) -> frozenset[int]:
        return frozenset(self.state.celebrated_tiles)

    @property
    def tile_counter(self) -> int:
        return self.state.tile_counter

    def can_undo(self) -> bool:
        return len(self._history) > 0

    def is_game_over(self) -> bool:
        return self.state.is_over

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def init(self, restore: bool = True, difficulty: Difficulty | None = None) -> bool:
        """
        Start a game.

        With `restore`, resume the stored session if there is an unfinished
        one; `difficulty` is ignored in that case. Returns True if a session
        was restored, False if a fresh game was dealt.
        """
        self._history.clear()

        if restore and self.load_state():
            logger.info(
                "Restored %s game with score %d",
                self.state.difficulty.value, self.state.score,
            )
            return True

        if difficulty is not None:
            self.state.difficulty = Difficulty(difficulty)

        self.state.grid = empty_grid()
        self.state.score = 0
        self.state.celebrated_tiles = set()
        self.add_tile()
        self.add_tile()
        self.save_state()

        logger.info("New %s game", self.state.difficulty.value)
        return False

    def set_player_name(self, name: str):
        self.state.player_name = name
        self._save_profile()

    # =========================================================================
    # Moves
    # =========================================================================

    def add_tile(self) -> Tile | None:
        """Spawn one tile in a random empty slot. No-op on a full grid."""
        choice = self.spawner.choose(self.state.grid, self.state.difficulty)
        if choice is None:
            return None

        slot, value = choice
        tile = Tile(value=value, id=self.state.tile_counter, is_new=True, is_merged=False)
        self.state.tile_counter += 1
        self.state.grid[slot] = tile
        logger.debug("Spawned %d at slot %d (id %d)", value, slot, tile.id)
        return tile

    def move(self, direction: Direction) -> MoveResult:
        """
        Slide and merge in `direction`.

        When the board changes: spawn a tile, raise the best score if beaten,
        push the pre-move snapshot and persist. Otherwise nothing changes.
        """
        direction = Direction(direction)
        outcome = resolve_move(self.state.grid, direction)
        if not outcome.moved:
            return MoveResult(moved=False, merged=outcome.merged)

        before = self.state.snapshot()

        self.state.grid = outcome.grid
        self.state.score += outcome.score_gained
        milestones = self._record_milestones(outcome.merged_values)
        spawned = self.add_tile()

        if self.state.score > self.state.best_score:
            self.state.best_score = self.state.score
            self._save_profile()

        self._history.append(before)
        self.save_state()

        logger.debug(
            "Moved %s: +%d (score %d)",
            direction.value, outcome.score_gained, self.state.score,
        )
        return MoveResult(
            moved=True,
            merged=outcome.merged,
            milestones=milestones,
            spawned=spawned,
        )

    def undo(self) -> bool:
        """Restore the most recent pre-move snapshot. Not redoable."""
        if not self._history:
            return False

        self.state.restore(self._history.pop())
        self.save_state()
        logger.debug("Undo: score back to %d", self.state.score)
        return True

    def _record_milestones(self, merged_values: list[int]) -> list[int]:
        reached = []
        for value in merged_values:
            if value in self.config.milestones and value not in self.state.celebrated_tiles:
                self.state.celebrated_tiles.add(value)
                reached.append(value)
        return reached

    # =========================================================================
    # Persistence
    # =========================================================================

    def save_state(self):
        self.persistence.save_session(self.state)

    def load_state(self) -> bool:
        """Hydrate from the stored session. False if none can be resumed."""
        record = self.persistence.load_session()
        if record is None:
            return False
        record.apply_to(self.state)
        return True

    def _load_profile(self, default_player_name: str):
        profile = self.persistence.load_profile()
        if profile is None:
            return
        self.state.best_score = profile.score
        self.state.player_name = profile.name or default_player_name

    def _save_profile(self):
        self.persistence.save_profile(self.state.best_score, self.state.player_name)
