"""
Game persistence - save and restore sessions and the player profile.

Two independent records live in the store:
- PROFILE_KEY: best score + owning player name, written on a new best
  or an explicit rename
- SESSION_KEY: the game in progress, written after every state change

A finished game is never resumed. Its record is purged on load, as is
any record that fails to parse.
"""

from __future__ import annotations
import json
import logging

from pydantic import ValidationError

from ..engine_core.state import SessionState, is_terminal
from .records import ProfileRecord, SessionRecord
from .store import KeyValueStore, MemoryStore


logger = logging.getLogger(__name__)

PROFILE_KEY = "2048-best-score"
SESSION_KEY = "2048-game-state"


class GamePersistence:
    """
    Persistence boundary for one engine.

    Usage:
        persistence = GamePersistence(JsonFileStore("~/.tilemerge"))
        record = persistence.load_session()
        if record:
            record.apply_to(state)
    """

    def __init__(self, store: KeyValueStore | None = None):
        self.store = store if store is not None else MemoryStore()

    # =========================================================================
    # Profile
    # =========================================================================

    def load_profile(self) -> ProfileRecord | None:
        """Stored profile, or None when absent or unreadable."""
        raw = self.store.get(PROFILE_KEY)
        if raw is None:
            return None

        try:
            return ProfileRecord.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Ignoring malformed profile record: %s", e)
            return None

    def save_profile(self, best_score: int, name: str):
        record = ProfileRecord(score=best_score, name=name)
        self.store.set(PROFILE_KEY, record.model_dump_json())

    # =========================================================================
    # Session
    # =========================================================================

    def save_session(self, state: SessionState):
        self.store.set(SESSION_KEY, SessionRecord.from_state(state).to_json())

    def load_session(self) -> SessionRecord | None:
        """
        Stored session, or None if there is nothing to resume.

        Malformed and finished sessions are deleted.
        """
        raw = self.store.get(SESSION_KEY)
        if raw is None:
            return None

        try:
            record = SessionRecord.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Purging malformed session record: %s", e)
            self.clear_session()
            return None

        if record.is_over or is_terminal([
            tile.to_tile() if tile is not None else None for tile in record.grid
        ]):
            logger.info("Purging finished session (score %d)", record.score)
            self.clear_session()
            return None

        return record

    def clear_session(self):
        self.store.delete(SESSION_KEY)
