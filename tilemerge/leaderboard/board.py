"""
Leaderboard - in-memory store of named score entries.

Players are created by name on their first submission. Entries are kept
per mode and listed highest score first.
"""

from __future__ import annotations
import itertools
import logging

from ..engine_core.state import Difficulty
from .models import ScoreEntry, ScoreSubmission, UserInfo


logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10


class Leaderboard:
    """
    Usage:
        board = Leaderboard()
        board.submit(ScoreSubmission(name="Ada", score=2048, mode="hard"))
        top = board.top(Difficulty.HARD)
    """

    def __init__(self):
        self._entries: dict[int, ScoreEntry] = {}
        self._users: dict[str, UserInfo] = {}
        self._ids = itertools.count(1)

    def submit(self, submission: ScoreSubmission) -> ScoreEntry:
        user = self._users.get(submission.name)
        if user is None:
            user = UserInfo(name=submission.name)
            self._users[submission.name] = user

        entry = ScoreEntry(
            id=next(self._ids),
            score=submission.score,
            mode=submission.mode,
            user=user,
        )
        self._entries[entry.id] = entry
        logger.info(
            "Recorded %s score %d for %s", entry.mode.value, entry.score, user.name
        )
        return entry

    def top(self, mode: Difficulty = Difficulty.EASY, limit: int = DEFAULT_LIMIT) -> list[ScoreEntry]:
        entries = [e for e in self._entries.values() if e.mode == mode]
        # Ties go to the earlier entry
        entries.sort(key=lambda e: (-e.score, e.id))
        return entries[:limit]

    def get(self, entry_id: int) -> ScoreEntry | None:
        return self._entries.get(entry_id)

    def delete(self, entry_id: int) -> bool:
        return self._entries.pop(entry_id, None) is not None

    def users(self) -> list[str]:
        return list(self._users)

    def __len__(self) -> int:
        return len(self._entries)
