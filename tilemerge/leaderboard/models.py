"""
Leaderboard models - score submissions and stored entries.
"""

from datetime import datetime, timezone
from pydantic import BaseModel, Field

from ..engine_core.state import Difficulty
from ..identity import MAX_NAME_LENGTH


class ScoreSubmission(BaseModel):
    """A final score sent to the leaderboard."""
    name: str = Field(min_length=1, max_length=MAX_NAME_LENGTH)
    score: int = Field(gt=0)
    mode: Difficulty = Difficulty.EASY


class UserInfo(BaseModel):
    name: str


class ScoreEntry(BaseModel):
    """A stored leaderboard entry."""
    id: int
    score: int
    mode: Difficulty
    user: UserInfo
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
