"""
Leaderboard - Named score entries per difficulty mode.

The game only ever writes to it (fire-and-forget after game over); it is
an interchangeable sink, local or remote.
"""

from .models import ScoreSubmission, ScoreEntry, UserInfo
from .board import Leaderboard
from .client import ScoreSink, LocalScoreSink, HttpScoreSink

__all__ = [
    "ScoreSubmission",
    "ScoreEntry",
    "UserInfo",
    "Leaderboard",
    "ScoreSink",
    "LocalScoreSink",
    "HttpScoreSink",
]
