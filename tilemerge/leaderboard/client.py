"""
Score sinks - where final scores go after a game ends.

Submission is best effort. Local state is authoritative and already
saved by the time a score is submitted, so a failed submission is logged
and dropped; nothing here raises into the game.
"""

from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from typing import Any

import httpx
from pydantic import ValidationError

from ..engine_core.state import Difficulty
from .board import Leaderboard
from .models import ScoreEntry, ScoreSubmission


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 5.0


class ScoreSink(ABC):
    """Accepts final scores."""

    @abstractmethod
    def submit(self, name: str, score: int, mode: Difficulty) -> Any | None:
        """
        Submit a score. Returns the accepted entry, or None if rejected.
        """
        pass


class LocalScoreSink(ScoreSink):
    """Writes straight into an in-process Leaderboard."""

    def __init__(self, leaderboard: Leaderboard):
        self.leaderboard = leaderboard

    def submit(self, name: str, score: int, mode: Difficulty) -> ScoreEntry | None:
        try:
            submission = ScoreSubmission(name=name, score=score, mode=mode)
        except ValidationError as e:
            logger.warning("Rejected score submission: %s", e)
            return None
        return self.leaderboard.submit(submission)


class HttpScoreSink(ScoreSink):
    """
    Talks to a leaderboard server over HTTP.

    Usage:
        sink = HttpScoreSink("http://localhost:3001/api")
        sink.submit("Ada", 2048, Difficulty.EASY)
        top = sink.fetch_leaderboard(Difficulty.EASY)
    """

    def __init__(
        self,
        base_url: str,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = client or httpx.Client(timeout=timeout)

    def submit(self, name: str, score: int, mode: Difficulty) -> dict[str, Any] | None:
        payload = {"name": name, "score": score, "mode": Difficulty(mode).value}
        try:
            response = self.client.post(f"{self.base_url}/score", json=payload)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Failed to submit score: %s", e)
            return None

    def fetch_leaderboard(self, mode: Difficulty = Difficulty.EASY) -> list[ScoreEntry]:
        try:
            response = self.client.get(
                f"{self.base_url}/leaderboard",
                params={"mode": Difficulty(mode).value},
            )
            response.raise_for_status()
            return [ScoreEntry.model_validate(item) for item in response.json()]
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Failed to fetch leaderboard: %s", e)
            return []

    def close(self):
        self.client.close()
