"""
Storage - Durable slots for the game profile and the session in progress.

The only persistence in the system is local. A remote leaderboard, when
configured, receives copies of final scores but is never read back.
"""

from .store import KeyValueStore, MemoryStore, JsonFileStore
from .records import TileRecord, ProfileRecord, SessionRecord
from .persistence import GamePersistence, PROFILE_KEY, SESSION_KEY

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "TileRecord",
    "ProfileRecord",
    "SessionRecord",
    "GamePersistence",
    "PROFILE_KEY",
    "SESSION_KEY",
]
