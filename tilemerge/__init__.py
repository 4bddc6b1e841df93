"""
Tilemerge - 2048 Game Engine

A deterministic sliding-tile puzzle engine with local persistence and an
optional leaderboard. The package provides:
- The grid-merge state machine with easy and hard spawn policies
- Bounded undo history
- Save/restore of the game in progress and the best score
- A leaderboard store, a JSON API and a terminal client
"""

__version__ = "0.1.0"
