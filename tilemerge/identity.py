"""
Player identity - device id and display name.

The device id is generated once per data directory and never changes.
The display name falls back to "Player" until the user picks one.
"""

from __future__ import annotations
import random
import string
import time

from .storage.store import KeyValueStore


DEVICE_ID_KEY = "deviceId"
USER_NAME_KEY = "userName"
FALLBACK_NAME = "Player"
MAX_NAME_LENGTH = 32

_BASE36 = string.digits + string.ascii_lowercase


class InvalidPlayerName(ValueError):
    """Raised when a player name is empty or too long."""

    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid player name {name!r}: {reason}")


def validate_player_name(name: str) -> str:
    """Return the stripped name, or raise InvalidPlayerName."""
    cleaned = name.strip()
    if not cleaned:
        raise InvalidPlayerName(name, "name is empty")
    if len(cleaned) > MAX_NAME_LENGTH:
        raise InvalidPlayerName(name, f"longer than {MAX_NAME_LENGTH} characters")
    return cleaned


def to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def generate_device_id(rng: random.Random | None = None) -> str:
    """
    `<ms timestamp>-<8 chars>-<8 chars>`, all base 36.
    """
    rng = rng or random.SystemRandom()
    timestamp = to_base36(int(time.time() * 1000))
    part1 = "".join(rng.choice(_BASE36) for _ in range(8))
    part2 = "".join(rng.choice(_BASE36) for _ in range(8))
    return f"{timestamp}-{part1}-{part2}"


class PlayerIdentity:
    """Reads and writes identity keys in a KeyValueStore."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def device_id(self) -> str:
        device_id = self.store.get(DEVICE_ID_KEY)
        if not device_id:
            device_id = generate_device_id()
            self.store.set(DEVICE_ID_KEY, device_id)
        return device_id

    def user_name(self) -> str:
        return self.store.get(USER_NAME_KEY) or ""

    def set_user_name(self, name: str):
        self.store.set(USER_NAME_KEY, name)

    def display_name(self) -> str:
        return self.user_name() or FALLBACK_NAME
