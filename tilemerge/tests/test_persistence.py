"""
Tests for storage and the persistence boundary.

Tests:
- Store backends
- Record layout on disk
- Purging of malformed and finished sessions
- Identity keys
"""

import json
import random

import pytest

from ..engine_core.engine import GameEngine
from ..engine_core.state import Difficulty, SessionState
from ..identity import (
    FALLBACK_NAME,
    InvalidPlayerName,
    PlayerIdentity,
    generate_device_id,
    to_base36,
    validate_player_name,
)
from ..storage import (
    GamePersistence,
    JsonFileStore,
    MemoryStore,
    PROFILE_KEY,
    SESSION_KEY,
    SessionRecord,
)
from .conftest import CHECKERBOARD, grid_from_values


class TestStores:

    def test_memory_store_roundtrip(self):
        store = MemoryStore()
        store.set("a", "1")
        assert store.get("a") == "1"
        assert "a" in store
        store.delete("a")
        assert store.get("a") is None
        store.delete("a")  # missing keys are ignored

    def test_file_store_survives_reopen(self, tmp_path):
        JsonFileStore(tmp_path).set(SESSION_KEY, '{"score": 1}')
        assert JsonFileStore(tmp_path).get(SESSION_KEY) == '{"score": 1}'

    def test_file_store_creates_directory(self, tmp_path):
        data_dir = tmp_path / "nested" / "dir"
        store = JsonFileStore(data_dir)
        store.set("deviceId", "abc")
        assert data_dir.is_dir()
        assert store.keys() == ["deviceId"]

    def test_file_store_ignores_garbage_file(self, tmp_path):
        store = JsonFileStore(tmp_path)
        (tmp_path / "broken.json").write_text("{{{", encoding="utf-8")
        assert store.get("broken") is None

    @pytest.mark.parametrize("key", [SESSION_KEY, PROFILE_KEY])
    def test_file_store_ignores_undecodable_bytes(self, tmp_path, key):
        store = JsonFileStore(tmp_path)
        (tmp_path / f"{key}.json").write_bytes(b"\xff\xfe\x00garbage")
        assert store.get(key) is None

        engine = GameEngine(GamePersistence(store), rng=random.Random(3))
        assert engine.init(restore=True) is False
        assert engine.best_score == 0
        assert sum(1 for t in engine.grid if t) == 2

    def test_file_store_delete(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.set("k", "v")
        store.delete("k")
        store.delete("k")
        assert store.get("k") is None


class TestSessionRecords:

    def _state(self, values, **kwargs) -> SessionState:
        kwargs.setdefault("tile_counter", sum(1 for v in values if v))
        return SessionState(grid=grid_from_values(values), **kwargs)

    def test_layout_uses_browser_field_names(self, persistence, store):
        values = [2] + [0] * 15
        state = self._state(values, score=12, tile_counter=5, celebrated_tiles={2048, 1024},
                            difficulty=Difficulty.HARD)
        persistence.save_session(state)

        data = json.loads(store.get(SESSION_KEY))
        assert set(data) == {"grid", "score", "tileCounter", "celebratedTiles", "isOver", "difficulty"}
        assert data["grid"][0] == {"value": 2, "id": 0, "isNew": False, "isMerged": False}
        assert data["grid"][1] is None
        assert data["celebratedTiles"] == [1024, 2048]
        assert data["isOver"] is False
        assert data["difficulty"] == "hard"

    def test_load_restores_fields(self, persistence):
        values = [2, 4, 0, 0] + [0] * 12
        state = self._state(values, score=8, tile_counter=9, celebrated_tiles={1024})
        persistence.save_session(state)

        restored = SessionState()
        persistence.load_session().apply_to(restored)

        assert restored.grid == state.grid
        assert restored.score == 8
        assert restored.tile_counter == 9
        assert restored.celebrated_tiles == {1024}

    def test_finished_session_is_purged(self, persistence, store):
        persistence.save_session(self._state(CHECKERBOARD, score=100))
        assert json.loads(store.get(SESSION_KEY))["isOver"] is True

        assert persistence.load_session() is None
        assert store.get(SESSION_KEY) is None

    def test_is_over_flag_alone_is_enough(self, persistence, store):
        record = SessionRecord.from_state(self._state([2] + [0] * 15))
        record.is_over = True
        store.set(SESSION_KEY, record.to_json())

        assert persistence.load_session() is None

    def test_terminal_grid_purged_even_without_flag(self, persistence, store):
        record = SessionRecord.from_state(self._state(CHECKERBOARD))
        record.is_over = False
        store.set(SESSION_KEY, record.to_json())

        assert persistence.load_session() is None

    @pytest.mark.parametrize("raw", [
        "not json",
        "[]",
        '{"grid": [], "score": 0, "tileCounter": 0}',
        json.dumps({"grid": [None] * 15, "score": 0, "tileCounter": 0}),
        json.dumps({"grid": [{"value": 3, "id": 0}] + [None] * 15, "score": 0, "tileCounter": 1}),
        json.dumps({"grid": [None] * 16, "score": -1, "tileCounter": 0}),
        json.dumps({"grid": [None] * 16, "score": 0, "tileCounter": 0, "difficulty": "nightmare"}),
        json.dumps({"grid": [{"value": 2, "id": 0}, {"value": 4, "id": 1}] + [None] * 14,
                    "score": 0, "tileCounter": 0}),
        json.dumps({"grid": [{"value": 2, "id": 5}, {"value": 4, "id": 5}] + [None] * 14,
                    "score": 0, "tileCounter": 9}),
    ])
    def test_malformed_session_is_purged(self, persistence, store, raw):
        store.set(SESSION_KEY, raw)
        assert persistence.load_session() is None
        assert store.get(SESSION_KEY) is None

    def test_missing_optional_fields_default(self, persistence, store):
        store.set(SESSION_KEY, json.dumps({
            "grid": [{"value": 2, "id": 0}] + [None] * 15,
            "score": 0,
            "tileCounter": 1,
        }))
        record = persistence.load_session()
        assert record.difficulty == Difficulty.EASY
        assert record.celebrated_tiles == []


class TestProfile:

    def test_absent_profile(self, persistence):
        assert persistence.load_profile() is None

    def test_profile_roundtrip(self, persistence, store):
        persistence.save_profile(2048, "Ada")
        assert json.loads(store.get(PROFILE_KEY)) == {"score": 2048, "name": "Ada"}
        assert persistence.load_profile().score == 2048

    def test_malformed_profile_ignored(self, store):
        store.set(PROFILE_KEY, '{"score": "lots"}')
        engine = GameEngine(GamePersistence(store))
        assert engine.best_score == 0
        assert engine.player_name == "Player"


class TestFileBackedEngine:

    def test_game_resumes_from_disk(self, tmp_path):
        first = GameEngine(GamePersistence(JsonFileStore(tmp_path)), rng=random.Random(4))
        first.init(restore=False, difficulty=Difficulty.HARD)
        first.set_player_name("Lin")

        second = GameEngine(GamePersistence(JsonFileStore(tmp_path)), rng=random.Random(5))
        assert second.init(restore=True)
        assert second.grid == first.grid
        assert second.player_name == "Lin"
        assert second.difficulty == Difficulty.HARD


class TestIdentity:

    def test_device_id_is_stable(self, store):
        identity = PlayerIdentity(store)
        first = identity.device_id()
        assert identity.device_id() == first
        assert PlayerIdentity(store).device_id() == first

    def test_device_id_format(self):
        device_id = generate_device_id(random.Random(0))
        timestamp, part1, part2 = device_id.split("-")
        assert len(part1) == 8 and len(part2) == 8
        assert all(c.isdigit() or c.islower() for c in device_id.replace("-", ""))
        assert int(timestamp, 36) > 0

    def test_base36(self):
        assert to_base36(0) == "0"
        assert to_base36(35) == "z"
        assert to_base36(36) == "10"

    def test_display_name_falls_back(self, store):
        identity = PlayerIdentity(store)
        assert identity.display_name() == FALLBACK_NAME
        identity.set_user_name("Mo")
        assert identity.display_name() == "Mo"

    def test_name_validation(self):
        assert validate_player_name("  Ada  ") == "Ada"
        with pytest.raises(InvalidPlayerName):
            validate_player_name("   ")
        with pytest.raises(InvalidPlayerName):
            validate_player_name("x" * 33)
