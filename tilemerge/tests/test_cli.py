"""
Tests for the terminal client.
"""

import random

from ..cli import main, render
from ..engine_core import GameEngine
from ..storage import GamePersistence, JsonFileStore, MemoryStore, PROFILE_KEY


class TestRender:

    def test_render_shows_values_and_scores(self, set_grid):
        engine = GameEngine(GamePersistence(MemoryStore()), rng=random.Random(1))
        engine.init(restore=False)
        set_grid(engine, [
            2048, 0, 0, 0,
            0, 4, 0, 0,
            0, 0, 0, 0,
            0, 0, 0, 2,
        ])
        text = render(engine)
        assert "EASY" in text
        assert "2048" in text
        assert text.count("+") == 5 * 5


class TestPlayCommand:

    def test_play_session(self, tmp_path, monkeypatch, capsys):
        keys = iter(["d", "x", "u", "u", "q"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(keys))

        main(["--data-dir", str(tmp_path), "play", "--new"])

        out = capsys.readouterr().out
        assert "Unknown key: 'x'" in out
        assert (tmp_path / "2048-game-state.json").exists()

    def test_play_resumes(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", lambda prompt="": "q")
        main(["--data-dir", str(tmp_path), "play", "--new"])
        main(["--data-dir", str(tmp_path), "play"])

        assert "Resuming your saved game." in capsys.readouterr().out
        assert JsonFileStore(tmp_path).get(PROFILE_KEY) is None
