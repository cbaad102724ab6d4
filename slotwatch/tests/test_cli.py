"""
Tests for the CLI, settings and logging setup.
"""

import json
import logging

import pytest

from ..cli import main, load_snapshots
from ..config import Settings
from ..logging_config import configure_logging
from .conftest import AXE


@pytest.fixture
def recording(tmp_path, make_payload):
    """A short recorded match: Axe vanishes as victim 2 dies."""
    snapshots = [
        make_payload(0.0, game_state="DOTA_GAMERULES_STATE_PRE_GAME"),
        make_payload(10.0, visible={AXE: (0, 0)}, kills={}),
        make_payload(10.3, visible={}, kills={2: 1}),
    ]
    path = tmp_path / "match.json"
    path.write_text(json.dumps(snapshots), encoding="utf-8")
    return path


class TestLoadSnapshots:
    """Tests for load_snapshots."""

    def test_json_array(self, recording):
        assert len(load_snapshots(recording)) == 3

    def test_json_lines(self, tmp_path, make_payload):
        path = tmp_path / "match.jsonl"
        path.write_text(
            "\n".join(json.dumps(make_payload(t)) for t in (1.0, 2.0)) + "\n",
            encoding="utf-8",
        )
        assert [s["map"]["game_time"] for s in load_snapshots(path)] == [1.0, 2.0]

    def test_single_object(self, tmp_path, make_payload):
        path = tmp_path / "one.json"
        path.write_text(json.dumps(make_payload(1.0)), encoding="utf-8")
        assert len(load_snapshots(path)) == 1

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("", encoding="utf-8")
        assert load_snapshots(path) == []


class TestReplayCommand:
    """Tests for `slotwatch replay`."""

    def test_replay_prints_kills_and_table(self, recording, capsys):
        main(["replay", str(recording), "--seed", "5"])
        out = capsys.readouterr().out

        assert "[   10.3] Killed possible Axe (victim 2, 1 total)" in out
        assert "Replayed 3 snapshots (2 ticks)" in out
        assert "Match match_1: 1 kills" in out
        assert "victim 2: Axe (0.30)" in out

    def test_quiet_replay(self, recording, capsys):
        main(["replay", str(recording), "--quiet"])
        out = capsys.readouterr().out

        assert "Killed" not in out
        assert "victim 2: Axe" in out

    def test_replay_without_match(self, tmp_path, make_payload, capsys):
        path = tmp_path / "lobby.json"
        path.write_text(json.dumps([make_payload(0.0, game_state="DOTA_GAMERULES_STATE_INIT")]), encoding="utf-8")

        main(["replay", str(path)])

        assert "No match in progress found." in capsys.readouterr().out

    def test_missing_file(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["replay", str(tmp_path / "nope.json")])
        assert exc.value.code == 1

    def test_no_command(self):
        with pytest.raises(SystemExit):
            main([])


class TestSettings:
    """Tests for Settings.from_env."""

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        for name in ("HOST", "PORT", "LOG_LEVEL", "LOG_DIRECTORY", "SLOTWATCH_SEED",
                     "SLOTWATCH_SUMMARY_INTERVAL", "HIGHLIGHTS_ENABLED"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.port == 3000
        assert settings.log_level == "INFO"
        assert settings.seed is None
        assert settings.highlights_enabled

    def test_environment_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("PORT", "4000")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("SLOTWATCH_SEED", "42")
        monkeypatch.setenv("SLOTWATCH_SUMMARY_INTERVAL", "30")
        monkeypatch.setenv("HIGHLIGHTS_ENABLED", "false")

        settings = Settings.from_env()

        assert settings.port == 4000
        assert settings.log_level == "DEBUG"
        assert settings.seed == 42
        assert settings.summary_interval == 30.0
        assert not settings.highlights_enabled


class TestLogging:
    """Tests for configure_logging."""

    @pytest.fixture
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)

    def test_writes_combined_and_error_logs(self, tmp_path, restore_root):
        logger = configure_logging(Settings(log_directory=str(tmp_path / "logs")), console=False)

        logger.info("tracking started")
        logging.getLogger("slotwatch.engine_core").error("something broke")
        for handler in logging.getLogger().handlers:
            handler.flush()

        combined = (tmp_path / "logs" / "combined.log").read_text(encoding="utf-8")
        errors = (tmp_path / "logs" / "error.log").read_text(encoding="utf-8")
        assert "tracking started" in combined
        assert "something broke" in combined
        assert "something broke" in errors
        assert "tracking started" not in errors
