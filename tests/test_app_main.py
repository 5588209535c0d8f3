from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from cs2chat.app import config as app_config
from cs2chat.app import main as app_main


@pytest.fixture(autouse=True)
def _isolated_config_dir(tmp_path: Path, monkeypatch):
    monkeypatch.setattr(app_config, "user_config_dir", lambda appname, appauthor=None: str(tmp_path / "cfg"))
    yield
    logger = logging.getLogger("cs2chat.app")
    for h in logger.handlers:
        h.close()
    logger.handlers.clear()


def _config(tmp_path: Path, **values) -> Path:
    cfg_path = tmp_path / "app.json"
    cfg_path.write_text(json.dumps(values), encoding="utf-8")
    return cfg_path


def test_main_missing_console_log_exits_nonzero(tmp_path: Path, capsys) -> None:
    cfg = _config(tmp_path, log_path=str(tmp_path / "nope" / "console.log"))
    code = app_main.main(["--config", str(cfg), "--no-color"])
    out = capsys.readouterr().out
    assert code == 1
    assert "console.log not found" in out
    assert "--set-log-path" in out


def test_main_empty_log_path_exits_nonzero(tmp_path: Path, capsys) -> None:
    cfg = _config(tmp_path, log_path="")
    code = app_main.main(["--config", str(cfg), "--no-color"])
    assert code == 1
    assert "No log_path configured." in capsys.readouterr().out


def test_main_unknown_translator_is_argument_error(tmp_path: Path, capsys) -> None:
    log = tmp_path / "console.log"
    log.write_bytes(b"")
    cfg = _config(tmp_path, log_path=str(log))
    code = app_main.main(["--config", str(cfg), "--no-color", "--translator", "deepl"])
    assert code == 2
    assert "Unknown translator provider: deepl" in capsys.readouterr().out


def test_main_init_config_prints_effective_values(tmp_path: Path, capsys) -> None:
    cfg = _config(tmp_path, log_path="/games/csgo/console.log")
    code = app_main.main(["--config", str(cfg), "--no-color", "--init-config"])
    out = capsys.readouterr().out
    assert code == 0
    assert str(cfg) in out
    assert "log_path: /games/csgo/console.log" in out
    assert json.loads(cfg.read_text(encoding="utf-8"))["poll_ms"] == 500


def test_main_set_log_path_updates_config(tmp_path: Path, capsys) -> None:
    cfg = _config(tmp_path, log_path="/old/console.log")
    target = tmp_path / "csgo" / "console.log"
    code = app_main.main(["--config", str(cfg), "--no-color", "--set-log-path", str(target)])
    assert code == 0
    assert json.loads(cfg.read_text(encoding="utf-8"))["log_path"] == str(target.resolve())
    assert "Config updated (log_path)" in capsys.readouterr().out


def test_main_unknown_watch_mode_from_config_is_argument_error(tmp_path: Path, capsys) -> None:
    log = tmp_path / "console.log"
    log.write_bytes(b"")
    cfg = _config(tmp_path, log_path=str(log), translator="stub", watch_mode="inotify")
    code = app_main.main(["--config", str(cfg), "--no-color"])
    out = capsys.readouterr().out
    assert code == 2
    assert "Unknown watch mode: inotify" in out
    assert "CS2 Chat Auto Translator" not in out


def test_main_malformed_config_reports_and_exits(tmp_path: Path, capsys) -> None:
    cfg = tmp_path / "app.json"
    cfg.write_text("{not json", encoding="utf-8")
    code = app_main.main(["--config", str(cfg)])
    out = capsys.readouterr().out
    assert code == 1
    assert f"Invalid config file {cfg}" in out
    assert "--init-config" in out
