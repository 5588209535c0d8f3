from __future__ import annotations

import argparse
import copy
import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

APP_NAME = "cs2-chat-translator"


class StartupError(RuntimeError):
    """Fatal condition detected before the watch loop starts."""


def default_log_path() -> str:
    # Best guess only; override with --set-log-path when the library lives elsewhere.
    steam_tail = ("Steam", "steamapps", "common", "Counter-Strike Global Offensive", "game", "csgo", "console.log")
    if sys.platform == "win32":
        program_files = os.getenv("PROGRAMFILES(X86)") or r"C:\Program Files (x86)"
        return str(Path(program_files).joinpath(*steam_tail))
    return str(Path.home().joinpath(".local", "share", *steam_tail))


DEFAULTS: dict[str, Any] = {
    "log_path": "",
    "target_lang": "en",
    "auto_translate": True,
    "prefer_ru_for_cyrillic": True,
    "translator": "google",
    "watch_mode": "poll",
    "poll_ms": 500,
    "carry_partial_lines": True,
    "encoding": "utf-8",
    "request_timeout_sec": 10.0,
    "argos_source_lang": "ru",
    "color": True,
}
CONFIG_KEYS: tuple[str, ...] = tuple(DEFAULTS.keys())


@dataclass(frozen=True)
class AppPaths:
    config_dir: Path
    config_path: Path


def app_paths() -> AppPaths:
    config_dir = Path(user_config_dir(APP_NAME, appauthor=False))
    return AppPaths(config_dir=config_dir, config_path=config_dir / "config.json")


def _load_json_dict(path: Path) -> dict[str, Any]:
    # Accept UTF-8 with or without BOM for Windows-edited config files.
    with path.open("r", encoding="utf-8-sig") as f:
        text = f.read().strip()
    if not text:
        return {}
    try:
        loaded = json.loads(text)
    except json.JSONDecodeError as e:
        raise SystemExit(f"Invalid config file {path}: {e}") from e
    if not isinstance(loaded, dict):
        raise SystemExit(f"Invalid config file {path}: expected a JSON object")
    return loaded


def _write_json_dict(path: Path, payload: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)
        f.write("\n")


def _known_only(payload: dict[str, Any]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in CONFIG_KEYS:
        if key in payload:
            out[key] = payload[key]
    return out


def _fill_missing(values: dict[str, Any]) -> dict[str, Any]:
    if not str(values.get("log_path") or "").strip():
        values["log_path"] = default_log_path()
    return values


def load_default_config() -> dict[str, Any]:
    return _fill_missing(copy.deepcopy(DEFAULTS))


def load_user_config(config_path: str | None = None) -> tuple[dict[str, Any], Path]:
    defaults = load_default_config()
    if config_path:
        chosen = Path(config_path)
        if not chosen.exists():
            raise SystemExit(f"Config file not found: {chosen}")
    else:
        chosen = ensure_user_config_exists(defaults)
    merged = dict(defaults)
    merged.update(_known_only(_load_json_dict(chosen)))
    return merged, chosen


def save_user_config(values: dict[str, Any], config_path: str | None = None) -> Path:
    payload = _known_only(values)
    if config_path:
        path = Path(config_path)
    else:
        path = ensure_user_config_exists()
    existing = _known_only(_load_json_dict(path)) if path.exists() else {}
    merged = dict(load_default_config())
    merged.update(existing)
    merged.update(payload)
    _write_json_dict(path, _fill_missing(_known_only(merged)))
    return path


def ensure_user_config_exists(defaults: dict[str, Any] | None = None) -> Path:
    paths = app_paths()
    if paths.config_path.exists():
        return paths.config_path
    _write_json_dict(paths.config_path, defaults or load_default_config())
    return paths.config_path


def init_config(config_path: str | None = None) -> tuple[Path, dict[str, Any]]:
    """Create the config file or fill in keys that older files are missing."""
    values, _ = load_user_config(config_path=config_path)
    path = save_user_config(values, config_path=config_path)
    return path, _known_only(_load_json_dict(path))


def set_log_path(raw_path: str, config_path: str | None = None) -> tuple[Path, str]:
    resolved = str(Path(raw_path).expanduser().resolve())
    path = save_user_config({"log_path": resolved}, config_path=config_path)
    return path, resolved


def get_log_path(values: Any) -> str:
    if isinstance(values, dict):
        raw = values.get("log_path")
    else:
        raw = getattr(values, "log_path", None)
    log_path = str(raw or "").strip()
    if not log_path:
        raise StartupError("No log_path configured.")
    return log_path


def resolve_defaults(config_path: str | None = None) -> tuple[dict[str, Any], Path]:
    return load_user_config(config_path=config_path)


def parser_with_defaults(defaults: dict[str, Any], config_location: Path | None = None) -> argparse.ArgumentParser:
    epilog = (
        "CS2 must be launched with the '-condebug' Steam launch option so console.log is written.\n"
        f"Config file: {config_location or app_paths().config_path}"
    )
    p = argparse.ArgumentParser(
        prog="cs2-chat-translator",
        description="Watch CS2 console.log and print chat messages with translations.",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument("--config", default=None, help="JSON config path (CLI flags override config)")
    p.add_argument(
        "--init-config",
        action="store_true",
        help="create or refresh config.json with a default log_path guess and exit",
    )
    p.add_argument("--set-log-path", default=None, metavar="PATH", help="store the console.log path and exit")
    p.add_argument("--log-path", default=defaults["log_path"], help="console.log to watch for this run only")
    p.add_argument("--target-lang", default=defaults["target_lang"], help="language code to translate into")
    p.add_argument("--translator", default=defaults["translator"], help="google|argos|stub")
    p.add_argument(
        "--watch-mode",
        default=defaults["watch_mode"],
        choices=["poll", "events"],
        help="detect growth by polling or by filesystem notifications",
    )
    p.add_argument("--poll-ms", type=int, default=defaults["poll_ms"], help="poll interval (ms)")
    p.add_argument(
        "--auto-translate",
        action=argparse.BooleanOptionalAction,
        default=defaults["auto_translate"],
        help="translate chat messages (chat lines are printed either way)",
    )
    p.add_argument(
        "--prefer-ru-for-cyrillic",
        action=argparse.BooleanOptionalAction,
        default=defaults["prefer_ru_for_cyrillic"],
        help="retry Cyrillic text as Russian when detection says otherwise",
    )
    p.add_argument(
        "--carry-partial-lines",
        action=argparse.BooleanOptionalAction,
        default=defaults["carry_partial_lines"],
        help="keep an unterminated last line until its newline arrives",
    )
    p.add_argument(
        "--color",
        action=argparse.BooleanOptionalAction,
        default=defaults["color"],
        help="colorize terminal output",
    )
    return p


def resolve_args(argv: list[str] | None = None) -> argparse.Namespace:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", default=None)
    pre_args, _ = pre.parse_known_args(argv)
    defaults, used = resolve_defaults(config_path=pre_args.config)
    parser = parser_with_defaults(defaults, config_location=used)
    args = parser.parse_args(argv)
    for key in ("encoding", "request_timeout_sec", "argos_source_lang"):
        setattr(args, key, defaults[key])
    return args
