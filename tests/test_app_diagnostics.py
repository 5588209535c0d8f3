from __future__ import annotations

from cs2chat.app.diagnostics import hint_for_exception, summarize_exception


def test_summarize_exception_picks_last_meaningful_line() -> None:
    detail = (
        "Traceback (most recent call last):\n"
        '  File "x.py", line 1, in <module>\n'
        "    boom()\n"
        "RuntimeError: failed to start watcher"
    )
    assert summarize_exception(detail) == "RuntimeError: failed to start watcher"


def test_summarize_exception_truncates_long_line() -> None:
    detail = "ValueError: " + ("x" * 500)
    out = summarize_exception(detail, max_len=60)
    assert out.startswith("ValueError: ")
    assert out.endswith("...")
    assert len(out) <= 60


def test_summarize_exception_empty() -> None:
    assert summarize_exception("") == "Unknown runtime error."


def test_hint_for_missing_console_log() -> None:
    hint = hint_for_exception("console.log not found: /games/csgo/console.log")
    assert "-condebug" in hint


def test_hint_for_rate_limit() -> None:
    hint = hint_for_exception("TranslationError: google translate error (429): Too Many Requests")
    assert "rate limiting" in hint


def test_hint_for_exception_default() -> None:
    hint = hint_for_exception("RuntimeError: unknown")
    assert hint == "Check logs for full traceback."


def test_hint_for_invalid_config_file() -> None:
    hint = hint_for_exception("Invalid config file /tmp/app.json: Expecting value: line 1 column 1 (char 0)")
    assert "--init-config" in hint
