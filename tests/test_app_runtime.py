from __future__ import annotations

import asyncio
from argparse import Namespace
from pathlib import Path

import pytest

from cs2chat.app.runtime import _dispatch_lines, run_watch
from cs2chat.contracts import ChatEvent, LogLine, TranslationResult
from cs2chat.live.pipeline import EventPipeline, TranslateSettings
from cs2chat.nlp.translator.stub import StubTranslator


class RecordingSink:
    def __init__(self) -> None:
        self.lines: list[tuple] = []

    def chat(self, event: ChatEvent) -> None:
        self.lines.append(("chat", event.team.value, event.sender, event.message, event.source_offset))

    def translation(self, event: ChatEvent, language: str, target_lang: str, text: str) -> None:
        self.lines.append(("trans", event.sender, language, target_lang, text))

    def warning(self, message: str) -> None:
        self.lines.append(("warn", message))


class EchoGateway:
    async def translate(self, text: str, target_lang: str) -> TranslationResult:
        return TranslationResult(text=text.upper(), detected_language="fr")


def _args(log: Path, **overrides) -> Namespace:
    values = dict(
        log_path=str(log),
        target_lang="en",
        auto_translate=True,
        prefer_ru_for_cyrillic=True,
        translator="stub",
        watch_mode="poll",
        poll_ms=10,
        carry_partial_lines=True,
    )
    values.update(overrides)
    return Namespace(**values)


def test_dispatch_lines_classifies_and_hands_off() -> None:
    sink = RecordingSink()
    pipeline = EventPipeline(gateway=EchoGateway(), sink=sink, settings=TranslateSettings(auto_translate=False))
    lines = [
        LogLine("10/26 18:49:20  [CT] Alice: rush b", 100),
        LogLine("Damage Given to \"Bob\" - 27 in 1 hit", 140),
        LogLine("[ALL] Bob: ok", 180),
    ]

    async def go() -> int:
        return _dispatch_lines(pipeline, lines)

    assert asyncio.run(go()) == 2
    assert sink.lines == [
        ("chat", "CT", "Alice", "rush b", 100),
        ("chat", "ALL", "Bob", "ok", 180),
    ]


def test_run_watch_tails_new_chat_lines(tmp_path: Path) -> None:
    log = tmp_path / "console.log"
    log.write_bytes(b"[CT] Old: before start\n")
    sink = RecordingSink()

    async def go():
        stop = asyncio.Event()

        async def writer() -> None:
            await asyncio.sleep(0.05)
            with log.open("ab") as f:
                f.write(b"[T]  Player123: hello world\nnoise line\n")
            for _ in range(300):
                if len(sink.lines) >= 2:
                    break
                await asyncio.sleep(0.01)
            stop.set()

        w = asyncio.create_task(writer())
        services = await asyncio.wait_for(
            run_watch(_args(log), sink, stop_event=stop, translator=StubTranslator(detected_language="de")),
            timeout=10,
        )
        await w
        return services

    services = asyncio.run(go())
    assert sink.lines == [
        ("chat", "T", "Player123", "hello world", 23),
        ("trans", "Player123", "German", "en", "[stub:en] hello world"),
    ]
    assert services.pipeline.stats.chat_events == 1
    assert services.tailer.state.last_known_size == log.stat().st_size


def test_run_watch_missing_log_is_fatal(tmp_path: Path) -> None:
    sink = RecordingSink()

    async def go():
        await run_watch(_args(tmp_path / "missing.log"), sink, translator=StubTranslator())

    with pytest.raises(FileNotFoundError):
        asyncio.run(go())
    assert sink.lines == []
