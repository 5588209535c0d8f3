from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from cs2chat.contracts import LogLine
from cs2chat.live.pipeline import EventPipeline, TranslateSettings
from cs2chat.live.tailer import IncrementalTailer
from cs2chat.live.watchers import ChangeWatcher, make_watcher
from cs2chat.nlp.translator.base import Translator
from cs2chat.nlp.translator.factory import get_translator
from cs2chat.nlp.translator.gateway import TranslationGateway
from cs2chat.ui.console import ConsoleSink


@dataclass(frozen=True)
class WatchServices:
    translator: Translator
    gateway: TranslationGateway
    pipeline: EventPipeline
    tailer: IncrementalTailer
    watcher: ChangeWatcher


def settings_from_args(args: Any) -> TranslateSettings:
    return TranslateSettings(
        target_lang=str(args.target_lang).strip().lower() or "en",
        auto_translate=bool(args.auto_translate),
        prefer_ru_for_cyrillic=bool(args.prefer_ru_for_cyrillic),
    )


def build_watch_services(
    args: Any,
    sink: ConsoleSink,
    on_lines: Callable[[EventPipeline, Sequence[LogLine]], None],
    logger: logging.Logger | None = None,
    translator: Translator | None = None,
) -> WatchServices:
    settings = settings_from_args(args)
    translator = translator or get_translator(
        str(args.translator),
        timeout_sec=float(getattr(args, "request_timeout_sec", 10.0)),
        argos_source_lang=str(getattr(args, "argos_source_lang", "ru")),
    )
    gateway = TranslationGateway(
        translator,
        prefer_ru_for_cyrillic=settings.prefer_ru_for_cyrillic,
        logger=logger,
        on_warning=sink.warning,
    )
    pipeline = EventPipeline(gateway=gateway, sink=sink, settings=settings, logger=logger)
    tailer = IncrementalTailer(
        str(args.log_path),
        lambda lines: on_lines(pipeline, lines),
        encoding=str(getattr(args, "encoding", "utf-8")),
        carry_partial_lines=bool(args.carry_partial_lines),
        logger=logger,
    )
    watcher = make_watcher(
        str(args.watch_mode),
        str(args.log_path),
        interval_sec=max(10, int(args.poll_ms)) / 1000.0,
    )
    return WatchServices(
        translator=translator,
        gateway=gateway,
        pipeline=pipeline,
        tailer=tailer,
        watcher=watcher,
    )
