from __future__ import annotations

import asyncio
import logging
from typing import Any, Sequence

from cs2chat.app.logging_setup import log_event
from cs2chat.app.services import WatchServices, build_watch_services
from cs2chat.contracts import LogLine
from cs2chat.live.pipeline import EventPipeline
from cs2chat.nlp.classifier import classify
from cs2chat.nlp.translator.base import Translator
from cs2chat.ui.console import ConsoleSink


def _dispatch_lines(pipeline: EventPipeline, lines: Sequence[LogLine]) -> int:
    dispatched = 0
    for line in lines:
        event = classify(line.text, line.offset)
        if event is None:
            continue
        pipeline.handle(event)
        dispatched += 1
    return dispatched


async def run_watch(
    args: Any,
    sink: ConsoleSink,
    logger: logging.Logger | None = None,
    *,
    stop_event: asyncio.Event | None = None,
    translator: Translator | None = None,
) -> WatchServices:
    services = build_watch_services(args, sink, _dispatch_lines, logger=logger, translator=translator)
    stop = stop_event or asyncio.Event()

    # Missing file is fatal here, before the loop starts.
    services.tailer.start()
    log_event(
        logger,
        logging.INFO,
        "watch_start",
        log_path=str(args.log_path),
        translator=services.translator.name,
        target_lang=services.pipeline.settings.target_lang,
        watch_mode=str(args.watch_mode),
        poll_ms=int(args.poll_ms),
        carry_partial_lines=bool(args.carry_partial_lines),
    )

    try:
        await services.watcher.run(services.tailer.check, stop)
    finally:
        stats = services.pipeline.stats
        log_event(
            logger,
            logging.INFO,
            "watch_stop",
            chat_events=stats.chat_events,
            translations=stats.translations,
            suppressed=stats.suppressed,
            failures=stats.failures,
            pending=services.pipeline.pending,
            last_known_size=services.tailer.state.last_known_size,
        )
        await services.translator.aclose()
    return services
