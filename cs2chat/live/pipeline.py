# cs2chat/live/pipeline.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from cs2chat.app.logging_setup import log_event
from cs2chat.contracts import ChatEvent, TranslationResult
from cs2chat.nlp.languages import lang_name


class Gateway(Protocol):
    async def translate(self, text: str, target_lang: str) -> TranslationResult:
        ...


class Sink(Protocol):
    def chat(self, event: ChatEvent) -> None:
        ...

    def translation(self, event: ChatEvent, language: str, target_lang: str, text: str) -> None:
        ...

    def warning(self, message: str) -> None:
        ...


@dataclass(frozen=True)
class TranslateSettings:
    target_lang: str = "en"
    auto_translate: bool = True
    prefer_ru_for_cyrillic: bool = True


@dataclass
class PipelineStats:
    chat_events: int = 0
    translations: int = 0
    suppressed: int = 0
    failures: int = 0


class EventPipeline:
    """
    Print each chat event immediately, then translate it in its own task.

    The raw line always precedes its own translation. Translations of
    different events finish in whatever order the provider answers, so a
    quick reply to a later message can be printed before a slow earlier one.
    """

    def __init__(
        self,
        *,
        gateway: Gateway,
        sink: Sink,
        settings: TranslateSettings,
        logger: logging.Logger | None = None,
    ) -> None:
        self.gateway = gateway
        self.sink = sink
        self.settings = settings
        self.logger = logger
        self.stats = PipelineStats()
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def handle(self, event: ChatEvent) -> asyncio.Task[None] | None:
        self.stats.chat_events += 1
        self.sink.chat(event)
        if not self.settings.auto_translate:
            return None

        task = asyncio.get_running_loop().create_task(self._annotate(event))
        self._tasks.add(task)
        task.add_done_callback(self._finish)
        return task

    def _finish(self, task: asyncio.Task[None]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            # the warning sink itself failed; nothing left to print to
            log_event(
                self.logger,
                logging.ERROR,
                "annotate_crashed",
                error=f"{type(exc).__name__}: {exc}",
            )

    async def _annotate(self, event: ChatEvent) -> None:
        target = self.settings.target_lang
        try:
            res = await self.gateway.translate(event.message, target)
            self._emit(event, res, target)
        except Exception as e:
            self.stats.failures += 1
            log_event(
                self.logger,
                logging.WARNING,
                "annotate_failed",
                team=event.team.value,
                offset=event.source_offset,
                error=f"{type(e).__name__}: {e}",
            )
            self.sink.warning(f"Translation failed: {type(e).__name__}: {e}")

    def _emit(self, event: ChatEvent, res: TranslationResult, target: str) -> None:
        lang = res.effective_language
        if lang == target.lower():
            self.stats.suppressed += 1
            log_event(self.logger, logging.DEBUG, "translation_suppressed", offset=event.source_offset, lang=lang)
            return

        # fallback results still show the original text under an UNKNOWN label
        self.sink.translation(event, lang_name(lang), target, res.text)
        if res.failed:
            self.stats.failures += 1
        else:
            self.stats.translations += 1
        log_event(
            self.logger,
            logging.INFO,
            "translation_done",
            offset=event.source_offset,
            lang=lang,
            forced=res.forced_language is not None,
            failed=res.failed,
            provider=res.provider,
            chars=len(event.message),
        )

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
