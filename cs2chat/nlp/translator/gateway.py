from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import Callable

from cs2chat.app.logging_setup import log_event
from cs2chat.contracts import TranslationRequest, TranslationResult
from .base import Translator

_CYRILLIC = re.compile(r"[\u0400-\u04FF]")


def has_cyrillic(text: str) -> bool:
    return bool(_CYRILLIC.search(text or ""))


class TranslationGateway:
    """
    Detect-and-translate on top of a provider.

    Short Cyrillic chat lines are often detected as Ukrainian, Bulgarian or
    Serbian; when that happens the text is translated again with Russian as
    the forced source. Provider failures never reach the caller: the result
    falls back to the original text with detected_language "unknown".
    """

    def __init__(
        self,
        translator: Translator,
        *,
        prefer_ru_for_cyrillic: bool = True,
        logger: logging.Logger | None = None,
        on_warning: Callable[[str], None] | None = None,
    ) -> None:
        self.translator = translator
        self.prefer_ru_for_cyrillic = prefer_ru_for_cyrillic
        self.logger = logger
        self.on_warning = on_warning

    def _should_force_ru(self, text: str, res: TranslationResult) -> bool:
        return (
            self.prefer_ru_for_cyrillic
            and has_cyrillic(text)
            and (res.detected_language or "").lower() != "ru"
        )

    async def translate(self, text: str, target_lang: str) -> TranslationResult:
        try:
            res = await self.translator.translate(TranslationRequest(text=text, target_lang=target_lang))
        except Exception as e:
            detail = f"{type(e).__name__}: {e}"
            log_event(
                self.logger,
                logging.WARNING,
                "translate_failed",
                provider=self.translator.name,
                chars=len(text),
                error=detail,
            )
            if self.on_warning is not None:
                self.on_warning(f"Translation failed: {detail}")
            return TranslationResult(
                text=text, detected_language="unknown", provider=self.translator.name, failed=True
            )

        if self._should_force_ru(text, res):
            try:
                forced = await self.translator.translate(
                    TranslationRequest(text=text, target_lang=target_lang, source_lang="ru")
                )
            except Exception as e:
                log_event(
                    self.logger,
                    logging.DEBUG,
                    "translate_force_ru_failed",
                    detected=res.detected_language,
                    error=f"{type(e).__name__}: {e}",
                )
            else:
                log_event(
                    self.logger,
                    logging.INFO,
                    "translate_forced_ru",
                    detected=res.detected_language,
                )
                return replace(forced, forced_language="ru")

        return res
