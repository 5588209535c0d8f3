from __future__ import annotations
import os
from .base import Translator
from .argos import ArgosTranslator
from .google import GoogleTranslator
from .stub import StubTranslator

PROVIDERS: tuple[str, ...] = ("google", "argos", "stub")


def get_translator(
    provider: str | None = None,
    *,
    timeout_sec: float = 10.0,
    argos_source_lang: str = "ru",
) -> Translator:
    provider = (provider or os.getenv("CS2CHAT_TRANSLATOR", "google")).lower().strip()

    if provider == "google":
        return GoogleTranslator(timeout_sec=timeout_sec)
    if provider == "argos":
        return ArgosTranslator(from_code=argos_source_lang)
    if provider == "stub":
        return StubTranslator()

    raise ValueError(f"Unknown translator provider: {provider}")
