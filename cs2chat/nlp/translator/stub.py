from __future__ import annotations
from .base import Translator
from cs2chat.contracts import TranslationRequest, TranslationResult

class StubTranslator(Translator):
    def __init__(self, detected_language: str = "unknown"):
        self.detected_language = detected_language

    @property
    def name(self) -> str:
        return "stub"

    async def translate(self, req: TranslationRequest) -> TranslationResult:
        # Deterministic, network-free
        text = f"[stub:{req.target_lang}] {req.text}"
        return TranslationResult(
            text=text,
            detected_language=(req.source_lang or self.detected_language),
            provider=self.name,
        )
