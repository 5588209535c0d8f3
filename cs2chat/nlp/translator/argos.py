from __future__ import annotations
import asyncio
from .base import TranslationError, Translator
from cs2chat.contracts import TranslationRequest, TranslationResult

class ArgosTranslator(Translator):
    """
    Offline translation. Argos has no language detection, so the configured
    source language is reported back as the detected one.
    """

    def __init__(self, from_code: str = "ru", auto_install: bool = True):
        self.from_code = from_code
        self.auto_install = auto_install
        self._ready: set[tuple[str, str]] = set()

    @property
    def name(self) -> str:
        return "argos"

    def _ensure_ready(self, from_code: str, to_code: str) -> None:
        if (from_code, to_code) in self._ready:
            return

        import argostranslate.package
        import argostranslate.translate

        installed = argostranslate.translate.get_installed_languages()
        have_from = any(l.code == from_code for l in installed)
        have_to = any(l.code == to_code for l in installed)

        if not (have_from and have_to):
            if not self.auto_install:
                raise TranslationError("Argos model not installed and auto_install=False")

            argostranslate.package.update_package_index()
            available = argostranslate.package.get_available_packages()

            pkg = None
            for p in available:
                if p.from_code == from_code and p.to_code == to_code:
                    pkg = p
                    break
            if pkg is None:
                raise TranslationError(f"No Argos package found for {from_code}->{to_code}")

            path = pkg.download()
            argostranslate.package.install_from_path(path)

        self._ready.add((from_code, to_code))

    def _translate_blocking(self, text: str, from_code: str, to_code: str) -> str:
        self._ensure_ready(from_code, to_code)
        import argostranslate.translate
        return argostranslate.translate.translate(text, from_code, to_code)

    async def translate(self, req: TranslationRequest) -> TranslationResult:
        from_code = (req.source_lang or self.from_code).lower()
        to_code = req.target_lang.lower()
        if from_code == to_code:
            return TranslationResult(text=req.text, detected_language=from_code, provider=self.name)
        # argostranslate is CPU-bound and synchronous; keep it off the event loop.
        out = await asyncio.to_thread(self._translate_blocking, req.text, from_code, to_code)
        return TranslationResult(text=out, detected_language=from_code, provider=self.name)
