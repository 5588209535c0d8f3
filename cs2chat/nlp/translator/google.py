from __future__ import annotations

from typing import Any

import httpx

from .base import TranslationError, Translator
from cs2chat.contracts import TranslationRequest, TranslationResult

GTX_URL = "https://translate.googleapis.com/translate_a/single"


def parse_gtx_payload(payload: Any) -> tuple[str, str]:
    """
    Pull (translated_text, detected_language) out of a gtx response.

    Shape: [[["Hello", "Привет", ...], ...], None, "ru", ...]
    """
    if not isinstance(payload, list) or not payload or not isinstance(payload[0], list):
        raise TranslationError(f"Unexpected translate response: {str(payload)[:200]}")

    parts: list[str] = []
    for seg in payload[0]:
        if isinstance(seg, list) and seg and isinstance(seg[0], str):
            parts.append(seg[0])
    if not parts:
        raise TranslationError("Translate response contained no text segments")

    detected = payload[2] if len(payload) > 2 and isinstance(payload[2], str) else "unknown"
    return "".join(parts), detected.lower()


class GoogleTranslator(Translator):
    def __init__(
        self,
        *,
        timeout_sec: float = 10.0,
        url: str = GTX_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout_sec = timeout_sec
        self.url = url
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def name(self) -> str:
        return "google"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_sec),
                transport=self._transport,
            )
        return self._client

    async def translate(self, req: TranslationRequest) -> TranslationResult:
        params = {
            "client": "gtx",
            "sl": req.source_lang or "auto",
            "tl": req.target_lang,
            "dt": "t",
            "q": req.text,
        }
        try:
            response = await self._get_client().get(self.url, params=params)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise TranslationError(
                f"google translate error ({e.response.status_code}): {e.response.text[:200]}"
            ) from e
        except ValueError as e:
            raise TranslationError(f"google translate returned invalid JSON: {e}") from e

        text, detected = parse_gtx_payload(payload)
        return TranslationResult(text=text, detected_language=detected, provider=self.name)

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
