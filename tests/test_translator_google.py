from __future__ import annotations

import asyncio

import httpx
import pytest

from cs2chat.contracts import TranslationRequest
from cs2chat.nlp.translator.base import TranslationError
from cs2chat.nlp.translator.google import GoogleTranslator, parse_gtx_payload


def test_parse_gtx_payload_joins_segments() -> None:
    payload = [[["Hello, ", "Привет, ", None, None, 10], ["how are you?", "как дела?", None, None, 10]], None, "ru"]
    assert parse_gtx_payload(payload) == ("Hello, how are you?", "ru")


def test_parse_gtx_payload_without_language() -> None:
    assert parse_gtx_payload([[["ok", "ok"]]]) == ("ok", "unknown")


@pytest.mark.parametrize("payload", [None, {}, [], ["x"], [[]], [[[None]]]])
def test_parse_gtx_payload_rejects_malformed(payload) -> None:
    with pytest.raises(TranslationError):
        parse_gtx_payload(payload)


def test_google_translator_sends_expected_query() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[[["good game", "хорошая игра"]], None, "RU"])

    tr = GoogleTranslator(transport=httpx.MockTransport(handler))

    async def go():
        try:
            return await tr.translate(TranslationRequest(text="хорошая игра", target_lang="en", source_lang="ru"))
        finally:
            await tr.aclose()

    res = asyncio.run(go())
    assert res.text == "good game"
    assert res.detected_language == "ru"
    assert res.provider == "google"
    params = seen[0].url.params
    assert params["client"] == "gtx"
    assert params["sl"] == "ru"
    assert params["tl"] == "en"
    assert params["q"] == "хорошая игра"


def test_google_translator_auto_detects_by_default() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[[["hi", "hola"]], None, "es"])

    tr = GoogleTranslator(transport=httpx.MockTransport(handler))
    res = asyncio.run(tr.translate(TranslationRequest(text="hola")))
    assert seen[0].url.params["sl"] == "auto"
    assert res.detected_language == "es"


def test_google_translator_http_error_raises_translation_error() -> None:
    tr = GoogleTranslator(transport=httpx.MockTransport(lambda request: httpx.Response(429, text="Too Many Requests")))
    with pytest.raises(TranslationError, match="429"):
        asyncio.run(tr.translate(TranslationRequest(text="hola")))


def test_google_translator_invalid_json_raises_translation_error() -> None:
    tr = GoogleTranslator(transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>")))
    with pytest.raises(TranslationError):
        asyncio.run(tr.translate(TranslationRequest(text="hola")))
