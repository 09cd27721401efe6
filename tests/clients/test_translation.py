import asyncio
import json
import re
import threading
from typing import Any

import httpx
import pytest
from dirty_equals import IsStr
from google.auth.credentials import Credentials
from inline_snapshot import snapshot

from tests.conftest import (
    REFRESHED_TOKEN,
    TEST_PROJECT_ID,
    TEST_TOKEN,
    StaticCredentials,
    echo_translation_handler,
    new_test_translation_client,
)
from translate_bot.clients import translation
from translate_bot.clients.errors.base import RequestError
from translate_bot.clients.errors.translation import AuthenticationError, TranslationCountMismatchError
from translate_bot.clients.translation import GoogleTranslationClient, load_credentials


def test_translate_url() -> None:
    client = GoogleTranslationClient(project_id="test-project", location="us-central1", credentials=StaticCredentials())

    assert client.translate_url == snapshot(
        "https://translation.googleapis.com/v3/projects/test-project/locations/us-central1:translateText"
    )


async def test_translate_chunks() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        body = json.loads(request.content)
        return httpx.Response(200, json={"translations": [{"translatedText": f"번역: {content}"} for content in body["contents"]]})

    async with new_test_translation_client(handler) as client:
        translated = await client.translate_chunks(chunks=["こんにちは", "\nありがとう"], target_language="ko")

    assert translated == ["번역: こんにちは", "번역: \nありがとう"]

    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == snapshot("https://translation.googleapis.com/v3/projects/test-project/locations/global:translateText")
    assert request.headers["Authorization"] == f"Bearer {TEST_TOKEN}"
    assert json.loads(request.content) == snapshot(
        {
            "contents": ["こんにちは", "\nありがとう"],
            "targetLanguageCode": "ko",
            "mimeType": "text/plain",
            "model": "projects/test-project/locations/global/models/general/translation-llm",
        }
    )


async def test_translate_no_chunks() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    async with new_test_translation_client(handler) as client:
        assert await client.translate_chunks(chunks=[], target_language="ja") == []


async def test_refreshes_missing_token() -> None:
    credentials = StaticCredentials(token=None)
    authorizations: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        authorizations.append(request.headers["Authorization"])
        return httpx.Response(200, json={"translations": [{"translatedText": "안녕하세요"}]})

    async with new_test_translation_client(handler, credentials=credentials) as client:
        assert await client.translate_chunks(chunks=["こんにちは"], target_language="ko") == ["안녕하세요"]

    assert credentials.refresh_count == 1
    assert authorizations == [f"Bearer {REFRESHED_TOKEN}"]


async def test_error_status() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(403, text="permission denied")

    async with new_test_translation_client(handler) as client:
        with pytest.raises(RequestError) as exc_info:
            _ = await client.translate_chunks(chunks=["안녕하세요"], target_language="ja")

    assert str(exc_info.value) == snapshot(
        "A request error occured. (action: Translate text, message: permission denied, status_code: 403)"
    )


async def test_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused")

    async with new_test_translation_client(handler) as client:
        with pytest.raises(RequestError, match=re.escape("message: connection refused")):
            _ = await client.translate_chunks(chunks=["안녕하세요"], target_language="ja")


async def test_timeout() -> None:
    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(5)
        return httpx.Response(200, json={"translations": []})

    async with new_test_translation_client(handler, timeout=0.01) as client:
        with pytest.raises(RequestError, match=re.escape("Timed out after 0.01 seconds.")):
            _ = await client.translate_chunks(chunks=["안녕하세요"], target_language="ja")


async def test_unparseable_response() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"translations": [{"text": "안녕하세요"}]})

    async with new_test_translation_client(handler) as client:
        with pytest.raises(RequestError, match="could not be parsed"):
            _ = await client.translate_chunks(chunks=["안녕하세요"], target_language="ja")


async def test_translation_count_mismatch() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"translations": [{"translatedText": "こんにちは"}]})

    async with new_test_translation_client(handler) as client:
        with pytest.raises(TranslationCountMismatchError) as exc_info:
            _ = await client.translate_chunks(chunks=["안녕하세요", "\n감사합니다"], target_language="ja")

    assert str(exc_info.value) == snapshot(
        "A request error occured. (action: Translate text, message: The number of translations does not match the number of texts sent., requested: 2, received: 1)"
    )


def test_load_credentials_with_invalid_service_account_info() -> None:
    with pytest.raises(AuthenticationError) as exc_info:
        _ = load_credentials({"type": "service_account"})

    assert str(exc_info.value) == IsStr(regex=r"Google Cloud authentication failed: .* \(source: service account info\)")


async def test_credentials_are_loaded_off_the_event_loop(monkeypatch: pytest.MonkeyPatch) -> None:
    loading_threads: list[int] = []

    def fake_load_credentials(credentials_info: dict[str, Any] | None = None) -> Credentials:
        loading_threads.append(threading.get_ident())
        return StaticCredentials()

    monkeypatch.setattr(translation, "load_credentials", fake_load_credentials)

    client = GoogleTranslationClient(
        project_id=TEST_PROJECT_ID, http_client=httpx.AsyncClient(transport=httpx.MockTransport(echo_translation_handler))
    )

    async with client:
        assert await client.translate_chunks(chunks=["안녕하세요"], target_language="ja") == ["[ja] 안녕하세요"]
        assert await client.translate_chunks(chunks=["감사합니다"], target_language="ja") == ["[ja] 감사합니다"]

    assert len(loading_threads) == 1
    assert loading_threads[0] != threading.get_ident()
