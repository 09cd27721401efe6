import json
from collections.abc import Callable
from typing import Any, overload

import httpx
import pytest
from google.auth.credentials import Credentials
from google.auth.transport import Request
from pydantic import BaseModel

from translate_bot.clients.translation import GoogleTranslationClient

TEST_PROJECT_ID = "test-project"
TEST_TOKEN = "test-token"
REFRESHED_TOKEN = "refreshed-token"

RequestHandler = Callable[[httpx.Request], httpx.Response]


class StaticCredentials(Credentials):
    """Credentials holding a fixed token, refreshed to another fixed token."""

    def __init__(self, token: str | None = TEST_TOKEN):
        super().__init__()
        self.token = token
        self.refresh_count = 0

    def refresh(self, request: Request) -> None:
        self.refresh_count += 1
        self.token = REFRESHED_TOKEN


class EchoTranslator:
    """Translates by prefixing each chunk with the target language."""

    def __init__(self):
        self.calls: list[tuple[list[str], str]] = []

    async def translate_chunks(self, chunks: list[str], target_language: str) -> list[str]:
        self.calls.append((chunks, target_language))
        return [f"[{target_language}] {chunk}" for chunk in chunks]


class RecordingSlackClient:
    def __init__(self):
        self.replies: list[dict[str, str]] = []

    async def post_thread_reply(self, channel: str, thread_ts: str, text: str) -> str:
        self.replies.append({"channel": channel, "thread_ts": thread_ts, "text": text})
        return "1700000000.000200"


def echo_translation_handler(request: httpx.Request) -> httpx.Response:
    """Answer a translateText request the way the API does, prefixing each text with the target language."""

    body: dict[str, Any] = json.loads(request.content)
    translations = [{"translatedText": f"[{body['targetLanguageCode']}] {content}"} for content in body["contents"]]
    return httpx.Response(200, json={"translations": translations})


def new_test_translation_client(
    handler: RequestHandler = echo_translation_handler, credentials: Credentials | None = None, **kwargs: Any
) -> GoogleTranslationClient:
    return GoogleTranslationClient(
        project_id=TEST_PROJECT_ID,
        credentials=credentials or StaticCredentials(),
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        **kwargs,
    )


@pytest.fixture
def credentials() -> StaticCredentials:
    return StaticCredentials()


@pytest.fixture
def echo_translator() -> EchoTranslator:
    return EchoTranslator()


@pytest.fixture
def slack_client() -> RecordingSlackClient:
    return RecordingSlackClient()


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for name in (
        "SLACK_BOT_TOKEN",
        "GOOGLE_CLOUD_PROJECT_ID",
        "GOOGLE_TRANSLATE_API_LOCATION",
        "GOOGLE_CREDS",
        "TRANSLATE_MIN_CHUNK_BYTES",
        "TRANSLATE_MAX_CHUNK_BYTES",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def handle_exclude_keys(dictionary: dict[str, Any], exclude_keys: list[str] | None = None) -> dict[str, Any]:
    if exclude_keys is None:
        return dictionary
    return {key: value for key, value in dictionary.items() if key not in exclude_keys}


@overload
def dump_for_snapshot(
    basemodel: None,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> None: ...


@overload
def dump_for_snapshot(
    basemodel: BaseModel,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> dict[str, Any]: ...


def dump_for_snapshot(
    basemodel: None | BaseModel,
    /,
    exclude_keys: list[str] | None = None,
    exclude_none: bool = True,
    **dump_kwargs: Any,
) -> dict[str, Any] | None:
    if basemodel is None:
        return None

    return handle_exclude_keys(basemodel.model_dump(exclude_none=exclude_none, **dump_kwargs), exclude_keys)

