import asyncio
from collections.abc import Callable
from logging import Logger, getLogger
from types import TracebackType
from typing import Any, Self

import google.auth
import httpx
from google.auth.credentials import Credentials
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from pydantic import ValidationError

from translate_bot.clients.errors.base import RequestError
from translate_bot.clients.errors.translation import AuthenticationError, TranslationCountMismatchError
from translate_bot.clients.models.translation import TranslateTextRequest, TranslateTextResponse, location_path

TRANSLATION_SCOPE = "https://www.googleapis.com/auth/cloud-translation"
TRANSLATION_API_BASE_URL = "https://translation.googleapis.com/v3"

DEFAULT_LOCATION = "global"
DEFAULT_TIMEOUT_SECONDS = 15.0

TRANSLATE_ACTION = "Translate text"


def load_credentials(credentials_info: dict[str, Any] | None = None) -> Credentials:
    """Load service account credentials from `credentials_info`, or application default credentials without it."""

    try:
        if credentials_info:
            return service_account.Credentials.from_service_account_info(credentials_info, scopes=[TRANSLATION_SCOPE])  # pyright: ignore[reportUnknownMemberType]

        credentials, _ = google.auth.default(scopes=[TRANSLATION_SCOPE])  # pyright: ignore[reportUnknownMemberType]
    except (GoogleAuthError, ValueError) as e:
        source = "service account info" if credentials_info else "application default credentials"
        raise AuthenticationError(message=str(e), extra_info={"source": source}) from e

    return credentials


class GoogleTranslationClient:
    """A client for the Cloud Translation v3 `translateText` method using the translation LLM."""

    project_id: str
    location: str
    timeout: float
    http_client: httpx.AsyncClient
    logger: Logger

    log_requests: bool
    log_responses: bool
    log_on_error: bool

    def __init__(
        self,
        project_id: str,
        location: str = DEFAULT_LOCATION,
        credentials: Credentials | None = None,
        credentials_info: dict[str, Any] | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        logger: Logger | None = None,
        log_requests: bool = True,
        log_responses: bool = False,
        log_on_error: bool = True,
    ):
        self.project_id = project_id
        self.location = location or DEFAULT_LOCATION
        self.timeout = timeout
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout)
        self.logger = logger or getLogger(__name__)
        self.log_requests = log_requests
        self.log_responses = log_responses
        self.log_on_error = log_on_error

        self._credentials: Credentials | None = credentials
        self._credentials_info: dict[str, Any] | None = credentials_info

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: TracebackType | None
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http_client.aclose()

    @property
    def translate_url(self) -> str:
        return f"{TRANSLATION_API_BASE_URL}/{location_path(self.project_id, self.location)}:translateText"

    def _get_loggers(self) -> tuple[Callable[[str], Any], Callable[[str], Any], Callable[[str], Any]]:
        request_logger = self.logger.info if self.log_requests else self.logger.debug
        response_logger = self.logger.info if self.log_responses else self.logger.debug
        error_logger = self.logger.exception if self.log_on_error else self.logger.debug
        return request_logger, response_logger, error_logger

    def _get_credentials(self) -> Credentials:
        """Load the credentials on first use. Resolving application default credentials may block on the network."""

        if self._credentials is None:
            self._credentials = load_credentials(credentials_info=self._credentials_info)

        return self._credentials

    async def _get_access_token(self) -> str:
        """Return a valid access token, refreshing the credentials first when needed."""

        credentials: Credentials = await asyncio.to_thread(self._get_credentials)

        if not credentials.valid:
            try:
                await asyncio.to_thread(credentials.refresh, Request())
            except GoogleAuthError as e:
                raise AuthenticationError(message="Could not refresh the access token.", extra_info={"error": str(e)}) from e

        if not credentials.token:
            raise AuthenticationError(message="The credentials did not provide an access token.")

        return str(credentials.token)

    async def translate_chunks(self, chunks: list[str], target_language: str) -> list[str]:
        """Translate `chunks` into `target_language` with a single request.

        Raises:
            AuthenticationError: If no access token could be obtained.
            TranslationCountMismatchError: If the response does not contain one translation per chunk.
            RequestError: If the request fails, times out, or returns a non-200 response.
        """

        if not chunks:
            return []

        request_logger, response_logger, error_logger = self._get_loggers()

        request: TranslateTextRequest = TranslateTextRequest.for_chunks(
            chunks=chunks, target_language=target_language, project_id=self.project_id, location=self.location
        )

        request_logger(f"Translating {len(chunks)} chunks to {target_language} using {self.translate_url}")

        try:
            async with asyncio.timeout(self.timeout):
                access_token: str = await self._get_access_token()
                response: httpx.Response = await self.http_client.post(
                    self.translate_url,
                    json=request.to_payload(),
                    headers={"Authorization": f"Bearer {access_token}"},
                )
        except TimeoutError as e:
            error_logger(f"Translation request to {self.translate_url} timed out after {self.timeout} seconds")
            raise RequestError(action=TRANSLATE_ACTION, message=f"Timed out after {self.timeout} seconds.") from e
        except httpx.HTTPError as e:
            error_logger(f"Error performing translation request to {self.translate_url}: {e}")
            raise RequestError(action=TRANSLATE_ACTION, message=str(e)) from e

        response_logger(f"Translation API responded with status {response.status_code} ({len(response.content)} bytes)")

        if response.status_code != httpx.codes.OK:
            self.logger.error(f"Translation API request failed with status {response.status_code}: {response.text}")
            raise RequestError(action=TRANSLATE_ACTION, message=response.text, extra_info={"status_code": str(response.status_code)})

        try:
            translate_response: TranslateTextResponse = TranslateTextResponse.model_validate_json(response.content)
        except ValidationError as e:
            error_logger(f"Could not parse the translation response: {e}")
            raise RequestError(action=TRANSLATE_ACTION, message="The response body could not be parsed.") from e

        if len(translate_response.translations) != len(chunks):
            self.logger.warning(f"Translation count mismatch: requested {len(chunks)}, received {len(translate_response.translations)}")
            raise TranslationCountMismatchError(action=TRANSLATE_ACTION, requested=len(chunks), received=len(translate_response.translations))

        return translate_response.translated_texts
