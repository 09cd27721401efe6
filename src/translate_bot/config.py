import json
import os
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

from translate_bot.clients.translation import DEFAULT_LOCATION
from translate_bot.text.chunking import DEFAULT_MAX_CHUNK_BYTES, DEFAULT_MIN_CHUNK_BYTES, validate_chunk_bounds

DEFAULT_LOG_LEVEL = "INFO"


def get_google_cloud_project_id() -> str:
    if project_id := os.getenv("GOOGLE_CLOUD_PROJECT_ID"):
        return project_id
    msg = "GOOGLE_CLOUD_PROJECT_ID must be set"
    raise ValueError(msg)


def get_google_translate_location() -> str:
    return os.getenv("GOOGLE_TRANSLATE_API_LOCATION") or DEFAULT_LOCATION


def get_google_credentials_info() -> dict[str, Any] | None:
    """Parse the service account JSON in `GOOGLE_CREDS`, if set."""

    if not (raw_credentials := os.getenv("GOOGLE_CREDS", "").strip()):
        return None

    try:
        credentials_info = json.loads(raw_credentials)
    except json.JSONDecodeError as e:
        msg = f"GOOGLE_CREDS must be a service account JSON object: {e}"
        raise ValueError(msg) from e

    if not isinstance(credentials_info, dict):
        msg = "GOOGLE_CREDS must be a service account JSON object"
        raise ValueError(msg)

    return credentials_info  # pyright: ignore[reportUnknownVariableType]


def get_int_env(name: str, default: int) -> int:
    if not (value := os.getenv(name)):
        return default

    try:
        return int(value)
    except ValueError as e:
        msg = f"{name} must be an integer, got {value!r}"
        raise ValueError(msg) from e


class Settings(BaseModel):
    """Settings for the translate bot, read from the environment."""

    model_config = ConfigDict(frozen=True)

    slack_bot_token: str | None = Field(default=None, repr=False, description="The bot token used to post replies.")
    google_cloud_project_id: str = Field(description="The Google Cloud project hosting the Translation API.")
    google_translate_location: str = Field(default=DEFAULT_LOCATION, description="The Translation API location.")
    google_credentials_info: dict[str, Any] | None = Field(
        default=None, repr=False, description="Service account credentials. Application default credentials are used without it."
    )
    min_chunk_bytes: int = Field(default=DEFAULT_MIN_CHUNK_BYTES, description="Chunks prefer to end on a newline after this many bytes.")
    max_chunk_bytes: int = Field(default=DEFAULT_MAX_CHUNK_BYTES, description="The maximum size of a chunk in bytes.")
    log_level: str = Field(default=DEFAULT_LOG_LEVEL, description="The level the package logs at.")

    @model_validator(mode="after")
    def check_chunk_bounds(self) -> Self:
        try:
            validate_chunk_bounds(min_bytes=self.min_chunk_bytes, max_bytes=self.max_chunk_bytes)
        except ValueError as e:
            msg = f"TRANSLATE_MIN_CHUNK_BYTES and TRANSLATE_MAX_CHUNK_BYTES are invalid: {e}"
            raise ValueError(msg) from e
        return self

    @classmethod
    def from_env(cls) -> Self:
        return cls(
            slack_bot_token=os.getenv("SLACK_BOT_TOKEN") or None,
            google_cloud_project_id=get_google_cloud_project_id(),
            google_translate_location=get_google_translate_location(),
            google_credentials_info=get_google_credentials_info(),
            min_chunk_bytes=get_int_env("TRANSLATE_MIN_CHUNK_BYTES", DEFAULT_MIN_CHUNK_BYTES),
            max_chunk_bytes=get_int_env("TRANSLATE_MAX_CHUNK_BYTES", DEFAULT_MAX_CHUNK_BYTES),
            log_level=os.getenv("LOG_LEVEL") or DEFAULT_LOG_LEVEL,
        )

    def describe(self) -> dict[str, str]:
        """Summarize the settings for logging without revealing secrets."""

        return {
            "SLACK_BOT_TOKEN": f"{len(self.slack_bot_token or '')} characters",
            "GOOGLE_CLOUD_PROJECT_ID": self.google_cloud_project_id,
            "GOOGLE_TRANSLATE_API_LOCATION": self.google_translate_location,
            "GOOGLE_CREDS": "service account" if self.google_credentials_info else "application default credentials",
            "CHUNK_BYTES": f"{self.min_chunk_bytes}-{self.max_chunk_bytes}",
        }
