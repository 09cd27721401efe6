from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

IGNORED_MESSAGE_SUBTYPES: frozenset[str] = frozenset({"message_changed", "message_deleted"})


class MessageEvent(BaseModel):
    """A Slack `message` event."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    type: Literal["message"] = "message"
    channel: str = Field(description="The channel the message was posted in.")
    ts: str = Field(description="The timestamp of the message.")
    text: str = Field(default="", description="The text of the message.")
    user: str | None = Field(default=None, description="The user that posted the message.")
    thread_ts: str | None = Field(default=None, description="The timestamp of the thread parent, for replies.")
    bot_id: str | None = Field(default=None, description="The bot that posted the message, if any.")
    subtype: str | None = Field(default=None, description="The message subtype, if any.")

    @property
    def reply_thread_ts(self) -> str:
        """The thread a reply to this message belongs in."""
        return self.thread_ts or self.ts

    @property
    def is_from_bot(self) -> bool:
        return bool(self.bot_id)

    @property
    def is_ignored_subtype(self) -> bool:
        return self.subtype in IGNORED_MESSAGE_SUBTYPES


class UrlVerification(BaseModel):
    """The handshake Slack sends when the request URL of the app is configured."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["url_verification"]
    challenge: str


class EventCallback(BaseModel):
    """An Events API envelope carrying a single event."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["event_callback"]
    team_id: str | None = None
    event_id: str | None = None
    event: dict[str, Any] = Field(default_factory=dict, description="The inner event, parsed by type when handled.")

    @property
    def event_type(self) -> str | None:
        return self.event.get("type")
