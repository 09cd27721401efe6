from logging import Logger, getLogger
from typing import Any, Protocol

from pydantic import ValidationError

from translate_bot.bot.pipeline import TranslationPipeline, TranslationResult
from translate_bot.models.events import EventCallback, MessageEvent, UrlVerification


class ThreadReplyPoster(Protocol):
    async def post_thread_reply(self, channel: str, thread_ts: str, text: str) -> str: ...


class TranslateBot:
    """Replies to Korean messages with a Japanese translation and to Japanese messages with a Korean one."""

    pipeline: TranslationPipeline
    slack_client: ThreadReplyPoster
    logger: Logger

    def __init__(self, pipeline: TranslationPipeline, slack_client: ThreadReplyPoster, logger: Logger | None = None):
        self.pipeline = pipeline
        self.slack_client = slack_client
        self.logger = logger or getLogger(__name__)

    async def process_message(self, event: MessageEvent) -> TranslationResult | None:
        """Translate a message and post the translation in its thread.

        Returns `None` when the message is skipped: bot messages, edits and deletions, and messages that are not
        Korean-only or Japanese-only.
        """

        if event.is_from_bot or event.is_ignored_subtype:
            return None

        result: TranslationResult | None = await self.pipeline.translate(event.text)

        if result is None:
            self.logger.info(f"Skipping message, no translation needed (channel={event.channel}, ts={event.ts})")
            return None

        _ = await self.slack_client.post_thread_reply(channel=event.channel, thread_ts=event.reply_thread_ts, text=result.text)

        self.logger.info(
            f"Posted {result.target_language} translation of {len(result.chunks)} chunks "
            f"(channel={event.channel}, thread_ts={event.reply_thread_ts})"
        )

        return result

    async def handle_event_payload(self, payload: dict[str, Any]) -> str | None:
        """Handle a decoded Events API payload.

        Returns the challenge for `url_verification` payloads and `None` otherwise. Every error while processing a
        message is logged rather than raised, since a failure response makes Slack deliver the event again.
        """

        payload_type = payload.get("type")

        if payload_type == "url_verification":
            return UrlVerification.model_validate(payload).challenge

        if payload_type != "event_callback":
            self.logger.info(f"Ignoring payload of type {payload_type}")
            return None

        envelope: EventCallback = EventCallback.model_validate(payload)

        if envelope.event_type != "message":
            self.logger.debug(f"Ignoring event of type {envelope.event_type}")
            return None

        try:
            event: MessageEvent = MessageEvent.model_validate(envelope.event)
        except ValidationError:
            self.logger.exception(f"Could not parse message event {envelope.event_id}")
            return None

        try:
            _ = await self.process_message(event)
        except Exception:
            self.logger.exception(f"Error processing message (channel={event.channel}, ts={event.ts})")

        return None
