import os
from logging import Logger, getLogger

import aiohttp
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from translate_bot.clients.errors.base import RequestError

POST_THREAD_REPLY_ACTION = "Post thread reply"


def get_slack_bot_token() -> str:
    if token := os.getenv("SLACK_BOT_TOKEN"):
        return token
    msg = "SLACK_BOT_TOKEN must be set"
    raise ValueError(msg)


class SlackClient:
    web_client: AsyncWebClient
    logger: Logger

    def __init__(self, token: str | None = None, web_client: AsyncWebClient | None = None, logger: Logger | None = None):
        self.web_client = web_client or AsyncWebClient(token=token or get_slack_bot_token())
        self.logger = logger or getLogger(__name__)

    async def post_thread_reply(self, channel: str, thread_ts: str, text: str) -> str:
        """Post `text` as a reply in the thread started by `thread_ts` and return the new message's timestamp."""

        self.logger.info(f"Posting thread reply to {channel} (thread_ts={thread_ts}, {len(text)} characters)")

        try:
            response = await self.web_client.chat_postMessage(channel=channel, text=text, thread_ts=thread_ts)
        except SlackApiError as e:
            error: str | None = e.response.get("error") if e.response is not None else None
            self.logger.exception(f"Error posting thread reply to {channel} (thread_ts={thread_ts}): {error}")
            raise RequestError(
                action=POST_THREAD_REPLY_ACTION, message=error, extra_info={"channel": channel, "thread_ts": thread_ts}
            ) from e
        except (aiohttp.ClientError, TimeoutError) as e:
            self.logger.exception(f"Error posting thread reply to {channel} (thread_ts={thread_ts}): {e!r}")
            raise RequestError(
                action=POST_THREAD_REPLY_ACTION, message=str(e) or type(e).__name__, extra_info={"channel": channel, "thread_ts": thread_ts}
            ) from e

        return str(response.get("ts") or "")
