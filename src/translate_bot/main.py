import asyncio
import json
from logging import Logger, getLogger
from pathlib import Path
from typing import Any

import click

from translate_bot.bot.pipeline import TranslationPipeline, TranslationResult, prepare_chunks
from translate_bot.bot.translator import TranslateBot
from translate_bot.clients.errors.base import ClientError
from translate_bot.clients.slack import SlackClient
from translate_bot.clients.translation import GoogleTranslationClient
from translate_bot.config import Settings
from translate_bot.text.chunking import DEFAULT_MAX_CHUNK_BYTES, DEFAULT_MIN_CHUNK_BYTES
from translate_bot.text.language import TargetLanguage, determine_target_language
from translate_bot.utilities.formatting import dump_yaml
from translate_bot.utilities.logging import configure_logging

logger: Logger = getLogger(__name__)

TARGET_LANGUAGE_OPTION = click.option(
    "--target",
    "target_language",
    type=click.Choice(["ja", "ko"]),
    default=None,
    help="Translate into this language instead of detecting the direction.",
)


def new_translation_client(settings: Settings) -> GoogleTranslationClient:
    return GoogleTranslationClient(
        project_id=settings.google_cloud_project_id,
        location=settings.google_translate_location,
        credentials_info=settings.google_credentials_info,
    )


def new_pipeline(settings: Settings, translation_client: GoogleTranslationClient | None = None) -> TranslationPipeline:
    return TranslationPipeline(
        translation_client=translation_client or new_translation_client(settings),
        min_chunk_bytes=settings.min_chunk_bytes,
        max_chunk_bytes=settings.max_chunk_bytes,
    )


def new_translate_bot(settings: Settings, translation_client: GoogleTranslationClient | None = None) -> TranslateBot:
    if not settings.slack_bot_token:
        msg = "SLACK_BOT_TOKEN must be set"
        raise ValueError(msg)

    return TranslateBot(
        pipeline=new_pipeline(settings, translation_client=translation_client),
        slack_client=SlackClient(token=settings.slack_bot_token),
    )


def load_settings() -> Settings:
    try:
        settings = Settings.from_env()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    _ = configure_logging(level=settings.log_level)

    logger.debug(f"Loaded settings: {settings.describe()}")

    return settings


def read_text(text: str | None) -> str:
    if text is None or text == "-":
        return click.get_text_stream("stdin").read()
    return text


async def run_translation(settings: Settings, text: str, target_language: TargetLanguage | None) -> TranslationResult | None:
    async with new_translation_client(settings) as translation_client:
        pipeline = new_pipeline(settings, translation_client=translation_client)
        return await pipeline.translate(text, target_language=target_language)


async def replay_event(settings: Settings, payload: dict[str, Any]) -> str | None:
    async with new_translation_client(settings) as translation_client:
        bot = new_translate_bot(settings, translation_client=translation_client)
        return await bot.handle_event_payload(payload)


@click.group()
def cli():
    """Korean/Japanese auto-translation for Slack."""


@cli.command()
@click.argument("text", required=False)
def detect(text: str | None):
    """Print the language TEXT would be translated into, or `skip`."""
    click.echo(determine_target_language(read_text(text)) or "skip")


@cli.command()
@click.argument("text", required=False)
@TARGET_LANGUAGE_OPTION
@click.option("--min-bytes", type=int, default=DEFAULT_MIN_CHUNK_BYTES, show_default=True, help="Prefer to end chunks on a newline after this many bytes.")
@click.option("--max-bytes", type=int, default=DEFAULT_MAX_CHUNK_BYTES, show_default=True, help="The maximum size of a chunk in bytes.")
def plan(text: str | None, target_language: TargetLanguage | None, min_bytes: int, max_bytes: int):
    """Show the chunks and protected expressions TEXT would be sent as, without calling any API."""

    source = read_text(text)

    if (resolved_target := target_language or determine_target_language(source)) is None:
        click.echo("skip")
        return

    try:
        chunks = prepare_chunks(source, resolved_target, min_chunk_bytes=min_bytes, max_chunk_bytes=max_bytes)
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    chunk_summaries: list[dict[str, Any]] = [
        {**chunk.model_dump(exclude={"target_language"}), "bytes": len(chunk.text.encode("utf-8"))} for chunk in chunks
    ]

    click.echo(dump_yaml({"target_language": resolved_target, "chunks": chunk_summaries}), nl=False)


@cli.command()
@click.argument("text", required=False)
@TARGET_LANGUAGE_OPTION
def translate(text: str | None, target_language: TargetLanguage | None):
    """Translate TEXT (or stdin) between Korean and Japanese."""

    settings = load_settings()

    try:
        result = asyncio.run(run_translation(settings, read_text(text), target_language))
    except (ClientError, ValueError) as e:
        raise click.ClickException(str(e)) from e

    if result is None:
        click.echo("skip: the text is not Korean-only or Japanese-only", err=True)
        return

    click.echo(result.text)


@cli.command("handle-event")
@click.argument("payload_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def handle_event(payload_file: Path):
    """Replay a saved Slack Events API payload through the bot."""

    settings = load_settings()

    if not settings.slack_bot_token:
        msg = "SLACK_BOT_TOKEN must be set"
        raise click.ClickException(msg)

    try:
        payload: dict[str, Any] = json.loads(payload_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        msg = f"{payload_file} is not valid JSON: {e}"
        raise click.ClickException(msg) from e

    if (challenge := asyncio.run(replay_event(settings, payload))) is not None:
        click.echo(challenge)


if __name__ == "__main__":
    cli()
