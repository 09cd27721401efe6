from logging import Logger, getLogger
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from translate_bot.text.chunking import DEFAULT_MAX_CHUNK_BYTES, DEFAULT_MIN_CHUNK_BYTES, split_by_newline_chunk
from translate_bot.text.language import TargetLanguage, determine_target_language
from translate_bot.text.protection import ProtectedText

CHUNK_SEPARATOR = "\n\n"


class ChunkTranslator(Protocol):
    async def translate_chunks(self, chunks: list[str], target_language: str) -> list[str]: ...


class TranslationResult(BaseModel):
    """The outcome of translating a message."""

    model_config = ConfigDict(frozen=True)

    source_text: str = Field(description="The message as it was written.")
    target_language: TargetLanguage = Field(description="The language the message was translated into.")
    chunks: list[ProtectedText] = Field(description="The protected chunks sent for translation.")
    translated_chunks: list[str] = Field(description="The translated chunks, with protected expressions restored.")

    @property
    def text(self) -> str:
        return CHUNK_SEPARATOR.join(self.translated_chunks)


def prepare_chunks(
    text: str,
    target_language: TargetLanguage,
    min_chunk_bytes: int = DEFAULT_MIN_CHUNK_BYTES,
    max_chunk_bytes: int = DEFAULT_MAX_CHUNK_BYTES,
) -> list[ProtectedText]:
    """Split `text` into chunks and protect the currency and laughter in each of them."""

    chunks: list[str] = split_by_newline_chunk(text, min_bytes=min_chunk_bytes, max_bytes=max_chunk_bytes)

    return [ProtectedText.protect(chunk, target_language) for chunk in chunks]


class TranslationPipeline:
    """Chunk, protect, translate and restore a message."""

    translation_client: ChunkTranslator
    min_chunk_bytes: int
    max_chunk_bytes: int
    logger: Logger

    def __init__(
        self,
        translation_client: ChunkTranslator,
        min_chunk_bytes: int = DEFAULT_MIN_CHUNK_BYTES,
        max_chunk_bytes: int = DEFAULT_MAX_CHUNK_BYTES,
        logger: Logger | None = None,
    ):
        self.translation_client = translation_client
        self.min_chunk_bytes = min_chunk_bytes
        self.max_chunk_bytes = max_chunk_bytes
        self.logger = logger or getLogger(__name__)

    def prepare(self, text: str, target_language: TargetLanguage) -> list[ProtectedText]:
        return prepare_chunks(text, target_language, min_chunk_bytes=self.min_chunk_bytes, max_chunk_bytes=self.max_chunk_bytes)

    async def translate(self, text: str, target_language: TargetLanguage | None = None) -> TranslationResult | None:
        """Translate `text`, detecting the direction when `target_language` is not given.

        Returns `None` when the text is not Korean-only or Japanese-only.
        """

        if target_language is None and (target_language := determine_target_language(text)) is None:
            return None

        protected_chunks: list[ProtectedText] = self.prepare(text, target_language)

        self.logger.debug(
            f"Prepared {len(protected_chunks)} chunks for {target_language}, "
            f"{sum(chunk.has_placeholders for chunk in protected_chunks)} with protected expressions"
        )

        translated: list[str] = await self.translation_client.translate_chunks(
            chunks=[chunk.text for chunk in protected_chunks], target_language=target_language
        )

        return TranslationResult(
            source_text=text,
            target_language=target_language,
            chunks=protected_chunks,
            translated_chunks=[chunk.restore(translation) for chunk, translation in zip(protected_chunks, translated, strict=True)],
        )
