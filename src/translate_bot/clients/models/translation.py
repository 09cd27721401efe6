from typing import Self

from pydantic import BaseModel, ConfigDict, Field

TRANSLATION_MODEL_ID = "general/translation-llm"


def location_path(project_id: str, location: str) -> str:
    return f"projects/{project_id}/locations/{location}"


class TranslateTextRequest(BaseModel):
    """The body of a Cloud Translation v3 `translateText` request."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    contents: list[str] = Field(description="The texts to translate.")
    target_language_code: str = Field(alias="targetLanguageCode", description="The language to translate the texts into.")
    mime_type: str = Field(default="text/plain", alias="mimeType", description="The format of the texts.")
    model: str = Field(description="The full resource name of the translation model.")

    @classmethod
    def for_chunks(cls, chunks: list[str], target_language: str, project_id: str, location: str) -> Self:
        return cls(
            contents=chunks,
            target_language_code=target_language,
            model=f"{location_path(project_id, location)}/models/{TRANSLATION_MODEL_ID}",
        )

    def to_payload(self) -> dict[str, object]:
        return self.model_dump(by_alias=True)


class Translation(BaseModel):
    """A single translated text."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    translated_text: str = Field(alias="translatedText", description="The translated text.")
    detected_language_code: str | None = Field(
        default=None, alias="detectedLanguageCode", description="The source language, when it was detected by the API."
    )


class TranslateTextResponse(BaseModel):
    """The body of a Cloud Translation v3 `translateText` response."""

    model_config = ConfigDict(extra="ignore")

    translations: list[Translation] = Field(default_factory=list, description="The translations, in request order.")

    @property
    def translated_texts(self) -> list[str]:
        return [translation.translated_text for translation in self.translations]
