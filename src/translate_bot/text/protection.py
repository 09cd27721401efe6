"""Placeholder substitution for expressions the translation engine mistranslates.

Currency amounts keep their number and get the unit spelled the way the target language writes the foreign currency
(`1,000원` becomes `1,000ウォン`). Laughter such as `ㅋㅋㅋ` or `www` is swapped for the target language's own form
instead of being translated literally. Both are replaced by positional placeholders before translation and restored
afterwards.
"""

import re
from collections.abc import Callable
from typing import Self

from pydantic import BaseModel, ConfigDict, Field

from translate_bot.text.language import TargetLanguage

CURRENCY_PLACEHOLDER_PREFIX = "__CUR"
LAUGHTER_PLACEHOLDER_PREFIX = "__LAU"

# Longer units come first in the alternation so `만원` is never matched as a bare `원`.
KOREAN_WON_PATTERN = re.compile(r"(\d[\d,.]*\s*)(만\s*원|천\s*원|억\s*원|조\s*원|원)", flags=re.ASCII)
JAPANESE_YEN_PATTERN = re.compile(r"(\d[\d,.]*\s*)(万\s*円|千\s*円|億\s*円|兆\s*円|円)", flags=re.ASCII)

KOREAN_LAUGHTER_PATTERN = re.compile(r"ㅋ{2,}|ㅎ{2,}")
JAPANESE_LAUGHTER_PATTERN = re.compile(r"w{3,}")

WON_TO_JAPANESE: dict[str, str] = {
    "만원": "万ウォン",
    "천원": "千ウォン",
    "억원": "億ウォン",
    "조원": "兆ウォン",
    "원": "ウォン",
}

YEN_TO_KOREAN: dict[str, str] = {
    "万円": "만엔",
    "千円": "천엔",
    "億円": "억엔",
    "兆円": "조엔",
    "円": "엔",
}

CURRENCY_RULES: dict[str, tuple[re.Pattern[str], dict[str, str]]] = {
    "ja": (KOREAN_WON_PATTERN, WON_TO_JAPANESE),
    "ko": (JAPANESE_YEN_PATTERN, YEN_TO_KOREAN),
}


def currency_placeholder(index: int) -> str:
    return f"{CURRENCY_PLACEHOLDER_PREFIX}{index}__"


def laughter_placeholder(index: int) -> str:
    return f"{LAUGHTER_PLACEHOLDER_PREFIX}{index}__"


def restore_placeholders(text: str, replacements: list[str], placeholder: Callable[[int], str]) -> str:
    for index, replacement in enumerate(replacements):
        text = text.replace(placeholder(index), replacement)
    return text


def protect_currency(text: str, target_language: str) -> tuple[str, list[str]]:
    """Replace source-currency amounts with `__CUR{n}__` placeholders.

    Returns the protected text and the converted amounts, indexed by placeholder number.
    """

    if target_language not in CURRENCY_RULES:
        return text, []

    pattern, unit_map = CURRENCY_RULES[target_language]
    replacements: list[str] = []

    def replace(match: re.Match[str]) -> str:
        number = match.group(1).strip()
        unit = match.group(2).replace(" ", "")

        if (target_unit := unit_map.get(unit)) is None:
            return match.group(0)

        placeholder = currency_placeholder(len(replacements))
        replacements.append(number + target_unit)
        return placeholder

    return pattern.sub(replace, text), replacements


def restore_currency(text: str, replacements: list[str]) -> str:
    return restore_placeholders(text, replacements, currency_placeholder)


def protect_laughter(text: str, target_language: str) -> tuple[str, list[str]]:
    """Replace laughter with `__LAU{n}__` placeholders.

    `ㅋㅋ`/`ㅎㅎ` runs become `w` runs for Japanese and `www` runs become `ㅋ` runs for Korean, one character for one
    character. A `w` run directly followed by `.` is part of a host name and is left alone.
    """

    replacements: list[str] = []

    if target_language == "ja":

        def replace_korean(match: re.Match[str]) -> str:
            placeholder = laughter_placeholder(len(replacements))
            replacements.append("w" * len(match.group(0)))
            return placeholder

        return KOREAN_LAUGHTER_PATTERN.sub(replace_korean, text), replacements

    if target_language == "ko":

        def replace_japanese(match: re.Match[str]) -> str:
            if text[match.end() : match.end() + 1] == ".":
                return match.group(0)

            placeholder = laughter_placeholder(len(replacements))
            replacements.append("ㅋ" * len(match.group(0)))
            return placeholder

        return JAPANESE_LAUGHTER_PATTERN.sub(replace_japanese, text), replacements

    return text, []


def restore_laughter(text: str, replacements: list[str]) -> str:
    return restore_placeholders(text, replacements, laughter_placeholder)


class ProtectedText(BaseModel):
    """A piece of text with its currency and laughter expressions replaced by placeholders."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(description="The text to send for translation, containing placeholders.")
    target_language: TargetLanguage = Field(description="The language the text will be translated into.")
    currency: list[str] = Field(default_factory=list, description="Replacements for the `__CUR{n}__` placeholders.")
    laughter: list[str] = Field(default_factory=list, description="Replacements for the `__LAU{n}__` placeholders.")

    @classmethod
    def protect(cls, text: str, target_language: TargetLanguage) -> Self:
        """Protect currency then laughter.

        A kind of protection is skipped when the text already contains its placeholder prefix, so restoring never
        rewrites what the user wrote.
        """

        currency: list[str] = []
        laughter: list[str] = []

        if CURRENCY_PLACEHOLDER_PREFIX not in text:
            text, currency = protect_currency(text, target_language)

        if LAUGHTER_PLACEHOLDER_PREFIX not in text:
            text, laughter = protect_laughter(text, target_language)

        return cls(text=text, target_language=target_language, currency=currency, laughter=laughter)

    def restore(self, translated: str) -> str:
        """Restore the protected expressions in the translation of this text, laughter first."""

        translated = restore_laughter(translated, self.laughter)
        return restore_currency(translated, self.currency)

    @property
    def has_placeholders(self) -> bool:
        return bool(self.currency or self.laughter)
