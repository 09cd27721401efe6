import re
from typing import Literal

TargetLanguage = Literal["ja", "ko"]

# Unicode `Hangul` script: jamo, compatibility jamo, enclosed forms, syllables and half-width forms.
HANGUL_RANGES: tuple[tuple[int, int], ...] = (
    (0x1100, 0x11FF),
    (0x302E, 0x302F),
    (0x3131, 0x318E),
    (0x3200, 0x321E),
    (0x3260, 0x327E),
    (0xA960, 0xA97C),
    (0xAC00, 0xD7A3),
    (0xD7B0, 0xD7C6),
    (0xD7CB, 0xD7FB),
    (0xFFA0, 0xFFBE),
    (0xFFC2, 0xFFC7),
    (0xFFCA, 0xFFCF),
    (0xFFD2, 0xFFD7),
    (0xFFDA, 0xFFDC),
)

# Unicode `Hiragana` and `Katakana` scripts. The prolonged sound mark (U+30FC) and the middle dot (U+30FB) belong to
# the `Common` script and are not included.
KANA_RANGES: tuple[tuple[int, int], ...] = (
    (0x3041, 0x3096),
    (0x309D, 0x309F),
    (0x30A1, 0x30FA),
    (0x30FD, 0x30FF),
    (0x31F0, 0x31FF),
    (0x32D0, 0x32FE),
    (0x3300, 0x3357),
    (0xFF66, 0xFF6F),
    (0xFF71, 0xFF9D),
    (0x1AFF0, 0x1AFF3),
    (0x1AFF5, 0x1AFFB),
    (0x1AFFD, 0x1AFFE),
    (0x1B000, 0x1B122),
    (0x1B132, 0x1B132),
    (0x1B150, 0x1B152),
    (0x1B155, 0x1B155),
    (0x1B164, 0x1B167),
    (0x1F200, 0x1F200),
)


def compile_character_class(ranges: tuple[tuple[int, int], ...]) -> re.Pattern[str]:
    return re.compile("[" + "".join(f"{chr(start)}-{chr(end)}" for start, end in ranges) + "]")


HANGUL_PATTERN = compile_character_class(HANGUL_RANGES)
KANA_PATTERN = compile_character_class(KANA_RANGES)


def has_hangul(text: str) -> bool:
    return HANGUL_PATTERN.search(text) is not None


def has_kana(text: str) -> bool:
    return KANA_PATTERN.search(text) is not None


def determine_target_language(text: str) -> TargetLanguage | None:
    """Pick the language to translate `text` into.

    Korean text is translated to Japanese and Japanese text to Korean. Text containing both scripts, or neither, is
    not translated and `None` is returned.
    """

    korean = has_hangul(text)
    japanese = has_kana(text)

    if korean and japanese:
        return None

    if korean:
        return "ja"

    if japanese:
        return "ko"

    return None
