from __future__ import annotations

from enum import Enum

DEFAULT_LOCALE = "en"

# Languages whose case mapping of i differs from the Unicode default.
_TURKIC_LANGUAGES = frozenset({"tr", "az"})


class TagCase(str, Enum):
    LOWER = "lower"
    UPPER = "upper"
    CAPITALIZE = "capitalize"
    # Case insensitive keys, the case of the last entered tag is kept.
    PRESERVE = "preserve"
    CASE_SENSITIVE = "case_sensitive"


def language_of(locale: str | None) -> str:
    raw = (locale or DEFAULT_LOCALE).strip().replace("-", "_")
    return raw.split("_", 1)[0].lower()


def lower(text: str, locale: str | None = None) -> str:
    if language_of(locale) in _TURKIC_LANGUAGES:
        text = text.replace("I", "ı").replace("İ", "i")
    return text.lower()


def upper(text: str, locale: str | None = None) -> str:
    if language_of(locale) in _TURKIC_LANGUAGES:
        text = text.replace("i", "İ").replace("ı", "I")
    return text.upper()


def capitalize(text: str, locale: str | None = None) -> str:
    if not text:
        return text
    return upper(text[:1], locale) + lower(text[1:], locale)


def storage_key(name: str, tag_case: TagCase, locale: str | None = None) -> str:
    if tag_case == TagCase.CASE_SENSITIVE:
        return name
    return lower(name, locale)


def adjust_case(name: str, tag_case: TagCase, locale: str | None = None) -> str:
    if tag_case == TagCase.LOWER:
        return lower(name, locale)
    if tag_case == TagCase.UPPER:
        return upper(name, locale)
    if tag_case == TagCase.CAPITALIZE:
        return capitalize(name, locale)
    return name
