"""Supported languages and the language → channel binding."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class Language(StrEnum):
    """Fixed set of language tags. Declaration order is configuration order."""

    EN = "en"
    ES = "es"
    PT = "pt"


@dataclass(frozen=True)
class LanguageInfo:
    """Display and translation details for one language.

    Attributes:
        label: Human-readable language name.
        flag: Flag emoji shown next to the label.
        regional_note: Instruction telling the translator which regional
            variety and register to produce.
    """

    label: str
    flag: str
    regional_note: str


LANGUAGES: dict[Language, LanguageInfo] = {
    Language.EN: LanguageInfo(
        label="English",
        flag="🇺🇸",
        regional_note=(
            "Use clear, natural English. Match the tone and register of the original "
            "message (casual, formal, slang, etc.)."
        ),
    ),
    Language.ES: LanguageInfo(
        label="Spanish",
        flag="🇲🇽",
        regional_note=(
            "Use Mexican Spanish specifically. Use vocabulary, slang, and expressions "
            "native to Mexico, including Mexican street slang and colloquialisms. "
            "Avoid Castilian/Spain Spanish and avoid generic Latin American terms when "
            'a more specific Mexican word exists. Use "ustedes" not "vosotros". Match '
            "the tone and register of the original message (casual, formal, slang, etc.)."
        ),
    ),
    Language.PT: LanguageInfo(
        label="Portuguese",
        flag="🇧🇷",
        regional_note=(
            "Use Brazilian Portuguese from Rio de Janeiro specifically. Use carioca "
            "vocabulary, slang, and expressions, including Rio street slang and "
            'colloquialisms. Use "você" as the default second person. Prefer the '
            "informal, warm speech style typical of Rio de Janeiro. Match the tone and "
            "register of the original message (casual, formal, slang, etc.)."
        ),
    ),
}

ALL_LANGUAGES: tuple[Language, ...] = tuple(Language)


def parse_language(value: str) -> Language | None:
    """Resolve a tag ("es") or label ("Spanish"), case-insensitively."""
    needle = value.strip().lower()
    for lang in ALL_LANGUAGES:
        if needle in (lang.value, LANGUAGES[lang].label.lower()):
            return lang
    return None


@dataclass(frozen=True)
class ChannelEndpoint:
    """One destination: a language and the channel it is relayed into."""

    language: Language
    channel_id: str


class ChannelMap:
    """Immutable language ↔ channel binding, built once at startup.

    Raises ValueError when a language has no channel or two languages share
    one channel.
    """

    def __init__(self, channel_ids: dict[str, str]) -> None:
        endpoints: list[ChannelEndpoint] = []
        seen: set[str] = set()
        for lang in ALL_LANGUAGES:
            # StrEnum members hash like their value, so "en" keys match too
            channel_id = channel_ids.get(lang)
            if not channel_id:
                msg = f"No channel configured for language '{lang.value}'"
                raise ValueError(msg)
            if channel_id in seen:
                msg = f"Channel '{channel_id}' is bound to more than one language"
                raise ValueError(msg)
            seen.add(channel_id)
            endpoints.append(ChannelEndpoint(language=lang, channel_id=channel_id))
        self._endpoints: tuple[ChannelEndpoint, ...] = tuple(endpoints)
        self._by_channel = {ep.channel_id: ep.language for ep in endpoints}
        self._by_language = {ep.language: ep.channel_id for ep in endpoints}

    @property
    def endpoints(self) -> tuple[ChannelEndpoint, ...]:
        return self._endpoints

    def language_for(self, channel_id: str) -> Language | None:
        """Return the language bound to a channel, or None if it is not watched."""
        return self._by_channel.get(channel_id)

    def channel_for(self, language: Language) -> str:
        return self._by_language[language]

    def destinations(self, source: Language) -> list[ChannelEndpoint]:
        """Every endpoint except the source, in configuration order."""
        return [ep for ep in self._endpoints if ep.language != source]
