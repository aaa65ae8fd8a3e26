"""Tests for the language set and ChannelMap."""

import pytest

from src.relay.languages import ALL_LANGUAGES, LANGUAGES, ChannelMap, Language, parse_language


def test_fixed_language_order() -> None:
    assert ALL_LANGUAGES == (Language.EN, Language.ES, Language.PT)
    assert set(LANGUAGES) == set(ALL_LANGUAGES)


@pytest.mark.parametrize(
    ("value", "expected"),
    [("es", Language.ES), ("PT", Language.PT), (" English ", Language.EN), ("fr", None)],
)
def test_parse_language(value: str, expected: Language | None) -> None:
    assert parse_language(value) is expected


def test_language_for_channel(channels: ChannelMap) -> None:
    assert channels.language_for("C_ES") is Language.ES
    assert channels.language_for("C_UNKNOWN") is None
    assert channels.channel_for(Language.PT) == "C_PT"


def test_destinations_exclude_source_in_order(channels: ChannelMap) -> None:
    assert [ep.channel_id for ep in channels.destinations(Language.ES)] == ["C_EN", "C_PT"]
    assert [ep.language for ep in channels.destinations(Language.EN)] == [Language.ES, Language.PT]


def test_accepts_enum_keys() -> None:
    cm = ChannelMap({Language.EN: "A", Language.ES: "B", Language.PT: "C"})
    assert cm.language_for("B") is Language.ES


def test_missing_channel_raises() -> None:
    with pytest.raises(ValueError, match="No channel configured for language 'pt'"):
        ChannelMap({"en": "A", "es": "B", "pt": ""})


def test_shared_channel_raises() -> None:
    with pytest.raises(ValueError, match="more than one language"):
        ChannelMap({"en": "A", "es": "A", "pt": "C"})
