"""Tests for relay text formatting."""

from src.relay.formatting import (
    compose,
    excerpt,
    format_attribution,
    format_preview,
    format_quote,
    with_attachments,
)
from src.relay.languages import Language
from src.relay.models import DisplayIdentity, FetchedMessage


def test_excerpt_takes_first_non_empty_line() -> None:
    assert excerpt("\n  first line \nsecond") == "first line"


def test_excerpt_truncates_with_ellipsis() -> None:
    result = excerpt("abcdefghijklmnop", max_chars=8)
    assert result == "abcdefg…"
    assert len(result) == 8


def test_excerpt_short_line_untouched() -> None:
    assert excerpt("short", max_chars=80) == "short"


def test_format_quote() -> None:
    quote = format_quote(FetchedMessage(author_name="Ana", content="hola\nmundo"))
    assert quote == "> *Ana*: hola"


def test_format_attribution() -> None:
    header = format_attribution(DisplayIdentity(name="Ana"), Language.ES, Language.PT)
    assert header == "*Ana* · 🇲🇽 Spanish → 🇧🇷 Portuguese"


def test_with_attachments() -> None:
    assert with_attachments("hi", []) == "hi"
    assert with_attachments("hi", ["u1", "u2"]) == "hi\nu1\nu2"
    assert with_attachments("", ["u1"]) == "u1"


def test_compose_skips_missing_parts() -> None:
    assert compose("body") == "body"
    assert compose("body", quote="> q", header="h") == "h\n> q\nbody"


def test_format_preview_marks_skipped_targets() -> None:
    preview = format_preview(
        "hello",
        Language.EN,
        [Language.ES, Language.PT],
        {Language.ES: "hola"},
    )
    assert preview.splitlines() == [
        "🇺🇸 *English:* hello",
        "🇲🇽 *Spanish:* hola",
        "🇧🇷 *Portuguese:* —",
    ]
