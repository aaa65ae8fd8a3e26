"""Text rendering for relayed copies: quotes, attribution, attachments."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from src.relay.languages import LANGUAGES, Language
from src.relay.models import DisplayIdentity, FetchedMessage

DEFAULT_QUOTE_MAX_CHARS = 80
ELLIPSIS = "…"


def excerpt(content: str, max_chars: int = DEFAULT_QUOTE_MAX_CHARS) -> str:
    """First non-empty line of ``content``, cut to ``max_chars`` with an ellipsis."""
    first_line = next((line.strip() for line in content.splitlines() if line.strip()), "")
    if len(first_line) <= max_chars:
        return first_line
    return first_line[: max(max_chars - 1, 0)].rstrip() + ELLIPSIS


def format_quote(message: FetchedMessage, max_chars: int = DEFAULT_QUOTE_MAX_CHARS) -> str:
    """Render a one-line quote of the message being replied to."""
    return f"> *{message.author_name}*: {excerpt(message.content, max_chars)}"


def format_attribution(identity: DisplayIdentity, source: Language, target: Language) -> str:
    """Header for copies posted under the relay's own name."""
    src, dst = LANGUAGES[source], LANGUAGES[target]
    return f"*{identity.name}* · {src.flag} {src.label} → {dst.flag} {dst.label}"


def with_attachments(content: str, attachments: Sequence[str]) -> str:
    """Append attachment links, one per line."""
    if not attachments:
        return content
    links = "\n".join(attachments)
    return f"{content}\n{links}" if content else links


def compose(body: str, *, quote: str | None = None, header: str | None = None) -> str:
    """Stack the optional header and quote above the message body."""
    parts = [p for p in (header, quote, body) if p]
    return "\n".join(parts)


def format_preview(
    text: str,
    source: Language,
    targets: Sequence[Language],
    translations: Mapping[Language, str],
) -> str:
    """Multi-line translation preview, one line per language."""
    src = LANGUAGES[source]
    lines = [f"{src.flag} *{src.label}:* {text}"]
    for lang in targets:
        info = LANGUAGES[lang]
        lines.append(f"{info.flag} *{info.label}:* {translations.get(lang, '—')}")
    return "\n".join(lines)
