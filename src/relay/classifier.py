"""Decide whether inbound content needs translation."""

from __future__ import annotations

import re
from enum import StrEnum


class ContentKind(StrEnum):
    EMPTY = "empty"
    EMOJI_ONLY = "emoji_only"
    TRANSLATABLE = "translatable"


# Emoji presentation / extended pictographic ranges plus the joiners and
# modifiers that build multi-codepoint emoji (ZWJ, variation selectors, tags).
_EMOJI_CHARS = (
    "\u00a9\u00ae\u203c\u2049\u2122\u2139\u2194-\u2199\u21a9\u21aa"
    "\u231a\u231b\u2328\u23cf\u23e9-\u23f3\u23f8-\u23fa\u24c2"
    "\u25aa\u25ab\u25b6\u25c0\u25fb-\u25fe\u2600-\u27bf\u2934\u2935"
    "\u2b05-\u2b07\u2b1b\u2b1c\u2b50\u2b55\u3030\u303d\u3297\u3299"
    "\U0001f000-\U0001faff\U0001fc00-\U0001fffd"
    "\u200d\ufe0e\ufe0f\U000e0020-\U000e007f"
)
_KEYCAP = "[0-9#*]\ufe0f?\u20e3"
# Slack custom/standard emoji as shortcodes, e.g. :fire: or :+1::skin-tone-3:
_SHORTCODE = r":[a-z0-9_+'\-]+:"

_EMOJI_ONLY_RE = re.compile(rf"(?:{_KEYCAP}|[{_EMOJI_CHARS}]|{_SHORTCODE}|\s)+")


def is_emoji_only(text: str) -> bool:
    """True if ``text`` is non-empty and nothing but emoji and whitespace."""
    stripped = text.strip()
    return bool(stripped) and _EMOJI_ONLY_RE.fullmatch(stripped) is not None


def classify(text: str, has_attachment: bool) -> ContentKind:
    """Classify message content.

    Emoji and stickers carry no linguistic meaning, so they are relayed
    verbatim instead of being sent to the translator.
    """
    stripped = text.strip()
    if not stripped:
        return ContentKind.EMOJI_ONLY if has_attachment else ContentKind.EMPTY
    if is_emoji_only(stripped):
        return ContentKind.EMOJI_ONLY
    return ContentKind.TRANSLATABLE
