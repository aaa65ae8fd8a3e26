"""Shield platform tokens from the translator.

Mentions, channel links, URLs, emoji shortcodes and code spans are swapped
for numbered placeholders before translation and put back afterwards, so the
translator only ever sees plain text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# <@U123>, <#C123|general>, <!here>, <https://x|label>, :emoji:, `code`, ```blocks```
_TOKEN_RE = re.compile(
    r"```.*?```"
    r"|`[^`\n]+`"
    r"|<[^<>\s][^<>]*>"
    r"|:[a-z0-9_+'\-]+:",
    re.DOTALL,
)
_PLACEHOLDER = "⟪{}⟫"
_PLACEHOLDER_RE = re.compile(r"⟪(\d+)⟫")


@dataclass
class ProtectedText:
    """Text with platform tokens replaced by placeholders."""

    text: str
    tokens: list[str] = field(default_factory=list)

    @property
    def is_blank(self) -> bool:
        """True when nothing but placeholders and whitespace is left to translate."""
        return not _PLACEHOLDER_RE.sub("", self.text).strip()

    def restore(self, translated: str) -> str:
        """Put the original tokens back into translated text."""
        if not self.tokens:
            return translated

        def _sub(match: re.Match[str]) -> str:
            index = int(match.group(1))
            if index < len(self.tokens):
                return self.tokens[index]
            return match.group(0)

        restored = _PLACEHOLDER_RE.sub(_sub, translated)
        found = len(set(_PLACEHOLDER_RE.findall(translated)))
        if found < len(self.tokens):
            logger.debug("Translator dropped %d of %d token(s)", len(self.tokens) - found, len(self.tokens))
        return restored


def protect(text: str) -> ProtectedText:
    """Replace platform tokens in ``text`` with numbered placeholders."""
    tokens: list[str] = []

    def _sub(match: re.Match[str]) -> str:
        tokens.append(match.group(0))
        return _PLACEHOLDER.format(len(tokens) - 1)

    return ProtectedText(text=_TOKEN_RE.sub(_sub, text), tokens=tokens)
