"""Claude-backed translator."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Sequence

import anthropic

from src.config import settings
from src.llm.client import complete_text
from src.llm.models import resolve_model
from src.llm.prompt import SKIP_SENTINEL, build_translation_prompt, wrap_text
from src.relay.errors import TranslationError
from src.relay.languages import Language
from src.relay.models import Translation
from src.relay.ports import Translator
from src.relay.tokens import protect

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"^\s*<translate>(.*)</translate>\s*$", re.DOTALL)


class ClaudeTranslator:
    """Translates one message into one target language per call.

    Args:
        model: Friendly name or full model ID (default from settings).
        timeout: Seconds before a call counts as failed (default from settings).
        max_tokens: Response token limit (default from settings).
    """

    def __init__(
        self,
        model: str | None = None,
        *,
        timeout: float | None = None,
        max_tokens: int | None = None,
    ) -> None:
        self._model = resolve_model(model or settings.translation_model)
        self._timeout = timeout if timeout is not None else settings.translation_timeout_seconds
        self._max_tokens = max_tokens or settings.translation_max_tokens

    @property
    def model(self) -> str:
        return self._model

    async def translate(self, text: str, source: Language, target: Language) -> Translation:
        """Translate ``text``. Raises TranslationError on failure or timeout."""
        try:
            raw = await asyncio.wait_for(
                complete_text(
                    [{"role": "user", "content": wrap_text(text)}],
                    system=build_translation_prompt(source, target),
                    model=self._model,
                    max_tokens=self._max_tokens,
                ),
                timeout=self._timeout,
            )
        except TimeoutError as exc:
            msg = f"Translation {source.value} → {target.value} timed out after {self._timeout}s"
            raise TranslationError(msg) from exc
        except (anthropic.APIError, ValueError) as exc:
            msg = f"Translation {source.value} → {target.value} failed: {exc}"
            raise TranslationError(msg) from exc

        result = raw.strip()
        tagged = _TAG_RE.match(result)
        if tagged:
            result = tagged.group(1).strip()
        if not result or result == SKIP_SENTINEL:
            return Translation.skipped()
        return Translation(text=result)


async def translate_to_all(
    translator: Translator,
    text: str,
    source: Language,
    targets: Sequence[Language],
) -> dict[Language, str]:
    """Translate into several languages at once.

    Returns only the targets that produced a translation; skipped and failed
    targets are left out (failures are logged).
    """
    protected = protect(text)
    results = await asyncio.gather(
        *(translator.translate(protected.text, source, target) for target in targets),
        return_exceptions=True,
    )
    translations: dict[Language, str] = {}
    for target, result in zip(targets, results, strict=True):
        if isinstance(result, BaseException):
            logger.warning("Preview translation %s → %s failed: %s", source.value, target.value, result)
            continue
        if result.text is not None:
            translations[target] = protected.restore(result.text)
    return translations
