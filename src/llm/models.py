"""Friendly model names for configuration."""

import logging

logger = logging.getLogger(__name__)

MODEL_MAP: dict[str, str] = {
    "haiku": "claude-haiku-4-5-20251001",
    "sonnet": "claude-sonnet-4-5-20250929",
    "opus": "claude-opus-4-6-20250612",
}

# Reverse lookup: full model string → friendly name
FRIENDLY_NAMES: dict[str, str] = {v: k for k, v in MODEL_MAP.items()}


def resolve_model(name_or_id: str) -> str:
    """Resolve a friendly name to a full model ID.

    Anything that is not a friendly name is passed through unchanged, so new
    model IDs work without a code change.
    """
    name = name_or_id.strip()
    if name.lower() in MODEL_MAP:
        return MODEL_MAP[name.lower()]
    if not name:
        logger.warning("Empty model name; falling back to haiku")
        return MODEL_MAP["haiku"]
    return name


def friendly(model_id: str) -> str:
    """Return the friendly name for a model ID, or the ID itself."""
    return FRIENDLY_NAMES.get(model_id, model_id)
