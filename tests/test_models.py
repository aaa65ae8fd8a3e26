"""Tests for friendly model names."""

from src.llm.models import MODEL_MAP, friendly, resolve_model


def test_resolve_friendly_names() -> None:
    assert resolve_model("haiku") == MODEL_MAP["haiku"]
    assert resolve_model(" Sonnet ") == MODEL_MAP["sonnet"]
    assert resolve_model("opus") == MODEL_MAP["opus"]


def test_resolve_passes_full_ids_through() -> None:
    assert resolve_model("claude-opus-4-6-20250612") == MODEL_MAP["opus"]
    assert resolve_model("claude-future-model") == "claude-future-model"


def test_resolve_empty_falls_back_to_haiku() -> None:
    assert resolve_model("  ") == MODEL_MAP["haiku"]


def test_friendly_name() -> None:
    assert friendly(MODEL_MAP["sonnet"]) == "sonnet"
    assert friendly(MODEL_MAP["haiku"]) == "haiku"
    assert friendly(MODEL_MAP["opus"]) == "opus"
    assert friendly("unknown-model") == "unknown-model"
