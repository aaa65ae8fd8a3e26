"""Translation prompt assembly."""

from src.relay.languages import LANGUAGES, Language

SKIP_SENTINEL = "[SKIP]"


def build_translation_prompt(source: Language, target: Language) -> str:
    """System prompt for translating from ``source`` into ``target``."""
    src, dst = LANGUAGES[source], LANGUAGES[target]
    return (
        f"Translate the text inside <translate> tags from {src.label} to {dst.label}. "
        f"{dst.regional_note} "
        "Keep placeholders such as ⟪0⟫ exactly as they appear. "
        "Output ONLY the translated text. No explanations, no commentary, no questions. "
        f"If you cannot translate it, output exactly: {SKIP_SENTINEL}"
    )


def wrap_text(text: str) -> str:
    """User message carrying the text to translate."""
    return f"<translate>{text}</translate>"
