"""Application settings loaded from environment variables."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _env_file() -> str | None:
    if os.getenv("PYTEST_CURRENT_TEST"):
        return None
    return ".env"


# Variables the relay cannot start without
REQUIRED_VARIABLES: tuple[str, ...] = (
    "slack_bot_token",
    "slack_app_token",
    "anthropic_api_key",
    "channel_en",
    "channel_es",
    "channel_pt",
)


class Settings(BaseSettings):
    """Polyglot configuration. All values come from environment variables."""

    # Slack
    slack_bot_token: str = Field(default="")
    slack_app_token: str = Field(default="")

    # Anthropic
    anthropic_api_key: str = Field(default="")
    translation_model: str = Field(default="haiku")
    translation_max_tokens: int = Field(default=1024)
    translation_timeout_seconds: float = Field(default=30.0)

    # Language channels (one channel per language)
    channel_en: str = Field(default="")
    channel_es: str = Field(default="")
    channel_pt: str = Field(default="")

    # Relay behaviour
    dedup_ttl_seconds: float = Field(default=60.0)
    link_table_max_groups: int = Field(default=5000)
    quote_max_chars: int = Field(default=80)
    reply_style: str = Field(default="thread")
    impersonate_authors: bool = Field(default=True)

    # Logging
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_file=_env_file(), env_file_encoding="utf-8")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        if os.getenv("PYTEST_CURRENT_TEST"):
            return (init_settings,)
        return (init_settings, env_settings, dotenv_settings, file_secret_settings)

    def get_channel_ids(self) -> dict[str, str]:
        """Return language code → channel ID, in configuration order."""
        return {
            "en": self.channel_en.strip(),
            "es": self.channel_es.strip(),
            "pt": self.channel_pt.strip(),
        }

    def missing_required(self) -> list[str]:
        """Return upper-cased names of required variables that are empty."""
        return [
            name.upper()
            for name in REQUIRED_VARIABLES
            if not str(getattr(self, name)).strip()
        ]


settings = Settings()
