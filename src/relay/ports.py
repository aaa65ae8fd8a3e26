"""Collaborator protocols consumed by the relay core."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from src.relay.languages import Language
from src.relay.models import DisplayIdentity, FetchedMessage, Translation


@runtime_checkable
class Translator(Protocol):
    """Produces target-language text from source-language text."""

    async def translate(self, text: str, source: Language, target: Language) -> Translation:
        """Translate ``text``. Raises TranslationError on provider failure."""
        ...


@runtime_checkable
class ChannelTransport(Protocol):
    """Protocol that chat platform adapters must satisfy.

    Every method raises TransportError (or the platform's own error) on
    failure; the core catches per destination.
    """

    @property
    def supports_threaded_replies(self) -> bool:
        """True when replies are delivered as native threads instead of quotes."""
        ...

    async def identity_for(self, user_id: str) -> DisplayIdentity:
        """Return the display name and avatar of a platform user."""
        ...

    async def send(
        self,
        channel_id: str,
        content: str,
        identity: DisplayIdentity,
        *,
        reply_to: str | None = None,
    ) -> str:
        """Post ``content`` under the author's identity. Returns the new message ID."""
        ...

    async def send_as_self(
        self,
        channel_id: str,
        content: str,
        *,
        reply_to: str | None = None,
    ) -> str:
        """Post ``content`` under the relay's own identity. Returns the new message ID."""
        ...

    async def fetch_message(self, channel_id: str, message_id: str) -> FetchedMessage | None:
        """Read a message back, or None if it no longer exists."""
        ...

    async def react(self, channel_id: str, message_id: str, emoji: str) -> None:
        """Add ``emoji`` to a message."""
        ...
