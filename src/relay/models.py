"""Relay data model.

Platform adapters convert their payloads into these types so the relay core
never touches integration-specific objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from src.relay.languages import Language


@dataclass(frozen=True)
class DisplayIdentity:
    """Name and avatar a relayed copy is presented under."""

    name: str
    avatar_url: str | None = None


@dataclass(frozen=True)
class LinkedMessage:
    """One physical message: the channel it lives in and its ID there.

    Message IDs are only unique within a channel, so the pair is the identity.
    """

    channel_id: str
    message_id: str


@dataclass(frozen=True)
class LinkGroup:
    """Every copy of one relayed event, origin first.

    Immutable: the Link Table shares one instance between all member keys.

    Attributes:
        members: The origin followed by each delivered copy.
        author: Display name of the origin's author.
        bodies: Per member, the message text without anything the relay
            stacked above it (attribution header, reply quote). Empty when
            unknown.
    """

    members: tuple[LinkedMessage, ...]
    author: str | None = None
    bodies: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        channels = [m.channel_id for m in self.members]
        if len(channels) != len(set(channels)):
            msg = "LinkGroup members must be in distinct channels"
            raise ValueError(msg)
        if self.bodies and len(self.bodies) != len(self.members):
            msg = "LinkGroup needs one body per member"
            raise ValueError(msg)

    @property
    def origin(self) -> LinkedMessage:
        return self.members[0]

    def in_channel(self, channel_id: str) -> LinkedMessage | None:
        """Return the member that lives in ``channel_id``, if any."""
        for member in self.members:
            if member.channel_id == channel_id:
                return member
        return None

    def body_of(self, member: LinkedMessage) -> str | None:
        """Text of ``member`` as the author wrote it or as it was translated."""
        if not self.bodies or member not in self.members:
            return None
        return self.bodies[self.members.index(member)]

    def siblings(self, of: LinkedMessage) -> list[LinkedMessage]:
        """Every member except ``of``."""
        return [m for m in self.members if m != of]

    def __len__(self) -> int:
        return len(self.members)

    def __contains__(self, item: object) -> bool:
        return item in self.members


@dataclass(frozen=True)
class RelayEvent:
    """An inbound message, consumed once by the orchestrator.

    Attributes:
        message_id: Platform message ID in the source channel.
        channel_id: Source channel ID.
        author_id: Platform user ID of the author.
        author_is_bot: True for bots, including the relay's own copies.
        text: Raw message text, platform tokens included.
        attachments: Links to non-text content (files, stickers).
        reply_to: Message ID (in the same channel) this message replies to.
    """

    message_id: str
    channel_id: str
    author_id: str
    author_is_bot: bool
    text: str
    attachments: tuple[str, ...] = ()
    reply_to: str | None = None

    @property
    def has_attachment(self) -> bool:
        return bool(self.attachments)

    @property
    def origin(self) -> LinkedMessage:
        return LinkedMessage(channel_id=self.channel_id, message_id=self.message_id)


@dataclass(frozen=True)
class ReactionEvent:
    """An emoji reaction added to a message."""

    reactor_id: str
    reactor_is_bot: bool
    channel_id: str
    message_id: str
    emoji: str


@dataclass(frozen=True)
class Translation:
    """Translator result: translated text, or ``text=None`` when untranslatable."""

    text: str | None

    @property
    def untranslatable(self) -> bool:
        return self.text is None

    @classmethod
    def skipped(cls) -> Translation:
        return cls(text=None)


@dataclass(frozen=True)
class FetchedMessage:
    """A message read back from a channel (used to build reply quotes)."""

    author_name: str
    content: str


class DestinationStatus(StrEnum):
    DELIVERED = "delivered"
    UNTRANSLATABLE = "untranslatable"
    TRANSLATION_FAILED = "translation_failed"
    DUPLICATE = "duplicate"
    DELIVERY_FAILED = "delivery_failed"


@dataclass
class DestinationResult:
    """What happened for one destination of one relayed event."""

    language: Language
    channel_id: str
    status: DestinationStatus
    message_id: str | None = None
    body: str | None = None
    error: str | None = None

    @property
    def delivered(self) -> bool:
        return self.status is DestinationStatus.DELIVERED


@dataclass
class RelayOutcome:
    """Result of handling one RelayEvent.

    ``dropped`` carries the admission reason when the event never reached
    delivery; ``group`` is None unless at least one copy was delivered.
    """

    event: RelayEvent
    dropped: str | None = None
    results: list[DestinationResult] = field(default_factory=list)
    group: LinkGroup | None = None

    @property
    def delivered_count(self) -> int:
        return sum(1 for r in self.results if r.delivered)
