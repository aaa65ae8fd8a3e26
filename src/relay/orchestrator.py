"""RelayOrchestrator — fans one inbound message out to every other language channel.

Per event the flow is::

    admit → classify → translate (or pass through) → deliver → link

Admission drops bot-authored messages, messages outside the language
channels and duplicates. Emoji-only content skips translation. Each
destination is translated and delivered independently: a failure for one
language is logged and the remaining languages still get their copy. The
origin and every delivered copy are then registered as one LinkGroup so later
replies and reactions can find their counterparts.
"""

from __future__ import annotations

import asyncio
import logging

from src.relay.classifier import ContentKind, classify
from src.relay.dedup import DedupGuard
from src.relay.formatting import (
    DEFAULT_QUOTE_MAX_CHARS,
    compose,
    format_attribution,
    format_quote,
    with_attachments,
)
from src.relay.languages import ChannelEndpoint, ChannelMap, Language
from src.relay.links import LinkTable
from src.relay.models import (
    DestinationResult,
    DestinationStatus,
    DisplayIdentity,
    FetchedMessage,
    LinkedMessage,
    RelayEvent,
    RelayOutcome,
)
from src.relay.ports import ChannelTransport, Translator
from src.relay.tokens import protect

logger = logging.getLogger(__name__)


class RelayOrchestrator:
    """Relays messages between language channels and records their linkage.

    Args:
        channels: Language ↔ channel binding.
        translator: Translation collaborator.
        transport: Chat platform collaborator.
        links: Shared LinkTable (also read by the ReactionMirror).
        dedup: Shared DedupGuard.
        quote_max_chars: Length limit for textual reply quotes.
        impersonate: Post copies under the author's name and avatar. When
            False, copies are posted as the relay with an attribution header.
    """

    def __init__(
        self,
        channels: ChannelMap,
        translator: Translator,
        transport: ChannelTransport,
        *,
        links: LinkTable,
        dedup: DedupGuard,
        quote_max_chars: int = DEFAULT_QUOTE_MAX_CHARS,
        impersonate: bool = True,
    ) -> None:
        self._channels = channels
        self._translator = translator
        self._transport = transport
        self._links = links
        self._dedup = dedup
        self._quote_max_chars = quote_max_chars
        self._impersonate = impersonate

    async def handle_message(self, event: RelayEvent) -> RelayOutcome:
        """Process one inbound message to completion."""
        outcome = RelayOutcome(event=event)

        source = self._admit(event)
        if source is None:
            outcome.dropped = "not admitted"
            return outcome

        kind = classify(event.text, event.has_attachment)
        if kind is ContentKind.EMPTY:
            logger.debug("Dropping empty message %s", event.message_id)
            outcome.dropped = "empty"
            return outcome

        destinations = self._channels.destinations(source)
        if kind is ContentKind.EMOJI_ONLY:
            contents = {ep.language: event.text for ep in destinations}
            skipped: dict[Language, DestinationResult] = {}
        else:
            contents, skipped = await self._translate_all(event.text, source, destinations)

        identity = await self._identity(event.author_id)
        pending = [ep for ep in destinations if ep.language in contents]
        delivered = await asyncio.gather(
            *(
                self._deliver(
                    event,
                    source,
                    ep,
                    with_attachments(contents[ep.language], event.attachments),
                    identity,
                )
                for ep in pending
            )
        )
        by_language = {r.language: r for r in delivered} | skipped

        # Configuration order, so logs and group order are deterministic
        outcome.results = [by_language[ep.language] for ep in destinations]
        copies = [r for r in outcome.results if r.delivered and r.message_id]
        outcome.group = self._links.link_group(
            [event.origin]
            + [LinkedMessage(channel_id=r.channel_id, message_id=r.message_id) for r in copies],
            author=identity.name,
            bodies=[event.text] + [r.body or "" for r in copies],
        )

        logger.info(
            "Relayed %s from %s (%s): %s",
            event.message_id,
            source.value,
            kind.value,
            ", ".join(f"{r.language.value}={r.status.value}" for r in outcome.results),
        )
        return outcome

    # -- Admission -------------------------------------------------------------

    def _admit(self, event: RelayEvent) -> Language | None:
        """Return the source language, or None when the event must be dropped."""
        if event.author_is_bot:
            logger.debug("Ignoring bot-authored message %s", event.message_id)
            return None
        source = self._channels.language_for(event.channel_id)
        if source is None:
            logger.debug("Ignoring message in unwatched channel %s", event.channel_id)
            return None
        if not self._dedup.should_process(event.origin):
            return None
        return source

    # -- Translation -----------------------------------------------------------

    async def _translate_all(
        self,
        text: str,
        source: Language,
        destinations: list[ChannelEndpoint],
    ) -> tuple[dict[Language, str], dict[Language, DestinationResult]]:
        """Translate into every destination concurrently.

        Returns the translated contents and a result for each destination
        that was skipped.
        """
        protected = protect(text)
        if protected.is_blank:
            # Only mentions, links or emoji codes: nothing to translate
            return {ep.language: text for ep in destinations}, {}

        attempts = await asyncio.gather(
            *(self._translate_one(protected.text, source, ep) for ep in destinations)
        )

        contents: dict[Language, str] = {}
        skipped: dict[Language, DestinationResult] = {}
        for ep, (translated, result) in zip(destinations, attempts, strict=True):
            if result is not None:
                skipped[ep.language] = result
            elif translated is not None:
                contents[ep.language] = protected.restore(translated)
        return contents, skipped

    async def _translate_one(
        self,
        text: str,
        source: Language,
        ep: ChannelEndpoint,
    ) -> tuple[str | None, DestinationResult | None]:
        """Translate for one destination. Never raises."""
        try:
            translation = await self._translator.translate(text, source, ep.language)
        except Exception as exc:
            logger.exception("Translation %s → %s failed", source.value, ep.language.value)
            return None, DestinationResult(
                language=ep.language,
                channel_id=ep.channel_id,
                status=DestinationStatus.TRANSLATION_FAILED,
                error=str(exc) or type(exc).__name__,
            )
        if translation.untranslatable:
            logger.info("Translator skipped %s → %s", source.value, ep.language.value)
            return None, DestinationResult(
                language=ep.language,
                channel_id=ep.channel_id,
                status=DestinationStatus.UNTRANSLATABLE,
            )
        return translation.text, None

    # -- Delivery --------------------------------------------------------------

    async def _identity(self, author_id: str) -> DisplayIdentity:
        try:
            return await self._transport.identity_for(author_id)
        except Exception:
            logger.warning("Could not resolve identity for %s", author_id, exc_info=True)
            return DisplayIdentity(name=author_id)

    async def _deliver(
        self,
        event: RelayEvent,
        source: Language,
        ep: ChannelEndpoint,
        content: str,
        identity: DisplayIdentity,
    ) -> DestinationResult:
        """Send one copy. Never raises."""
        result = DestinationResult(
            language=ep.language,
            channel_id=ep.channel_id,
            status=DestinationStatus.DELIVERED,
            body=content,
        )
        if not self._dedup.should_deliver(event.origin, ep.channel_id):
            result.status = DestinationStatus.DUPLICATE
            return result

        try:
            reply_to, quote = await self._resolve_reply(event, ep.channel_id)
            if self._impersonate:
                message = compose(content, quote=quote)
                result.message_id = await self._transport.send(
                    ep.channel_id, message, identity, reply_to=reply_to
                )
            else:
                header = format_attribution(identity, source, ep.language)
                message = compose(content, quote=quote, header=header)
                result.message_id = await self._transport.send_as_self(
                    ep.channel_id, message, reply_to=reply_to
                )
        except Exception as exc:
            logger.exception(
                "Delivery of %s to %s (%s) failed",
                event.message_id,
                ep.language.value,
                ep.channel_id,
            )
            result.status = DestinationStatus.DELIVERY_FAILED
            result.error = str(exc) or type(exc).__name__
        return result

    async def _resolve_reply(
        self,
        event: RelayEvent,
        channel_id: str,
    ) -> tuple[str | None, str | None]:
        """Find the replied-to message's copy in ``channel_id``.

        Returns ``(reply_to, quote)``: a message ID to thread under when the
        transport supports threads, otherwise a rendered quote. Both are None
        when the event is not a reply or the target has no copy there.
        """
        if not event.reply_to:
            return None, None
        target = LinkedMessage(channel_id=event.channel_id, message_id=event.reply_to)
        group = self._links.lookup(target)
        sibling = group.in_channel(channel_id) if group else None
        if sibling is None:
            return None, None

        if self._transport.supports_threaded_replies:
            return sibling.message_id, None

        try:
            fetched = await self._transport.fetch_message(channel_id, sibling.message_id)
        except Exception:
            logger.warning(
                "Could not fetch reply target %s in %s", sibling.message_id, channel_id,
                exc_info=True,
            )
            return None, None
        if fetched is None:
            return None, None
        # Quote what the sibling says, not the header or quote stacked above it
        quoted = FetchedMessage(
            author_name=group.author or fetched.author_name,
            content=group.body_of(sibling) or fetched.content,
        )
        return None, format_quote(quoted, self._quote_max_chars)
