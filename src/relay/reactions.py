"""ReactionMirror — copies a reaction onto every linked copy of a message."""

from __future__ import annotations

import asyncio
import logging

from src.relay.links import LinkTable
from src.relay.models import LinkedMessage, ReactionEvent
from src.relay.ports import ChannelTransport

logger = logging.getLogger(__name__)


class ReactionMirror:
    """Replays reactions across a LinkGroup.

    Reactions by bots are ignored so the relay's own mirrored reactions do
    not bounce back and forth between channels.
    """

    def __init__(self, links: LinkTable, transport: ChannelTransport) -> None:
        self._links = links
        self._transport = transport

    async def on_reaction(self, event: ReactionEvent) -> int:
        """Mirror ``event`` onto the siblings. Returns how many succeeded."""
        if event.reactor_is_bot:
            return 0

        reacted = LinkedMessage(channel_id=event.channel_id, message_id=event.message_id)
        siblings = self._links.siblings(reacted)
        if not siblings:
            return 0

        results = await asyncio.gather(
            *(self._react(sibling, event.emoji) for sibling in siblings)
        )
        mirrored = sum(results)
        logger.info(
            "Mirrored :%s: from %s to %d/%d sibling(s)",
            event.emoji,
            event.message_id,
            mirrored,
            len(siblings),
        )
        return mirrored

    async def _react(self, sibling: LinkedMessage, emoji: str) -> bool:
        try:
            await self._transport.react(sibling.channel_id, sibling.message_id, emoji)
        except Exception:
            logger.warning(
                "Could not react on %s in %s",
                sibling.message_id,
                sibling.channel_id,
                exc_info=True,
            )
            return False
        return True
