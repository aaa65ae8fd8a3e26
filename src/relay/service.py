"""RelayService — owns the relay state and runs each event in its own task."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING

from src.relay.dedup import DedupGuard
from src.relay.links import LinkTable
from src.relay.orchestrator import RelayOrchestrator
from src.relay.reactions import ReactionMirror

if TYPE_CHECKING:
    from src.config import Settings
    from src.relay.languages import ChannelMap
    from src.relay.models import ReactionEvent, RelayEvent
    from src.relay.ports import ChannelTransport, Translator

logger = logging.getLogger(__name__)


class RelayService:
    """Entry point for platform adapters.

    Events are processed fire-and-forget: ``dispatch_*`` schedules a task and
    returns at once. An exception in one task is logged and never reaches
    the event source or other tasks.
    """

    def __init__(
        self,
        orchestrator: RelayOrchestrator,
        mirror: ReactionMirror,
        *,
        links: LinkTable,
        dedup: DedupGuard,
    ) -> None:
        self.orchestrator = orchestrator
        self.mirror = mirror
        self.links = links
        self.dedup = dedup
        self._tasks: set[asyncio.Task] = set()

    @classmethod
    def build(
        cls,
        channels: ChannelMap,
        translator: Translator,
        transport: ChannelTransport,
        settings: Settings,
    ) -> RelayService:
        """Wire the core components from settings."""
        links = LinkTable(max_groups=settings.link_table_max_groups)
        dedup = DedupGuard(ttl=settings.dedup_ttl_seconds)
        orchestrator = RelayOrchestrator(
            channels,
            translator,
            transport,
            links=links,
            dedup=dedup,
            quote_max_chars=settings.quote_max_chars,
            impersonate=settings.impersonate_authors,
        )
        return cls(orchestrator, ReactionMirror(links, transport), links=links, dedup=dedup)

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def dispatch_message(self, event: RelayEvent) -> asyncio.Task:
        return self._spawn(self.orchestrator.handle_message(event), f"message {event.message_id}")

    def dispatch_reaction(self, event: ReactionEvent) -> asyncio.Task:
        return self._spawn(self.mirror.on_reaction(event), f"reaction on {event.message_id}")

    async def drain(self) -> None:
        """Wait for every in-flight event to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def _spawn(self, coro: Awaitable, label: str) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        task.set_name(label)
        self._tasks.add(task)
        task.add_done_callback(self._on_done)
        return task

    def _on_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Unhandled error in %s", task.get_name(), exc_info=exc)
