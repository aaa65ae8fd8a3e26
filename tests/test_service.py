"""Tests for RelayService task handling and wiring."""

import logging
from unittest.mock import AsyncMock

from src.config import Settings
from src.relay.languages import ChannelMap
from src.relay.models import ReactionEvent
from src.relay.service import RelayService
from tests.fakes import CHANNELS, FakeTranslator, FakeTransport, make_event


def _service(**overrides) -> tuple[RelayService, FakeTranslator, FakeTransport]:
    translator = FakeTranslator()
    transport = FakeTransport()
    settings = Settings(**overrides)
    service = RelayService.build(ChannelMap(CHANNELS), translator, transport, settings)
    return service, translator, transport


def test_build_applies_settings() -> None:
    service, _, _ = _service(link_table_max_groups=7, quote_max_chars=12, impersonate_authors=False)
    assert service.links._max_groups == 7
    assert service.orchestrator._quote_max_chars == 12
    assert service.orchestrator._impersonate is False
    assert service.mirror._links is service.links


async def test_dispatch_message_runs_in_background() -> None:
    service, _, transport = _service()

    task = service.dispatch_message(make_event())
    assert service.pending == 1
    outcome = await task

    assert outcome.delivered_count == 2
    assert len(transport.sent) == 2
    assert service.pending == 0


async def test_dispatch_reaction_uses_shared_link_table() -> None:
    service, _, transport = _service()
    outcome = await service.dispatch_message(make_event("🔥"))
    origin = outcome.group.origin

    mirrored = await service.dispatch_reaction(
        ReactionEvent(
            reactor_id="U_BOB",
            reactor_is_bot=False,
            channel_id=origin.channel_id,
            message_id=origin.message_id,
            emoji="fire",
        )
    )
    assert mirrored == 2


async def test_failing_event_is_isolated(caplog) -> None:
    service, _, _ = _service()
    service.orchestrator.handle_message = AsyncMock(side_effect=RuntimeError("boom"))

    bad = service.dispatch_message(make_event(message_id="1.0"))
    with caplog.at_level(logging.ERROR, logger="src.relay.service"):
        await service.drain()

    assert bad.done()
    assert "Unhandled error in message 1.0" in caplog.text
    assert service.pending == 0


async def test_drain_waits_for_all_events() -> None:
    service, _, transport = _service()
    for i in range(3):
        service.dispatch_message(make_event(message_id=f"{i}.0"))
    await service.drain()
    assert len(transport.sent) == 6
