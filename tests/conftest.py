"""Shared test fixtures."""

import pytest

from src.relay.dedup import DedupGuard
from src.relay.languages import ChannelMap
from src.relay.links import LinkTable
from src.relay.orchestrator import RelayOrchestrator
from src.relay.reactions import ReactionMirror
from tests.fakes import CHANNELS, FakeClock, FakeTranslator, FakeTransport


@pytest.fixture
def channels() -> ChannelMap:
    return ChannelMap(CHANNELS)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def links() -> LinkTable:
    return LinkTable()


@pytest.fixture
def dedup(clock: FakeClock) -> DedupGuard:
    return DedupGuard(ttl=60.0, clock=clock)


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def orchestrator(channels, translator, transport, links, dedup) -> RelayOrchestrator:
    return RelayOrchestrator(channels, translator, transport, links=links, dedup=dedup)


@pytest.fixture
def mirror(links, transport) -> ReactionMirror:
    return ReactionMirror(links, transport)
