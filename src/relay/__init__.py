"""Relay and linkage core: admission, fan-out, linking and reaction mirroring."""

from src.relay.dedup import DedupGuard
from src.relay.languages import ChannelMap, Language
from src.relay.links import LinkTable
from src.relay.models import LinkedMessage, LinkGroup, ReactionEvent, RelayEvent
from src.relay.orchestrator import RelayOrchestrator
from src.relay.reactions import ReactionMirror
from src.relay.service import RelayService

__all__ = [
    "ChannelMap",
    "DedupGuard",
    "Language",
    "LinkGroup",
    "LinkTable",
    "LinkedMessage",
    "ReactionEvent",
    "ReactionMirror",
    "RelayEvent",
    "RelayOrchestrator",
    "RelayService",
]
