"""Slack event and command handlers.

Handlers convert Slack payloads into relay events and hand them to the
RelayService, which processes them in the background so the Bolt listener
returns immediately.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from src.llm.translator import translate_to_all
from src.relay.formatting import format_preview
from src.relay.languages import ALL_LANGUAGES, LANGUAGES, parse_language
from src.relay.models import ReactionEvent, RelayEvent

if TYPE_CHECKING:
    import asyncio

    from src.bot.slack.transport import SlackTransport
    from src.relay.ports import Translator
    from src.relay.service import RelayService

logger = logging.getLogger(__name__)

# Message subtypes that carry a new message worth relaying. Everything else
# (edits, deletes, joins, topic changes, ...) is ignored.
RELAYED_SUBTYPES: frozenset[str | None] = frozenset(
    {None, "thread_broadcast", "file_share", "me_message", "bot_message"}
)

TRANSLATE_USAGE = (
    "Usage: `/translate <from> <text>` where <from> is one of "
    + ", ".join(f"`{lang.value}`" for lang in ALL_LANGUAGES)
)


def to_relay_event(event: dict[str, Any]) -> RelayEvent | None:
    """Build a RelayEvent from a Slack ``message`` event, or None to ignore it."""
    subtype = event.get("subtype")
    if subtype not in RELAYED_SUBTYPES:
        return None
    ts = event.get("ts")
    channel = event.get("channel")
    if not ts or not channel:
        return None

    thread_ts = event.get("thread_ts")
    files = event.get("files") or []
    return RelayEvent(
        message_id=ts,
        channel_id=channel,
        author_id=event.get("user") or event.get("bot_id") or "",
        author_is_bot=bool(event.get("bot_id")) or subtype == "bot_message",
        text=event.get("text") or "",
        attachments=tuple(f["permalink"] for f in files if f.get("permalink")),
        reply_to=thread_ts if thread_ts and thread_ts != ts else None,
    )


def to_reaction_event(event: dict[str, Any], *, reactor_is_bot: bool) -> ReactionEvent | None:
    """Build a ReactionEvent from a ``reaction_added`` event (messages only)."""
    item = event.get("item") or {}
    if item.get("type") != "message":
        return None
    return ReactionEvent(
        reactor_id=event.get("user", ""),
        reactor_is_bot=reactor_is_bot,
        channel_id=item.get("channel", ""),
        message_id=item.get("ts", ""),
        emoji=event.get("reaction", ""),
    )


async def handle_message_event(
    event: dict[str, Any],
    service: RelayService,
) -> asyncio.Task | None:
    """Queue a Slack message for relaying."""
    relay_event = to_relay_event(event)
    if relay_event is None:
        logger.debug("Skipping Slack message event (subtype=%s)", event.get("subtype"))
        return None
    logger.debug(
        "Slack message %s in %s from %s: %s",
        relay_event.message_id,
        relay_event.channel_id,
        relay_event.author_id,
        relay_event.text[:80],
    )
    return service.dispatch_message(relay_event)


async def handle_reaction_added(
    event: dict[str, Any],
    service: RelayService,
    transport: SlackTransport,
) -> asyncio.Task | None:
    """Queue a Slack reaction for mirroring."""
    reactor_is_bot = await transport.is_bot_user(event.get("user", ""))
    reaction = to_reaction_event(event, reactor_is_bot=reactor_is_bot)
    if reaction is None:
        return None
    return service.dispatch_reaction(reaction)


async def handle_translate_command(
    ack: Any,
    command: dict[str, Any],
    respond: Any,
    translator: Translator,
) -> None:
    """Handle /translate — ephemeral translation preview, nothing is relayed."""
    await ack()
    lang_arg, _, text = (command.get("text") or "").strip().partition(" ")
    source = parse_language(lang_arg) if lang_arg else None
    text = text.strip()
    if source is None or not text:
        await respond(text=TRANSLATE_USAGE, response_type="ephemeral")
        return

    targets = [lang for lang in ALL_LANGUAGES if lang != source]
    try:
        translations = await translate_to_all(translator, text, source, targets)
    except Exception:
        logger.exception("/translate failed (from=%s)", source.value)
        await respond(text="Translation failed. Check the logs.", response_type="ephemeral")
        return

    logger.info(
        "/translate by %s from %s: %d/%d target(s)",
        command.get("user_id"),
        LANGUAGES[source].label,
        len(translations),
        len(targets),
    )
    await respond(
        text=format_preview(text, source, targets, translations),
        response_type="ephemeral",
    )
