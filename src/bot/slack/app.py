"""Slack Bolt application factory."""

from __future__ import annotations

import asyncio
import logging

from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler
from slack_bolt.app.async_app import AsyncApp as App
from slack_sdk.web.async_client import AsyncWebClient

from src.bot.slack.handlers import (
    handle_message_event,
    handle_reaction_added,
    handle_translate_command,
)
from src.bot.slack.transport import SlackTransport
from src.config import settings
from src.llm.models import friendly
from src.llm.translator import ClaudeTranslator
from src.relay.languages import LANGUAGES, ChannelMap
from src.relay.service import RelayService

logger = logging.getLogger(__name__)


def build_service(
    client: AsyncWebClient,
) -> tuple[RelayService, SlackTransport, ClaudeTranslator]:
    """Wire the relay core to Slack and Claude from settings."""
    channels = ChannelMap(settings.get_channel_ids())
    transport = SlackTransport(client, threaded_replies=settings.reply_style == "thread")
    translator = ClaudeTranslator()
    service = RelayService.build(channels, translator, transport, settings)

    logger.info(
        "Watching channels (model=%s, replies=%s):",
        friendly(translator.model),
        settings.reply_style,
    )
    for ep in channels.endpoints:
        logger.info("  %s %s → %s", LANGUAGES[ep.language].flag, ep.language.value.upper(), ep.channel_id)
    return service, transport, translator


def create_slack_app() -> tuple[App, RelayService, SlackTransport]:
    """Build and configure the Slack Bolt application."""
    client = AsyncWebClient(token=settings.slack_bot_token)
    app = App(token=settings.slack_bot_token, client=client)

    service, transport, translator = build_service(client)

    @app.event("message")
    async def _on_message(event):
        await handle_message_event(event, service)

    @app.event("reaction_added")
    async def _on_reaction_added(event):
        await handle_reaction_added(event, service, transport)

    @app.command("/translate")
    async def _on_translate(ack, command, respond):
        await handle_translate_command(ack, command, respond, translator)

    return app, service, transport


def run_slack() -> None:
    """Start the relay with Socket Mode (blocking)."""

    async def _run() -> None:
        app, service, transport = create_slack_app()
        await transport.load_bot_identity()

        handler = AsyncSocketModeHandler(app, settings.slack_app_token)
        try:
            await handler.start_async()
        finally:
            logger.info("Shutting down; waiting for %d in-flight event(s)", service.pending)
            await service.drain()

    asyncio.run(_run())
