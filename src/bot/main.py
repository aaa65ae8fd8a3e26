"""Polyglot relay entry point."""

import logging
import sys

from src.config import settings
from src.relay.languages import ChannelMap

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Validate configuration and start the relay on Slack."""
    missing = settings.missing_required()
    if missing:
        logger.error("Missing required environment variables: %s", ", ".join(missing))
        sys.exit(1)

    if settings.reply_style not in ("thread", "quote"):
        logger.error("REPLY_STYLE must be 'thread' or 'quote', got '%s'", settings.reply_style)
        sys.exit(1)

    try:
        ChannelMap(settings.get_channel_ids())
    except ValueError as exc:
        logger.error("Invalid channel configuration: %s", exc)
        sys.exit(1)

    from src.bot.slack.app import run_slack

    logger.info("Starting Polyglot on Slack...")
    run_slack()


if __name__ == "__main__":
    main()
