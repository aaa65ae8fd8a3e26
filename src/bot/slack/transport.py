"""Slack implementation of the ChannelTransport protocol."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from slack_sdk.errors import SlackApiError

from src.relay.errors import TransportError
from src.relay.models import DisplayIdentity, FetchedMessage

if TYPE_CHECKING:
    from slack_sdk.web.async_client import AsyncWebClient

logger = logging.getLogger(__name__)

# Errors from reactions.add that mean the reaction is already in place
_BENIGN_REACTION_ERRORS = {"already_reacted"}


@dataclass(frozen=True)
class SlackUser:
    """The parts of a Slack user profile the relay needs."""

    user_id: str
    identity: DisplayIdentity
    is_bot: bool


def _error_code(exc: SlackApiError) -> str:
    if exc.response is None:
        return ""
    return str(exc.response.get("error", ""))


class SlackTransport:
    """Posts, reads and reacts to messages through the Slack Web API.

    Copies are posted with ``username``/``icon_url`` overrides (requires the
    ``chat:write.customize`` scope) so they appear under the author's name.

    Args:
        client: Slack async web client.
        threaded_replies: Deliver replies into the sibling's thread instead
            of quoting the sibling inline.
    """

    def __init__(self, client: AsyncWebClient, *, threaded_replies: bool = True) -> None:
        self._client = client
        self._threaded_replies = threaded_replies
        self._users: dict[str, SlackUser] = {}
        self._bot_user_id: str = ""

    @property
    def supports_threaded_replies(self) -> bool:
        return self._threaded_replies

    @property
    def bot_user_id(self) -> str:
        return self._bot_user_id

    async def load_bot_identity(self) -> str:
        """Look up the relay's own user ID (auth.test). Returns it."""
        resp = await self._client.auth_test()
        self._bot_user_id = resp.get("user_id", "") or ""
        logger.info("Slack bot user: %s", self._bot_user_id)
        return self._bot_user_id

    # -- Users -----------------------------------------------------------------

    async def get_user(self, user_id: str) -> SlackUser:
        """Fetch (and cache) a user's display name, avatar and bot flag."""
        cached = self._users.get(user_id)
        if cached is not None:
            return cached

        try:
            resp = await self._client.users_info(user=user_id)
        except SlackApiError as exc:
            msg = f"users.info failed for {user_id}: {_error_code(exc)}"
            raise TransportError(msg) from exc

        data: dict[str, Any] = resp["user"]
        profile: dict[str, Any] = data.get("profile") or {}
        name = (
            profile.get("display_name")
            or profile.get("real_name")
            or data.get("real_name")
            or data.get("name")
            or user_id
        )
        avatar = profile.get("image_192") or profile.get("image_72")
        user = SlackUser(
            user_id=user_id,
            identity=DisplayIdentity(name=name, avatar_url=avatar),
            is_bot=bool(data.get("is_bot")) or user_id == "USLACKBOT",
        )
        self._users[user_id] = user
        return user

    async def identity_for(self, user_id: str) -> DisplayIdentity:
        return (await self.get_user(user_id)).identity

    async def is_bot_user(self, user_id: str) -> bool:
        """True for the relay itself and any other bot user."""
        if not user_id:
            return False
        if user_id == self._bot_user_id:
            return True
        try:
            return (await self.get_user(user_id)).is_bot
        except TransportError:
            logger.warning("Could not look up user %s; treating as human", user_id)
            return False

    # -- Messages --------------------------------------------------------------

    async def send(
        self,
        channel_id: str,
        content: str,
        identity: DisplayIdentity,
        *,
        reply_to: str | None = None,
    ) -> str:
        """Post ``content`` under the author's name and avatar."""
        kwargs: dict[str, Any] = {"username": identity.name}
        if identity.avatar_url:
            kwargs["icon_url"] = identity.avatar_url
        return await self._post(channel_id, content, reply_to=reply_to, **kwargs)

    async def send_as_self(
        self,
        channel_id: str,
        content: str,
        *,
        reply_to: str | None = None,
    ) -> str:
        """Post ``content`` as the relay bot."""
        return await self._post(channel_id, content, reply_to=reply_to)

    async def _post(
        self,
        channel_id: str,
        content: str,
        *,
        reply_to: str | None = None,
        **extra: Any,
    ) -> str:
        kwargs: dict[str, Any] = {
            "channel": channel_id,
            "text": content,
            "unfurl_links": False,
            **extra,
        }
        if reply_to:
            kwargs["thread_ts"] = reply_to
        try:
            resp = await self._client.chat_postMessage(**kwargs)
        except SlackApiError as exc:
            msg = f"chat.postMessage to {channel_id} failed: {_error_code(exc)}"
            raise TransportError(msg) from exc
        return resp["ts"]

    async def fetch_message(self, channel_id: str, message_id: str) -> FetchedMessage | None:
        """Read one message by its ``ts``. Returns None if it is gone."""
        try:
            resp = await self._client.conversations_history(
                channel=channel_id, latest=message_id, inclusive=True, limit=1
            )
            messages = resp.get("messages") or []
            if not any(m.get("ts") == message_id for m in messages):
                # Thread replies are not part of channel history
                resp = await self._client.conversations_replies(channel=channel_id, ts=message_id)
                messages = resp.get("messages") or []
        except SlackApiError as exc:
            if _error_code(exc) in {"message_not_found", "thread_not_found"}:
                return None
            msg = f"Could not read {message_id} in {channel_id}: {_error_code(exc)}"
            raise TransportError(msg) from exc

        message = next((m for m in messages if m.get("ts") == message_id), None)
        if message is None:
            return None

        author = message.get("username") or ""
        if not author and message.get("user"):
            try:
                author = (await self.identity_for(message["user"])).name
            except TransportError:
                author = message["user"]
        return FetchedMessage(author_name=author or "unknown", content=message.get("text", ""))

    async def react(self, channel_id: str, message_id: str, emoji: str) -> None:
        """Add ``emoji`` (a Slack reaction name) to a message."""
        try:
            await self._client.reactions_add(
                channel=channel_id, timestamp=message_id, name=emoji.strip(":")
            )
        except SlackApiError as exc:
            if _error_code(exc) in _BENIGN_REACTION_ERRORS:
                return
            msg = f"reactions.add on {message_id} in {channel_id} failed: {_error_code(exc)}"
            raise TransportError(msg) from exc
