"""Tests for SlackTransport and protocol conformance."""

from unittest.mock import AsyncMock

import pytest
from slack_sdk.errors import SlackApiError

from src.bot.slack.transport import SlackTransport
from src.relay.errors import TransportError
from src.relay.models import DisplayIdentity
from src.relay.ports import ChannelTransport


def _api_error(code: str) -> SlackApiError:
    return SlackApiError("slack said no", {"ok": False, "error": code})


def _make_mock_client() -> AsyncMock:
    """Create a mock slack_sdk.web.async_client.AsyncWebClient."""
    client = AsyncMock()
    client.auth_test = AsyncMock(return_value={"user_id": "U_RELAY"})
    client.chat_postMessage = AsyncMock(return_value={"ok": True, "ts": "200.0001"})
    client.users_info = AsyncMock(
        return_value={
            "user": {
                "name": "alice",
                "real_name": "Alice Real",
                "is_bot": False,
                "profile": {"display_name": "Ali", "image_192": "https://img/ali.png"},
            }
        }
    )
    client.reactions_add = AsyncMock(return_value={"ok": True})
    return client


def test_slack_transport_satisfies_protocol() -> None:
    transport = SlackTransport(_make_mock_client())
    assert isinstance(transport, ChannelTransport)


def test_reply_style_flag() -> None:
    assert SlackTransport(_make_mock_client()).supports_threaded_replies is True
    assert SlackTransport(_make_mock_client(), threaded_replies=False).supports_threaded_replies is False


async def test_load_bot_identity() -> None:
    transport = SlackTransport(_make_mock_client())
    assert await transport.load_bot_identity() == "U_RELAY"
    assert transport.bot_user_id == "U_RELAY"


async def test_send_posts_under_author_identity() -> None:
    client = _make_mock_client()
    transport = SlackTransport(client)

    ts = await transport.send(
        "C_ES", "hola", DisplayIdentity(name="Ali", avatar_url="https://img/ali.png")
    )

    assert ts == "200.0001"
    client.chat_postMessage.assert_awaited_once_with(
        channel="C_ES",
        text="hola",
        unfurl_links=False,
        username="Ali",
        icon_url="https://img/ali.png",
    )


async def test_send_in_thread_without_avatar() -> None:
    client = _make_mock_client()
    transport = SlackTransport(client)

    await transport.send("C_ES", "hola", DisplayIdentity(name="Ali"), reply_to="150.0")

    call_kwargs = client.chat_postMessage.call_args.kwargs
    assert call_kwargs["thread_ts"] == "150.0"
    assert "icon_url" not in call_kwargs


async def test_send_as_self_has_no_overrides() -> None:
    client = _make_mock_client()
    transport = SlackTransport(client)

    await transport.send_as_self("C_PT", "olá")

    call_kwargs = client.chat_postMessage.call_args.kwargs
    assert "username" not in call_kwargs
    assert "thread_ts" not in call_kwargs


async def test_send_failure_raises_transport_error() -> None:
    client = _make_mock_client()
    client.chat_postMessage.side_effect = _api_error("channel_not_found")
    transport = SlackTransport(client)

    with pytest.raises(TransportError, match="channel_not_found"):
        await transport.send_as_self("C_GONE", "hi")


async def test_identity_uses_profile_and_is_cached() -> None:
    client = _make_mock_client()
    transport = SlackTransport(client)

    first = await transport.identity_for("U_ALICE")
    second = await transport.identity_for("U_ALICE")

    assert first == DisplayIdentity(name="Ali", avatar_url="https://img/ali.png")
    assert second is first
    client.users_info.assert_awaited_once_with(user="U_ALICE")


async def test_identity_falls_back_to_real_name() -> None:
    client = _make_mock_client()
    client.users_info.return_value = {"user": {"name": "bob", "real_name": "Bob B", "profile": {}}}
    transport = SlackTransport(client)

    identity = await transport.identity_for("U_BOB")
    assert identity.name == "Bob B"
    assert identity.avatar_url is None


async def test_is_bot_user() -> None:
    client = _make_mock_client()
    transport = SlackTransport(client)
    await transport.load_bot_identity()

    assert await transport.is_bot_user("U_RELAY") is True
    assert await transport.is_bot_user("U_ALICE") is False
    assert await transport.is_bot_user("") is False

    client.users_info.return_value = {"user": {"name": "other-bot", "is_bot": True}}
    assert await transport.is_bot_user("U_OTHER") is True


async def test_is_bot_user_lookup_failure_treated_as_human() -> None:
    client = _make_mock_client()
    client.users_info.side_effect = _api_error("user_not_found")
    transport = SlackTransport(client)

    assert await transport.is_bot_user("U_X") is False


async def test_fetch_message_from_history() -> None:
    client = _make_mock_client()
    client.conversations_history = AsyncMock(
        return_value={"messages": [{"ts": "1.0", "user": "U_ALICE", "text": "hello there"}]}
    )
    transport = SlackTransport(client)

    fetched = await transport.fetch_message("C_EN", "1.0")

    assert fetched.author_name == "Ali"
    assert fetched.content == "hello there"
    client.conversations_replies.assert_not_called()


async def test_fetch_message_in_thread_uses_replies() -> None:
    client = _make_mock_client()
    client.conversations_history = AsyncMock(return_value={"messages": [{"ts": "0.5"}]})
    client.conversations_replies = AsyncMock(
        return_value={"messages": [{"ts": "1.0", "username": "Ana", "text": "oi"}]}
    )
    transport = SlackTransport(client)

    fetched = await transport.fetch_message("C_PT", "1.0")

    assert fetched.author_name == "Ana"
    assert fetched.content == "oi"


async def test_fetch_message_finds_reply_after_thread_parent() -> None:
    client = _make_mock_client()
    client.conversations_history = AsyncMock(return_value={"messages": [{"ts": "0.5"}]})
    client.conversations_replies = AsyncMock(
        return_value={
            "messages": [
                {"ts": "0.5", "username": "Ali", "text": "parent"},
                {"ts": "0.7", "username": "Bo", "text": "first reply"},
                {"ts": "1.0", "username": "Ana", "text": "second reply"},
            ]
        }
    )
    transport = SlackTransport(client)

    fetched = await transport.fetch_message("C_PT", "1.0")

    assert fetched.content == "second reply"
    assert "limit" not in client.conversations_replies.call_args.kwargs


async def test_fetch_missing_message_returns_none() -> None:
    client = _make_mock_client()
    client.conversations_history = AsyncMock(side_effect=_api_error("message_not_found"))
    transport = SlackTransport(client)

    assert await transport.fetch_message("C_EN", "9.0") is None


async def test_fetch_other_error_raises() -> None:
    client = _make_mock_client()
    client.conversations_history = AsyncMock(side_effect=_api_error("not_in_channel"))
    transport = SlackTransport(client)

    with pytest.raises(TransportError, match="not_in_channel"):
        await transport.fetch_message("C_EN", "9.0")


async def test_react_strips_colons() -> None:
    client = _make_mock_client()
    transport = SlackTransport(client)

    await transport.react("C_ES", "2.0", ":tada:")

    client.reactions_add.assert_awaited_once_with(channel="C_ES", timestamp="2.0", name="tada")


async def test_react_already_reacted_is_ignored() -> None:
    client = _make_mock_client()
    client.reactions_add.side_effect = _api_error("already_reacted")
    transport = SlackTransport(client)

    await transport.react("C_ES", "2.0", "tada")


async def test_react_failure_raises() -> None:
    client = _make_mock_client()
    client.reactions_add.side_effect = _api_error("message_not_found")
    transport = SlackTransport(client)

    with pytest.raises(TransportError):
        await transport.react("C_ES", "2.0", "tada")
