"""Tests for the discord.py gateway client wrapper."""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import AsyncMock, PropertyMock, patch

import discord
import pytest

from naka_bot.core.descriptors import CommandDescriptor
from naka_bot.gateway.discord_client import DiscordGateway


async def _drain() -> None:
    for _ in range(3):
        await asyncio.sleep(0)


def _slash(name: str, description: str = "", **kwargs: object) -> CommandDescriptor:
    return CommandDescriptor(name=name, run=AsyncMock(), description=description, **kwargs)


def test_default_intents() -> None:
    from naka_bot.gateway.discord_client import default_intents

    intents = default_intents()
    assert intents.message_content
    assert intents.members
    assert intents.guilds


class TestSlashPayload:
    """Application-command JSON."""

    def test_basic(self) -> None:
        from naka_bot.gateway.discord_client import slash_payload

        payload = slash_payload(_slash("ping", "Show latency"))
        assert payload == {
            "name": "ping",
            "description": "Show latency",
            "type": 1,
            "options": [],
        }

    def test_missing_description_and_limit(self) -> None:
        from naka_bot.gateway.discord_client import slash_payload

        assert slash_payload(_slash("ping"))["description"] == "No description"
        assert len(slash_payload(_slash("ping", "x" * 150))["description"]) == 100

    def test_options_copied(self) -> None:
        from naka_bot.gateway.discord_client import slash_payload

        option = {"type": 4, "name": "amount", "description": "n", "required": True}
        payload = slash_payload(_slash("clear", "c", options=(option,)))
        assert payload["options"] == [option]
        assert payload["options"][0] is not option


class TestSubscriptions:
    """One callback per event name, run as background tasks."""

    async def test_dispatch_runs_subscriber(self) -> None:
        gateway = DiscordGateway()
        callback = AsyncMock()
        gateway.subscribe("message", callback)
        sentinel = object()

        gateway.dispatch("message", sentinel)
        await _drain()

        callback.assert_awaited_once_with(sentinel)

    async def test_unsubscribed_event_ignored(self) -> None:
        gateway = DiscordGateway()
        callback = AsyncMock()
        gateway.subscribe("message", callback)
        gateway.dispatch("typing", object())
        await _drain()
        callback.assert_not_awaited()

    async def test_subscribe_replaces(self) -> None:
        gateway = DiscordGateway()
        first, second = AsyncMock(), AsyncMock()
        gateway.subscribe("ready", first)
        gateway.subscribe("ready", second)
        gateway.dispatch("ready")
        await _drain()
        first.assert_not_awaited()
        second.assert_awaited_once_with()
        assert gateway.subscriptions == ["ready"]

    async def test_unsubscribe(self) -> None:
        gateway = DiscordGateway()
        gateway.subscribe("ready", AsyncMock())
        assert gateway.unsubscribe("ready") is True
        assert gateway.unsubscribe("ready") is False
        assert gateway.subscriptions == []

    async def test_callback_error_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        gateway = DiscordGateway()
        gateway.subscribe("message", AsyncMock(side_effect=RuntimeError("boom")))
        with caplog.at_level(logging.ERROR, logger="naka_bot.gateway.discord_client"):
            gateway.dispatch("message", object())
            await _drain()
        assert "Subscription for event=message raised" in caplog.text


class TestSyncSlashCommands:
    """Bulk overwrite of registered slash commands."""

    async def test_skipped_without_application_id(self) -> None:
        gateway = DiscordGateway()
        assert await gateway.sync_slash_commands([_slash("ping")]) == 0

    async def test_global_sync(self, monkeypatch: pytest.MonkeyPatch) -> None:
        gateway = DiscordGateway()
        upsert = AsyncMock()
        monkeypatch.setattr(gateway.http, "bulk_upsert_global_commands", upsert)
        with patch.object(
            DiscordGateway, "application_id", new_callable=PropertyMock, return_value=123
        ):
            count = await gateway.sync_slash_commands([_slash("ping"), _slash("help")])

        assert count == 2
        app_id, payload = upsert.await_args.args
        assert app_id == 123
        assert [p["name"] for p in payload] == ["ping", "help"]

    async def test_guild_sync(self, monkeypatch: pytest.MonkeyPatch) -> None:
        gateway = DiscordGateway()
        upsert = AsyncMock()
        monkeypatch.setattr(gateway.http, "bulk_upsert_guild_commands", upsert)
        with patch.object(
            DiscordGateway, "application_id", new_callable=PropertyMock, return_value=123
        ):
            await gateway.sync_slash_commands([_slash("ping")], guild_id=555)

        app_id, guild_id, _payload = upsert.await_args.args
        assert (app_id, guild_id) == (123, 555)


def test_accepts_custom_intents() -> None:
    gateway = DiscordGateway(intents=discord.Intents.none())
    assert not gateway.intents.message_content
