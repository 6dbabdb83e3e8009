"""Tests for the bot runtime: startup, prefix parsing and command routing."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from naka_bot.config import BotConfig
from naka_bot.core.descriptors import CommandDescriptor, Handler
from naka_bot.core.runtime import BotRuntime


def _install(table_runtime: BotRuntime, transport: str, name: str = "ping") -> CommandDescriptor:
    command = CommandDescriptor(name=name, run=AsyncMock(name=f"{name}.run"))
    table = (
        table_runtime.message_commands if transport == "message" else table_runtime.slash_commands
    )
    table.add(command)
    return command


# -- Startup --


class TestBuild:
    """Runtime construction and the startup handler pass."""

    async def test_build_loads_everything(self, config: BotConfig, gateway: MagicMock) -> None:
        config.anti_crash.enabled = False
        runtime = BotRuntime(config, gateway)
        report = await runtime.build()

        assert report.ok
        assert report.loaded == ["event", "message", "slash"]
        assert sorted(runtime.events.names()) == ["interaction", "message", "ready"]
        assert runtime.message_commands.size == 3
        assert runtime.slash_commands.size == 3
        assert gateway.subscribe.call_count == 3

    async def test_build_respects_handler_order_and_subset(
        self, config: BotConfig, gateway: MagicMock
    ) -> None:
        config.anti_crash.enabled = False
        config.handler.names = ["slash"]
        runtime = BotRuntime(config, gateway)
        await runtime.build()
        assert runtime.events.size == 0
        assert runtime.message_commands.size == 0
        assert runtime.slash_commands.size == 3

    async def test_failing_handler_does_not_abort(
        self, config: BotConfig, gateway: MagicMock
    ) -> None:
        from naka_bot.core.registry import HandlerRegistry

        config.anti_crash.enabled = False
        config.handler.names = ["boom", "ok"]
        ok = Handler(name="ok", run=AsyncMock())
        registry = HandlerRegistry(
            [Handler(name="boom", run=AsyncMock(side_effect=ValueError("x"))), ok]
        )
        runtime = BotRuntime(config, gateway, handlers=registry)
        report = await runtime.build()
        ok.run.assert_awaited_once_with(runtime)
        assert [name for name, _ in report.failures] == ["boom"]

    async def test_anti_crash_handler_installed(
        self, config: BotConfig, gateway: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        from naka_bot.core.registry import HandlerRegistry
        from naka_bot.core.runtime import _log_loop_exception

        config.handler.names = []
        runtime = BotRuntime(config, gateway, handlers=HandlerRegistry())
        loop = asyncio.get_running_loop()
        try:
            await runtime.build()
            assert loop.get_exception_handler() is _log_loop_exception
            with caplog.at_level(logging.ERROR, logger="naka_bot.core.runtime"):
                loop.call_exception_handler(
                    {"message": "Task exception", "exception": RuntimeError("lost")}
                )
            assert "Anti-crash: Task exception" in caplog.text
        finally:
            loop.set_exception_handler(None)

    def test_uptime(self, runtime: BotRuntime) -> None:
        assert runtime.uptime_seconds == 0.0
        runtime.mark_ready()
        assert runtime.uptime_seconds >= 0.0


# -- Prefix parsing --


class TestParsePrefixed:
    """``<prefix><name> <args...>`` splitting."""

    def test_prefix(self, runtime: BotRuntime) -> None:
        assert runtime.parse_prefixed("$Ping  a b") == ("$", "ping", ["a", "b"])

    def test_no_prefix(self, runtime: BotRuntime) -> None:
        assert runtime.parse_prefixed("ping") is None

    def test_prefix_only(self, runtime: BotRuntime) -> None:
        assert runtime.parse_prefixed("$   ") is None

    @pytest.mark.parametrize("mention", ["<@99>", "<@!99>"])
    def test_bot_mention(self, runtime: BotRuntime, gateway: MagicMock, mention: str) -> None:
        gateway.user = MagicMock(id=99)
        assert runtime.parse_prefixed(f"{mention} help ping") == (mention, "help", ["ping"])

    def test_custom_prefix(self, config: BotConfig, gateway: MagicMock) -> None:
        config.bot.prefix = "n!"
        runtime = BotRuntime(config, gateway)
        assert runtime.parse_prefixed("n!clear 5") == ("n!", "clear", ["5"])
        assert runtime.parse_prefixed("$clear 5") is None


# -- Message routing --


class TestHandleMessage:
    """Prefixed text messages reach prefix commands through the gate."""

    async def test_runs_known_command(
        self, runtime: BotRuntime, make_message: Callable[..., MagicMock]
    ) -> None:
        from naka_bot.core.context import LegacyMessage
        from naka_bot.core.gate import GateOutcome

        command = _install(runtime, "message", "clear")
        message = make_message("$CLEAR 5")
        assert await runtime.handle_message(message) is GateOutcome.RAN
        command.run.assert_awaited_once_with(runtime, LegacyMessage(message), ["5"], "$")

    async def test_unknown_command_is_silent(
        self, runtime: BotRuntime, make_message: Callable[..., MagicMock]
    ) -> None:
        message = make_message("$nope")
        assert await runtime.handle_message(message) is None
        message.channel.send.assert_not_awaited()
        message.reply.assert_not_awaited()

    async def test_bot_authors_ignored(
        self, runtime: BotRuntime, make_message: Callable[..., MagicMock]
    ) -> None:
        command = _install(runtime, "message")
        assert await runtime.handle_message(make_message("$ping", bot=True)) is None
        command.run.assert_not_awaited()

    async def test_slash_table_not_consulted(
        self, runtime: BotRuntime, make_message: Callable[..., MagicMock]
    ) -> None:
        command = _install(runtime, "slash")
        assert await runtime.handle_message(make_message("$ping")) is None
        command.run.assert_not_awaited()


# -- Interaction routing --


class TestHandleInteraction:
    """Slash interactions reach slash commands through the gate."""

    async def test_runs_known_command(
        self, runtime: BotRuntime, make_interaction: Callable[..., MagicMock]
    ) -> None:
        from naka_bot.core.context import StructuredInteraction
        from naka_bot.core.gate import GateOutcome

        command = _install(runtime, "slash", "clear")
        interaction = make_interaction("clear", [{"name": "amount", "type": 4, "value": 5}])
        assert await runtime.handle_interaction(interaction) is GateOutcome.RAN
        command.run.assert_awaited_once_with(
            runtime, StructuredInteraction(interaction), ["5"], "/"
        )

    async def test_unknown_command(
        self, runtime: BotRuntime, make_interaction: Callable[..., MagicMock]
    ) -> None:
        interaction = make_interaction("nope")
        assert await runtime.handle_interaction(interaction) is None
        interaction.response.send_message.assert_not_awaited()

    async def test_non_command_interaction_ignored(
        self, runtime: BotRuntime, make_interaction: Callable[..., MagicMock]
    ) -> None:
        command = _install(runtime, "slash")
        interaction = make_interaction("ping")
        interaction.type = discord.InteractionType.component
        assert await runtime.handle_interaction(interaction) is None
        command.run.assert_not_awaited()


def test_slash_arguments_flattens_subcommands() -> None:
    from naka_bot.core.runtime import slash_arguments

    data = {
        "name": "config",
        "options": [
            {
                "name": "set",
                "type": 1,
                "options": [
                    {"name": "key", "type": 3, "value": "prefix"},
                    {"name": "value", "type": 3, "value": "!"},
                ],
            }
        ],
    }
    assert slash_arguments(data) == ["set", "prefix", "!"]
    assert slash_arguments({"name": "ping"}) == []


async def test_send_embed_uses_mediator(
    runtime: BotRuntime, make_message: Callable[..., MagicMock]
) -> None:
    from naka_bot.core.context import LegacyMessage
    from naka_bot.core.reply import EmbedData

    message = make_message()
    ctx = LegacyMessage(message)
    await runtime.send_embed(ctx, EmbedData(title="x", footer=runtime.get_footer(ctx)))
    embed = message.channel.send.call_args.kwargs["embeds"][0]
    assert embed.footer.text == "Requested by alice | Bot by slendertaker"
