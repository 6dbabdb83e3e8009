"""Bot runtime: composition root owning every table, and the dispatch core."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

import discord

from naka_bot.core.commands import CommandTable
from naka_bot.core.context import LegacyMessage, ReplyPayload, StructuredInteraction
from naka_bot.core.cooldown import CooldownTracker
from naka_bot.core.discovery import LoadReport
from naka_bot.core.events import EventTable, event_args_summary
from naka_bot.core.footer import Footer, get_footer
from naka_bot.core.gate import CommandGate, GateOutcome
from naka_bot.core.registry import HandlerRegistry
from naka_bot.core.reply import EmbedData, ReplyMediator
from naka_bot.log_context import set_log_context

if TYPE_CHECKING:
    from naka_bot.config import BotConfig
    from naka_bot.core.context import InteractionContext
    from naka_bot.gateway.discord_client import DiscordGateway

logger = logging.getLogger(__name__)

SLASH_PREFIX = "/"


class BotRuntime:
    """Owns the event table, both command tables and the cooldown tracker.

    Handlers, events and commands receive the runtime explicitly; nothing here
    is module-level state.  All mutation happens on the gateway's event loop.
    """

    def __init__(
        self,
        config: BotConfig,
        gateway: DiscordGateway,
        *,
        handlers: HandlerRegistry | None = None,
        cooldowns: CooldownTracker | None = None,
    ) -> None:
        self.config = config
        self.gateway = gateway
        self.events = EventTable()
        self.message_commands = CommandTable("message")
        self.slash_commands = CommandTable("slash")
        self.cooldowns = cooldowns or CooldownTracker()
        self.replies = ReplyMediator()
        self.gate = CommandGate(self.cooldowns, self.replies)
        if handlers is None:
            from naka_bot.handlers import BUILTIN_HANDLERS

            handlers = HandlerRegistry(BUILTIN_HANDLERS)
        self.handlers = handlers
        self._ready_at: float | None = None

    @property
    def prefix(self) -> str:
        return self.config.bot.prefix

    # -- Startup ---------------------------------------------------------------

    async def build(self) -> LoadReport:
        """Run the configured startup handlers in order (best effort)."""
        set_log_context(operation="boot")
        if self.config.anti_crash.enabled:
            self.install_anti_crash(asyncio.get_running_loop())
        report = await self.handlers.run_all(self, self.config.handler.names)
        logger.info(
            "Runtime built handlers=%d failed=%d events=%d commands=%d slash=%d",
            len(report.loaded),
            len(report.failures),
            self.events.size,
            self.message_commands.size,
            self.slash_commands.size,
        )
        return report

    def install_anti_crash(self, loop: asyncio.AbstractEventLoop) -> None:
        loop.set_exception_handler(_log_loop_exception)
        logger.debug("Anti-crash loop exception handler installed")

    def mark_ready(self) -> None:
        self._ready_at = time.monotonic()

    @property
    def uptime_seconds(self) -> float:
        if self._ready_at is None:
            return 0.0
        return time.monotonic() - self._ready_at

    # -- Dispatch --------------------------------------------------------------

    async def dispatch_event(self, name: str, *args: Any) -> None:
        """Run the event handler registered for *name*.

        This is the outermost boundary: handler errors are logged here and
        never propagate into the gateway's loop.
        """
        descriptor = self.events.get(name)
        if descriptor is None:
            return
        set_log_context(operation="evt")
        logger.debug("Event dispatch name=%s args=%s", name, event_args_summary(args))
        try:
            result = descriptor.run(self, *args)
            if asyncio.iscoroutine(result):
                await result
        except Exception:
            logger.exception("Event handler %s failed", name)

    async def handle_message(self, message: discord.Message) -> GateOutcome | None:
        """Route a prefixed text message to its prefix command.

        Returns None when the message is not a known command.
        """
        if message.author.bot:
            return None
        parsed = self.parse_prefixed(message.content)
        if parsed is None:
            return None
        prefix, name, args = parsed
        command = self.message_commands.get(name)
        if command is None:
            return None

        set_log_context(
            operation="cmd",
            guild_id=message.guild.id if message.guild else None,
            user_id=message.author.id,
        )
        return await self.gate.invoke(self, command, LegacyMessage(message), args, prefix)

    async def handle_interaction(self, interaction: discord.Interaction) -> GateOutcome | None:
        """Route a slash command interaction to its slash command."""
        if interaction.type is not discord.InteractionType.application_command:
            return None
        data: dict[str, Any] = dict(interaction.data or {})
        command = self.slash_commands.get(str(data.get("name", "")))
        if command is None:
            return None

        set_log_context(
            operation="slash", guild_id=interaction.guild_id, user_id=interaction.user.id
        )
        args = slash_arguments(data)
        return await self.gate.invoke(
            self, command, StructuredInteraction(interaction), args, SLASH_PREFIX
        )

    def parse_prefixed(self, content: str) -> tuple[str, str, list[str]] | None:
        """Split ``<prefix><name> <args...>``; accepts the prefix or a bot mention."""
        text = content.strip()
        prefixes = [self.prefix]
        me = getattr(self.gateway, "user", None)
        if me is not None:
            prefixes += [f"<@{me.id}>", f"<@!{me.id}>"]
        used = next((p for p in prefixes if p and text.startswith(p)), None)
        if used is None:
            return None
        parts = text[len(used) :].split()
        if not parts:
            return None
        return used, parts[0].lower(), parts[1:]

    # -- Reply helpers ---------------------------------------------------------

    async def send(self, ctx: InteractionContext, payload: ReplyPayload) -> object | None:
        return await self.replies.send(ctx, payload)

    async def send_embed(
        self,
        ctx: InteractionContext,
        data: EmbedData,
        ephemeral: bool = False,
        fetch_reply: bool = False,
    ) -> object | None:
        return await self.replies.send_embed(ctx, data, ephemeral, fetch_reply)

    def get_footer(self, ctx: InteractionContext | None, override: str | None = None) -> Footer:
        return get_footer(ctx, self.config.bot, override)


def slash_arguments(data: dict[str, Any]) -> list[str]:
    """Flatten slash option values (including subcommand options) into strings."""
    args: list[str] = []
    for option in data.get("options") or []:
        if "value" in option:
            args.append(str(option["value"]))
        else:
            args.append(str(option.get("name", "")))
            args.extend(slash_arguments(option))
    return args


def _log_loop_exception(loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
    exc = context.get("exception")
    message = context.get("message", "Unhandled exception in event loop")
    if exc is not None:
        logger.error("Anti-crash: %s", message, exc_info=exc)
    else:
        logger.error("Anti-crash: %s", message)
