"""message: route prefixed text messages to prefix commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from naka_bot.core.descriptors import EventDescriptor

if TYPE_CHECKING:
    import discord

    from naka_bot.core.runtime import BotRuntime


async def _on_message(runtime: BotRuntime, message: discord.Message) -> None:
    await runtime.handle_message(message)


event = EventDescriptor(name="message", run=_on_message)
