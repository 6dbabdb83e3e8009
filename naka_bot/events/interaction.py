"""interaction: route slash command interactions to slash commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from naka_bot.core.descriptors import EventDescriptor

if TYPE_CHECKING:
    import discord

    from naka_bot.core.runtime import BotRuntime


async def _on_interaction(runtime: BotRuntime, interaction: discord.Interaction) -> None:
    await runtime.handle_interaction(interaction)


event = EventDescriptor(name="interaction", run=_on_interaction)
