"""ready: log the bot identity and register slash commands."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from naka_bot.core.descriptors import EventDescriptor

if TYPE_CHECKING:
    from naka_bot.core.runtime import BotRuntime

logger = logging.getLogger(__name__)


async def _on_ready(runtime: BotRuntime) -> None:
    runtime.mark_ready()
    gateway = runtime.gateway
    user = gateway.user
    logger.info(
        "Bot online: %s (id=%s) guilds=%d",
        user,
        user.id if user else "?",
        len(gateway.guilds),
    )

    slash = runtime.config.slash
    if not slash.enabled:
        return
    try:
        await gateway.sync_slash_commands(runtime.slash_commands, guild_id=slash.guild_id)
    except discord.HTTPException:
        logger.exception("Slash command sync failed")


event = EventDescriptor(name="ready", run=_on_ready)
