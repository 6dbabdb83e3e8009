"""Reply mediator: one send surface over both interaction transports.

``send`` picks the right gateway call for the context's transport and reply
state.  Any failure is logged and answered with exactly one generic fallback
reply; a failing fallback is logged too and never raised to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import discord

from naka_bot.core.context import LegacyMessage, ReplyPayload, StructuredInteraction
from naka_bot.errors import ReplyError

if TYPE_CHECKING:
    from naka_bot.core.context import InteractionContext
    from naka_bot.core.footer import Footer

logger = logging.getLogger(__name__)

FALLBACK_TEXT = "Something went wrong"


@dataclass(slots=True)
class EmbedAuthor:
    name: str
    url: str | None = None
    icon_url: str | None = None


@dataclass(slots=True)
class EmbedData:
    """Optional fields of a single rich-content reply."""

    url: str | None = None
    title: str | None = None
    color: int | discord.Colour | None = None
    image: str | None = None
    footer: Footer | None = None
    author: EmbedAuthor | None = None
    thumbnail: str | None = None
    description: str | None = None


def build_embed(data: EmbedData) -> discord.Embed:
    """Build an embed from the set fields of *data*, stamped with the current time."""
    embed = discord.Embed(timestamp=datetime.now(UTC))
    if data.url:
        embed.url = data.url
    if data.title:
        embed.title = data.title
    if data.color is not None:
        embed.colour = data.color
    if data.image:
        embed.set_image(url=data.image)
    if data.footer:
        embed.set_footer(**data.footer.as_kwargs())
    if data.author:
        embed.set_author(name=data.author.name, url=data.author.url, icon_url=data.author.icon_url)
    if data.thumbnail:
        embed.set_thumbnail(url=data.thumbnail)
    if data.description:
        embed.description = data.description
    return embed


class ReplyMediator:
    """Transport-agnostic reply operations for command and event handlers."""

    async def send(self, ctx: InteractionContext, payload: ReplyPayload) -> object | None:
        """Deliver *payload* on *ctx*, falling back to a generic reply on failure."""
        try:
            return await self._deliver(ctx, payload)
        except Exception:
            logger.exception("Reply failed, sending fallback")
            return await self._fallback(ctx, payload)

    async def send_text(
        self,
        ctx: InteractionContext,
        content: str,
        *,
        ephemeral: bool = False,
    ) -> object | None:
        return await self.send(ctx, ReplyPayload(content=content, ephemeral=ephemeral))

    async def send_embed(
        self,
        ctx: InteractionContext,
        data: EmbedData,
        ephemeral: bool = False,
        fetch_reply: bool = False,
    ) -> object | None:
        """Build one embed from *data* and deliver it through :meth:`send`."""
        try:
            embed = build_embed(data)
        except (TypeError, ValueError):
            logger.exception("Failed to build embed, sending fallback")
            return await self._fallback(
                ctx, ReplyPayload(ephemeral=ephemeral, fetch_reply=fetch_reply)
            )
        payload = ReplyPayload(embeds=[embed], ephemeral=ephemeral, fetch_reply=fetch_reply)
        return await self.send(ctx, payload)

    async def _deliver(self, ctx: InteractionContext, payload: ReplyPayload) -> object | None:
        match ctx:
            case LegacyMessage():
                if ctx.can_send_to_channel:
                    return await ctx.send_to_channel(payload)
                return await ctx.reply(payload)
            case StructuredInteraction():
                if ctx.is_deferred:
                    return await ctx.edit_reply(payload)
                if ctx.is_replied:
                    return await ctx.defer_reply(ephemeral=payload.ephemeral)
                return await ctx.reply(payload)
        msg = f"Unsupported interaction context: {type(ctx).__name__}"
        raise ReplyError(msg)

    async def _fallback(self, ctx: InteractionContext, payload: ReplyPayload) -> object | None:
        fallback = ReplyPayload(
            content=FALLBACK_TEXT,
            ephemeral=payload.ephemeral,
            fetch_reply=payload.fetch_reply,
        )
        try:
            return await ctx.reply(fallback)
        except Exception:
            logger.exception("Fallback reply failed")
            return None
