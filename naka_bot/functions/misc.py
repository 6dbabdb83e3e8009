"""ping and clear."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from naka_bot.core.context import LegacyMessage, ReplyPayload, StructuredInteraction
from naka_bot.core.reply import EmbedData

if TYPE_CHECKING:
    from naka_bot.core.context import InteractionContext
    from naka_bot.core.runtime import BotRuntime

logger = logging.getLogger(__name__)

PING_COLOR = 0x5865F2
CLEAR_MIN = 1
CLEAR_MAX = 100


async def ping(runtime: BotRuntime, ctx: InteractionContext) -> None:
    latency_ms = round(runtime.gateway.latency * 1000)
    await runtime.send_embed(
        ctx,
        EmbedData(
            title="🏓 Pong!",
            description=f"Gateway latency: **{latency_ms}ms**",
            color=PING_COLOR,
            footer=runtime.get_footer(ctx),
        ),
    )


def parse_amount(args: list[str]) -> int | None:
    """First argument as a message count within the bulk-delete limits."""
    if not args:
        return None
    try:
        amount = int(args[0])
    except ValueError:
        return None
    if not CLEAR_MIN <= amount <= CLEAR_MAX:
        return None
    return amount


async def clear(runtime: BotRuntime, ctx: InteractionContext, args: list[str], prefix: str) -> None:
    amount = parse_amount(args)
    if amount is None:
        await runtime.send(
            ctx,
            ReplyPayload(
                content=f"Usage: `{prefix}clear <{CLEAR_MIN}-{CLEAR_MAX}>`",
                ephemeral=True,
            ),
        )
        return

    match ctx:
        case LegacyMessage():
            channel = ctx.message.channel
            # Include the invoking message itself.
            limit = amount + 1
        case StructuredInteraction():
            channel = ctx.interaction.channel
            limit = amount
            await ctx.defer_reply(ephemeral=True)
        case _:
            msg = f"Unsupported interaction context: {type(ctx).__name__}"
            raise TypeError(msg)

    purge = getattr(channel, "purge", None)
    if purge is None:
        await runtime.send(
            ctx, ReplyPayload(content="This command only works in server channels.", ephemeral=True)
        )
        return

    deleted = await purge(limit=limit)
    count = len(deleted)
    if isinstance(ctx, LegacyMessage):
        count = max(count - 1, 0)
    logger.info("Cleared messages count=%d channel=%s", count, getattr(channel, "id", "?"))
    await runtime.send(ctx, ReplyPayload(content=f"Deleted {count} message(s).", ephemeral=True))
