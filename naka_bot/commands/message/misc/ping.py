"""$ping"""

from __future__ import annotations

from typing import TYPE_CHECKING

from naka_bot.core.descriptors import CommandDescriptor
from naka_bot.functions.misc import ping

if TYPE_CHECKING:
    from naka_bot.core.context import InteractionContext
    from naka_bot.core.runtime import BotRuntime


async def _run(runtime: BotRuntime, ctx: InteractionContext, args: list[str], prefix: str) -> None:
    await ping(runtime, ctx)


command = CommandDescriptor(
    name="ping",
    description="Show the gateway latency.",
    category="misc",
    cooldown=5,
    user_permissions=frozenset({"send_messages"}),
    bot_permissions=frozenset({"send_messages", "embed_links"}),
    run=_run,
)
