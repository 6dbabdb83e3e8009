"""Command gate: permission and cooldown checks in front of every command run."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from naka_bot.core.reply import FALLBACK_TEXT
from naka_bot.log_context import set_log_context

if TYPE_CHECKING:
    from naka_bot.core.context import InteractionContext
    from naka_bot.core.cooldown import CooldownTracker
    from naka_bot.core.descriptors import CommandDescriptor
    from naka_bot.core.reply import ReplyMediator
    from naka_bot.core.runtime import BotRuntime

logger = logging.getLogger(__name__)


class GateOutcome(StrEnum):
    RAN = "ran"
    USER_DENIED = "user_denied"
    BOT_DENIED = "bot_denied"
    COOLING_DOWN = "cooling_down"
    FAILED = "failed"


def missing_permissions(permissions: Any, required: Iterable[str]) -> list[str]:
    """Names in *required* that are not granted on *permissions*."""
    return [name for name in sorted(required) if not getattr(permissions, name, False)]


def format_permissions(names: Iterable[str]) -> str:
    return ", ".join(name.replace("_", " ").title() for name in names)


def user_denied_text(missing: list[str]) -> str:
    return f"You need `{format_permissions(missing)}` permission to use this command."


def bot_denied_text(missing: list[str]) -> str:
    return f"I need `{format_permissions(missing)}` permission to run this command."


def cooldown_text(remaining: float, command: str) -> str:
    return f"Please wait {remaining:.1f} more second(s) before reusing the `{command}` command."


class CommandGate:
    """Runs a command only after user permissions, bot permissions and cooldown pass.

    The checks run strictly in that order.  A denied check replies to the user
    and stops; only a passing cooldown check commits a new window.
    """

    def __init__(self, cooldowns: CooldownTracker, mediator: ReplyMediator) -> None:
        self._cooldowns = cooldowns
        self._mediator = mediator

    async def invoke(  # noqa: PLR0913
        self,
        runtime: BotRuntime,
        command: CommandDescriptor,
        ctx: InteractionContext,
        args: list[str],
        prefix: str,
    ) -> GateOutcome:
        user_id = ctx.requesting_user.id
        set_log_context(user_id=user_id)

        missing = missing_permissions(ctx.user_permissions(), command.user_permissions)
        if missing:
            logger.debug("User lacks permissions cmd=%s missing=%s", command.name, missing)
            await self._mediator.send_text(ctx, user_denied_text(missing), ephemeral=True)
            return GateOutcome.USER_DENIED

        missing = missing_permissions(ctx.bot_permissions(), command.bot_permissions)
        if missing:
            logger.debug("Bot lacks permissions cmd=%s missing=%s", command.name, missing)
            await self._mediator.send_text(ctx, bot_denied_text(missing), ephemeral=True)
            return GateOutcome.BOT_DENIED

        seconds = command.normalize_cooldown()
        remaining = self._cooldowns.remaining(command.name, user_id)
        if remaining is not None:
            logger.debug("Cooldown active cmd=%s remaining=%.2fs", command.name, remaining)
            await self._mediator.send_text(
                ctx, cooldown_text(remaining, command.name), ephemeral=True
            )
            return GateOutcome.COOLING_DOWN

        self._cooldowns.commit(command.name, user_id, seconds)
        logger.info("Command run cmd=%s args=%d", command.name, len(args))
        try:
            await command.run(runtime, ctx, args, prefix)
        except Exception:
            logger.exception("Command %s failed", command.name)
            await self._mediator.send_text(ctx, FALLBACK_TEXT, ephemeral=True)
            return GateOutcome.FAILED
        return GateOutcome.RAN
