"""Embed footer branding."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from naka_bot.config import BotIdentityConfig
    from naka_bot.core.context import InteractionContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Footer:
    text: str
    icon_url: str | None

    def as_kwargs(self) -> dict[str, str | None]:
        """Arguments for ``discord.Embed.set_footer``."""
        return {"text": self.text, "icon_url": self.icon_url}


def default_footer(identity: BotIdentityConfig) -> Footer:
    return Footer(text=f"{identity.name} | Bot by {identity.author}", icon_url=identity.icon)


def get_footer(
    ctx: InteractionContext | None,
    identity: BotIdentityConfig,
    override: str | None = None,
) -> Footer:
    """Footer for *ctx*: the requesting user's name and avatar.

    Falls back to the bot's static branding when there is no context, when
    *override* is set, or when the user cannot be read.
    """
    if ctx is None or override:
        return default_footer(identity)
    try:
        user = ctx.requesting_user
    except Exception:
        logger.exception("Failed to resolve requesting user for footer")
        return default_footer(identity)
    return Footer(
        text=f"Requested by {user.name} | Bot by {identity.author}",
        icon_url=user.avatar_url,
    )
