"""Descriptor records for startup handlers, gateway events and commands."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from naka_bot.core.context import InteractionContext
    from naka_bot.core.runtime import BotRuntime

DEFAULT_COOLDOWN_SECONDS = 3

HandlerFunc = Callable[["BotRuntime"], Awaitable[None]]
EventFunc = Callable[..., Awaitable[None] | None]
"""(runtime, *event_args) -> None | awaitable"""
CommandFunc = Callable[["BotRuntime", "InteractionContext", list[str], str], Awaitable[None]]
"""(runtime, ctx, args, prefix) -> awaitable"""


@dataclass(frozen=True, slots=True)
class Handler:
    """A startup-time unit of initialization logic, run once against the runtime."""

    name: str
    run: HandlerFunc


@dataclass(frozen=True, slots=True)
class EventDescriptor:
    """Binds a gateway event name to the function handling it."""

    name: str
    run: EventFunc


@dataclass(slots=True)
class CommandDescriptor:
    """A prefix or slash command.

    Permission sets hold permission flag names as exposed by the gateway's
    permission objects (``send_messages``, ``manage_messages``, ...).

    Only ``cooldown`` is ever written after loading, by
    :meth:`normalize_cooldown`.
    """

    name: str
    run: CommandFunc
    description: str = ""
    category: str = "misc"
    cooldown: int = 0
    user_permissions: frozenset[str] = field(default_factory=frozenset)
    bot_permissions: frozenset[str] = field(default_factory=frozenset)
    options: tuple[dict[str, Any], ...] = ()

    def normalize_cooldown(self) -> int:
        """Replace an unset or non-positive cooldown with the default, in place."""
        if not self.cooldown or self.cooldown < 1:
            self.cooldown = DEFAULT_COOLDOWN_SECONDS
        return self.cooldown

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe view for introspection endpoints."""
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "cooldown": self.cooldown,
            "userPermissions": sorted(self.user_permissions),
            "botPermissions": sorted(self.bot_permissions),
        }
