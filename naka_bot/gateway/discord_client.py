"""Discord gateway: discord.py client with explicit per-event subscriptions."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import TYPE_CHECKING, Any

import discord

if TYPE_CHECKING:
    from naka_bot.core.descriptors import CommandDescriptor

logger = logging.getLogger(__name__)

EventCallback = Callable[..., Awaitable[None]]

_CHAT_INPUT = 1
_DESCRIPTION_LIMIT = 100


def default_intents() -> discord.Intents:
    """Intents needed for prefix commands and member-aware permission checks."""
    intents = discord.Intents.default()
    intents.message_content = True
    intents.members = True
    return intents


def slash_payload(command: CommandDescriptor) -> dict[str, Any]:
    """Application-command JSON for one slash descriptor."""
    description = (command.description or "No description")[:_DESCRIPTION_LIMIT]
    return {
        "name": command.name,
        "description": description,
        "type": _CHAT_INPUT,
        "options": [dict(option) for option in command.options],
    }


class DiscordGateway(discord.Client):
    """discord.py client that forwards every dispatched event to one subscriber.

    ``subscribe`` keeps at most one callback per event name; subscribing again
    replaces the previous callback.  Callbacks run as tracked background tasks
    so a slow handler never blocks the gateway's own dispatch.
    """

    def __init__(self, *, intents: discord.Intents | None = None, **options: Any) -> None:
        super().__init__(intents=default_intents() if intents is None else intents, **options)
        self._subscriptions: dict[str, EventCallback] = {}
        self._background_tasks: set[asyncio.Task[None]] = set()

    def subscribe(self, event_name: str, callback: EventCallback) -> None:
        if event_name in self._subscriptions:
            logger.info("Replacing subscription for event=%s", event_name)
        self._subscriptions[event_name] = callback
        logger.debug("Subscribed event=%s", event_name)

    def unsubscribe(self, event_name: str) -> bool:
        return self._subscriptions.pop(event_name, None) is not None

    @property
    def subscriptions(self) -> list[str]:
        return list(self._subscriptions)

    def dispatch(self, event: str, /, *args: Any, **kwargs: Any) -> None:
        super().dispatch(event, *args, **kwargs)
        callback = self._subscriptions.get(event)
        if callback is None:
            return
        task = asyncio.create_task(self._run_subscription(event, callback, args))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _run_subscription(
        self,
        event: str,
        callback: EventCallback,
        args: tuple[Any, ...],
    ) -> None:
        try:
            await callback(*args)
        except Exception:
            logger.exception("Subscription for event=%s raised", event)

    async def sync_slash_commands(
        self,
        commands: Iterable[CommandDescriptor],
        *,
        guild_id: int | None = None,
    ) -> int:
        """Overwrite the registered slash commands with *commands*.

        Syncs to a single guild when *guild_id* is set (applies instantly),
        otherwise globally.  Returns the number of commands sent.
        """
        if self.application_id is None:
            logger.warning("Slash sync skipped: application id unknown (not logged in?)")
            return 0
        payload = [slash_payload(command) for command in commands]
        if guild_id is not None:
            await self.http.bulk_upsert_guild_commands(self.application_id, guild_id, payload)
        else:
            await self.http.bulk_upsert_global_commands(self.application_id, payload)
        logger.info("Synced %d slash commands guild=%s", len(payload), guild_id or "global")
        return len(payload)
