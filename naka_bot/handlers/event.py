"""Startup handler: load gateway event definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from naka_bot.core.descriptors import Handler
from naka_bot.core.events import load_events

if TYPE_CHECKING:
    from naka_bot.core.runtime import BotRuntime


async def _run(runtime: BotRuntime) -> None:
    await load_events(runtime)


handler = Handler(name="event", run=_run)
