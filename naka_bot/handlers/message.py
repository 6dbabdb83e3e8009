"""Startup handler: load prefix (text message) commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from naka_bot.core.commands import MESSAGE_COMMANDS_PACKAGE, load_commands
from naka_bot.core.descriptors import Handler

if TYPE_CHECKING:
    from naka_bot.core.runtime import BotRuntime


async def _run(runtime: BotRuntime) -> None:
    await load_commands(runtime, runtime.message_commands, MESSAGE_COMMANDS_PACKAGE)


handler = Handler(name="message", run=_run)
