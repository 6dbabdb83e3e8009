"""Startup handler: load slash commands.

Registration with the platform happens later, once the gateway is ready.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from naka_bot.core.commands import SLASH_COMMANDS_PACKAGE, load_commands
from naka_bot.core.descriptors import Handler

if TYPE_CHECKING:
    from naka_bot.core.runtime import BotRuntime


async def _run(runtime: BotRuntime) -> None:
    await load_commands(runtime, runtime.slash_commands, SLASH_COMMANDS_PACKAGE)


handler = Handler(name="slash", run=_run)
