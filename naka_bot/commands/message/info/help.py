"""$help [command]"""

from __future__ import annotations

from naka_bot.core.descriptors import CommandDescriptor
from naka_bot.functions.info import help_command

command = CommandDescriptor(
    name="help",
    description="List commands or show details for one.",
    category="info",
    bot_permissions=frozenset({"send_messages", "embed_links"}),
    run=help_command,
)
