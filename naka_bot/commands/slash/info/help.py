"""/help [command]"""

from __future__ import annotations

from naka_bot.core.descriptors import CommandDescriptor
from naka_bot.functions.info import help_command

_STRING_OPTION = 3

command = CommandDescriptor(
    name="help",
    description="List commands or show details for one.",
    category="info",
    options=(
        {
            "type": _STRING_OPTION,
            "name": "command",
            "description": "Command to describe",
            "required": False,
        },
    ),
    run=help_command,
)
