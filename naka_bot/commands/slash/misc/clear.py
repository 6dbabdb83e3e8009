"""/clear amount:<1-100>"""

from __future__ import annotations

from naka_bot.core.descriptors import CommandDescriptor
from naka_bot.functions.misc import CLEAR_MAX, CLEAR_MIN, clear

_INTEGER_OPTION = 4

command = CommandDescriptor(
    name="clear",
    description="Clear messages in a channel.",
    category="misc",
    cooldown=5,
    user_permissions=frozenset({"manage_messages"}),
    bot_permissions=frozenset({"manage_messages", "read_message_history"}),
    options=(
        {
            "type": _INTEGER_OPTION,
            "name": "amount",
            "description": "Number of messages to delete",
            "required": True,
            "min_value": CLEAR_MIN,
            "max_value": CLEAR_MAX,
        },
    ),
    run=clear,
)
