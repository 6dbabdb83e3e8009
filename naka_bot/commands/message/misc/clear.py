"""$clear <amount>"""

from __future__ import annotations

from naka_bot.core.descriptors import CommandDescriptor
from naka_bot.functions.misc import clear

command = CommandDescriptor(
    name="clear",
    description="Clear messages in a channel.",
    category="misc",
    cooldown=5,
    user_permissions=frozenset({"manage_messages"}),
    bot_permissions=frozenset({"manage_messages", "read_message_history"}),
    run=clear,
)
