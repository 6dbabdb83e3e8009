"""Built-in startup handlers, selectable by name in ``handler.names``."""

from naka_bot.handlers.event import handler as event_handler
from naka_bot.handlers.message import handler as message_handler
from naka_bot.handlers.slash import handler as slash_handler

BUILTIN_HANDLERS = (event_handler, message_handler, slash_handler)

__all__ = ["BUILTIN_HANDLERS"]
