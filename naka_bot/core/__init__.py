"""Dispatch core: handler registry, event and command tables, cooldowns, replies."""

from naka_bot.core.commands import CommandTable, load_commands
from naka_bot.core.context import (
    InteractionContext,
    LegacyMessage,
    ReplyPayload,
    RequestingUser,
    StructuredInteraction,
)
from naka_bot.core.cooldown import CooldownTracker
from naka_bot.core.descriptors import (
    DEFAULT_COOLDOWN_SECONDS,
    CommandDescriptor,
    EventDescriptor,
    Handler,
)
from naka_bot.core.discovery import LoadReport
from naka_bot.core.events import EventTable, load_events
from naka_bot.core.footer import Footer, get_footer
from naka_bot.core.gate import CommandGate, GateOutcome
from naka_bot.core.registry import HandlerRegistry, LogStatus, log_status
from naka_bot.core.reply import EmbedAuthor, EmbedData, ReplyMediator, build_embed
from naka_bot.core.runtime import BotRuntime

__all__ = [
    "DEFAULT_COOLDOWN_SECONDS",
    "BotRuntime",
    "CommandDescriptor",
    "CommandGate",
    "CommandTable",
    "CooldownTracker",
    "EmbedAuthor",
    "EmbedData",
    "EventDescriptor",
    "EventTable",
    "Footer",
    "GateOutcome",
    "Handler",
    "HandlerRegistry",
    "InteractionContext",
    "LegacyMessage",
    "LoadReport",
    "LogStatus",
    "ReplyMediator",
    "ReplyPayload",
    "RequestingUser",
    "StructuredInteraction",
    "build_embed",
    "get_footer",
    "load_commands",
    "load_events",
    "log_status",
]
