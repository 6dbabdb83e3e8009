"""Interaction contexts: one tagged variant over the two reply transports.

A command or event handler receives either a :class:`LegacyMessage` (a plain
prefixed text message) or a :class:`StructuredInteraction` (a slash command
interaction).  Both expose the same capability set, and code that has to
behave differently per transport matches on the variant::

    match ctx:
        case LegacyMessage():
            ...
        case StructuredInteraction():
            ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeAlias

import discord

if TYPE_CHECKING:
    from discord import Interaction, Message, Permissions

AVATAR_SIZE = 512

_DEFERRED_TYPES = frozenset(
    {
        discord.InteractionResponseType.deferred_channel_message,
        discord.InteractionResponseType.deferred_message_update,
    }
)


@dataclass(frozen=True, slots=True)
class RequestingUser:
    """Normalized view of the user who triggered an interaction."""

    id: int
    name: str
    avatar_url: str | None


@dataclass(slots=True)
class ReplyPayload:
    """Content of one outgoing reply plus its delivery options."""

    content: str | None = None
    embeds: list[discord.Embed] = field(default_factory=list)
    ephemeral: bool = False
    fetch_reply: bool = False

    def body(self) -> dict[str, Any]:
        """Keyword arguments accepted by every discord.py send/edit call."""
        return {"content": self.content, "embeds": self.embeds}


def _user_view(user: discord.abc.User) -> RequestingUser:
    avatar = user.display_avatar.replace(size=AVATAR_SIZE).url
    return RequestingUser(id=user.id, name=user.name, avatar_url=avatar)


@dataclass(slots=True)
class LegacyMessage:
    """A prefixed text message, answered in its channel."""

    message: Message

    @property
    def requesting_user(self) -> RequestingUser:
        return _user_view(self.message.author)

    @property
    def guild_id(self) -> int | None:
        guild = self.message.guild
        return guild.id if guild else None

    @property
    def is_replied(self) -> bool:
        return False

    @property
    def is_deferred(self) -> bool:
        return False

    @property
    def can_send_to_channel(self) -> bool:
        return callable(getattr(self.message.channel, "send", None))

    def user_permissions(self) -> Permissions:
        return self.message.channel.permissions_for(self.message.author)

    def bot_permissions(self) -> Permissions:
        guild = self.message.guild
        me = guild.me if guild else self.message.channel.me
        return self.message.channel.permissions_for(me)

    async def send_to_channel(self, payload: ReplyPayload) -> Message:
        return await self.message.channel.send(**payload.body())

    async def reply(self, payload: ReplyPayload) -> Message:
        return await self.message.reply(**payload.body())

    async def defer_reply(self, *, ephemeral: bool = False) -> None:
        # Text messages have no deferred state; show typing instead.
        await self.message.channel.typing()

    async def edit_reply(self, payload: ReplyPayload) -> Message:
        return await self.reply(payload)


@dataclass(slots=True)
class StructuredInteraction:
    """A slash command interaction with its own deferred/replied state machine."""

    interaction: Interaction

    @property
    def requesting_user(self) -> RequestingUser:
        return _user_view(self.interaction.user)

    @property
    def guild_id(self) -> int | None:
        return self.interaction.guild_id

    @property
    def is_replied(self) -> bool:
        return self.interaction.response.is_done()

    @property
    def is_deferred(self) -> bool:
        return self.interaction.response.type in _DEFERRED_TYPES

    def user_permissions(self) -> Permissions:
        return self.interaction.permissions

    def bot_permissions(self) -> Permissions:
        return self.interaction.app_permissions

    async def reply(self, payload: ReplyPayload) -> Message | None:
        """Initial response, or a follow-up once the response is spent."""
        if self.interaction.response.is_done():
            return await self.interaction.followup.send(
                **payload.body(),
                ephemeral=payload.ephemeral,
                wait=payload.fetch_reply,
            )
        await self.interaction.response.send_message(
            **payload.body(),
            ephemeral=payload.ephemeral,
        )
        if payload.fetch_reply:
            return await self.interaction.original_response()
        return None

    async def defer_reply(self, *, ephemeral: bool = False) -> None:
        await self.interaction.response.defer(ephemeral=ephemeral, thinking=True)

    async def edit_reply(self, payload: ReplyPayload) -> Message:
        return await self.interaction.edit_original_response(**payload.body())


InteractionContext: TypeAlias = LegacyMessage | StructuredInteraction
