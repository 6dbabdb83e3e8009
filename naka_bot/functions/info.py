"""help: command listing grouped by category."""

from __future__ import annotations

from typing import TYPE_CHECKING

from naka_bot.core.context import LegacyMessage
from naka_bot.core.gate import format_permissions
from naka_bot.core.reply import EmbedData

if TYPE_CHECKING:
    from naka_bot.core.commands import CommandTable
    from naka_bot.core.context import InteractionContext
    from naka_bot.core.runtime import BotRuntime

HELP_COLOR = 0x57F287


def _table_for(runtime: BotRuntime, ctx: InteractionContext) -> CommandTable:
    if isinstance(ctx, LegacyMessage):
        return runtime.message_commands
    return runtime.slash_commands


def overview_text(runtime: BotRuntime, table: CommandTable, prefix: str) -> str:
    emoji = runtime.config.emoji
    lines: list[str] = []
    for category, commands in sorted(table.by_category().items()):
        names = ", ".join(f"`{prefix}{c.name}`" for c in sorted(commands, key=lambda c: c.name))
        lines.append(f"{emoji.for_category(category)} **{category.capitalize()}**: {names}")
    lines.append("")
    lines.append(f"Use `{prefix}help <command>` for details.")
    return "\n".join(lines)


def detail_text(table: CommandTable, name: str, prefix: str) -> str | None:
    command = table.get(name)
    if command is None:
        return None
    lines = [
        f"**{prefix}{command.name}**",
        command.description or "No description.",
        f"Category: {command.category}",
        f"Cooldown: {command.cooldown or 'default'}s",
    ]
    if command.user_permissions:
        lines.append(f"Requires: {format_permissions(sorted(command.user_permissions))}")
    return "\n".join(lines)


async def help_command(
    runtime: BotRuntime, ctx: InteractionContext, args: list[str], prefix: str
) -> None:
    table = _table_for(runtime, ctx)
    description = detail_text(table, args[0], prefix) if args else None
    if description is None:
        description = overview_text(runtime, table, prefix)
    await runtime.send_embed(
        ctx,
        EmbedData(
            title=f"{runtime.config.bot.name} commands",
            description=description,
            color=HELP_COLOR,
            thumbnail=runtime.config.bot.icon,
            footer=runtime.get_footer(ctx),
        ),
        ephemeral=True,
    )
