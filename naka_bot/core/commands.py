"""Command tables: command name -> descriptor, one table per transport."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, TypeVar

from naka_bot.core.descriptors import CommandDescriptor
from naka_bot.core.discovery import (
    LoadReport,
    discover_modules,
    resolve_descriptor_async,
    short_name,
)
from naka_bot.core.registry import LogStatus, log_status

if TYPE_CHECKING:
    from naka_bot.core.runtime import BotRuntime

logger = logging.getLogger(__name__)

MESSAGE_COMMANDS_PACKAGE = "naka_bot.commands.message"
SLASH_COMMANDS_PACKAGE = "naka_bot.commands.slash"
DESCRIPTOR_ATTR = "command"

T = TypeVar("T")


class CommandTable:
    """Commands of one transport, keyed by name.

    Written only by the loading handlers at startup; everything else reads.
    """

    def __init__(self, kind: str) -> None:
        self.kind = kind
        self._commands: dict[str, CommandDescriptor] = {}

    def add(self, command: CommandDescriptor) -> None:
        key = command.name.lower()
        if key in self._commands:
            logger.warning("%s command %s defined twice, replacing", self.kind, key)
        self._commands[key] = command

    def get(self, name: str) -> CommandDescriptor | None:
        return self._commands.get(name.lower())

    @property
    def size(self) -> int:
        return len(self._commands)

    def map(self, func: Callable[[CommandDescriptor], T]) -> list[T]:
        return [func(command) for command in self._commands.values()]

    def names(self) -> list[str]:
        return self.map(lambda command: command.name)

    def by_category(self) -> dict[str, list[CommandDescriptor]]:
        grouped: dict[str, list[CommandDescriptor]] = {}
        for command in self._commands.values():
            grouped.setdefault(command.category, []).append(command)
        return grouped

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._commands

    def __iter__(self) -> Iterator[CommandDescriptor]:
        return iter(list(self._commands.values()))

    def __len__(self) -> int:
        return len(self._commands)


async def load_commands(
    runtime: BotRuntime,
    table: CommandTable,
    package: str,
) -> LoadReport:
    """Scan *package* (``<category>/<command>.py``) and fill *table*.

    Modules are resolved concurrently; invalid ones are logged and skipped.
    """
    report = LoadReport()
    emoji = runtime.config.emoji
    label = f"{table.kind.capitalize()} Command"

    async def _load_one(module_name: str) -> None:
        source = short_name(module_name)
        try:
            command = await resolve_descriptor_async(
                module_name, DESCRIPTOR_ATTR, CommandDescriptor
            )
        except Exception as exc:
            logger.debug("Command load failed source=%s: %s", source, exc)
            log_status(emoji, source, label, LogStatus.ERROR, log=logger)
            report.failures.append((source, exc))
            return
        table.add(command)
        log_status(emoji, f"{source} ({command.name})", label, LogStatus.SUCCESS, log=logger)
        report.loaded.append(command.name)

    modules = await asyncio.to_thread(discover_modules, package)
    await asyncio.gather(*(_load_one(name) for name in modules))
    logger.info(
        "%s commands loaded=%d failed=%d", table.kind, len(report.loaded), len(report.failures)
    )
    return report
