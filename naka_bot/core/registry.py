"""Handler registry: named startup units run once, in configured order."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import StrEnum
from typing import TYPE_CHECKING

from naka_bot.core.discovery import LoadReport
from naka_bot.errors import HandlerLoadError

if TYPE_CHECKING:
    from naka_bot.config import EmojiConfig
    from naka_bot.core.descriptors import Handler
    from naka_bot.core.runtime import BotRuntime

logger = logging.getLogger(__name__)


class LogStatus(StrEnum):
    LOADING = "Loading"
    SUCCESS = "Loaded"
    ERROR = "Error"


def log_status(
    emoji: EmojiConfig,
    name: str,
    category: str,
    status: LogStatus,
    *,
    log: logging.Logger | None = None,
) -> None:
    """Emit one ``<category> : <name> | Status: <glyph> <text>`` line."""
    icon = {
        LogStatus.SUCCESS: emoji.success,
        LogStatus.LOADING: emoji.loading,
        LogStatus.ERROR: emoji.error,
    }[status]
    level = logging.ERROR if status is LogStatus.ERROR else logging.INFO
    (log or logger).log(level, "%s : %s | Status: %s %s", category, name, icon, status.value)


class HandlerRegistry:
    """Explicit table of startup handlers, resolved by identifier."""

    def __init__(self, handlers: Iterable[Handler] = ()) -> None:
        self._handlers: dict[str, Handler] = {}
        for handler in handlers:
            self.register(handler)

    def register(self, handler: Handler) -> None:
        if handler.name in self._handlers:
            logger.warning("Handler %s registered twice, replacing", handler.name)
        self._handlers[handler.name] = handler

    def get(self, name: str) -> Handler | None:
        return self._handlers.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._handlers)

    async def run_all(self, runtime: BotRuntime, order: Iterable[str]) -> LoadReport:
        """Run the handlers named in *order*, one after another.

        A handler that is unknown or raises is logged and recorded in the
        report; the remaining handlers still run.
        """
        report = LoadReport()
        emoji = runtime.config.emoji
        for name in order:
            handler = self._handlers.get(name)
            if handler is None:
                log_status(emoji, name, "Handler", LogStatus.ERROR)
                report.failures.append((name, HandlerLoadError(f"Unknown handler '{name}'")))
                continue

            log_status(emoji, name, "Handler", LogStatus.LOADING)
            try:
                await handler.run(runtime)
            except Exception as exc:
                logger.exception("Handler %s failed", name)
                log_status(emoji, name, "Handler", LogStatus.ERROR)
                report.failures.append((name, exc))
                continue
            log_status(emoji, name, "Handler", LogStatus.SUCCESS)
            report.loaded.append(name)
        return report
