"""Event table: gateway event name -> descriptor, with one subscription per name."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable, Iterator
from typing import TYPE_CHECKING, Any, Protocol

from naka_bot.core.descriptors import EventDescriptor
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

EVENTS_PACKAGE = "naka_bot.events"
DESCRIPTOR_ATTR = "event"

EventCallback = Callable[..., Awaitable[None]]


class Subscriber(Protocol):
    """The part of the gateway the event table needs."""

    def subscribe(self, event_name: str, callback: EventCallback) -> None: ...


class EventTable:
    """Read-only mapping of loaded event descriptors.

    Adding a descriptor whose name is already subscribed replaces the table
    entry only: the existing subscription looks the descriptor up at dispatch
    time, so it reaches the replacement without a second subscription.
    """

    def __init__(self) -> None:
        self._events: dict[str, EventDescriptor] = {}
        self._subscribed: set[str] = set()

    def add(
        self,
        descriptor: EventDescriptor,
        gateway: Subscriber,
        dispatch: Callable[..., Awaitable[None]],
    ) -> bool:
        """Insert *descriptor*; subscribe its name once.  Returns True on new subscription."""
        if descriptor.name in self._events:
            logger.warning("Event %s defined twice, replacing", descriptor.name)
        self._events[descriptor.name] = descriptor
        if descriptor.name in self._subscribed:
            return False
        gateway.subscribe(descriptor.name, functools.partial(dispatch, descriptor.name))
        self._subscribed.add(descriptor.name)
        return True

    def get(self, name: str) -> EventDescriptor | None:
        return self._events.get(name)

    @property
    def size(self) -> int:
        return len(self._events)

    def names(self) -> list[str]:
        return list(self._events)

    def is_subscribed(self, name: str) -> bool:
        return name in self._subscribed

    def __contains__(self, name: object) -> bool:
        return name in self._events

    def __iter__(self) -> Iterator[EventDescriptor]:
        return iter(list(self._events.values()))

    def __len__(self) -> int:
        return len(self._events)


async def load_events(runtime: BotRuntime, package: str = EVENTS_PACKAGE) -> LoadReport:
    """Scan *package* for event modules and register every valid descriptor.

    Modules are resolved concurrently.  A module that fails to import or has no
    named :class:`EventDescriptor` is logged and skipped.
    """
    report = LoadReport()
    emoji = runtime.config.emoji

    async def _load_one(module_name: str) -> None:
        source = short_name(module_name)
        try:
            descriptor = await resolve_descriptor_async(
                module_name, DESCRIPTOR_ATTR, EventDescriptor
            )
        except Exception as exc:
            logger.debug("Event load failed source=%s: %s", source, exc)
            log_status(emoji, source, "Event", LogStatus.ERROR, log=logger)
            report.failures.append((source, exc))
            return
        runtime.events.add(descriptor, runtime.gateway, runtime.dispatch_event)
        log_status(emoji, f"{source} ({descriptor.name})", "Event", LogStatus.SUCCESS, log=logger)
        report.loaded.append(descriptor.name)

    modules = await asyncio.to_thread(discover_modules, package)
    await asyncio.gather(*(_load_one(name) for name in modules))
    logger.info("Events loaded=%d failed=%d", len(report.loaded), len(report.failures))
    return report


def event_args_summary(args: tuple[Any, ...]) -> str:
    """Short type summary of event arguments for debug logs."""
    return ",".join(type(arg).__name__ for arg in args) or "-"
