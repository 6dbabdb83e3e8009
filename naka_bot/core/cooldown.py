"""Per-command, per-user cooldown windows with automatic expiry."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


def _now_ms() -> float:
    return time.time() * 1000


class CooldownTracker:
    """Tracks ``(command, user) -> expiry`` (epoch milliseconds).

    Each pair is either absent or active.  :meth:`commit` moves a pair to
    active and schedules its removal on the running loop; :meth:`remaining`
    only reads.  An entry whose expiry has already passed is treated as
    absent and dropped on read, so a late timer never extends a window.
    """

    __slots__ = ("_clock", "_entries", "_timers")

    def __init__(self, *, clock: Callable[[], float] = _now_ms) -> None:
        self._clock = clock
        self._entries: dict[str, dict[int, float]] = {}
        self._timers: dict[tuple[str, int], asyncio.TimerHandle] = {}

    def remaining(self, command: str, user_id: int) -> float | None:
        """Seconds left in the active window, or None when the pair is absent."""
        timestamps = self._entries.get(command)
        if not timestamps or user_id not in timestamps:
            return None
        expiry = timestamps[user_id]
        now = self._clock()
        if now >= expiry:
            self._expire(command, user_id, expiry)
            return None
        return (expiry - now) / 1000

    def commit(self, command: str, user_id: int, seconds: float) -> float:
        """Start a fresh window for the pair and schedule its removal.

        Returns the expiry timestamp in epoch milliseconds.
        """
        expiry = self._clock() + seconds * 1000
        self._entries.setdefault(command, {})[user_id] = expiry

        key = (command, user_id)
        previous = self._timers.pop(key, None)
        if previous is not None:
            previous.cancel()
        loop = asyncio.get_running_loop()
        self._timers[key] = loop.call_later(seconds, self._expire, command, user_id, expiry)
        logger.debug("Cooldown started cmd=%s user=%d seconds=%s", command, user_id, seconds)
        return expiry

    def _expire(self, command: str, user_id: int, expiry: float) -> None:
        timestamps = self._entries.get(command)
        if timestamps is None or timestamps.get(user_id) != expiry:
            return
        del timestamps[user_id]
        if not timestamps:
            del self._entries[command]
        handle = self._timers.pop((command, user_id), None)
        if handle is not None:
            handle.cancel()
        logger.debug("Cooldown expired cmd=%s user=%d", command, user_id)

    def is_active(self, command: str, user_id: int) -> bool:
        return self.remaining(command, user_id) is not None

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        command, user_id = key
        return user_id in self._entries.get(command, {})

    def __len__(self) -> int:
        return sum(len(users) for users in self._entries.values())

    def clear(self) -> None:
        """Drop all entries and cancel pending timers."""
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        self._entries.clear()
