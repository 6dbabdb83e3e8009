"""Logging context: ContextVar-based log enrichment for async dispatch.

Every log record is automatically enriched with an ``[op:guild:user]`` prefix
via a `ContextFilter` attached to the root logger handlers.

Operation codes: ``evt`` (gateway event), ``cmd`` (prefix command),
``slash`` (slash command), ``api`` (dashboard request), ``boot`` (startup).
"""

from __future__ import annotations

import logging
from contextvars import ContextVar

# Cross-cutting context propagated through asyncio tasks.
ctx_operation: ContextVar[str | None] = ContextVar("ctx_operation", default=None)
ctx_guild_id: ContextVar[int | None] = ContextVar("ctx_guild_id", default=None)
ctx_user_id: ContextVar[int | None] = ContextVar("ctx_user_id", default=None)


class ContextFilter(logging.Filter):
    """Inject ContextVar values into every LogRecord as ``record.ctx``."""

    def filter(self, record: logging.LogRecord) -> bool:
        op = ctx_operation.get(None)
        guild = ctx_guild_id.get(None)
        user = ctx_user_id.get(None)
        parts: list[str] = []
        if op:
            parts.append(op)
        if guild is not None:
            parts.append(str(guild))
        if user is not None:
            parts.append(str(user))
        record.ctx = f"[{':'.join(parts)}] " if parts else ""
        return True


def set_log_context(
    *,
    operation: str | None = None,
    guild_id: int | None = None,
    user_id: int | None = None,
) -> None:
    """Set logging context for the current asyncio task.

    Gateway events are dispatched as separate tasks, so values set while
    handling one event never leak into another.
    """
    if operation is not None:
        ctx_operation.set(operation)
    if guild_id is not None:
        ctx_guild_id.set(guild_id)
    if user_id is not None:
        ctx_user_id.set(user_id)
