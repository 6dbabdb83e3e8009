"""Dashboard HTTP server: aiohttp-based read-only status and introspection API."""

from __future__ import annotations

import logging
import math
import platform
from typing import TYPE_CHECKING, Any

import discord
from aiohttp import web

from naka_bot.log_context import set_log_context

if TYPE_CHECKING:
    from naka_bot.core.commands import CommandTable
    from naka_bot.core.runtime import BotRuntime

logger = logging.getLogger(__name__)

RUNTIME_KEY: web.AppKey[BotRuntime] = web.AppKey("runtime")

INVITE_URL = "https://discord.com/oauth2/authorize?client_id={client_id}&scope=bot&permissions=8"


def _ok(message: str, data: Any = None) -> web.Response:
    body: dict[str, Any] = {"status": "success", "message": message}
    if data is not None:
        body["data"] = data
    return web.json_response(body)


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"status": "error", "message": message}, status=status)


def format_duration(seconds: float) -> str:
    """Human-readable duration, e.g. ``1d 2h 3m 4s``."""
    total = max(int(seconds), 0)
    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, secs = divmod(rem, 60)
    parts = [f"{v}{u}" for v, u in ((days, "d"), (hours, "h"), (minutes, "m")) if v]
    parts.append(f"{secs}s")
    return " ".join(parts)


def build_app(runtime: BotRuntime) -> web.Application:
    """Create the dashboard application bound to *runtime*.

    Routes:
    - ``GET /health``                -- Liveness check.
    - ``GET /api/``                  -- Versions, title and loaded event names.
    - ``GET /api/command[/{name}]``  -- Prefix command listing / detail.
    - ``GET /api/slash[/{name}]``    -- Slash command listing / detail.
    - ``GET /api/guilds|users|channels|ping|uptime|invite|github``
    """
    app = web.Application(middlewares=[_context_middleware])
    app[RUNTIME_KEY] = runtime
    app.router.add_get("/health", _handle_health)
    app.router.add_get("/api/", _handle_index)
    app.router.add_get("/api/command", _handle_commands)
    app.router.add_get("/api/command/{command}", _handle_command)
    app.router.add_get("/api/slash", _handle_slash_commands)
    app.router.add_get("/api/slash/{command}", _handle_slash_command)
    app.router.add_get("/api/guilds", _handle_guilds)
    app.router.add_get("/api/users", _handle_users)
    app.router.add_get("/api/channels", _handle_channels)
    app.router.add_get("/api/ping", _handle_ping)
    app.router.add_get("/api/uptime", _handle_uptime)
    app.router.add_get("/api/invite", _handle_invite)
    app.router.add_get("/api/github", _handle_github)
    return app


@web.middleware
async def _context_middleware(request: web.Request, handler: Any) -> web.StreamResponse:
    set_log_context(operation="api")
    logger.debug("Dashboard request %s %s", request.method, request.path)
    return await handler(request)


class DashboardServer:
    """Serves :func:`build_app` on the configured host and port."""

    def __init__(self, runtime: BotRuntime) -> None:
        self._runtime = runtime
        self._config = runtime.config.web
        self._runner: web.AppRunner | None = None

    async def start(self) -> None:
        """Create the aiohttp app and start listening."""
        self._runner = web.AppRunner(build_app(self._runtime), access_log=None)
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._config.host, self._config.port)
        await site.start()
        logger.info("Dashboard listening on %s:%d", self._config.host, self._config.port)

    async def stop(self) -> None:
        """Shut down the server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
        logger.info("Dashboard stopped")


# -- Handlers --


async def _handle_health(_request: web.Request) -> web.Response:
    return web.json_response({"status": "ok"})


async def _handle_index(request: web.Request) -> web.Response:
    runtime = request.app[RUNTIME_KEY]
    return _ok(
        "Welcome to the API!",
        {
            "discord": f"v{discord.__version__}",
            "python": platform.python_version(),
            "title": runtime.config.web.name,
            "events": runtime.events.names(),
        },
    )


def _list_commands(table: CommandTable, label: str) -> web.Response:
    return _ok(f"We have {table.size} {label}!", table.names())


def _show_command(table: CommandTable, name: str) -> web.Response:
    command = table.get(name)
    if command is None:
        return _error(f"Command {name} not found!", status=404)
    return _ok(f"Command {name} found!", command.to_dict())


async def _handle_commands(request: web.Request) -> web.Response:
    return _list_commands(request.app[RUNTIME_KEY].message_commands, "commands")


async def _handle_command(request: web.Request) -> web.Response:
    table = request.app[RUNTIME_KEY].message_commands
    return _show_command(table, request.match_info["command"])


async def _handle_slash_commands(request: web.Request) -> web.Response:
    return _list_commands(request.app[RUNTIME_KEY].slash_commands, "slash commands")


async def _handle_slash_command(request: web.Request) -> web.Response:
    table = request.app[RUNTIME_KEY].slash_commands
    return _show_command(table, request.match_info["command"])


async def _handle_guilds(request: web.Request) -> web.Response:
    guilds = request.app[RUNTIME_KEY].gateway.guilds
    return _ok(f"We are now in {len(guilds)} guilds!", [guild.name for guild in guilds])


async def _handle_users(request: web.Request) -> web.Response:
    users = request.app[RUNTIME_KEY].gateway.users
    return _ok(f"We are now in {len(users)} users!", [user.name for user in users])


async def _handle_channels(request: web.Request) -> web.Response:
    channels = list(request.app[RUNTIME_KEY].gateway.get_all_channels())
    return _ok(
        f"We are now in {len(channels)} channels!",
        [channel.name for channel in channels],
    )


async def _handle_ping(request: web.Request) -> web.Response:
    latency = request.app[RUNTIME_KEY].gateway.latency
    if latency is None or math.isnan(latency) or math.isinf(latency):
        return _ok("Pong! not connected")
    return _ok(f"Pong! {round(latency * 1000)}ms")


async def _handle_uptime(request: web.Request) -> web.Response:
    uptime = format_duration(request.app[RUNTIME_KEY].uptime_seconds)
    return _ok(f"Uptime: {uptime}")


async def _handle_invite(request: web.Request) -> web.Response:
    user = request.app[RUNTIME_KEY].gateway.user
    if user is None:
        return _error("Bot is not logged in yet", status=503)
    return _ok(
        "Invite me to your server!",
        {"invite": INVITE_URL.format(client_id=user.id)},
    )


async def _handle_github(request: web.Request) -> web.Response:
    url = request.app[RUNTIME_KEY].config.web.repository_url
    return _ok("Check out our github!", {"github": url})
