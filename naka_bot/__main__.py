"""Entry point: python -m naka_bot."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from naka_bot.config import BotConfig, load_config, resolve_paths
from naka_bot.errors import ConfigError
from naka_bot.logging_config import setup_logging

logger = logging.getLogger(__name__)

_console = Console()


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="naka_bot", description="Discord command bot runtime")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging output")
    parser.add_argument(
        "command",
        nargs="?",
        default="run",
        choices=("run", "status"),
        help="run the bot (default) or print its configuration",
    )
    return parser.parse_args(argv)


def _load_or_exit() -> BotConfig:
    try:
        return load_config()
    except ConfigError as exc:
        _console.print(f"[bold red]{exc}[/bold red]")
        sys.exit(1)


# ---------------------------------------------------------------------------
# Bot lifecycle
# ---------------------------------------------------------------------------


async def run_bot(config: BotConfig) -> None:
    """Build the runtime, start the dashboard if enabled, and connect."""
    from naka_bot.core.runtime import BotRuntime
    from naka_bot.dashboard.server import DashboardServer
    from naka_bot.gateway.discord_client import DiscordGateway

    gateway = DiscordGateway()
    runtime = BotRuntime(config, gateway)
    dashboard: DashboardServer | None = None

    async with gateway:
        await runtime.build()
        if config.web.enabled:
            dashboard = DashboardServer(runtime)
            await dashboard.start()
        try:
            await gateway.start(config.bot.token)
        finally:
            if dashboard is not None:
                await dashboard.stop()
    logger.info("Bot shut down")


def _start_bot(verbose: bool = False) -> None:
    paths = resolve_paths()
    setup_logging(verbose=verbose, log_dir=paths.logs_dir)
    config = _load_or_exit()
    if not verbose:
        config_level = getattr(logging, config.log_level.upper(), logging.INFO)
        if config_level != logging.INFO:
            setup_logging(level=config_level, log_dir=paths.logs_dir)

    token = config.bot.token
    if not token or token.startswith("YOUR_"):
        _console.print(
            "[bold yellow]No bot token configured. Set [bold]BOT_TOKEN[/bold] or "
            f"edit {paths.config_path}.[/bold yellow]"
        )
        sys.exit(1)

    try:
        asyncio.run(run_bot(config))
    except KeyboardInterrupt:
        logger.info("Shutting down...")


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


def _print_status() -> None:
    """Print identity, handler order and discovered commands without connecting."""
    from naka_bot.core.commands import MESSAGE_COMMANDS_PACKAGE, SLASH_COMMANDS_PACKAGE
    from naka_bot.core.discovery import discover_modules

    config = _load_or_exit()
    paths = resolve_paths()

    identity = Table(show_header=False, box=None, padding=(0, 2))
    identity.add_column(style="bold green", min_width=12)
    identity.add_column()
    identity.add_row("Name", config.bot.name)
    identity.add_row("Author", config.bot.author)
    identity.add_row("Prefix", config.bot.prefix)
    identity.add_row("Token", "[green]set[/green]" if config.bot.token else "[red]missing[/red]")
    identity.add_row("Handlers", ", ".join(config.handler.names) or "-")
    web = f"{config.web.host}:{config.web.port}" if config.web.enabled else "[dim]disabled[/dim]"
    identity.add_row("Dashboard", web)
    identity.add_row("Config", f"[cyan]{paths.config_path}[/cyan]")
    _console.print(Panel(identity, title="[bold]Status[/bold]", border_style="green"))

    commands = Table(title="Discovered commands")
    commands.add_column("Transport", style="bold")
    commands.add_column("Module")
    for label, package in (("prefix", MESSAGE_COMMANDS_PACKAGE), ("slash", SLASH_COMMANDS_PACKAGE)):
        for module in discover_modules(package):
            commands.add_row(label, module.removeprefix(f"{package}."))
    _console.print(commands)


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    if args.command == "status":
        _print_status()
        return
    _start_bot(verbose=args.verbose)


if __name__ == "__main__":
    main()
