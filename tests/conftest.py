"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from naka_bot.config import BotConfig
from naka_bot.core.runtime import BotRuntime


@pytest.fixture
def tmp_naka_home(tmp_path: Path) -> Path:
    """Temporary ~/.naka equivalent."""
    home = tmp_path / ".naka"
    home.mkdir()
    return home


@pytest.fixture
def config() -> BotConfig:
    return BotConfig()


@pytest.fixture
def gateway() -> MagicMock:
    """Stand-in for DiscordGateway: records subscriptions, never connects."""
    gw = MagicMock(name="gateway")
    gw.user = None
    gw.latency = 0.042
    gw.guilds = []
    gw.users = []
    gw.get_all_channels.return_value = iter(())
    gw.sync_slash_commands = AsyncMock(return_value=0)
    return gw


@pytest.fixture
def runtime(config: BotConfig, gateway: MagicMock) -> BotRuntime:
    return BotRuntime(config, gateway)


def make_user(user_id: int = 42, name: str = "alice", *, bot: bool = False) -> MagicMock:
    user = MagicMock(name=f"user-{user_id}")
    user.id = user_id
    user.name = name
    user.bot = bot
    user.display_avatar.replace.return_value.url = f"https://cdn.example/avatars/{user_id}.png"
    return user


@pytest.fixture
def make_message() -> Callable[..., MagicMock]:
    """Factory for discord.Message mocks in a guild text channel."""

    def _make(
        content: str = "$ping",
        *,
        user_id: int = 42,
        bot: bool = False,
        permissions: discord.Permissions | None = None,
        bot_permissions: discord.Permissions | None = None,
    ) -> MagicMock:
        user_perms = discord.Permissions.all() if permissions is None else permissions
        bot_perms = discord.Permissions.all() if bot_permissions is None else bot_permissions

        message = MagicMock(name="message")
        message.content = content
        message.author = make_user(user_id, bot=bot)
        message.guild.id = 1000
        message.channel.id = 2000
        message.channel.send = AsyncMock(name="channel.send")
        message.channel.typing = AsyncMock(name="channel.typing")
        message.channel.purge = AsyncMock(name="channel.purge", return_value=[])
        message.channel.permissions_for.side_effect = lambda member: (
            user_perms if member is message.author else bot_perms
        )
        message.reply = AsyncMock(name="message.reply")
        return message

    return _make


@pytest.fixture
def make_interaction() -> Callable[..., MagicMock]:
    """Factory for slash command discord.Interaction mocks."""

    def _make(
        name: str = "ping",
        options: list[dict[str, Any]] | None = None,
        *,
        user_id: int = 42,
        done: bool = False,
        response_type: discord.InteractionResponseType | None = None,
        permissions: discord.Permissions | None = None,
        app_permissions: discord.Permissions | None = None,
    ) -> MagicMock:
        interaction = MagicMock(name="interaction")
        interaction.type = discord.InteractionType.application_command
        interaction.data = {"name": name, "options": options or []}
        interaction.user = make_user(user_id)
        interaction.guild_id = 1000
        interaction.permissions = (
            discord.Permissions.all() if permissions is None else permissions
        )
        interaction.app_permissions = (
            discord.Permissions.all() if app_permissions is None else app_permissions
        )
        interaction.response.is_done = MagicMock(return_value=done)
        interaction.response.type = response_type
        interaction.response.send_message = AsyncMock(name="response.send_message")
        interaction.response.defer = AsyncMock(name="response.defer")
        interaction.followup.send = AsyncMock(name="followup.send")
        interaction.edit_original_response = AsyncMock(name="edit_original_response")
        interaction.original_response = AsyncMock(name="original_response")
        interaction.channel.id = 2000
        interaction.channel.purge = AsyncMock(name="channel.purge", return_value=[])
        return interaction

    return _make


@pytest.fixture
def make_package(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., str]:
    """Write a throwaway importable package and return its dotted name.

    *files* maps relative module paths (``misc/ping.py``) to source text;
    ``__init__.py`` files are created for every directory.
    """
    counter = iter(range(1_000))

    def _make(files: dict[str, str]) -> str:
        name = f"naka_fixture_{tmp_path.name.lower()}_{next(counter)}".replace("-", "_")
        root = tmp_path / "pkgs" / name
        root.mkdir(parents=True)
        (root / "__init__.py").write_text("")
        for rel, source in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            for parent in path.relative_to(root).parents:
                init = root / parent / "__init__.py"
                if not init.exists():
                    init.write_text("")
            path.write_text(source, encoding="utf-8")
        monkeypatch.syspath_prepend(str(tmp_path / "pkgs"))
        return name

    return _make
