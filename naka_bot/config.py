"""Application configuration: pydantic models, JSON file, environment overrides."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from naka_bot.errors import ConfigError

logger = logging.getLogger(__name__)

_DEFAULT_ICON = "https://i.scdn.co/image/ab67616d00001e02af9492f3874593a0ecb971c8"


class BotIdentityConfig(BaseModel):
    """Static identity and branding of the bot."""

    name: str = "slendertaker"
    icon: str = _DEFAULT_ICON
    token: str = ""
    prefix: str = "$"
    author: str = "slendertaker"


class EmojiConfig(BaseModel):
    """Glyphs used in load-status logs and help output."""

    success: str = "✅"
    loading: str = "🔄"
    error: str = "❌"
    categories: dict[str, str] = Field(
        default_factory=lambda: {"misc": "🎲", "info": "📖"},
    )

    def for_category(self, category: str) -> str:
        return self.categories.get(category, "📁")


class HandlerConfig(BaseModel):
    """Ordered identifiers of the startup handlers to run."""

    names: list[str] = Field(default_factory=lambda: ["event", "message", "slash"])


class SlashConfig(BaseModel):
    """Slash command registration on the platform."""

    enabled: bool = True
    guild_id: int | None = None


class WebConfig(BaseModel):
    """Settings for the read-only HTTP dashboard."""

    enabled: bool = False
    name: str = "naka-bot dashboard"
    host: str = "127.0.0.1"
    port: int = 8750
    repository_url: str = "https://github.com/sleepy4k/discordjs-nakaaa"


class AntiCrashConfig(BaseModel):
    """Log unhandled asyncio task errors instead of surfacing them raw."""

    enabled: bool = True


class BotConfig(BaseModel):
    """Top-level configuration loaded from config.json."""

    log_level: str = "INFO"
    bot: BotIdentityConfig = Field(default_factory=BotIdentityConfig)
    emoji: EmojiConfig = Field(default_factory=EmojiConfig)
    handler: HandlerConfig = Field(default_factory=HandlerConfig)
    slash: SlashConfig = Field(default_factory=SlashConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    anti_crash: AntiCrashConfig = Field(default_factory=AntiCrashConfig)


# Environment variable -> field of ``BotConfig.bot``.
ENV_OVERRIDES: dict[str, str] = {
    "BOT_NAME": "name",
    "BOT_ICON": "icon",
    "BOT_TOKEN": "token",
    "BOT_PREFIX": "prefix",
    "BOT_AUTHOR": "author",
}


@dataclass(frozen=True)
class NakaPaths:
    """Resolved, immutable paths for the bot's home directory."""

    naka_home: Path

    @property
    def config_path(self) -> Path:
        return self.naka_home / "config.json"

    @property
    def logs_dir(self) -> Path:
        return self.naka_home / "logs"


def resolve_paths(naka_home: str | Path | None = None) -> NakaPaths:
    """Resolve the home directory: argument -> ``NAKA_HOME`` -> ``~/.naka``."""
    raw = naka_home or os.environ.get("NAKA_HOME") or "~/.naka"
    return NakaPaths(naka_home=Path(raw).expanduser())


def deep_merge_config(
    user: dict[str, object],
    defaults: dict[str, object],
) -> tuple[dict[str, object], bool]:
    """Recursively merge *defaults* into *user*, preserving user values.

    Returns ``(merged_dict, changed)`` where *changed* is True when new keys were added.
    """
    result: dict[str, object] = dict(user)
    changed = False
    new_keys = 0
    for key, default_val in defaults.items():
        if key not in result:
            result[key] = default_val
            changed = True
            new_keys += 1
        elif isinstance(default_val, dict) and isinstance(result[key], dict):
            sub_merged, sub_changed = deep_merge_config(
                result[key],  # type: ignore[arg-type]
                default_val,
            )
            result[key] = sub_merged
            changed = changed or sub_changed
    if new_keys:
        logger.info("Config deep-merge: %d new keys added", new_keys)
    return result, changed


def apply_env_overrides(
    data: dict[str, object],
    environ: Mapping[str, str] | None = None,
) -> dict[str, object]:
    """Overlay ``BOT_*`` environment variables onto the ``bot`` section.

    Empty variables are ignored so an exported-but-blank value never wipes
    a configured token.
    """
    env = os.environ if environ is None else environ
    result = dict(data)
    bot_section = dict(result.get("bot") or {})  # type: ignore[call-overload]
    for var, field_name in ENV_OVERRIDES.items():
        value = env.get(var, "")
        if value:
            bot_section[field_name] = value
    result["bot"] = bot_section
    return result


def load_config(
    paths: NakaPaths | None = None,
    environ: Mapping[str, str] | None = None,
) -> BotConfig:
    """Load, auto-create, and smart-merge the bot config.

    On first start the Pydantic defaults are written to ``config.json``.  On
    every load the file is deep-merged with current defaults so new fields are
    added without destroying user settings.  Environment overrides are applied
    last and never written back to disk.
    """
    paths = paths or resolve_paths()
    config_path = paths.config_path
    defaults = BotConfig().model_dump(mode="json")

    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(
            json.dumps(defaults, indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
        logger.info("Created default config at %s", config_path)

    try:
        user_data: dict[str, object] = json.loads(config_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        msg = f"Failed to parse config at {config_path}"
        raise ConfigError(msg) from exc

    merged, changed = deep_merge_config(user_data, defaults)
    if changed:
        config_path.write_text(
            json.dumps(merged, indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
        logger.info("Extended config with new default fields")

    try:
        return BotConfig.model_validate(apply_env_overrides(merged, environ))
    except ValidationError as exc:
        msg = f"Invalid config at {config_path}: {exc}"
        raise ConfigError(msg) from exc
