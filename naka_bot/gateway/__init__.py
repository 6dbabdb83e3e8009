"""Gateway transport: the discord.py client the runtime subscribes to."""

from naka_bot.gateway.discord_client import DiscordGateway, default_intents, slash_payload

__all__ = ["DiscordGateway", "default_intents", "slash_payload"]
