"""Chat platform adapters (e.g., discord.py integration)."""

from .discord_gateway import DiscordGateway, build_intents, command_payload

__all__ = [
    "DiscordGateway",
    "build_intents",
    "command_payload",
]
