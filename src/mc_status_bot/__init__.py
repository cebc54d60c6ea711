"""Discord bot reporting Minecraft server status from mcstatus.io."""

__version__ = "0.1.0"
