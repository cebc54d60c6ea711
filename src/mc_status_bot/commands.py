"""Slash-command declarations and their one-shot registration."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from mc_status_bot.config import CommandSet
from mc_status_bot.models import CommandDescriptor

FULL_COMMANDS: tuple[CommandDescriptor, ...] = (
    CommandDescriptor("status", "Display the status of players currently on the Minecraft Server"),
    CommandDescriptor("version", "Display the current version of the Minecraft Server"),
    CommandDescriptor("players", "Display the current players on the Minecraft Server"),
)

BASIC_COMMANDS: tuple[CommandDescriptor, ...] = (
    CommandDescriptor("online", "Display whether the Minecraft Server is online"),
    CommandDescriptor("version", "Display the current version of the Minecraft Server"),
)


def commands_for(command_set: CommandSet) -> tuple[CommandDescriptor, ...]:
    if command_set == CommandSet.BASIC:
        return BASIC_COMMANDS
    return FULL_COMMANDS


class CommandPlatform(Protocol):
    """Chat platform endpoint that replaces the whole registered command set."""

    async def bulk_overwrite_commands(
        self,
        application_id: int,
        guild_id: int | None,
        commands: Sequence[CommandDescriptor],
    ) -> list[str]:
        """Replace every registered command in scope; return the names now known."""


class CommandRegistry:
    """Pushes the static command set to the platform once at startup."""

    def __init__(
        self,
        platform: CommandPlatform,
        *,
        application_id: int,
        guild_id: int | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._platform = platform
        self._application_id = application_id
        self._guild_id = guild_id
        self._logger = logger or logging.getLogger("mc_status_bot.commands")

    async def publish(self, commands: Sequence[CommandDescriptor]) -> None:
        """Bulk-replace the platform's commands; rejections propagate as ``PlatformError``."""
        registered = await self._platform.bulk_overwrite_commands(self._application_id, self._guild_id, commands)
        self._logger.info(
            "commands_registered",
            extra={"commands": registered, "guild_id": self._guild_id, "scope": "guild" if self._guild_id else "global"},
        )
