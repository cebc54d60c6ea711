"""discord.py-backed chat gateway.

Translates gateway events into dispatcher events and exposes the bulk
command overwrite endpoint used at startup.
"""

from __future__ import annotations

import logging
import sys
from typing import Any, Callable, Sequence

import discord

from mc_status_bot.errors import PlatformError
from mc_status_bot.models import CommandDescriptor, CommandEvent, MessageEvent

# Discord's CHAT_INPUT application command type.
_SLASH_COMMAND_TYPE = 1

FailureHandler = Callable[[BaseException], None]


def build_intents(*, message_content: bool = False) -> discord.Intents:
    """All non-privileged intents, optionally plus message content."""
    intents = discord.Intents.default()
    intents.message_content = message_content
    return intents


def command_payload(commands: Sequence[CommandDescriptor]) -> list[dict[str, Any]]:
    return [
        {"name": command.name, "description": command.description, "type": _SLASH_COMMAND_TYPE}
        for command in commands
    ]


class _StatusBotClient(discord.Client):
    def __init__(self, gateway: DiscordGateway, **options: Any) -> None:
        super().__init__(**options)
        self._gateway = gateway

    async def on_message(self, message: discord.Message) -> None:
        await self._gateway.handle_message(message)

    async def on_interaction(self, interaction: discord.Interaction) -> None:
        await self._gateway.handle_interaction(interaction)

    async def on_error(self, event_method: str, /, *args: Any, **kwargs: Any) -> None:
        self._gateway.report_failure(event_method, sys.exc_info()[1])


class DiscordGateway:
    """Owns the discord.py client and forwards events to a dispatcher."""

    def __init__(
        self,
        token: str,
        *,
        intents: discord.Intents | None = None,
        client: discord.Client | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._token = token
        self._client = client or _StatusBotClient(self, intents=intents or build_intents())
        self._logger = logger or logging.getLogger("mc_status_bot.discord_gateway")
        self._dispatcher = None
        self._on_failure: FailureHandler | None = None

    @property
    def client(self) -> discord.Client:
        return self._client

    def attach(self, dispatcher, on_failure: FailureHandler | None = None) -> None:
        self._dispatcher = dispatcher
        self._on_failure = on_failure

    def self_id(self) -> int | None:
        user = self._client.user
        return user.id if user is not None else None

    async def login(self) -> None:
        try:
            await self._client.login(self._token)
        except (discord.LoginFailure, discord.HTTPException) as exc:
            raise PlatformError(f"Discord login failed: {exc}") from exc
        self._logger.info("discord_logged_in", extra={"user_id": self.self_id()})

    async def bulk_overwrite_commands(
        self,
        application_id: int,
        guild_id: int | None,
        commands: Sequence[CommandDescriptor],
    ) -> list[str]:
        payload = command_payload(commands)
        try:
            if guild_id:
                registered = await self._client.http.bulk_upsert_guild_commands(application_id, guild_id, payload)
            else:
                registered = await self._client.http.bulk_upsert_global_commands(application_id, payload)
        except discord.HTTPException as exc:
            raise PlatformError(f"Command registration rejected: {exc}") from exc
        return [item["name"] for item in registered]

    async def connect(self) -> None:
        try:
            await self._client.connect()
        except (discord.PrivilegedIntentsRequired, discord.GatewayNotFound, discord.ConnectionClosed) as exc:
            raise PlatformError(f"Discord gateway connection failed: {exc}") from exc

    async def wait_until_ready(self) -> None:
        await self._client.wait_until_ready()

    async def set_presence(self, text: str) -> None:
        await self._client.change_presence(activity=discord.Game(name=text))

    async def close(self) -> None:
        await self._client.close()

    async def handle_message(self, message: discord.Message) -> None:
        if self._dispatcher is None:
            return

        async def reply(content: str) -> None:
            await message.channel.send(content)

        await self._dispatcher.on_message(MessageEvent(author_id=message.author.id, content=message.content, reply=reply))

    async def handle_interaction(self, interaction: discord.Interaction) -> None:
        if self._dispatcher is None or interaction.type is not discord.InteractionType.application_command:
            return

        async def respond(content: str) -> None:
            await interaction.response.send_message(content)

        name = (interaction.data or {}).get("name", "")
        await self._dispatcher.on_command(CommandEvent(name=name, respond=respond))

    def report_failure(self, event_method: str, exc: BaseException | None) -> None:
        self._logger.error("event_handler_failed", exc_info=exc, extra={"event": event_method})
        if exc is not None and self._on_failure is not None:
            self._on_failure(exc)
