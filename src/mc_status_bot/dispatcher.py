"""Routes chat events to status replies."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

from mc_status_bot.errors import SendError
from mc_status_bot.formatting import format_players, format_status, format_version
from mc_status_bot.models import CommandEvent, MessageEvent, ServerStatus
from mc_status_bot.status_client import StatusClient

Formatter = Callable[[ServerStatus], str]

COMMAND_FORMATTERS: dict[str, Formatter] = {
    "status": format_status,
    "online": format_status,
    "version": format_version,
    "players": format_players,
}


class StatusSource(Protocol):
    """Supplies the status a command reply is rendered from."""

    async def current(self) -> ServerStatus: ...


class SnapshotStatusSource:
    """Serves one status fetched before the connection opened."""

    def __init__(self, snapshot: ServerStatus) -> None:
        self._snapshot = snapshot

    @property
    def snapshot(self) -> ServerStatus:
        return self._snapshot

    async def current(self) -> ServerStatus:
        return self._snapshot


class LiveStatusSource:
    """Fetches a fresh status for every call, off the event loop."""

    def __init__(self, client: StatusClient, server_address: str, *, bedrock: bool = False) -> None:
        self._client = client
        self._server_address = server_address
        self._bedrock = bedrock

    async def current(self) -> ServerStatus:
        return await asyncio.to_thread(self._client.fetch, self._server_address, self._bedrock)


class CommandDispatcher:
    """Answers slash commands from a status source and a fixed trigger phrase."""

    def __init__(
        self,
        *,
        status_source: StatusSource,
        self_id: Callable[[], int | None],
        trigger_phrase: str = "hello",
        trigger_reply: str = "world",
        logger: logging.Logger | None = None,
    ) -> None:
        self._status_source = status_source
        self._self_id = self_id
        self._trigger_phrase = trigger_phrase
        self._trigger_reply = trigger_reply
        self._logger = logger or logging.getLogger("mc_status_bot.dispatcher")

    async def on_command(self, event: CommandEvent) -> None:
        formatter = COMMAND_FORMATTERS.get(event.name)
        if formatter is None:
            # No reply for unregistered names.
            self._logger.debug("command_ignored", extra={"command": event.name})
            return

        status = await self._status_source.current()
        await self._send(event.respond, formatter(status), context=event.name)
        self._logger.info("command_replied", extra={"command": event.name})

    async def on_message(self, event: MessageEvent) -> None:
        if event.author_id == self._self_id():
            return
        if event.content != self._trigger_phrase:
            return
        await self._send(event.reply, self._trigger_reply, context="trigger")

    async def _send(self, send: Callable[[str], Awaitable[None]], content: str, *, context: str) -> None:
        try:
            await send(content)
        except SendError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise SendError(f"Failed to deliver {context} reply: {exc}") from exc
