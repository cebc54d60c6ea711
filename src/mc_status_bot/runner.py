"""Process lifecycle: register, fetch, connect, serve until signalled."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import Callable, Protocol, Sequence

from mc_status_bot.commands import CommandPlatform, CommandRegistry, commands_for
from mc_status_bot.config import FetchMode, Settings
from mc_status_bot.dispatcher import CommandDispatcher, LiveStatusSource, SnapshotStatusSource, StatusSource
from mc_status_bot.errors import PlatformError
from mc_status_bot.formatting import format_presence
from mc_status_bot.models import CommandDescriptor, ServerStatus
from mc_status_bot.status_client import StatusClient

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ChatGateway(CommandPlatform, Protocol):
    """Chat connection capabilities the runner drives."""

    async def login(self) -> None: ...

    def attach(self, dispatcher: CommandDispatcher, on_failure: Callable[[BaseException], None] | None = None) -> None: ...

    def self_id(self) -> int | None: ...

    async def connect(self) -> None: ...

    async def wait_until_ready(self) -> None: ...

    async def set_presence(self, text: str) -> None: ...

    async def close(self) -> None: ...


class LifecycleRunner:
    """Drives one bot process from login to shutdown.

    Any ``BotError`` raised along the way, including ones reported from
    event handlers after the connection opened, ends the run and is
    re-raised to the caller once the connection is closed.
    """

    def __init__(
        self,
        *,
        gateway: ChatGateway,
        status_client: StatusClient,
        settings: Settings,
        commands: Sequence[CommandDescriptor] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._gateway = gateway
        self._status_client = status_client
        self._settings = settings
        self._commands = tuple(commands) if commands is not None else commands_for(settings.command_set)
        self._logger = logger or logging.getLogger("mc_status_bot.runner")

        self._stop: asyncio.Event | None = None
        self._failure: BaseException | None = None
        self._snapshot: ServerStatus | None = None

    @property
    def snapshot(self) -> ServerStatus | None:
        return self._snapshot

    def report_fatal(self, exc: BaseException) -> None:
        """Record the first fatal handler error and stop waiting."""
        if self._failure is None:
            self._failure = exc
        if self._stop is not None:
            self._stop.set()

    async def run(self, stop_event: asyncio.Event | None = None) -> None:
        stop = stop_event or asyncio.Event()
        self._stop = stop
        installed = self._install_signal_handlers(stop) if stop_event is None else []
        connection: asyncio.Task[None] | None = None
        try:
            await self._gateway.login()
            await CommandRegistry(
                self._gateway,
                application_id=self._settings.discord_app_id,
                guild_id=self._settings.discord_guild_id,
            ).publish(self._commands)

            dispatcher = CommandDispatcher(
                status_source=await self._build_status_source(),
                self_id=self._gateway.self_id,
                trigger_phrase=self._settings.trigger_phrase,
                trigger_reply=self._settings.trigger_reply,
            )
            self._gateway.attach(dispatcher, self.report_fatal)

            connection = asyncio.create_task(self._gateway.connect(), name="chat-gateway-connection")
            if await self._wait_ready(connection, stop):
                await self._gateway.set_presence(format_presence(self._snapshot, self._settings.community_name))
                self._logger.info("Discord bot spinning up")
                await self._wait_any(connection, stop.wait())
        finally:
            self._remove_signal_handlers(installed)
            await self._gateway.close()
            if connection is not None:
                await self._settle(connection)

        if self._failure is not None:
            raise self._failure
        if connection is not None and not connection.cancelled() and connection.exception() is not None:
            raise connection.exception()
        self._logger.info("bot_stopped")

    async def _build_status_source(self) -> StatusSource:
        server = self._settings.minecraft_server
        bedrock = self._settings.minecraft_bedrock
        if self._settings.fetch_mode == FetchMode.PER_COMMAND:
            return LiveStatusSource(self._status_client, server, bedrock=bedrock)

        self._snapshot = await asyncio.to_thread(self._status_client.fetch, server, bedrock)
        return SnapshotStatusSource(self._snapshot)

    async def _wait_ready(self, connection: asyncio.Task[None], stop: asyncio.Event) -> bool:
        ready = await self._wait_any(connection, self._gateway.wait_until_ready(), stop.wait())
        if ready:
            return True
        if connection.done() and not connection.cancelled() and connection.exception() is None:
            raise PlatformError("Chat connection closed before it became ready")
        return False

    @staticmethod
    async def _wait_any(connection: asyncio.Task[None], *others) -> bool:
        """Wait until the connection ends or the first of ``others`` finishes.

        Returns True when ``others[0]`` finished first.
        """
        tasks = [asyncio.ensure_future(other) for other in others]
        try:
            await asyncio.wait([connection, *tasks], return_when=asyncio.FIRST_COMPLETED)
            return tasks[0].done() and not tasks[0].cancelled() and not connection.done()
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    @staticmethod
    async def _settle(connection: asyncio.Task[None]) -> None:
        if not connection.done():
            connection.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await asyncio.gather(connection, return_exceptions=True)

    def _install_signal_handlers(self, stop: asyncio.Event) -> list[signal.Signals]:
        loop = asyncio.get_running_loop()
        installed = []
        for sig in _STOP_SIGNALS:
            try:
                loop.add_signal_handler(sig, stop.set)
            except (NotImplementedError, RuntimeError):
                self._logger.warning("signal_handler_unavailable", extra={"signal": sig.name})
                continue
            installed.append(sig)
        return installed

    @staticmethod
    def _remove_signal_handlers(installed: list[signal.Signals]) -> None:
        if not installed:
            return
        loop = asyncio.get_running_loop()
        for sig in installed:
            loop.remove_signal_handler(sig)
