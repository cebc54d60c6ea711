from __future__ import annotations

import asyncio
import types

import discord
import pytest

from mc_status_bot.adapters.discord_gateway import DiscordGateway, build_intents, command_payload
from mc_status_bot.commands import FULL_COMMANDS
from mc_status_bot.dispatcher import CommandDispatcher, LiveStatusSource
from mc_status_bot.errors import PlatformError, TransportError


class FakeHttp:
    def __init__(self, reject: bool = False) -> None:
        self.reject = reject
        self.calls: list[tuple] = []

    async def bulk_upsert_global_commands(self, application_id, payload):
        self.calls.append(("global", application_id, payload))
        return self._respond(payload)

    async def bulk_upsert_guild_commands(self, application_id, guild_id, payload):
        self.calls.append(("guild", application_id, guild_id, payload))
        return self._respond(payload)

    def _respond(self, payload):
        if self.reject:
            raise discord.HTTPException(types.SimpleNamespace(status=403, reason="Forbidden"), "Missing Access")
        return [dict(item, id=str(index)) for index, item in enumerate(payload)]


class RecordingDispatcher:
    def __init__(self) -> None:
        self.commands = []
        self.messages = []

    async def on_command(self, event) -> None:
        self.commands.append(event)
        await event.respond("reply")

    async def on_message(self, event) -> None:
        self.messages.append(event)
        await event.reply("world")


def _gateway(http: FakeHttp | None = None) -> DiscordGateway:
    client = types.SimpleNamespace(http=http or FakeHttp(), user=types.SimpleNamespace(id=1000))
    return DiscordGateway("token", client=client)


def test_intents_exclude_privileged_by_default() -> None:
    intents = build_intents()

    assert intents.guilds and intents.guild_messages
    assert not intents.members and not intents.presences and not intents.message_content
    assert build_intents(message_content=True).message_content


def test_command_payload_declares_slash_commands() -> None:
    payload = command_payload(FULL_COMMANDS)

    assert [item["name"] for item in payload] == ["status", "version", "players"]
    assert all(item["type"] == 1 and item["description"] for item in payload)


def test_bulk_overwrite_targets_guild_or_global_scope() -> None:
    http = FakeHttp()
    gateway = _gateway(http)

    guild_names = asyncio.run(gateway.bulk_overwrite_commands(7, 99, FULL_COMMANDS))
    global_names = asyncio.run(gateway.bulk_overwrite_commands(7, None, FULL_COMMANDS[:1]))

    assert guild_names == ["status", "version", "players"]
    assert global_names == ["status"]
    assert [call[0] for call in http.calls] == ["guild", "global"]
    assert http.calls[0][1:3] == (7, 99)


def test_bulk_overwrite_rejection_raises_platform_error() -> None:
    with pytest.raises(PlatformError, match="Command registration rejected"):
        asyncio.run(_gateway(FakeHttp(reject=True)).bulk_overwrite_commands(7, None, FULL_COMMANDS))


def test_interaction_is_forwarded_as_command_event() -> None:
    gateway = _gateway()
    dispatcher = RecordingDispatcher()
    gateway.attach(dispatcher)
    sent: list[str] = []

    async def send_message(content: str) -> None:
        sent.append(content)

    interaction = types.SimpleNamespace(
        type=discord.InteractionType.application_command,
        data={"name": "status", "type": 1},
        response=types.SimpleNamespace(send_message=send_message),
    )
    asyncio.run(gateway.handle_interaction(interaction))

    assert [event.name for event in dispatcher.commands] == ["status"]
    assert sent == ["reply"]


def test_non_command_interactions_are_ignored() -> None:
    gateway = _gateway()
    dispatcher = RecordingDispatcher()
    gateway.attach(dispatcher)

    interaction = types.SimpleNamespace(type=discord.InteractionType.component, data={"name": "status"})
    asyncio.run(gateway.handle_interaction(interaction))

    assert dispatcher.commands == []


def test_message_is_forwarded_with_author_and_channel_reply() -> None:
    gateway = _gateway()
    dispatcher = RecordingDispatcher()
    gateway.attach(dispatcher)
    posted: list[str] = []

    async def channel_send(content: str) -> None:
        posted.append(content)

    message = types.SimpleNamespace(
        author=types.SimpleNamespace(id=42),
        content="hello",
        channel=types.SimpleNamespace(send=channel_send),
    )
    asyncio.run(gateway.handle_message(message))

    assert [(event.author_id, event.content) for event in dispatcher.messages] == [(42, "hello")]
    assert posted == ["world"]
    assert gateway.self_id() == 1000


def test_handler_failure_is_reported_to_runner() -> None:
    gateway = _gateway()
    failures: list[BaseException] = []
    gateway.attach(RecordingDispatcher(), failures.append)
    error = RuntimeError("boom")

    gateway.report_failure("on_interaction", error)

    assert failures == [error]


class _UnreachableStatusClient:
    def fetch(self, server_address: str, bedrock: bool = False):
        raise TransportError("connection refused")


def test_failed_live_fetch_in_command_handler_sends_nothing_and_is_fatal() -> None:
    failures: list[BaseException] = []
    sent: list[str] = []

    async def send_message(content: str) -> None:
        sent.append(content)

    async def _run() -> None:
        gateway = DiscordGateway("token")
        dispatcher = CommandDispatcher(
            status_source=LiveStatusSource(_UnreachableStatusClient(), "play.example.com"),
            self_id=gateway.self_id,
        )
        gateway.attach(dispatcher, failures.append)
        interaction = types.SimpleNamespace(
            type=discord.InteractionType.application_command,
            data={"name": "status", "type": 1},
            response=types.SimpleNamespace(send_message=send_message),
        )
        client = gateway.client
        await client._run_event(client.on_interaction, "on_interaction", interaction)

    asyncio.run(_run())

    assert sent == []
    assert len(failures) == 1
    assert isinstance(failures[0], TransportError)
