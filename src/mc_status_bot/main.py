"""CLI startup entrypoint for the MC status bot."""

from __future__ import annotations

import asyncio
import logging

import typer
from rich import print

from mc_status_bot.adapters import DiscordGateway, build_intents
from mc_status_bot.config import Settings, load_settings
from mc_status_bot.errors import BotError
from mc_status_bot.formatting import format_players, format_presence, format_status, format_version
from mc_status_bot.runner import LifecycleRunner
from mc_status_bot.status_client import StatusClient
from mc_status_bot.telemetry.logging import configure_logging

app = typer.Typer(help="Discord bot answering Minecraft server status commands")

logger = logging.getLogger("mc_status_bot.main")


def _build_status_client(settings: Settings) -> StatusClient:
    return StatusClient(base_url=settings.status_api_base, timeout_seconds=settings.status_api_timeout_seconds)


def _build_runner(settings: Settings) -> tuple[LifecycleRunner, StatusClient]:
    settings.require("discord_key", "discord_app_id", "minecraft_server")
    gateway = DiscordGateway(
        settings.discord_key,
        intents=build_intents(message_content=settings.enable_message_content),
    )
    status_client = _build_status_client(settings)
    runner = LifecycleRunner(gateway=gateway, status_client=status_client, settings=settings)
    return runner, status_client


def _fail(exc: BotError) -> None:
    logger.error("fatal_error", exc_info=exc)
    print({"error": f"{type(exc).__name__}: {exc}"})
    raise typer.Exit(code=1)


@app.command()
def run() -> None:
    """Register commands, connect to Discord, and serve until SIGINT/SIGTERM."""
    try:
        settings = load_settings()
        configure_logging(settings.log_level)
        runner, status_client = _build_runner(settings)
    except BotError as exc:
        _fail(exc)

    try:
        asyncio.run(runner.run())
    except BotError as exc:
        _fail(exc)
    finally:
        status_client.close()


@app.command()
def check(
    server: str = typer.Option(None, help="Server address; defaults to MINECRAFT_SERVER"),
    bedrock: bool = typer.Option(None, help="Query the Bedrock edition endpoint"),
) -> None:
    """Fetch the status once and print every command reply without connecting to Discord."""
    try:
        settings = load_settings()
    except BotError as exc:
        _fail(exc)
    configure_logging(settings.log_level)
    address = server or settings.minecraft_server
    if not address:
        raise typer.BadParameter("Provide --server or set MINECRAFT_SERVER")

    status_client = _build_status_client(settings)
    try:
        status = status_client.fetch(address, settings.minecraft_bedrock if bedrock is None else bedrock)
    except BotError as exc:
        _fail(exc)
    finally:
        status_client.close()

    print(
        {
            "status": format_status(status),
            "version": format_version(status),
            "players": format_players(status),
            "presence": format_presence(status, settings.community_name),
        }
    )


@app.command("settings")
def show_settings() -> None:
    """Show runtime configuration without the bot token."""
    try:
        settings = load_settings()
    except BotError as exc:
        _fail(exc)
    print(settings.public_view())


if __name__ == "__main__":
    app()
