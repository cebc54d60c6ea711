"""Chat reply and presence text for server status snapshots."""

from __future__ import annotations

from mc_status_bot.models import ServerStatus

ONLINE_INDICATOR = ("online", ":green_circle:")
OFFLINE_INDICATOR = ("offline", ":x:")


def _header(status: ServerStatus) -> str:
    return f"## {status.host}"


def format_status(status: ServerStatus) -> str:
    label, emoji = ONLINE_INDICATOR if status.online else OFFLINE_INDICATOR
    return "\n".join(
        [
            _header(status),
            f"Server Status: {label} {emoji}",
            f"Players Online: {status.players.online} :tools:",
            f"Maximum Players: {status.players.max} :chart_with_upwards_trend:",
        ]
    )


def format_version(status: ServerStatus) -> str:
    return f"{_header(status)}\nVersion: {status.version.name_clean} :floppy_disk:"


def format_players(status: ServerStatus) -> str:
    # Driven by the sampled list only; players.online may be larger.
    lines = [_header(status), "Players Online:"]
    lines.extend(f"{player.name_clean} :green_square:" for player in status.players.list)
    return "\n".join(lines) + "\n"


def format_presence(status: ServerStatus | None, community_name: str) -> str:
    if status is None:
        return "Minecraft"
    return f"Minecraft with {status.players.online} {community_name} Minecrafters"
