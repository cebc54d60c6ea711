from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _ApiRecord(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _null_as_default(cls, data: Any) -> Any:
        # The API reports absent sections and lists as null at any depth.
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class ServerVersion(_ApiRecord):
    name_raw: str = ""
    name_clean: str = ""
    name_html: str = ""
    protocol: int = 0


class PlayerEntry(_ApiRecord):
    uuid: str = ""
    name_raw: str = ""
    name_clean: str = ""
    name_html: str = ""


class PlayerSummary(_ApiRecord):
    online: int = 0
    max: int = 0
    # Not guaranteed to hold ``online`` entries; the API may omit the sample.
    list: tuple[PlayerEntry, ...] = ()


class Motd(_ApiRecord):
    raw: str = ""
    clean: str = ""
    html: str = ""


class ServerStatus(_ApiRecord):
    """Parsed mcstatus.io response for a single server."""

    online: bool
    host: str
    port: int = 0
    eula_blocked: bool = False
    retrieved_at: int | None = None
    expires_at: int | None = None
    version: ServerVersion = Field(default_factory=ServerVersion)
    players: PlayerSummary = Field(default_factory=PlayerSummary)
    motd: Motd = Field(default_factory=Motd)
    icon: str | None = None
    mods: tuple[Any, ...] = ()
    software: Any = None
    plugins: tuple[Any, ...] = ()


@dataclass(frozen=True, slots=True)
class CommandDescriptor:
    name: str
    description: str


@dataclass(slots=True)
class CommandEvent:
    """One slash-command invocation; ``respond`` sends the single reply."""

    name: str
    respond: Callable[[str], Awaitable[None]]


@dataclass(slots=True)
class MessageEvent:
    """One plain chat message; ``reply`` posts into the originating channel."""

    author_id: int
    content: str
    reply: Callable[[str], Awaitable[None]]
