"""Runtime configuration for the MC status bot."""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from mc_status_bot.errors import ConfigurationError

DEFAULT_STATUS_API_BASE = "https://api.mcstatus.io/v2/status"


class FetchMode(str, Enum):
    """When the server status is retrieved."""

    ONCE = "once"
    PER_COMMAND = "per_command"


class CommandSet(str, Enum):
    """Which slash-command descriptors are published."""

    FULL = "full"
    BASIC = "basic"


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(
        env_prefix="MC_STATUS_",
        env_file=".env",
        env_ignore_empty=True,
        populate_by_name=True,
        extra="ignore",
    )

    discord_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("DISCORD_KEY", "MC_STATUS_DISCORD_KEY"),
        description="Bot token used to log in to Discord.",
    )
    discord_app_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("DISCORD_APP_ID", "MC_STATUS_DISCORD_APP_ID"),
    )
    discord_guild_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices("DISCORD_GUILD_ID", "MC_STATUS_DISCORD_GUILD_ID"),
        description="Guild to register commands in; unset registers them globally.",
    )
    minecraft_server: str | None = Field(
        default=None,
        validation_alias=AliasChoices("MINECRAFT_SERVER", "MC_STATUS_MINECRAFT_SERVER"),
    )
    minecraft_bedrock: bool = Field(
        default=False,
        validation_alias=AliasChoices("MINECRAFT_BEDROCK", "MC_STATUS_MINECRAFT_BEDROCK"),
    )

    status_api_base: str = Field(
        default=DEFAULT_STATUS_API_BASE,
        validation_alias=AliasChoices("MC_STATUS_API_BASE", "MC_STATUS_STATUS_API_BASE"),
    )
    status_api_timeout_seconds: float | None = Field(
        default=None,
        validation_alias=AliasChoices("MC_STATUS_API_TIMEOUT", "MC_STATUS_STATUS_API_TIMEOUT_SECONDS"),
        description="Request timeout for the status API; unset waits indefinitely.",
    )
    fetch_mode: FetchMode = FetchMode.ONCE
    command_set: CommandSet = CommandSet.FULL
    trigger_phrase: str = "hello"
    trigger_reply: str = "world"
    community_name: str = Field(
        default="TR",
        validation_alias=AliasChoices("MC_STATUS_COMMUNITY", "MC_STATUS_COMMUNITY_NAME"),
    )
    enable_message_content: bool = Field(
        default=False,
        validation_alias=AliasChoices("MC_STATUS_MESSAGE_CONTENT", "MC_STATUS_ENABLE_MESSAGE_CONTENT"),
        description="Request the privileged message-content intent for the trigger phrase.",
    )
    log_level: str = "INFO"

    def require(self, *fields: str) -> None:
        """Raise ``ConfigurationError`` naming every unset field in ``fields``."""
        missing = [name for name in fields if getattr(self, name) in (None, "")]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")

    def public_view(self) -> dict:
        return self.model_dump(mode="json", exclude={"discord_key"})


def load_settings() -> Settings:
    """Build ``Settings`` from the environment, reporting bad values as ``ConfigurationError``."""
    try:
        return Settings()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings: {exc}") from exc
