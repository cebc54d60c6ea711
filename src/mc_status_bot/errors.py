"""Error taxonomy for the status bot.

Every error raised here is fatal: components raise, the lifecycle runner
propagates, and the CLI entrypoint logs and exits.
"""


class BotError(RuntimeError):
    """Base class for all status bot failures."""


class ConfigurationError(BotError):
    """Raised when required settings are missing at startup."""


class FetchError(BotError):
    """Raised when the server status could not be retrieved."""


class TransportError(FetchError):
    """Network or HTTP-level failure talking to the status API."""


class ParseError(FetchError):
    """Status API body was not JSON or did not match the expected shape."""


class PlatformError(BotError):
    """Chat platform rejected login, command registration, or the connection."""


class SendError(BotError):
    """A reply could not be delivered to the chat platform."""
