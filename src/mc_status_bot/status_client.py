"""Client for the mcstatus.io server status API."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from mc_status_bot.config import DEFAULT_STATUS_API_BASE
from mc_status_bot.errors import ParseError, TransportError
from mc_status_bot.models import ServerStatus


def build_status_url(base_url: str, server_address: str, bedrock: bool = False) -> str:
    platform = "bedrock" if bedrock else "java"
    return f"{base_url.rstrip('/')}/{platform}/{server_address}"


class StatusClient:
    """Fetches and parses one server status per call.

    There is no caching, retry, or backoff here; callers decide whether a
    result is reused.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_STATUS_API_BASE,
        timeout_seconds: float | None = None,
        http_client: httpx.Client | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._base_url = base_url
        self._http = http_client or httpx.Client(timeout=httpx.Timeout(timeout_seconds))
        self._logger = logger or logging.getLogger("mc_status_bot.status_client")

    def fetch(self, server_address: str, bedrock: bool = False) -> ServerStatus:
        """Query the API for ``server_address`` and return the parsed status.

        Raises ``TransportError`` on network/HTTP failures and ``ParseError``
        when the body is not a status document.
        """
        self._logger.info("Getting information for server: %s", server_address)
        url = build_status_url(self._base_url, server_address, bedrock=bedrock)

        try:
            response = self._http.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise TransportError(f"Status request for {server_address} failed: {exc}") from exc

        try:
            status = ServerStatus.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise ParseError(f"Unexpected status body for {server_address}: {exc}") from exc

        self._logger.debug("status_fetched", extra={"server": server_address, "status": status.model_dump()})
        return status

    def close(self) -> None:
        self._http.close()
