"""Realtime host client: hands a new room's config to the party server.

The session bootstrapper injects a host matching the protocol:

    async def init_room(self, room_code: str, payload: dict) -> None: ...

Two implementations are provided:

    HttpRealtimeHost  POST {base_url}/party/{roomCode} with a JSON body
                        {gameConfig, templateSlug, settings}. Raises
                        HandoffError on any connection or protocol failure.
    NullRealtimeHost  logs and does nothing. Used when no party server is
                        configured; the room is then initialised lazily on
                        first join.

The handoff may happen zero or more times for the same room with the same
payload; the party server treats it as idempotent.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol: every realtime host implementation must match this signature
# ---------------------------------------------------------------------------

class RealtimeHost(Protocol):
    async def init_room(self, room_code: str, payload: dict[str, Any]) -> None: ...


# ---------------------------------------------------------------------------
# HttpRealtimeHost: talks to a real party server
# ---------------------------------------------------------------------------

class HttpRealtimeHost:
    """Async HTTP client for the party server.

    Args:
        base_url: Base URL of the party server, e.g. "http://localhost:1999".
        timeout:  HTTP timeout in seconds. Session creation never waits
                  longer than this for the handoff. Defaults to 5.
    """

    def __init__(self, base_url: str, timeout: float = 5.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def room_url(self, room_code: str) -> str:
        return f"{self._base_url}/party/{room_code}"

    async def init_room(self, room_code: str, payload: dict[str, Any]) -> None:
        url = self.room_url(room_code)
        logger.debug("realtime handoff url=%s", url)
        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(
                    url, json=payload, headers={"Content-Type": "application/json"}
                )
                resp.raise_for_status()
        except httpx.ConnectError as e:
            raise HandoffError(f"Cannot connect to party server at {self._base_url}") from e
        except httpx.HTTPStatusError as e:
            raise HandoffError(
                f"Party server returned HTTP {e.response.status_code}"
            ) from e
        except httpx.TimeoutException as e:
            raise HandoffError(f"Party server timed out after {self._timeout}s") from e
        except httpx.HTTPError as e:
            raise HandoffError(f"Handoff to {url} failed: {e}") from e


# ---------------------------------------------------------------------------
# NullRealtimeHost: no party server configured
# ---------------------------------------------------------------------------

class NullRealtimeHost:
    """Skips the handoff. Rooms initialise themselves on first join."""

    async def init_room(self, room_code: str, payload: dict[str, Any]) -> None:
        logger.debug("NullRealtimeHost skipping handoff for %s", room_code)


# ---------------------------------------------------------------------------
# HandoffError: raised by HttpRealtimeHost for all connection and protocol failures
# ---------------------------------------------------------------------------

class HandoffError(RuntimeError):
    """Raised when the party server cannot be reached or rejects the room."""
