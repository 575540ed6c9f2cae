"""Tests for party_kit.realtime: HttpRealtimeHost and NullRealtimeHost."""

import pytest
import httpx
from unittest.mock import AsyncMock, MagicMock, patch

from party_kit.realtime import HandoffError, HttpRealtimeHost, NullRealtimeHost


PAYLOAD = {
    "gameConfig": {"decks": {"prompt": {}}},
    "templateSlug": None,
    "settings": {"maxPlayers": 8, "turnTimeLimit": None,
                 "allowSpectators": True, "isPrivate": False},
}


def _mock_response(status: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.raise_for_status = MagicMock(
        side_effect=None if status < 400 else httpx.HTTPStatusError(
            "", request=MagicMock(), response=resp
        )
    )
    return resp


class TestNullRealtimeHost:
    async def test_does_nothing(self) -> None:
        assert await NullRealtimeHost().init_room("ABCDEF", PAYLOAD) is None


class TestHttpRealtimeHost:
    @pytest.fixture
    def host(self) -> HttpRealtimeHost:
        return HttpRealtimeHost(base_url="http://localhost:1999/")

    def test_room_url_strips_trailing_slash(self, host: HttpRealtimeHost) -> None:
        assert host.room_url("ABCDEF") == "http://localhost:1999/party/ABCDEF"

    async def test_posts_payload_to_room_url(self, host: HttpRealtimeHost) -> None:
        mock_post = AsyncMock(return_value=_mock_response())
        with patch("httpx.AsyncClient.post", mock_post):
            await host.init_room("ABCDEF", PAYLOAD)
        assert mock_post.call_args[0][0] == "http://localhost:1999/party/ABCDEF"
        assert mock_post.call_args.kwargs["json"] == PAYLOAD
        assert mock_post.call_args.kwargs["headers"]["Content-Type"] == "application/json"

    async def test_http_error_raises_handoff_error(self, host: HttpRealtimeHost) -> None:
        mock_post = AsyncMock(return_value=_mock_response(500))
        with patch("httpx.AsyncClient.post", mock_post):
            with pytest.raises(HandoffError, match="500"):
                await host.init_room("ABCDEF", PAYLOAD)

    async def test_connect_error_raises_handoff_error(self, host: HttpRealtimeHost) -> None:
        mock_post = AsyncMock(side_effect=httpx.ConnectError("refused"))
        with patch("httpx.AsyncClient.post", mock_post):
            with pytest.raises(HandoffError, match="Cannot connect"):
                await host.init_room("ABCDEF", PAYLOAD)

    async def test_read_error_raises_handoff_error(self, host: HttpRealtimeHost) -> None:
        mock_post = AsyncMock(side_effect=httpx.ReadError("connection reset"))
        with patch("httpx.AsyncClient.post", mock_post):
            with pytest.raises(HandoffError):
                await host.init_room("ABCDEF", PAYLOAD)

    async def test_url_without_scheme_raises_handoff_error(self) -> None:
        host = HttpRealtimeHost(base_url="localhost:1999")
        with pytest.raises(HandoffError):
            await host.init_room("ABCDEF", PAYLOAD)

    async def test_timeout_raises_handoff_error(self, host: HttpRealtimeHost) -> None:
        mock_post = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        with patch("httpx.AsyncClient.post", mock_post):
            with pytest.raises(HandoffError, match="timed out"):
                await host.init_room("ABCDEF", PAYLOAD)
