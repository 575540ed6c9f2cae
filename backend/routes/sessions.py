"""Game session endpoints: create a room, look one up by code, list open rooms."""

from fastapi import APIRouter, Depends, Query

from backend.config import Settings
from party_kit import sessions
from party_kit.realtime import RealtimeHost
from party_kit.sessions import SessionInput
from party_kit.storage import Storage

from .deps import get_realtime_host, get_settings, get_store, optional_caller_id

router = APIRouter()


@router.post("/sessions", status_code=201)
async def create_session(
    body: SessionInput,
    user: str | None = Depends(optional_caller_id),
    store: Storage = Depends(get_store),
    host: RealtimeHost = Depends(get_realtime_host),
    settings: Settings = Depends(get_settings),
):
    """Create a room for a custom game or a stock template and hand it off."""
    session = await sessions.create_session(
        store, host, body, host_id=user, handoff_timeout=settings.handoff_timeout
    )
    return {"success": True, "session": sessions.created_view(session)}


@router.get("/sessions")
async def list_sessions(
    template: str | None = None,
    limit: int = Query(default=20, ge=1, le=100),
    store: Storage = Depends(get_store),
):
    """Public rooms that are waiting or in progress."""
    return {"sessions": sessions.list_open_sessions(store, template_slug=template, limit=limit)}


@router.get("/sessions/{room_code}")
async def get_session(room_code: str, store: Storage = Depends(get_store)):
    """Room info for a player-typed join code (case and spaces ignored)."""
    return {"session": sessions.get_session_info(store, room_code)}
