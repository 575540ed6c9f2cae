"""Request-scoped dependencies: storage, realtime host, caller identity.

Caller identity comes from the X-User-Id header set by whatever sits in
front of this service; there is no authentication policy here.
"""

from fastapi import Header, HTTPException, Request

from backend.config import Settings
from party_kit.realtime import RealtimeHost
from party_kit.storage import Storage


def get_store(request: Request) -> Storage:
    return request.app.state.store


def get_realtime_host(request: Request) -> RealtimeHost:
    return request.app.state.realtime_host


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def caller_id(x_user_id: str | None = Header(default=None)) -> str:
    if not x_user_id:
        raise HTTPException(401, "Unauthorized")
    return x_user_id


def optional_caller_id(x_user_id: str | None = Header(default=None)) -> str | None:
    return x_user_id or None


def caller_name(x_user_name: str | None = Header(default=None)) -> str | None:
    return x_user_name or None
