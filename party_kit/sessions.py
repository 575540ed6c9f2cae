"""Session bootstrap: allocate a room code, freeze the config, hand off.

create_session():
  1. Validate the input: exactly one of game_definition_id / template_slug,
     and a non-blank host nickname.
  2. Build the frozen config snapshot. A custom game uses its definition
     (archived → ForbiddenError, missing → NotFoundError); a stock game
     uses a copy of the template's base config.
  3. Allocate a room code against the session store and persist the
     session. If the insert loses a race for the code (RoomCodeTaken), the
     whole create is retried with a fresh code.
  4. Hand the room to the realtime host. Failures and timeouts are logged
     and swallowed: the stored session is the source of truth and the room
     can initialise itself on first join.
"""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any
from uuid import uuid4

from pydantic import Field

from party_kit import room_codes
from party_kit.compiler import ensure_playable, snapshot_config
from party_kit.errors import (
    ConflictError,
    GoneError,
    NotFoundError,
    RoomCodeTaken,
    ValidationError,
)
from party_kit.models import GameSession, WireModel
from party_kit.realtime import HandoffError, RealtimeHost
from party_kit.storage import Storage, now_iso

logger = logging.getLogger(__name__)

MAX_CREATE_ATTEMPTS = 5
OPEN_STATUSES = ("WAITING", "IN_PROGRESS")
ENDED_STATUSES = ("COMPLETED", "ABANDONED")


class SessionInput(WireModel):
    game_definition_id: str | None = None
    template_slug: str | None = None
    host_nickname: str = ""
    max_players: int = Field(default=16, ge=1)
    is_private: bool = False
    password: str | None = None
    allow_spectators: bool = True
    turn_time_limit: int | None = Field(default=None, ge=1)


def _validate(data: SessionInput) -> None:
    if bool(data.game_definition_id) == bool(data.template_slug):
        raise ValidationError("Provide exactly one of gameDefinitionId or templateSlug")
    if not data.host_nickname.strip():
        raise ValidationError("Host nickname is required")


def _frozen_config(store: Storage, data: SessionInput) -> dict[str, Any]:
    if data.game_definition_id:
        definition = store.get_definition(data.game_definition_id)
        if definition is None:
            raise NotFoundError("Game definition not found")
        ensure_playable(definition)
        template = store.get_template_by_id(definition.template_id)
        if template is None:
            raise NotFoundError("Template not found")
        return snapshot_config(definition, template, store.list_packs(definition.id))

    template = store.get_template(data.template_slug)
    if template is None:
        raise NotFoundError("Template not found")
    return copy.deepcopy(template.base_config)


def handoff_payload(session: GameSession) -> dict[str, Any]:
    return {
        "gameConfig": session.game_config,
        "templateSlug": session.template_slug,
        "settings": {
            "maxPlayers": session.max_players,
            "turnTimeLimit": session.turn_time_limit,
            "allowSpectators": session.allow_spectators,
            "isPrivate": session.is_private,
        },
    }


async def _handoff(host: RealtimeHost, session: GameSession, timeout: float | None) -> None:
    try:
        await asyncio.wait_for(
            host.init_room(session.room_code, handoff_payload(session)), timeout
        )
    except HandoffError as e:
        logger.warning("realtime handoff for %s failed: %s", session.room_code, e)
    except asyncio.TimeoutError:
        logger.warning("realtime handoff for %s timed out after %ss", session.room_code, timeout)
    except Exception:
        # The session is already stored; a host failure must not fail the create.
        logger.warning("realtime handoff for %s crashed", session.room_code, exc_info=True)


async def create_session(
    store: Storage,
    host: RealtimeHost,
    data: SessionInput,
    host_id: str | None = None,
    handoff_timeout: float | None = None,
) -> GameSession:
    _validate(data)
    game_config = _frozen_config(store, data)

    async def code_exists(code: str) -> bool:
        return store.room_code_exists(code)

    session: GameSession | None = None
    for attempt in range(1, MAX_CREATE_ATTEMPTS + 1):
        candidate = GameSession(
            id=uuid4().hex,
            room_code=await room_codes.allocate(code_exists),
            game_definition_id=data.game_definition_id,
            template_slug=data.template_slug,
            game_config=game_config,
            host_id=host_id,
            host_nickname=data.host_nickname.strip(),
            max_players=data.max_players,
            is_private=data.is_private,
            password=data.password if data.is_private else None,
            allow_spectators=data.allow_spectators,
            turn_time_limit=data.turn_time_limit,
            created_at=now_iso(),
        )
        try:
            session = store.create_session(candidate)
            break
        except RoomCodeTaken:
            logger.warning(
                "room code %s taken on insert (attempt %d), allocating again",
                candidate.room_code, attempt,
            )
    if session is None:
        raise ConflictError("Could not create a session with a unique room code")

    logger.info(
        "session created code=%s definition=%s template=%s host=%s",
        session.room_code, session.game_definition_id, session.template_slug,
        session.host_nickname,
    )
    await _handoff(host, session, handoff_timeout)
    return session


def created_view(session: GameSession) -> dict[str, Any]:
    return {
        "id": session.id,
        "roomCode": session.room_code,
        "hostNickname": session.host_nickname,
        "maxPlayers": session.max_players,
        "status": session.status,
        "joinUrl": f"/room/{session.room_code}",
        "hostUrl": f"/game-session/{session.room_code}",
    }


def _public_view(session: GameSession) -> dict[str, Any]:
    return session.model_dump(
        by_alias=True, exclude={"password", "host_id", "game_config"}
    )


def get_session_info(store: Storage, raw_code: str) -> dict[str, Any]:
    """Look up a room by a player-typed code."""
    room_code = room_codes.normalize(raw_code)
    if not room_codes.is_valid(room_code):
        raise ValidationError("Invalid room code format")
    session = store.get_session(room_code)
    if session is None:
        raise NotFoundError("Room not found")
    if session.status in ENDED_STATUSES:
        raise GoneError("This game has ended")

    is_full = session.player_count >= session.max_players
    view = _public_view(session)
    view.update({
        "isFull": is_full,
        "canJoin": not is_full and session.status == "WAITING",
        "canSpectate": session.allow_spectators,
        "requiresPassword": session.is_private,
    })
    return view


def list_open_sessions(
    store: Storage, template_slug: str | None = None, limit: int = 20
) -> list[dict[str, Any]]:
    """Public rooms still waiting or playing, newest first."""
    sessions = [
        s for s in store.list_sessions()
        if not s.is_private
        and s.status in OPEN_STATUSES
        and (template_slug is None or s.template_slug == template_slug)
    ]
    sessions.sort(key=lambda s: s.created_at, reverse=True)
    results = []
    for session in sessions[:limit]:
        view = _public_view(session)
        view["joinUrl"] = f"/room/{session.room_code}"
        results.append(view)
    return results
