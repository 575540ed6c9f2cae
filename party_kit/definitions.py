"""Game definition lifecycle: create (with its core pack), update, delete.

A definition starts as DRAFT. Allowed status changes:

    DRAFT     → TESTING, PUBLISHED
    TESTING   → DRAFT, PUBLISHED, ARCHIVED
    PUBLISHED → TESTING, ARCHIVED
    ARCHIVED  → (none)

`game_config` is the creator's override layer only; the template's
`base_config` is merged under it at compile time.
"""

from __future__ import annotations

import logging
import secrets
from typing import Any
from uuid import uuid4

from party_kit.errors import ForbiddenError, NotFoundError, ValidationError
from party_kit.models import CardPack, GameDefinition, GameStatus
from party_kit.storage import Storage, now_iso, slugify

logger = logging.getLogger(__name__)

CORE_PACK_NAME = "Core Pack"
DEFAULT_MIN_PLAYERS = 3
DEFAULT_MAX_PLAYERS = 10

STATUS_TRANSITIONS: dict[str, set[str]] = {
    "DRAFT": {"TESTING", "PUBLISHED"},
    "TESTING": {"DRAFT", "PUBLISHED", "ARCHIVED"},
    "PUBLISHED": {"TESTING", "ARCHIVED"},
    "ARCHIVED": set(),
}

UPDATABLE_FIELDS = {
    "name", "description", "min_players", "max_players", "status", "game_config",
}


def _unique_slug(store: Storage, creator_id: str, name: str) -> str:
    base_slug = slugify(name)
    slug = base_slug
    counter = 1
    while store.slug_taken(creator_id, slug):
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug


def _check_player_bounds(min_players: int, max_players: int) -> None:
    if min_players < 1:
        raise ValidationError("minPlayers must be at least 1")
    if max_players < min_players:
        raise ValidationError("maxPlayers must not be lower than minPlayers")


def create_definition(
    store: Storage,
    creator_id: str,
    name: str,
    template_id: str,
    description: str | None = None,
    creator_name: str | None = None,
) -> tuple[GameDefinition, CardPack]:
    """Create a DRAFT definition and its core pack. Returns both."""
    if not name or not name.strip():
        raise ValidationError("Name is required")
    template = store.get_template_by_id(template_id)
    if template is None:
        raise NotFoundError("Template not found")

    base = template.base_config
    now = now_iso()
    definition = GameDefinition(
        id=uuid4().hex,
        creator_id=creator_id,
        creator_name=creator_name,
        template_id=template.id,
        name=name.strip(),
        slug=_unique_slug(store, creator_id, name),
        description=description or None,
        min_players=base.get("minPlayers") or DEFAULT_MIN_PLAYERS,
        max_players=base.get("maxPlayers") or DEFAULT_MAX_PLAYERS,
        share_token=secrets.token_urlsafe(16),
        created_at=now,
        updated_at=now,
    )
    store.create_definition(definition)

    core = CardPack(
        id=uuid4().hex,
        game_id=definition.id,
        name=CORE_PACK_NAME,
        is_core=True,
    )
    store.save_pack(core)
    logger.info(
        "definition created id=%s slug=%s creator=%s template=%s",
        definition.id, definition.slug, creator_id, template.slug,
    )
    return definition, core


def get_owned_definition(store: Storage, definition_id: str, caller_id: str) -> GameDefinition:
    definition = store.get_definition(definition_id)
    if definition is None:
        raise NotFoundError("Game not found")
    if definition.creator_id != caller_id:
        raise ForbiddenError("Forbidden")
    return definition


def get_readable_definition(
    store: Storage, definition_id: str, caller_id: str | None
) -> GameDefinition:
    """Published definitions are readable by anyone; others by their creator only."""
    definition = store.get_definition(definition_id)
    if definition is None:
        raise NotFoundError("Game not found")
    if definition.status != "PUBLISHED" and definition.creator_id != caller_id:
        raise ForbiddenError("Forbidden")
    return definition


def list_definitions(
    store: Storage, creator_id: str, status: GameStatus | None = None
) -> list[dict[str, Any]]:
    """Creator's definitions with pack/card counts, most recently updated first."""
    summaries = []
    for definition in store.list_definitions(creator_id=creator_id):
        if status is not None and definition.status != status:
            continue
        packs = store.list_packs(definition.id)
        summary = definition.model_dump(by_alias=True)
        summary["packCount"] = len(packs)
        summary["cardCount"] = sum(len(p.cards) for p in packs)
        summaries.append(summary)
    summaries.sort(key=lambda s: s["updatedAt"], reverse=True)
    return summaries


def check_transition(current: str, target: str) -> None:
    if target == current:
        return
    if target not in STATUS_TRANSITIONS:
        raise ValidationError(f"Unknown status '{target}'")
    if target not in STATUS_TRANSITIONS[current]:
        raise ValidationError(f"Cannot change status from {current} to {target}")


def update_definition(
    store: Storage, definition_id: str, caller_id: str, fields: dict[str, Any]
) -> GameDefinition:
    definition = get_owned_definition(store, definition_id, caller_id)

    changes = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
    if "name" in changes and not (changes["name"] or "").strip():
        raise ValidationError("Name must not be empty")
    if "status" in changes:
        check_transition(definition.status, changes["status"])
        if changes["status"] == "PUBLISHED" and definition.published_at is None:
            changes["published_at"] = now_iso()
    _check_player_bounds(
        changes.get("min_players", definition.min_players),
        changes.get("max_players", definition.max_players),
    )

    updated = GameDefinition.model_validate(
        {**definition.model_dump(), **changes, "updated_at": now_iso()}
    )
    store.save_definition(updated)
    if updated.status != definition.status:
        logger.info(
            "definition %s status %s -> %s", definition_id, definition.status, updated.status
        )
    return updated


def delete_definition(store: Storage, definition_id: str, caller_id: str) -> None:
    get_owned_definition(store, definition_id, caller_id)
    store.delete_definition(definition_id)
    logger.info("definition deleted id=%s", definition_id)
