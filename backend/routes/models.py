"""Pydantic request models for API endpoints."""

from typing import Any

from pydantic import Field

from party_kit.authoring import CardInput
from party_kit.models import GameStatus, WireModel


class CreateDefinition(WireModel):
    name: str
    template_id: str
    description: str | None = None


class UpdateDefinition(WireModel):
    name: str | None = None
    description: str | None = None
    min_players: int | None = None
    max_players: int | None = None
    status: GameStatus | None = None
    game_config: dict[str, Any] | None = None


class CreatePack(WireModel):
    name: str
    description: str = ""


class BulkCards(WireModel):
    pack_id: str
    cards: list[CardInput] | None = None
    delete_ids: list[str] | None = Field(default=None)
