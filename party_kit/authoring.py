"""Card authoring: bulk create/update/delete of cards inside a creator's pack.

Every operation is scoped to a (pack, caller) pair. The pack is resolved to
its game definition and the definition's creator must be the caller.

Within one bulk call deletes are applied before upserts, and the pack is
written once at the end, so a failed call leaves the pack untouched. Ids in
`delete_ids` that belong to other packs are ignored.

Prompt cards get their `pick` filled in from the blank count when it is
missing or below one. This happens here, at write time only; a stored pick
is never recomputed.
"""

from __future__ import annotations

import logging
from uuid import uuid4

from pydantic import BaseModel, Field

from party_kit.blanks import default_pick
from party_kit.definitions import get_owned_definition
from party_kit.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from party_kit.models import Card, CardPack, CardProperties, CardType, WireModel
from party_kit.storage import Storage

logger = logging.getLogger(__name__)


class CardInput(WireModel):
    """One card in a bulk request. With `id` it updates, without it creates."""

    id: str | None = None
    card_type: CardType
    properties: CardProperties
    sort_order: int | None = None


class BulkCounts(BaseModel):
    created: int = 0
    updated: int = 0
    deleted: int = 0


class BulkResult(BaseModel):
    results: BulkCounts = Field(default_factory=BulkCounts)
    pack: CardPack


def check_pack_owner(store: Storage, pack_id: str, caller_id: str) -> CardPack:
    """Return the pack if `caller_id` created its game; raise otherwise."""
    pack = store.get_pack(pack_id)
    if pack is None:
        raise NotFoundError("Pack not found")
    definition = store.get_definition(pack.game_id)
    if definition is None:
        raise NotFoundError("Pack not found")
    if definition.creator_id != caller_id:
        raise ForbiddenError("Forbidden")
    return pack


def _prepared_properties(item: CardInput) -> CardProperties:
    properties = item.properties.model_copy(deep=True)
    if not properties.text.strip():
        raise ValidationError("Card text is required")
    if item.card_type == "prompt":
        properties.pick = default_pick(properties.text, properties.pick)
    return properties


def bulk_update(
    store: Storage,
    pack_id: str,
    caller_id: str,
    cards: list[CardInput] | None = None,
    delete_ids: list[str] | None = None,
) -> BulkResult:
    pack = check_pack_owner(store, pack_id, caller_id)
    counts = BulkCounts()

    # Deletes first so a caller can replace a card in one request.
    if delete_ids:
        doomed = set(delete_ids)
        kept = [c for c in pack.cards if c.id not in doomed]
        counts.deleted = len(pack.cards) - len(kept)
        pack.cards = kept

    positions = {card.id: i for i, card in enumerate(pack.cards)}
    for item in cards or []:
        properties = _prepared_properties(item)
        if item.id:
            if item.id not in positions:
                raise NotFoundError(f"Card {item.id} not found in this pack")
            existing = pack.cards[positions[item.id]]
            pack.cards[positions[item.id]] = Card(
                id=existing.id,
                card_type=item.card_type,
                properties=properties,
                sort_order=existing.sort_order if item.sort_order is None else item.sort_order,
            )
            counts.updated += 1
        else:
            card = Card(
                id=uuid4().hex,
                card_type=item.card_type,
                properties=properties,
                sort_order=item.sort_order or 0,
            )
            positions[card.id] = len(pack.cards)
            pack.cards.append(card)
            counts.created += 1

    store.save_pack(pack)
    logger.debug(
        "bulk update pack=%s created=%d updated=%d deleted=%d",
        pack_id, counts.created, counts.updated, counts.deleted,
    )
    return BulkResult(
        results=counts,
        pack=pack.model_copy(update={"cards": pack.sorted_cards()}),
    )


def create_pack(
    store: Storage, game_id: str, caller_id: str, name: str, description: str = ""
) -> CardPack:
    """Add an empty creator-authored (unofficial) pack to a definition."""
    get_owned_definition(store, game_id, caller_id)
    if not name or not name.strip():
        raise ValidationError("Pack name is required")
    pack = CardPack(
        id=uuid4().hex,
        game_id=game_id,
        name=name.strip(),
        description=description,
    )
    store.save_pack(pack)
    logger.info("pack created id=%s game=%s", pack.id, game_id)
    return pack


def delete_pack(store: Storage, pack_id: str, caller_id: str) -> None:
    """Delete a pack and its cards. The core pack is protected."""
    pack = check_pack_owner(store, pack_id, caller_id)
    if pack.is_core:
        raise ConflictError("The core pack cannot be deleted")
    store.delete_pack(pack_id)
    logger.info("pack deleted id=%s game=%s", pack_id, pack.game_id)
