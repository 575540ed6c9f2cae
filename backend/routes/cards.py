"""Card pack management + bulk card authoring endpoints."""

from fastapi import APIRouter, Depends

from party_kit import authoring
from party_kit.storage import Storage

from .deps import caller_id, get_store
from .models import BulkCards, CreatePack

router = APIRouter()


@router.post("/definitions/{definition_id}/packs", status_code=201)
async def create_pack(
    definition_id: str,
    body: CreatePack,
    user: str = Depends(caller_id),
    store: Storage = Depends(get_store),
):
    """Add an empty creator-authored pack to a definition."""
    return authoring.create_pack(store, definition_id, user, body.name, body.description)


@router.delete("/packs/{pack_id}")
async def delete_pack(
    pack_id: str,
    user: str = Depends(caller_id),
    store: Storage = Depends(get_store),
):
    """Delete a pack and its cards (the core pack cannot be deleted)."""
    authoring.delete_pack(store, pack_id, user)
    return {"ok": True}


@router.post("/cards/bulk")
async def bulk_cards(
    body: BulkCards,
    user: str = Depends(caller_id),
    store: Storage = Depends(get_store),
):
    """Delete, then create/update cards in one pack. Returns counts + the pack."""
    return authoring.bulk_update(
        store, body.pack_id, user, cards=body.cards, delete_ids=body.delete_ids
    )
