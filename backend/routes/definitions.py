"""Game definition CRUD + compiled preview endpoints."""

from fastapi import APIRouter, Depends

from party_kit import definitions
from party_kit.models import GameStatus
from party_kit.play import compile_for
from party_kit.storage import Storage

from .deps import caller_id, caller_name, get_store, optional_caller_id
from .models import CreateDefinition, UpdateDefinition

router = APIRouter()


@router.get("/definitions")
async def list_definitions(
    status: GameStatus | None = None,
    user: str = Depends(caller_id),
    store: Storage = Depends(get_store),
):
    """List the caller's game definitions, optionally filtered by status."""
    return definitions.list_definitions(store, user, status=status)


@router.post("/definitions", status_code=201)
async def create_definition(
    body: CreateDefinition,
    user: str = Depends(caller_id),
    user_name: str | None = Depends(caller_name),
    store: Storage = Depends(get_store),
):
    """Create a DRAFT definition from a template, with its core pack."""
    definition, core = definitions.create_definition(
        store, user, body.name, body.template_id,
        description=body.description, creator_name=user_name,
    )
    result = definition.model_dump(by_alias=True)
    result["cardPacks"] = [core.model_dump(by_alias=True)]
    return result


@router.get("/definitions/{definition_id}")
async def get_definition(
    definition_id: str,
    user: str | None = Depends(optional_caller_id),
    store: Storage = Depends(get_store),
):
    """Get a definition with its template and packs (cards sorted).

    Owners can read their own; anyone can read a published one.
    """
    definition = definitions.get_readable_definition(store, definition_id, user)
    template = store.get_template_by_id(definition.template_id)
    result = definition.model_dump(by_alias=True)
    result["template"] = template.model_dump(by_alias=True) if template else None
    result["cardPacks"] = [
        pack.model_copy(update={"cards": pack.sorted_cards()}).model_dump(by_alias=True)
        for pack in store.list_packs(definition.id)
    ]
    return result


@router.patch("/definitions/{definition_id}")
async def update_definition(
    definition_id: str,
    body: UpdateDefinition,
    user: str = Depends(caller_id),
    store: Storage = Depends(get_store),
):
    """Update name, description, player bounds, status or config overrides."""
    fields = body.model_dump(exclude_none=True)
    return definitions.update_definition(store, definition_id, user, fields)


@router.delete("/definitions/{definition_id}")
async def delete_definition(
    definition_id: str,
    user: str = Depends(caller_id),
    store: Storage = Depends(get_store),
):
    """Delete a definition with all its packs and cards."""
    definitions.delete_definition(store, definition_id, user)
    return {"ok": True}


@router.get("/definitions/{definition_id}/preview")
async def preview_definition(
    definition_id: str,
    user: str = Depends(caller_id),
    store: Storage = Depends(get_store),
):
    """Compiled play bundle for the editor. Does not count as a play."""
    definition = definitions.get_owned_definition(store, definition_id, user)
    return compile_for(store, definition)
