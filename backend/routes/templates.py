"""Game template endpoints (read-only; templates are presets or seeded)."""

from fastapi import APIRouter, Depends, HTTPException

from party_kit.storage import Storage

from .deps import get_store

router = APIRouter()


@router.get("/templates")
async def list_templates(store: Storage = Depends(get_store)):
    """List all templates (presets merged with stored ones)."""
    return store.list_templates()


@router.get("/templates/{slug}")
async def get_template(slug: str, store: Storage = Depends(get_store)):
    """Get a single template by slug."""
    template = store.get_template(slug)
    if not template:
        raise HTTPException(404, "Template not found")
    return template
