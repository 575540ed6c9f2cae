"""Play-load endpoint, called by the party server when a room needs content."""

from fastapi import APIRouter, BackgroundTasks, Depends

from party_kit.play import bump_play_count, load_play_bundle
from party_kit.storage import Storage

from .deps import get_store

router = APIRouter()


@router.get("/play/{share_token}")
async def play(
    share_token: str,
    background_tasks: BackgroundTasks,
    store: Storage = Depends(get_store),
):
    """Compiled play bundle. 404 for unknown tokens, 403 for archived games."""
    bundle = load_play_bundle(store, share_token)
    background_tasks.add_task(bump_play_count, store, bundle.meta.game_id)
    return bundle
