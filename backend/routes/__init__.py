"""FastAPI API endpoints under /api.

Endpoint groups: health, templates, definitions (CRUD + compiled preview),
packs and bulk card authoring, play-load (called by the party server), and
sessions (create a room, look up a join code, list open rooms).

Caller identity is read from the X-User-Id header (see deps.py). Service
errors (party_kit.errors) are turned into HTTP responses by the handler
registered in backend.app.
"""

from fastapi import APIRouter

from .cards import router as cards_router
from .definitions import router as definitions_router
from .health import router as health_router
from .play import router as play_router
from .sessions import router as sessions_router
from .templates import router as templates_router

router = APIRouter()
router.include_router(health_router)
router.include_router(templates_router)
router.include_router(definitions_router)
router.include_router(cards_router)
router.include_router(play_router)
router.include_router(sessions_router)
