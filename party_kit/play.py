"""Play-load: resolve a share token to a compiled PlayBundle.

The realtime engine calls this when a room needs its content. Lookup is by
share token first and then by definition id, so the editor's preview links
keep working. Unknown tokens raise NotFoundError (404); archived games raise
ForbiddenError (403).
"""

from __future__ import annotations

import logging

from party_kit.compiler import compile_bundle, ensure_playable
from party_kit.errors import NotFoundError
from party_kit.models import GameDefinition, PlayBundle
from party_kit.storage import Storage

logger = logging.getLogger(__name__)


def find_playable(store: Storage, token: str) -> GameDefinition:
    definition = store.find_definition_by_share_token(token) or store.get_definition(token)
    if definition is None:
        raise NotFoundError("Game not found")
    ensure_playable(definition)
    return definition


def compile_for(store: Storage, definition: GameDefinition) -> PlayBundle:
    template = store.get_template_by_id(definition.template_id)
    if template is None:
        raise NotFoundError("Template not found")
    return compile_bundle(definition, template, store.list_packs(definition.id))


def load_play_bundle(store: Storage, token: str) -> PlayBundle:
    definition = find_playable(store, token)
    bundle = compile_for(store, definition)
    logger.debug("play-load token=%s game=%s", token, definition.id)
    return bundle


def bump_play_count(store: Storage, definition_id: str) -> None:
    """Best-effort popularity counter. Never raises."""
    try:
        count = store.increment_play_count(definition_id)
    except Exception:
        logger.warning("play count bump failed for %s", definition_id, exc_info=True)
        return
    logger.debug("play count for %s is now %d", definition_id, count)
