"""Definition compiler: template + definition + packs → PlayBundle.

Config merging is a flat override, `{**template.base_config,
**definition.game_config}`. A creator who overrides `decks` replaces the
whole `decks` mapping; nothing is merged recursively. Do not swap this for
a deep merge: creators rely on being able to remove template sections.

Identity fields always come from the definition, whatever the config says:
id (the slug), name, description (falling back to the template's), and the
player bounds.

Packs stay separate in the bundle, one descriptor per pack with cards
grouped by card type. The realtime engine decides how packs combine.

compile_bundle() has no side effects and refuses ARCHIVED definitions. The
play-count bump lives in party_kit.play and runs after the response.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from party_kit.errors import ForbiddenError
from party_kit.models import (
    BundleCard,
    CardPack,
    GameDefinition,
    GameTemplate,
    PackDescriptor,
    PlayBundle,
    PlayMeta,
)

logger = logging.getLogger(__name__)

ANONYMOUS_CREATOR = "Anonymous"


def ensure_playable(definition: GameDefinition) -> None:
    """Archived games cannot be played; every other status can."""
    if definition.status == "ARCHIVED":
        raise ForbiddenError("Game is archived")


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Shallow merge: top-level keys of `override` replace those of `base`."""
    return copy.deepcopy({**base, **override})


def _is_dsl_config(config: dict[str, Any]) -> bool:
    return "main" in config or "setup" in config


def build_definition(definition: GameDefinition, template: GameTemplate) -> dict[str, Any]:
    base = template.base_config
    merged = merge_config(base, definition.game_config)
    merged.update({
        "id": definition.slug,
        "name": definition.name,
        "description": (
            definition.description
            if definition.description is not None
            else base.get("description")
        ),
        "minPlayers": definition.min_players,
        "maxPlayers": definition.max_players,
    })
    players = merged.get("players")
    if _is_dsl_config(merged) and isinstance(players, dict):
        merged["players"] = {
            **players,
            "min": definition.min_players,
            "max": definition.max_players,
        }
    return merged


def build_pack(pack: CardPack, game_name: str, allowed_types: set[str]) -> PackDescriptor:
    cards: dict[str, list[BundleCard]] = {}
    for card in pack.sorted_cards():
        if allowed_types and card.card_type not in allowed_types:
            logger.warning(
                "pack %s: card %s has type %s not declared by the template, left out",
                pack.id, card.id, card.card_type,
            )
            continue
        cards.setdefault(card.card_type, []).append(
            BundleCard(
                id=card.id,
                type=card.card_type,
                properties=copy.deepcopy(card.properties.as_dict()),
            )
        )
    return PackDescriptor(
        id=pack.id,
        name=pack.name,
        description=pack.description or f"Card pack for {game_name}",
        official=pack.official,
        cards=cards,
    )


def compile_bundle(
    definition: GameDefinition, template: GameTemplate, packs: list[CardPack]
) -> PlayBundle:
    """Assemble the play-ready bundle. Pure; safe to call for previews."""
    ensure_playable(definition)
    allowed = set(template.card_types)
    return PlayBundle(
        definition=build_definition(definition, template),
        packs=[build_pack(pack, definition.name, allowed) for pack in packs],
        meta=PlayMeta(
            game_id=definition.id,
            game_name=definition.name,
            creator_name=definition.creator_name or ANONYMOUS_CREATOR,
            play_count=definition.play_count + 1,
        ),
    )


def snapshot_config(
    definition: GameDefinition, template: GameTemplate, packs: list[CardPack]
) -> dict[str, Any]:
    """Frozen config stored on a session: merged config plus raw pack data.

    Lighter than compile_bundle(); the realtime engine fetches the full
    bundle through the play-load endpoint when the room starts.
    """
    config = merge_config(template.base_config, definition.game_config)
    config["cardPacks"] = [pack.model_dump(by_alias=True) for pack in packs]
    return config
