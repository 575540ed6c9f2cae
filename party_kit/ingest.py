"""Offline card ingestion: raw dataset → one combined official CardPack.

Dataset shape:

    {
      "responses": ["A disappointing birthday party.", ...],
      "prompts":   ["Why can't I sleep at night? _", {"text": "...", "pick": 2}, ...],
      "packs": [
        {"name": "Base Set", "responseIndices": [0, 1], "promptIndices": [0], "official": true},
        ...
      ]
    }

The older "white"/"black" key names are accepted as well, both at the top
level and inside packs.

Steps:
  1. Keep official packs only.
  2. Union their response and prompt indices (an index shared by two packs
     produces one card).
  3. Build one card per surviving index, in index order. Prompts get
     `pick` (declared, or derived from blanks) and `blanks` (== pick).
  4. Emit a single official pack holding every card.

Bad rows (index out of range, missing text) are skipped and counted, never
fatal. A dataset that cannot be read or parsed is fatal.

Usage:
    python -m party_kit.ingest cards.json --out base-pack.json
    python -m party_kit.ingest cards.json --data-dir data --definition <id>
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from party_kit.blanks import default_pick
from party_kit.errors import NotFoundError, ValidationError
from party_kit.models import Card, CardPack, CardProperties
from party_kit.storage import Storage

logger = logging.getLogger(__name__)

BASE_PACK_ID = "base"


@dataclass
class IngestResult:
    pack: CardPack
    packs_total: int = 0
    packs_official: int = 0
    responses: int = 0
    prompts: int = 0
    skipped: int = 0

    def counts(self) -> dict[str, int]:
        return {
            "packs_total": self.packs_total,
            "packs_official": self.packs_official,
            "responses": self.responses,
            "prompts": self.prompts,
            "skipped": self.skipped,
        }


def _first(mapping: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in mapping:
            return mapping[key]
    return None


def _indices(raw: Any) -> list[int]:
    if not isinstance(raw, list):
        return []
    return [i for i in raw if isinstance(i, int) and not isinstance(i, bool)]


def _entry_at(entries: list[Any], index: int) -> Any:
    if 0 <= index < len(entries):
        return entries[index]
    return None


def _response_card(index: int, entry: Any) -> Card | None:
    if not isinstance(entry, str) or not entry.strip():
        return None
    return Card(
        id=f"r-{index}",
        card_type="response",
        properties=CardProperties(text=entry),
        sort_order=index,
    )


def _prompt_card(index: int, entry: Any) -> Card | None:
    if isinstance(entry, str):
        text, declared = entry, None
    elif isinstance(entry, dict):
        text, declared = entry.get("text"), entry.get("pick")
    else:
        return None
    if not isinstance(text, str) or not text.strip():
        return None
    pick = default_pick(text, declared)
    return Card(
        id=f"p-{index}",
        card_type="prompt",
        properties=CardProperties(text=text, pick=pick, blanks=pick),
        sort_order=index,
    )


def ingest(dataset: dict[str, Any]) -> IngestResult:
    """Turn a raw dataset into one combined official pack."""
    responses = _first(dataset, "responses", "white") or []
    prompts = _first(dataset, "prompts", "black") or []
    packs = dataset.get("packs") or []
    for key, value in (("responses", responses), ("prompts", prompts), ("packs", packs)):
        if not isinstance(value, list):
            raise ValidationError(f"Card dataset field '{key}' must be a list")

    official = [p for p in packs if isinstance(p, dict) and p.get("official") is True]

    response_ids: set[int] = set()
    prompt_ids: set[int] = set()
    for pack in official:
        response_ids.update(_indices(_first(pack, "responseIndices", "white")))
        prompt_ids.update(_indices(_first(pack, "promptIndices", "black")))

    result = IngestResult(
        pack=CardPack(id=BASE_PACK_ID, name="Base Set", official=True),
        packs_total=len(packs),
        packs_official=len(official),
    )

    cards: list[Card] = []
    for idx in sorted(response_ids):
        card = _response_card(idx, _entry_at(responses, idx))
        if card is None:
            logger.warning("skipping response row %d: missing text", idx)
            result.skipped += 1
            continue
        cards.append(card)
        result.responses += 1

    for idx in sorted(prompt_ids):
        card = _prompt_card(idx, _entry_at(prompts, idx))
        if card is None:
            logger.warning("skipping prompt row %d: missing text", idx)
            result.skipped += 1
            continue
        cards.append(card)
        result.prompts += 1

    result.pack.cards = cards
    result.pack.description = (
        f"All official cards combined ({result.prompts} prompts, "
        f"{result.responses} responses)"
    )
    logger.info(
        "ingested %d/%d official packs: %d prompts, %d responses, %d skipped",
        result.packs_official, result.packs_total,
        result.prompts, result.responses, result.skipped,
    )
    return result


def combine_packs(packs: list[CardPack]) -> CardPack:
    """Concatenate the cards of several packs into a new preview pack.

    Inputs are not modified. The result is never official.
    """
    cards: list[Card] = []
    for pack in packs:
        cards.extend(card.model_copy(deep=True) for card in pack.cards)
    return CardPack(
        id=BASE_PACK_ID,
        name="Combined Pack",
        description=f"Combined from: {', '.join(p.name for p in packs)}",
        official=False,
        cards=cards,
    )


def load_dataset(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text())
    except (OSError, json.JSONDecodeError) as e:
        raise ValidationError(f"Cannot read card dataset {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValidationError(f"Card dataset {path} must be a JSON object")
    return data


def import_pack(store: Storage, definition_id: str, pack: CardPack) -> CardPack:
    """Store an ingested pack as an official pack of an existing definition."""
    if store.get_definition(definition_id) is None:
        raise NotFoundError("Game definition not found")
    stored = pack.model_copy(deep=True, update={
        "id": f"{BASE_PACK_ID}-{definition_id[:8]}",
        "game_id": definition_id,
        "official": True,
        "is_core": False,
    })
    store.save_pack(stored)
    logger.info("imported %d cards into definition %s", len(stored.cards), definition_id)
    return stored


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ingest a raw card dataset")
    parser.add_argument("dataset", type=Path, help="Raw dataset JSON file")
    parser.add_argument("--out", type=Path, default=None,
                        help="Write the combined pack to this JSON file")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Data storage directory (used with --definition)")
    parser.add_argument("--definition", default=None,
                        help="Import the pack into this game definition id")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    result = ingest(load_dataset(args.dataset))
    if args.out:
        args.out.write_text(result.pack.model_dump_json(indent=2, by_alias=True))
        print(f"Wrote {args.out}")
    if args.definition:
        store = Storage(args.data_dir or Path("data"))
        import_pack(store, args.definition, result.pack)
    for name, value in result.counts().items():
        print(f"{name}: {value}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
