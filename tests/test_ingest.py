"""Tests for the offline card ingestion pipeline."""

import json

import pytest

from party_kit.errors import NotFoundError, ValidationError
from party_kit.ingest import combine_packs, import_pack, ingest, load_dataset, main
from party_kit.models import Card, CardPack, CardProperties


def _dataset():
    return {
        "responses": [f"Response {i}" for i in range(6)],
        "prompts": [
            "Plain prompt?",
            "Why did ___ cross the road because ___?",
            {"text": "Pick three: _", "pick": 3},
            {"text": "Declared zero: _ _", "pick": 0},
            "Unofficial _",
            "Unused",
        ],
        "packs": [
            {"name": "Base", "responseIndices": [1, 2, 3], "promptIndices": [0, 1], "official": True},
            {"name": "Expansion", "responseIndices": [3, 4], "promptIndices": [2, 3], "official": True},
            {"name": "Community", "responseIndices": [5], "promptIndices": [4], "official": False},
        ],
    }


def _ids(pack, card_type):
    return {c.id for c in pack.cards if c.card_type == card_type}


# ── Official-only filter and union ─────────────────────────


def test_official_union_without_duplicates():
    result = ingest(_dataset())
    assert _ids(result.pack, "response") == {"r-1", "r-2", "r-3", "r-4"}
    assert len([c for c in result.pack.cards if c.id == "r-3"]) == 1


def test_unofficial_pack_dropped():
    result = ingest(_dataset())
    assert "r-5" not in _ids(result.pack, "response")
    assert "p-4" not in _ids(result.pack, "prompt")


def test_single_combined_official_pack():
    result = ingest(_dataset())
    assert result.pack.official is True
    assert result.pack.id == "base"


def test_counts_reported():
    result = ingest(_dataset())
    assert result.counts() == {
        "packs_total": 3,
        "packs_official": 2,
        "responses": 4,
        "prompts": 4,
        "skipped": 0,
    }


# ── Prompt picks ───────────────────────────────────────────


def test_bare_string_prompt_pick_from_blanks():
    cards = {c.id: c for c in ingest(_dataset()).pack.cards}
    assert cards["p-0"].properties.pick == 1
    assert cards["p-1"].properties.pick == 2
    assert cards["p-1"].properties.as_dict()["blanks"] == 2


def test_declared_pick_kept():
    cards = {c.id: c for c in ingest(_dataset()).pack.cards}
    assert cards["p-2"].properties.pick == 3


def test_declared_pick_below_one_derived():
    cards = {c.id: c for c in ingest(_dataset()).pack.cards}
    assert cards["p-3"].properties.pick == 2


def test_response_cards_have_text_only():
    cards = {c.id: c for c in ingest(_dataset()).pack.cards}
    assert cards["r-1"].properties.as_dict() == {"text": "Response 1"}


# ── Bad rows are skipped ───────────────────────────────────


def test_malformed_rows_skipped_not_fatal():
    data = {
        "responses": ["ok", "", None],
        "prompts": [{"pick": 2}, "fine _"],
        "packs": [{"name": "Base", "responseIndices": [0, 1, 2, 99],
                   "promptIndices": [0, 1], "official": True}],
    }
    result = ingest(data)
    assert _ids(result.pack, "response") == {"r-0"}
    assert _ids(result.pack, "prompt") == {"p-1"}
    assert result.skipped == 4


def test_legacy_white_black_keys():
    data = {
        "white": ["A", "B"],
        "black": ["Q _"],
        "packs": [{"name": "Base", "white": [0, 1], "black": [0], "official": True}],
    }
    result = ingest(data)
    assert result.responses == 2
    assert result.prompts == 1


@pytest.mark.parametrize("key", ["responses", "prompts", "packs"])
def test_non_list_section_is_fatal(key):
    data = _dataset()
    data[key] = {"a": "x"}
    with pytest.raises(ValidationError, match=key):
        ingest(data)


def test_empty_dataset():
    result = ingest({})
    assert result.pack.cards == []
    assert result.packs_total == 0


# ── combine_packs ──────────────────────────────────────────


def test_combine_packs_concatenates_without_mutating():
    a = CardPack(id="a", name="A", official=True, cards=[
        Card(id="1", card_type="prompt", properties=CardProperties(text="_", pick=1)),
    ])
    b = CardPack(id="b", name="B", cards=[
        Card(id="2", card_type="response", properties=CardProperties(text="x")),
    ])
    combined = combine_packs([a, b])
    assert [c.id for c in combined.cards] == ["1", "2"]
    assert combined.official is False
    assert "A, B" in combined.description
    combined.cards[0].properties.text = "changed"
    assert a.cards[0].properties.text == "_"


# ── Loading and importing ──────────────────────────────────


def test_load_dataset_unreadable_is_fatal(tmp_path):
    with pytest.raises(ValidationError):
        load_dataset(tmp_path / "missing.json")


def test_load_dataset_bad_json_is_fatal(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(ValidationError):
        load_dataset(path)


def test_import_pack_into_definition(store, game):
    definition, _core = game
    stored = import_pack(store, definition.id, ingest(_dataset()).pack)
    packs = store.list_packs(definition.id)
    assert stored.id in {p.id for p in packs}
    imported = store.get_pack(stored.id)
    assert imported.official is True
    assert imported.game_id == definition.id
    assert len(imported.cards) == 8


def test_import_pack_unknown_definition(store):
    with pytest.raises(NotFoundError):
        import_pack(store, "nope", ingest(_dataset()).pack)


def test_cli_writes_pack(tmp_path, capsys):
    src = tmp_path / "cards.json"
    src.write_text(json.dumps(_dataset()))
    out = tmp_path / "pack.json"
    assert main([str(src), "--out", str(out)]) == 0
    written = json.loads(out.read_text())
    assert written["official"] is True
    assert len(written["cards"]) == 8
    assert "responses: 4" in capsys.readouterr().out
