"""Tests for the JSON file store: templates, definitions, packs, sessions."""

import pytest

from party_kit.errors import ConflictError, RoomCodeTaken
from party_kit.models import Card, CardPack, CardProperties, GameDefinition, GameSession, GameTemplate
from party_kit.storage import slugify


def _definition(id: str, slug: str = "game", creator: str = "u1", **kw) -> GameDefinition:
    return GameDefinition(
        id=id, creator_id=creator, template_id="tmpl-fill-in-the-blank",
        name=slug.title(), slug=slug, share_token=f"tok-{id}", **kw,
    )


# ── slugify ──────────────────────────────────────────────


@pytest.mark.parametrize("title, slug", [
    ("Cards For Everyone!", "cards-for-everyone"),
    ("Don't Panic", "dont-panic"),
    ("Café Chaos", "cafe-chaos"),
    ("!!!", "untitled"),
])
def test_slugify(title, slug):
    assert slugify(title) == slug


# ── Templates ────────────────────────────────────────────


def test_presets_listed(store):
    slugs = {t.slug for t in store.list_templates()}
    assert {"fill-in-the-blank", "quick-quips"} <= slugs


def test_preset_fields_loaded(store):
    tmpl = store.get_template("fill-in-the-blank")
    assert tmpl.id == "tmpl-fill-in-the-blank"
    assert tmpl.card_types == ["prompt", "response"]
    assert tmpl.base_config["minPlayers"] == 3


def test_lookup_by_id(store):
    assert store.get_template_by_id("tmpl-quick-quips").slug == "quick-quips"
    assert store.get_template_by_id("tmpl-missing") is None


def test_user_template_overrides_preset(store):
    store.save_template(GameTemplate(
        id="tmpl-fill-in-the-blank", slug="fill-in-the-blank", name="House Rules",
    ))
    assert store.get_template("fill-in-the-blank").name == "House Rules"
    names = [t.name for t in store.list_templates() if t.slug == "fill-in-the-blank"]
    assert names == ["House Rules"]


def test_unsafe_slug_not_resolved(store):
    assert store.get_template("../presets/templates/quick-quips") is None


# ── Definitions ──────────────────────────────────────────


def test_definition_roundtrip(store):
    store.create_definition(_definition("d1", game_config={"rounds": 3}))
    loaded = store.get_definition("d1")
    assert loaded.game_config == {"rounds": 3}
    assert store.find_definition_by_share_token("tok-d1").id == "d1"


def test_duplicate_slug_for_creator_conflicts(store):
    store.create_definition(_definition("d1"))
    with pytest.raises(ConflictError):
        store.create_definition(_definition("d2"))
    store.create_definition(_definition("d3", creator="u2"))
    assert store.slug_taken("u2", "game")


def test_list_filters_by_creator(store):
    store.create_definition(_definition("d1", slug="a"))
    store.create_definition(_definition("d2", slug="b", creator="u2"))
    assert [d.id for d in store.list_definitions(creator_id="u1")] == ["d1"]
    assert len(store.list_definitions()) == 2


def test_delete_cascades_to_packs(store):
    store.create_definition(_definition("d1"))
    store.save_pack(CardPack(id="p1", game_id="d1", name="Core", is_core=True))
    assert store.delete_definition("d1") is True
    assert store.get_definition("d1") is None
    assert store.get_pack("p1") is None
    assert store.delete_definition("d1") is False


def test_increment_play_count(store):
    store.create_definition(_definition("d1"))
    assert store.increment_play_count("d1") == 1
    assert store.increment_play_count("d1") == 2
    assert store.get_definition("d1").play_count == 2


def test_increment_missing_definition_raises(store):
    with pytest.raises(FileNotFoundError):
        store.increment_play_count("nope")


# ── Packs ────────────────────────────────────────────────


def test_packs_listed_core_first(store):
    store.create_definition(_definition("d1"))
    store.save_pack(CardPack(id="p2", game_id="d1", name="Animals"))
    store.save_pack(CardPack(id="p1", game_id="d1", name="Zoo", is_core=True))
    assert [p.id for p in store.list_packs("d1")] == ["p1", "p2"]


def test_pack_cards_roundtrip(store):
    store.create_definition(_definition("d1"))
    pack = CardPack(id="p1", game_id="d1", name="Core", cards=[
        Card(id="c1", card_type="prompt", sort_order=2,
             properties=CardProperties(text="Why _?", pick=1, category="food")),
    ])
    store.save_pack(pack)
    loaded = store.get_pack("p1")
    assert loaded == pack
    assert loaded.cards[0].properties.as_dict()["category"] == "food"


def test_delete_pack(store):
    store.create_definition(_definition("d1"))
    store.save_pack(CardPack(id="p1", game_id="d1", name="Core"))
    assert store.delete_pack("p1") is True
    assert store.delete_pack("p1") is False


# ── Sessions ─────────────────────────────────────────────


def test_session_create_is_exclusive(store):
    session = GameSession(id="s1", room_code="ABCDEF", host_nickname="Bob")
    store.create_session(session)
    assert store.room_code_exists("ABCDEF")
    with pytest.raises(RoomCodeTaken):
        store.create_session(session.model_copy(update={"id": "s2"}))
    assert store.get_session("ABCDEF").id == "s1"


def test_save_session_overwrites(store):
    session = GameSession(id="s1", room_code="ABCDEF", host_nickname="Bob")
    store.create_session(session)
    store.save_session(session.model_copy(update={"player_count": 3}))
    assert store.get_session("ABCDEF").player_count == 3
    assert [s.id for s in store.list_sessions()] == ["s1"]


def test_missing_session(store):
    assert store.get_session("ZZZZZZ") is None
    assert not store.room_code_exists("ZZZZZZ")
