"""Core domain models.

Every service and the storage layer operate on these types. Pydantic is
used for validation and serialisation at every data boundary. Fields are
snake_case in Python and camelCase on the wire (populate_by_name lets both
spellings validate), which is the shape the realtime engine and the editor
UI exchange.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Legacy names used by older card datasets.
CARD_TYPE_ALIASES = {"black": "prompt", "white": "response"}


def _normalize_card_type(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip().lower()
        return CARD_TYPE_ALIASES.get(value, value)
    return value


CardType = Annotated[Literal["prompt", "response"], BeforeValidator(_normalize_card_type)]

GameStatus = Literal["DRAFT", "TESTING", "PUBLISHED", "ARCHIVED"]

SessionStatus = Literal["WAITING", "IN_PROGRESS", "COMPLETED", "ABANDONED"]


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CardProperties(BaseModel):
    """Known card fields plus an open bag for game-specific metadata.

    `text` is always present. `pick` only means something on prompt cards.
    Anything else (`blanks`, `category`, `image`, ...) is kept as an extra.
    """

    model_config = ConfigDict(extra="allow")

    text: str
    pick: int | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Card(WireModel):
    """A single prompt or response card inside a pack."""

    id: str
    card_type: CardType
    properties: CardProperties
    sort_order: int = 0


class CardPack(WireModel):
    """A named collection of cards belonging to one game definition."""

    id: str
    game_id: str = ""
    name: str
    description: str = ""
    is_core: bool = False
    official: bool = False
    cards: list[Card] = Field(default_factory=list)

    def sorted_cards(self) -> list[Card]:
        return sorted(self.cards, key=lambda c: c.sort_order)


class GameTemplate(WireModel):
    """A reusable game archetype. `base_config` holds the default config."""

    id: str
    slug: str
    name: str
    icon_emoji: str = "🎲"
    description: str = ""
    card_types: list[CardType] = Field(default_factory=list)
    base_config: dict[str, Any] = Field(default_factory=dict)
    editor_hints: dict[str, Any] = Field(default_factory=dict)


class GameDefinition(WireModel):
    """One creator's customisation of a template."""

    id: str
    creator_id: str
    creator_name: str | None = None
    template_id: str
    name: str
    slug: str
    description: str | None = None
    status: GameStatus = "DRAFT"
    game_config: dict[str, Any] = Field(default_factory=dict)
    min_players: int = 3
    max_players: int = 10
    share_token: str
    play_count: int = 0
    created_at: str = ""
    updated_at: str = ""
    published_at: str | None = None


class GameSession(WireModel):
    """A live room playing one game. `game_config` is a frozen snapshot."""

    id: str
    room_code: str
    game_definition_id: str | None = None
    template_slug: str | None = None
    game_config: dict[str, Any] | None = None
    host_id: str | None = None
    host_nickname: str
    max_players: int = 16
    is_private: bool = False
    password: str | None = None
    allow_spectators: bool = True
    turn_time_limit: int | None = None
    player_count: int = 0
    status: SessionStatus = "WAITING"
    created_at: str = ""


# ---------------------------------------------------------------------------
# Play bundle: the compiled, play-ready shape handed to the realtime engine
# ---------------------------------------------------------------------------

class BundleCard(WireModel):
    id: str
    type: CardType
    properties: dict[str, Any]


class PackDescriptor(WireModel):
    id: str
    name: str
    description: str
    official: bool
    cards: dict[str, list[BundleCard]]


class PlayMeta(WireModel):
    game_id: str
    game_name: str
    creator_name: str
    play_count: int


class PlayBundle(WireModel):
    definition: dict[str, Any]
    packs: list[PackDescriptor]
    meta: PlayMeta
