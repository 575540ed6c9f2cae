"""Create a demo creator game for development/testing."""

from party_kit.authoring import CardInput, bulk_update
from party_kit.definitions import create_definition, update_definition
from party_kit.models import CardProperties, GameDefinition
from party_kit.storage import Storage

DEMO_CREATOR = "demo-creator"
DEMO_TEMPLATE_ID = "tmpl-fill-in-the-blank"

DEMO_PROMPTS = [
    "What's that smell?",
    "I got 99 problems but _ ain't one.",
    "Step 1: _. Step 2: _. Step 3: Profit.",
    "What did the office party need more of? ____",
]

DEMO_RESPONSES = [
    "A disappointing birthday party.",
    "Forgetting the Wi-Fi password.",
    "A suspiciously large sandwich.",
    "Interpretive dance.",
    "The group chat.",
    "Grandma's secret recipe.",
]


def create_demo_data(store: Storage) -> GameDefinition:
    """Create a published demo game with a core pack of cards."""
    definition, core = create_definition(
        store,
        DEMO_CREATOR,
        "Office Party Panic",
        DEMO_TEMPLATE_ID,
        description="A demo game about the worst office party ever.",
        creator_name="Demo Creator",
    )
    cards = [
        CardInput(card_type="prompt", properties=CardProperties(text=text), sort_order=i)
        for i, text in enumerate(DEMO_PROMPTS)
    ]
    cards += [
        CardInput(card_type="response", properties=CardProperties(text=text), sort_order=i)
        for i, text in enumerate(DEMO_RESPONSES)
    ]
    bulk_update(store, core.id, DEMO_CREATOR, cards=cards)
    definition = update_definition(
        store, definition.id, DEMO_CREATOR,
        {"status": "PUBLISHED", "game_config": {"defaultSettings": {"handSize": 5, "endValue": 5}}},
    )
    print(f"Demo game '{definition.name}', play token: {definition.share_token}")
    return definition
