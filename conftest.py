import shutil
from pathlib import Path

import pytest

from party_kit.definitions import create_definition
from party_kit.storage import Storage

TEST_DATA_DIR = Path("data-tests")
PRESETS_DIR = Path(__file__).parent / "presets"

CREATOR = "creator-a"
TEMPLATE_ID = "tmpl-fill-in-the-blank"


@pytest.fixture
def store() -> Storage:
    """Wipe data-tests/ and return a fresh store over it."""
    if TEST_DATA_DIR.exists():
        shutil.rmtree(TEST_DATA_DIR)
    # leave data-tests around after tests for inspection; CI can ignore it
    return Storage(TEST_DATA_DIR, presets_dir=PRESETS_DIR)


@pytest.fixture
def game(store):
    """A DRAFT fill-in-the-blank definition owned by CREATOR, plus its core pack."""
    return create_definition(
        store, CREATOR, "Office Party", TEMPLATE_ID, creator_name="Alice"
    )
