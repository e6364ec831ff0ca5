import random
import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from caves.config import GenerationSettings  # noqa: E402
from caves.generator import GameGenerator, MapKey  # noqa: E402

# A small three level dungeon that generates quickly
SMALL_DUNGEON = {
    "levels": 3,
    "rows": 20,
    "cols": 40,
    "rooms": [4, 4],
    "room_rows": [3, 6],
    "room_cols": [4, 10],
    "max_overlap": 0.2,
    "doors": [1, 1],
    "next_prev_tiles": 2,
    "attempts": 500,
    "workers": 1,
}

FIXED_KEY = "AAECAwQFBgcICQoLDA0ODxAREhMUFRYXGBkaGxwdHh8"


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def small_settings():
    return GenerationSettings.default().with_overrides(**SMALL_DUNGEON)


@pytest.fixture(scope="module")
def small_game():
    settings = GenerationSettings.default().with_overrides(**SMALL_DUNGEON)
    return GameGenerator(settings).generate_with_key(MapKey.parse(FIXED_KEY))
