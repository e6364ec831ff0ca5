import random
from collections import Counter

import pytest
from pydantic import ValidationError

from caves.generator.enemies import EnemyPlacer, EnemyTable
from caves.generator.rooms import place_rect
from caves.map.floor_map import FloorMap
from caves.map.geometry import GridSize, TilePos
from caves.map.spawns import EnemySpawn
from caves.map.tile_rect import TileRect

TABLE = {
    "kinds": {
        "rat": {"attack": 5, "speed": 3, "health_points": 15, "hit_wait": 12},
        "bat": {"attack": 2, "speed": 6, "health_points": 5, "width": 8, "height": 8},
    },
    "levels": [{"rat": 1.0}, {"rat": 1.0, "bat": 3.0}],
}


def test_weights_follow_the_level():
    table = EnemyTable.model_validate(TABLE)
    rng = random.Random(11)
    assert {table.random_enemy(rng, 1)[0] for _ in range(50)} == {"rat"}

    counts = Counter(table.random_enemy(rng, 2)[0] for _ in range(2000))
    assert counts["bat"] > counts["rat"] > 0
    # Deeper levels reuse the last entry
    assert table.weights_for_level(7) == {"rat": 1.0, "bat": 3.0}


def test_zero_weight_kinds_never_appear():
    data = dict(TABLE, levels=[{"rat": 0.0, "bat": 1.0}])
    table = EnemyTable.model_validate(data)
    rng = random.Random(2)
    assert {table.random_enemy(rng, 1)[0] for _ in range(100)} == {"bat"}


@pytest.mark.parametrize(
    "levels",
    [
        [{"rat": -1.0}],
        [{"rat": 0.0}],
        [{"wolf": 1.0}],
        [],
    ],
)
def test_invalid_tables(levels):
    with pytest.raises(ValidationError):
        EnemyTable.model_validate(dict(TABLE, levels=levels))


def big_room():
    floor_map = FloorMap(GridSize(8, 8), 16)
    room_id = floor_map.add_room(TileRect(TilePos(0, 0), GridSize(8, 8)))
    place_rect(floor_map, room_id)
    return floor_map


def test_enemies_keep_away_from_walls(small_settings):
    settings = small_settings.with_overrides(room_enemies=[3, 3])
    floor_map = big_room()
    assert EnemyPlacer(settings).place(random.Random(4), floor_map, level=1) == 3

    spawns = [s for s in floor_map.spawns if isinstance(s, EnemySpawn)]
    assert len(spawns) == 3
    assert len({s.tile for s in spawns}) == 3
    for spawn in spawns:
        assert 2 <= spawn.tile.row <= 5 and 2 <= spawn.tile.col <= 5
        assert spawn.enemy == "rat"
        assert spawn.position == floor_map.tile_center(spawn.tile)
        assert spawn.bounding_box.width == 16


def test_enemy_count_is_capped_by_room_area(small_settings):
    settings = small_settings.with_overrides(room_enemies=[20, 20], max_room_enemy_area=0.1)
    floor_map = big_room()
    # 36 floor tiles at 10%
    assert EnemyPlacer(settings).place(random.Random(4), floor_map, level=1) == 3


def test_special_rooms_have_no_enemies(small_settings):
    settings = small_settings.with_overrides(room_enemies=[3, 3])
    floor_map = big_room()
    floor_map.room(next(floor_map.rooms())[0]).become_treasure_chamber()
    assert EnemyPlacer(settings).place(random.Random(4), floor_map, level=1) == 0
    assert floor_map.spawns == []
