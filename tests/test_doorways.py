import random

import pytest

from caves.exceptions import GeneratorBug
from caves.generator.attempts import RanOutOfAttempts
from caves.generator.doorways import (
    DoorwayConnector,
    door_orientation,
    doorway_wall_adjacent_rooms,
    unreachable_rooms,
)
from caves.generator.rooms import place_rect
from caves.map.floor_map import FloorMap
from caves.map.geometry import GridSize, TilePos
from caves.map.spawns import DoorSpawn
from caves.map.sprites import WallSpriteAlternate
from caves.map.tile_rect import TileRect
from caves.map.tiles import Door, DoorState, Orientation


def build(size, *rects):
    floor_map = FloorMap(GridSize(*size), 16)
    for row, col, rows, cols in rects:
        room_id = floor_map.add_room(TileRect(TilePos(row, col), GridSize(rows, cols)))
        place_rect(floor_map, room_id)
    return floor_map


def doors(floor_map):
    return [pos for pos in floor_map.grid.tile_positions() if isinstance(floor_map.tile(pos).object, Door)]


def test_side_by_side_rooms_get_one_vertical_door():
    # The second room overlaps the right side of the first
    floor_map = build((6, 9), (0, 0, 5, 5), (1, 3, 5, 6))
    a, b = [room_id for room_id, _ in floor_map.rooms()]
    assert doorway_wall_adjacent_rooms(floor_map.grid, TilePos(2, 3), b) == (b, a)
    assert doorway_wall_adjacent_rooms(floor_map.grid, TilePos(2, 3), a) == (a, b)
    assert door_orientation(floor_map.grid, TilePos(2, 3)) is Orientation.VERTICAL

    outcome = DoorwayConnector().connect(random.Random(0), floor_map)
    assert outcome == 1
    [door] = doors(floor_map)
    assert door in (TilePos(2, 3), TilePos(3, 3))
    assert floor_map.tile(door).object == Door(DoorState.CLOSED, Orientation.VERTICAL)
    [spawn] = floor_map.spawns
    assert isinstance(spawn, DoorSpawn) and spawn.tile == door
    assert unreachable_rooms(floor_map) == set()


def test_stacked_rooms_get_a_horizontal_door_with_entrance_walls():
    floor_map = build((8, 7), (0, 0, 5, 5), (3, 1, 5, 6))
    assert door_orientation(floor_map.grid, TilePos(3, 2)) is Orientation.HORIZONTAL

    assert DoorwayConnector().connect(random.Random(0), floor_map) == 1
    [door] = doors(floor_map)
    assert door.row == 3
    alts = {floor_map.tile(TilePos(3, col)).sprite.alt for col in range(7) if floor_map.tile(TilePos(3, col)).is_wall()}
    assert WallSpriteAlternate.ENTRANCE_RIGHT in alts


def test_rooms_that_never_touch_cannot_be_connected():
    floor_map = build((4, 10), (0, 0, 4, 4), (0, 6, 4, 4))
    assert DoorwayConnector.doorway_candidates(floor_map) == []
    outcome = DoorwayConnector().connect(random.Random(0), floor_map)
    assert isinstance(outcome, RanOutOfAttempts)
    assert outcome.phase == "doorways"
    assert outcome.attempts == 0
    assert str(outcome) == "doorways failed its connectivity check"
    assert len(unreachable_rooms(floor_map)) == 1


def test_locked_doors_block_reachability():
    floor_map = build((6, 9), (0, 0, 5, 5), (1, 3, 5, 6))
    DoorwayConnector().connect(random.Random(0), floor_map)
    [door] = doors(floor_map)
    floor_map.grid.place_object(door, Door(DoorState.LOCKED, Orientation.VERTICAL))
    assert len(unreachable_rooms(floor_map)) == 1


def test_door_without_walls_on_a_line_is_a_bug():
    floor_map = build((5, 5), (0, 0, 5, 5))
    with pytest.raises(GeneratorBug):
        door_orientation(floor_map.grid, TilePos(0, 0))
