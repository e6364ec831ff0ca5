import random

from caves.generator.attempts import RanOutOfAttempts
from caves.generator.placement import (
    TO_NEXT_LEVEL,
    TO_PREV_LEVEL,
    ObjectPlacer,
    StaircaseValidator,
    find_place,
)
from caves.generator.rooms import place_rect
from caves.map.floor_map import FloorMap
from caves.map.geometry import GridSize, TilePos
from caves.map.spawns import StairsSpawn
from caves.map.tile_rect import TileRect
from caves.map.tiles import StairsDirection, ToNextLevel, ToPrevLevel


def single_room(rows, cols):
    floor_map = FloorMap(GridSize(rows, cols), 16)
    room_id = floor_map.add_room(TileRect(TilePos(0, 0), GridSize(rows, cols)))
    place_rect(floor_map, room_id)
    return floor_map, room_id


def test_find_place_returns_the_tile_inside_the_wall():
    floor_map, room_id = single_room(5, 6)
    assert find_place(floor_map.grid, TilePos(2, 5), room_id) == TilePos(2, 4)
    assert find_place(floor_map.grid, TilePos(2, 0), room_id) == TilePos(2, 1)
    # Corners touch no floor at all
    assert find_place(floor_map.grid, TilePos(0, 5), room_id) is None
    # Not a wall
    assert find_place(floor_map.grid, TilePos(2, 2), room_id) is None


def test_staircases_may_not_be_neighbours():
    floor_map, _ = single_room(5, 6)
    grid = floor_map.grid
    validator = StaircaseValidator()
    assert validator.validate(grid, TilePos(2, 4))
    grid.place_object(TilePos(2, 4), ToNextLevel(0, StairsDirection.LEFT))
    assert not validator.validate(grid, TilePos(3, 4))
    assert not validator.validate(grid, TilePos(1, 4))


def test_staircase_needs_exactly_one_way_in():
    floor_map, _ = single_room(5, 5)
    # In a three wide room the middle column is open on both sides
    assert not StaircaseValidator().validate(floor_map.grid, TilePos(2, 2))


def test_place_stairs_in_single_room(small_settings):
    settings = small_settings.with_overrides(next_prev_tiles=1)
    floor_map, room_id = single_room(7, 6)
    placed = ObjectPlacer(settings).place_stairs(random.Random(0), floor_map, TO_NEXT_LEVEL)
    assert not isinstance(placed, RanOutOfAttempts)
    [pos] = placed
    assert pos.col == 4
    stairs = floor_map.tile(pos).object
    assert stairs == ToNextLevel(0, StairsDirection.LEFT)
    # Walled in above and below
    assert floor_map.tile(TilePos(pos.row - 1, pos.col)).is_wall()
    assert floor_map.tile(TilePos(pos.row + 1, pos.col)).is_wall()
    [spawn] = floor_map.spawns
    assert isinstance(spawn, StairsSpawn)
    assert spawn.tile == pos and spawn.id == 0 and spawn.to_next_level


def test_up_stairs_go_on_the_left_wall(small_settings):
    settings = small_settings.with_overrides(next_prev_tiles=1)
    floor_map, _ = single_room(7, 6)
    [pos] = ObjectPlacer(settings).place_stairs(random.Random(3), floor_map, TO_PREV_LEVEL)
    assert pos.col == 1
    assert floor_map.tile(pos).object == ToPrevLevel(0, StairsDirection.RIGHT)
    assert floor_map.spawns[0].to_next_level is False


def test_too_few_rooms_for_the_stairs(small_settings):
    floor_map, _ = single_room(7, 6)
    outcome = ObjectPlacer(small_settings).place_stairs(random.Random(0), floor_map, TO_NEXT_LEVEL)
    assert isinstance(outcome, RanOutOfAttempts)
    assert outcome.phase == "to_next_level"
    assert floor_map.spawns == []


def test_special_rooms_never_hold_stairs(small_settings):
    settings = small_settings.with_overrides(next_prev_tiles=1)
    floor_map, room_id = single_room(7, 6)
    floor_map.room(room_id).become_player_start()
    outcome = ObjectPlacer(settings).place_stairs(random.Random(0), floor_map, TO_NEXT_LEVEL)
    assert isinstance(outcome, RanOutOfAttempts)


def test_no_stairs_requested(small_settings):
    settings = small_settings.with_overrides(next_prev_tiles=0)
    floor_map, _ = single_room(7, 6)
    assert ObjectPlacer(settings).place_stairs(random.Random(0), floor_map, TO_NEXT_LEVEL) == []
