import random

from caves.generator.cosmetics import CosmeticLayoutPass
from caves.generator.rooms import place_rect
from caves.map.floor_map import FloorMap
from caves.map.geometry import GridSize, TilePos
from caves.map.spawns import TorchSpawn
from caves.map.sprites import FloorSprite, WallDecoration, WallSprite, WallSpriteAlternate
from caves.map.tile_rect import TileRect


def single_room(rows, cols):
    floor_map = FloorMap(GridSize(rows, cols), 16)
    room_id = floor_map.add_room(TileRect(TilePos(0, 0), GridSize(rows, cols)))
    place_rect(floor_map, room_id)
    return floor_map


def test_wall_mask_bits():
    assert WallSprite().mask() == 0
    assert WallSprite(wall_north=True).mask() == 1
    assert WallSprite(wall_east=True, wall_west=True).mask() == 10
    assert WallSprite(True, True, True, True).mask() == 15


def test_wall_sprites_follow_neighbouring_walls():
    floor_map = single_room(5, 6)
    CosmeticLayoutPass.layout_wall_sprites(random.Random(0), floor_map)
    grid = floor_map.grid
    # Top-left corner: walls to the east and south
    assert grid.get(TilePos(0, 0)).sprite.mask() == 2 | 4
    # Middle of the top wall: walls east and west
    assert grid.get(TilePos(0, 2)).sprite.mask() == 2 | 8
    # Left wall: walls north and south
    assert grid.get(TilePos(2, 0)).sprite.mask() == 1 | 4
    plain = {WallSpriteAlternate.ALT_0, WallSpriteAlternate.ALT_1, WallSpriteAlternate.ALT_2}
    assert all(grid.get(pos).sprite.alt in plain for pos in grid.tile_positions() if grid.get(pos).is_wall())


def test_entrance_alternates_are_kept():
    floor_map = single_room(5, 6)
    grid = floor_map.grid
    grid.set_wall_sprite(TilePos(0, 2), WallSprite(alt=WallSpriteAlternate.ENTRANCE_LEFT))
    CosmeticLayoutPass.layout_wall_sprites(random.Random(0), floor_map)
    assert grid.get(TilePos(0, 2)).sprite.alt is WallSpriteAlternate.ENTRANCE_LEFT


def test_torches_light_every_fourth_wall_over_free_floor():
    floor_map = single_room(5, 10)
    assert CosmeticLayoutPass.layout_wall_torches(floor_map) == 2
    lit = [pos for pos in floor_map.grid.tile_positions() if floor_map.tile(pos).is_wall() and floor_map.tile(pos).decoration is WallDecoration.TORCH]
    assert lit == [TilePos(0, 2), TilePos(0, 6)]
    assert floor_map.tile(TilePos(0, 2)).sprite.alt is WallSpriteAlternate.TORCH_LIT
    assert [s.tile for s in floor_map.spawns if isinstance(s, TorchSpawn)] == lit


def test_floor_patterns_only_touch_floor():
    floor_map = single_room(12, 12)
    before = floor_map.render_ascii()
    CosmeticLayoutPass.layout_floor_sprites(random.Random(9), floor_map)
    assert floor_map.render_ascii() == before
    sprites = {floor_map.tile(pos).sprite for pos in floor_map.grid.tile_positions() if floor_map.tile(pos).is_floor()}
    assert sprites - {FloorSprite.FLOOR_1}


def test_cosmetic_pass_does_not_change_the_layout():
    floor_map = single_room(8, 10)
    before = floor_map.render_ascii()
    CosmeticLayoutPass().apply(random.Random(1), floor_map)
    assert floor_map.render_ascii() == before
