from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import List

from ..map.floor_map import FloorMap
from ..map.geometry import GridSize, TilePos
from ..map.spawns import TorchSpawn
from ..map.sprites import FLOOR_PATTERNS, WallDecoration, WallSprite, WallSpriteAlternate
from ..map.tile_rect import TileRect

logger = logging.getLogger(__name__)

# Patterns are placed until this many placements have failed
FLOOR_PATTERN_TRIES = 100
# Roughly one torch in the middle of every run of this many torch-able walls
TORCH_FREQUENCY = 4


class CosmeticLayoutPass:
    """Chooses sprite variants for a finished level.

    Nothing here changes which tiles are floor or wall. Wall sprites follow
    their wall neighbours, floors get stamped with small patterns and long
    runs of wall above a floor get torches.
    """

    def apply(self, rng: random.Random, floor_map: FloorMap) -> None:
        self.layout_wall_sprites(rng, floor_map)
        self.layout_floor_sprites(rng, floor_map)
        torches = self.layout_wall_torches(floor_map)
        logger.debug("Cosmetic pass placed %d torches", torches)

    @staticmethod
    def layout_wall_sprites(rng: random.Random, floor_map: FloorMap) -> None:
        grid = floor_map.grid
        nrows, ncols = grid.rows_len(), grid.cols_len()

        def is_wall(adj):
            return adj is not None and grid.get(adj).is_wall()

        for pos in grid.tile_positions():
            tile = grid.get(pos)
            if not tile.is_wall():
                continue
            # Keep alternates chosen earlier (e.g. beside an entrance)
            if tile.sprite.alt is not WallSpriteAlternate.ALT_0:
                continue

            sprite = WallSprite(
                wall_north=is_wall(pos.adjacent_north()),
                wall_east=is_wall(pos.adjacent_east(ncols)),
                wall_south=is_wall(pos.adjacent_south(nrows)),
                wall_west=is_wall(pos.adjacent_west()),
                alt=WallSpriteAlternate.random_plain(rng),
            )
            grid.set_wall_sprite(pos, sprite)

    @staticmethod
    def layout_floor_sprites(rng: random.Random, floor_map: FloorMap) -> None:
        grid = floor_map.grid
        nrows, ncols = grid.rows_len(), grid.cols_len()
        remaining_tries = FLOOR_PATTERN_TRIES
        placed: List[TileRect] = []
        while remaining_tries > 0:
            pattern = rng.choice(FLOOR_PATTERNS)
            rect = TileRect(
                TilePos(rng.randrange(nrows), rng.randrange(ncols)),
                GridSize(len(pattern), len(pattern[0])),
            )
            if any(rect.has_intersection(other) for other in placed):
                remaining_tries -= 1
                continue

            for pos in rect.tile_positions():
                # Patterns hanging off the grid are clipped
                if pos.row >= nrows or pos.col >= ncols:
                    continue
                if not grid.get(pos).is_floor():
                    continue
                local = pos - rect.top_left
                grid.set_floor_sprite(pos, pattern[local.row][local.col])
            placed.append(rect)

    @staticmethod
    def layout_wall_torches(floor_map: FloorMap) -> int:
        """Light walls that face down onto free floor, about one per run of four.

        Returns the number of torches placed.
        """
        grid = floor_map.grid
        nrows = grid.rows_len()
        torches = 0
        # The bottom row of walls never faces a floor
        for row in range(nrows - 1):
            can_torch = 0
            for col in range(grid.cols_len()):
                pos = TilePos(row, col)
                tile = grid.get(pos)
                if not tile.is_wall():
                    continue

                south = TilePos(row + 1, col)
                south_tile = grid.get(south)
                if not south_tile.is_floor() or south_tile.has_object():
                    continue
                if floor_map.has_spawn_within(south.tile_rect(floor_map.tile_size)):
                    continue

                can_torch += 1
                if can_torch % TORCH_FREQUENCY == TORCH_FREQUENCY // 2:
                    grid.set_wall_sprite(pos, replace(tile.sprite, alt=WallSpriteAlternate.TORCH_LIT))
                    grid.set_wall_decoration(pos, WallDecoration.TORCH)
                    floor_map.spawns.append(
                        TorchSpawn(
                            tile=pos,
                            position=floor_map.tile_center(pos),
                            bounding_box=pos.tile_rect(floor_map.tile_size),
                        )
                    )
                    torches += 1
        return torches


__all__ = ["CosmeticLayoutPass", "FLOOR_PATTERN_TRIES", "TORCH_FREQUENCY"]
