from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ..exceptions import GeneratorBug
from ..map.floor_map import FloorMap
from ..map.tiles import ToNextLevel, ToPrevLevel
from .doorways import unreachable_rooms
from .rooms import edges_aligned

if TYPE_CHECKING:
    from ..config import GenerationSettings

logger = logging.getLogger(__name__)


def validate_level(floor_map: FloorMap, level: int, settings: "GenerationSettings") -> None:
    """Check the structural invariants of a finished level.

    Any violation is a bug in the generator, never a bad seed, so it raises
    GeneratorBug instead of asking for a retry.
    """
    grid = floor_map.grid
    nrows, ncols = grid.rows_len(), grid.cols_len()

    for pos in grid.tile_positions():
        tile = grid.get(pos)
        if (tile.is_wall() or tile.is_empty()) and tile.has_object():
            raise GeneratorBug(f"level {level}: non-floor tile at {pos} holds an object")

    for room_id, room in floor_map.rooms():
        br = room.boundary.bottom_right()
        if br.row >= nrows or br.col >= ncols:
            raise GeneratorBug(f"level {level}: room {room_id} extends past the grid")

    rooms = list(floor_map.rooms())
    for i, (room_id, room) in enumerate(rooms):
        for other_id, other in rooms[i + 1 :]:
            if edges_aligned(room.boundary, other.boundary):
                raise GeneratorBug(f"level {level}: rooms {room_id} and {other_id} share an edge line")

    player_starts = sum(1 for _, room in floor_map.rooms() if room.is_player_start())
    expected_starts = 1 if level == 1 else 0
    if player_starts != expected_starts:
        raise GeneratorBug(f"level {level}: expected {expected_starts} player start room(s), found {player_starts}")

    treasure_chambers = sum(1 for _, room in floor_map.rooms() if room.is_treasure_chamber())
    expected_chambers = 1 if level == settings.levels else 0
    if treasure_chambers != expected_chambers:
        raise GeneratorBug(
            f"level {level}: expected {expected_chambers} treasure chamber(s), found {treasure_chambers}"
        )

    next_stairs = 0
    prev_stairs = 0
    for pos in grid.tile_positions():
        tile = grid.get(pos)
        obj = tile.object
        if isinstance(obj, ToNextLevel):
            next_stairs += 1
        elif isinstance(obj, ToPrevLevel):
            prev_stairs += 1
        else:
            continue
        if any(adj.has_staircase() for adj in grid.adjacents(pos)):
            raise GeneratorBug(f"level {level}: staircase at {pos} is beside another staircase")

    expected_next = settings.next_prev_tiles if level < settings.levels else 0
    expected_prev = settings.next_prev_tiles if level > 1 else 0
    if next_stairs != expected_next or prev_stairs != expected_prev:
        raise GeneratorBug(
            f"level {level}: expected {expected_next} down / {expected_prev} up staircases, "
            f"found {next_stairs} / {prev_stairs}"
        )

    unreachable = unreachable_rooms(floor_map)
    if unreachable:
        raise GeneratorBug(f"level {level}: rooms {sorted(r.index for r in unreachable)} are unreachable")

    logger.debug("Level %d passed validation", level)


__all__ = ["validate_level"]
