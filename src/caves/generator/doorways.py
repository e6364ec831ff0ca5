from __future__ import annotations

import logging
import random
from collections import deque
from dataclasses import replace
from typing import Dict, FrozenSet, List, Optional, Set, Tuple

from ..exceptions import GeneratorBug
from ..map.floor_map import FloorMap
from ..map.geometry import TilePos
from ..map.grid import TileGrid
from ..map.room import RoomId
from ..map.spawns import DoorSpawn
from ..map.sprites import WallSpriteAlternate
from ..map.tiles import Door, DoorState, Orientation
from .attempts import Outcome, RanOutOfAttempts

logger = logging.getLogger(__name__)

# (enumerating room, other room)
RoomPair = Tuple[RoomId, RoomId]
Candidate = Tuple[TilePos, RoomPair]


class DoorwayConnector:
    """Turns just enough room walls into doors that every room can be reached.

    Every wall tile on a room's edge that separates that room's floor from
    another room's floor is a candidate. Candidates are picked at random; once
    a pair of rooms has a door, every other candidate for that pair is dropped.
    """

    def connect(self, rng: random.Random, floor_map: FloorMap, level: int = 0) -> Outcome[int]:
        grid = floor_map.grid
        candidates = self.doorway_candidates(floor_map)

        committed: Dict[FrozenSet[RoomId], Candidate] = {}
        while candidates:
            edge, pair = rng.choice(candidates)
            committed[frozenset(pair)] = (edge, pair)
            candidates = [c for c in candidates if frozenset(c[1]) not in committed]

        # Orientation is read from the walls as they were before any door went in
        doors = [(edge, room_id, door_orientation(grid, edge)) for edge, (room_id, _) in committed.values()]
        for edge, room_id, orientation in doors:
            grid.become_floor(edge, room_id)
            grid.place_object(edge, Door(DoorState.CLOSED, orientation))
            if orientation is Orientation.HORIZONTAL:
                mark_entrance_walls(grid, edge)
            floor_map.spawns.append(
                DoorSpawn(
                    tile=edge,
                    position=floor_map.tile_center(edge),
                    bounding_box=edge.tile_rect(floor_map.tile_size),
                    orientation=orientation,
                )
            )

        unreachable = unreachable_rooms(floor_map)
        if unreachable:
            logger.warning(
                "Level %d: doorways left %d room(s) unreachable (%s); retrying with a new seed",
                level,
                len(unreachable),
                ", ".join(str(r) for r in sorted(unreachable)),
            )
            return RanOutOfAttempts("doorways", 0)

        logger.debug("Level %d: connected %d rooms with %d doors", level, floor_map.nrooms(), len(doors))
        return len(doors)

    @staticmethod
    def doorway_candidates(floor_map: FloorMap) -> List[Candidate]:
        grid = floor_map.grid
        candidates: List[Candidate] = []
        for room_id, room in floor_map.rooms():
            for edge in room.boundary.edge_positions():
                pair = doorway_wall_adjacent_rooms(grid, edge, room_id)
                if pair is not None:
                    candidates.append((edge, pair))
        return candidates


def doorway_wall_adjacent_rooms(grid: TileGrid, edge: TilePos, room_id: RoomId) -> Optional[RoomPair]:
    """The pair of rooms a wall at ``edge`` would join, if it can become a doorway.

    The wall needs exactly two floor neighbours from two different rooms, one
    of them ``room_id``. That already rules out corners and walls beside an
    existing entrance.
    """
    # Overlapping rooms may have turned this edge into floor
    if not grid.get(edge).is_wall():
        return None

    adj_rooms = [room for room in (tile.floor_room_id() for tile in grid.adjacents(edge)) if room is not None]
    if len(adj_rooms) != 2 or adj_rooms[0] == adj_rooms[1]:
        return None
    r1, r2 = adj_rooms
    if r1 == room_id:
        return (room_id, r2)
    if r2 == room_id:
        return (room_id, r1)
    return None


def door_orientation(grid: TileGrid, edge: TilePos) -> Orientation:
    """Horizontal when the door sits in a row of walls, vertical in a column of walls."""
    row_walls = 0
    col_walls = 0
    for adj in grid.adjacent_positions(edge):
        if not grid.get(adj).is_wall():
            continue
        if adj.row == edge.row:
            row_walls += 1
        if adj.col == edge.col:
            col_walls += 1

    # Entrances are one tile wide: walls on both sides in a row or in a column, never both
    if (row_walls, col_walls) == (2, 0):
        return Orientation.HORIZONTAL
    if (row_walls, col_walls) == (0, 2):
        return Orientation.VERTICAL
    raise GeneratorBug(f"entrance at {edge} did not have the expected walls ({row_walls} in row, {col_walls} in column)")


def mark_entrance_walls(grid: TileGrid, edge: TilePos) -> None:
    """Give the walls on either side of a horizontal door their entrance sprite."""
    nrows = grid.rows_len()
    for adj in grid.adjacent_positions(edge):
        if adj.row != edge.row:
            continue
        tile = grid.get(adj)
        if not tile.is_wall():
            continue
        south = adj.adjacent_south(nrows)
        if south is not None and grid.get(south).is_wall():
            continue
        alt = WallSpriteAlternate.ENTRANCE_LEFT if adj.col < edge.col else WallSpriteAlternate.ENTRANCE_RIGHT
        grid.set_wall_sprite(adj, replace(tile.sprite, alt=alt))


def unreachable_rooms(floor_map: FloorMap) -> Set[RoomId]:
    """Rooms that cannot be reached from the first room over floor tiles.

    Closed doors open on contact, so only locked doors block the way.
    """
    grid = floor_map.grid
    all_rooms = {room_id for room_id, _ in floor_map.rooms()}

    start = next((pos for pos in grid.tile_positions() if grid.get(pos).is_floor()), None)
    if start is None:
        return all_rooms

    seen = {start}
    queue = deque([start])
    reached: Set[RoomId] = set()
    while queue:
        pos = queue.popleft()
        reached.add(grid.get(pos).floor_room_id())
        for adj in grid.adjacent_positions(pos):
            if adj not in seen and is_passable(grid, adj):
                seen.add(adj)
                queue.append(adj)

    return all_rooms - reached


def is_passable(grid: TileGrid, pos: TilePos) -> bool:
    tile = grid.get(pos)
    if not tile.is_floor():
        return False
    obj = tile.object
    if isinstance(obj, Door):
        return obj.is_passable()
    return obj is None or obj.is_traversable()


__all__ = [
    "DoorwayConnector",
    "doorway_wall_adjacent_rooms",
    "door_orientation",
    "mark_entrance_walls",
    "unreachable_rooms",
    "is_passable",
]
