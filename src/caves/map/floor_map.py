from __future__ import annotations

import hashlib
from typing import Any, Dict, Iterator, List, Tuple

from .geometry import GridSize, Point, TilePos, WorldRect
from .grid import TileGrid
from .room import Room, RoomId
from .spawns import Spawn
from .tile_rect import TileRect
from .tiles import Tile


class FloorMap:
    """One level of the dungeon: its tile grid, its rooms and its spawn records.

    The generator builds a FloorMap phase by phase. Once handed to callers it
    is only read: renderers look tiles and rooms up, the game layer turns the
    spawn records into entities.
    """

    def __init__(self, size: GridSize, tile_size: int) -> None:
        self.grid = TileGrid(size)
        self.tile_size = tile_size
        self._rooms: List[Room] = []
        self.spawns: List[Spawn] = []

    # ---- Rooms -----------------------------------------------------------
    def add_room(self, boundary: TileRect) -> RoomId:
        self._rooms.append(Room(boundary))
        return RoomId(len(self._rooms) - 1)

    def nrooms(self) -> int:
        return len(self._rooms)

    def rooms(self) -> Iterator[Tuple[RoomId, Room]]:
        for index, room in enumerate(self._rooms):
            yield RoomId(index), room

    def room(self, room_id: RoomId) -> Room:
        return self._rooms[room_id.index]

    def room_exact_area(self, room_id: RoomId) -> int:
        """Number of floor tiles that actually belong to the room.

        Overlapping rooms take tiles from each other, so this may be smaller
        than the area of the room's rectangle.
        """
        boundary = self.room(room_id).boundary
        return sum(1 for pos in boundary.tile_positions() if self.grid.get(pos).is_room_floor(room_id))

    # ---- Tiles and world coordinates -------------------------------------
    def tile(self, pos: TilePos) -> Tile:
        return self.grid.get(pos)

    def level_boundary(self) -> WorldRect:
        return self.grid.dimensions().to_rect(self.tile_size)

    def tile_center(self, pos: TilePos) -> Point:
        return pos.center(self.tile_size)

    def world_to_tile_pos(self, point: Point) -> TilePos:
        """The tile containing ``point``. Raises ValueError for points off the grid."""
        if not self.level_boundary().contains_point(point):
            raise ValueError(f"point {point} is not on the grid")
        return TilePos(point.y // self.tile_size, point.x // self.tile_size)

    def has_spawn_within(self, bounds: WorldRect) -> bool:
        return any(bounds.contains_point(spawn.position) for spawn in self.spawns)

    # ---- Output ----------------------------------------------------------
    def signature(self) -> str:
        """Stable digest of the structural content (rooms, tiles, objects, spawns)."""
        h = hashlib.blake2b(digest_size=16)
        for room_id, room in self.rooms():
            h.update(f"R{room_id}:{room.room_type.value}:{room.boundary.to_dict()}".encode("utf-8"))
        for row in self.grid.rows():
            h.update(self._render_row(row).encode("utf-8"))
            for tile in row:
                obj = tile.object
                if obj is not None:
                    h.update(repr(obj.to_dict()).encode("utf-8"))
        for spawn in self.spawns:
            h.update(repr(spawn.to_dict()).encode("utf-8"))
        return h.hexdigest()

    @staticmethod
    def _render_row(row: List[Tile]) -> str:
        chars = []
        for tile in row:
            obj = tile.object
            if obj is not None:
                chars.append(obj.symbol)
            elif tile.is_wall():
                chars.append("#")
            elif tile.is_floor():
                chars.append(".")
            else:
                chars.append(" ")
        return "".join(chars)

    def render_ascii(self) -> str:
        return "\n".join(self._render_row(row) for row in self.grid.rows())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": self.grid.rows_len(),
            "cols": self.grid.cols_len(),
            "tile_size": self.tile_size,
            "signature": self.signature(),
            "rooms": [dict(room.to_dict(), id=room_id.index) for room_id, room in self.rooms()],
            "spawns": [spawn.to_dict() for spawn in self.spawns],
        }

    def __repr__(self) -> str:
        return f"FloorMap({self.grid.rows_len()}x{self.grid.cols_len()}, rooms={self.nrooms()})"


__all__ = ["FloorMap"]
