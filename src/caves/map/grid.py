from __future__ import annotations

from typing import Iterator, List, Optional

from ..exceptions import GeneratorBug
from .geometry import GridSize, TilePos
from .room import RoomId
from .sprites import FloorSprite, WallDecoration, WallSprite
from .tiles import EmptyTile, FloorTile, Tile, TileObject, WallTile


class TileGrid:
    """A rectangular grid of tiles; every position starts out empty.

    Rows map to y and columns map to x. All generation phases mutate the grid
    through the methods below rather than by poking at tiles directly.
    """

    def __init__(self, size: GridSize) -> None:
        if size.rows <= 0 or size.cols <= 0:
            raise ValueError("Cannot create a grid with zero rows or zero columns")
        self._tiles: List[List[Tile]] = [[EmptyTile() for _ in range(size.cols)] for _ in range(size.rows)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TileGrid):
            return NotImplemented
        return self._tiles == other._tiles

    def rows_len(self) -> int:
        return len(self._tiles)

    def cols_len(self) -> int:
        return len(self._tiles[0])

    def dimensions(self) -> GridSize:
        return GridSize(self.rows_len(), self.cols_len())

    def rows(self) -> Iterator[List[Tile]]:
        return iter(self._tiles)

    def in_bounds(self, pos: TilePos) -> bool:
        return 0 <= pos.row < self.rows_len() and 0 <= pos.col < self.cols_len()

    def get(self, pos: TilePos) -> Tile:
        if not self.in_bounds(pos):
            raise IndexError(f"Tile out of bounds: {pos} not in {self.dimensions()}")
        return self._tiles[pos.row][pos.col]

    # ---- Mutation --------------------------------------------------------
    def place_tile(self, pos: TilePos, tile: Tile) -> None:
        if tile.is_empty():
            raise GeneratorBug("unsafe to place an empty tile without checking surroundings")
        self.get(pos)
        self._tiles[pos.row][pos.col] = tile

    def become_wall(self, pos: TilePos, sprite: Optional[WallSprite] = None) -> None:
        self.place_tile(pos, WallTile(sprite or WallSprite()))

    def become_floor(self, pos: TilePos, room_id: RoomId, sprite: FloorSprite = FloorSprite.FLOOR_1) -> None:
        self.place_tile(pos, FloorTile(room_id, sprite))

    def place_object(self, pos: TilePos, obj: TileObject) -> None:
        tile = self.get(pos)
        if not isinstance(tile, FloorTile):
            raise GeneratorBug(f"only floor tiles may hold objects, not the tile at {pos}")
        tile.object = obj

    def set_wall_sprite(self, pos: TilePos, sprite: WallSprite) -> None:
        tile = self.get(pos)
        if not isinstance(tile, WallTile):
            raise GeneratorBug(f"cannot set a wall sprite for the non-wall tile at {pos}")
        tile.sprite = sprite

    def set_wall_decoration(self, pos: TilePos, decoration: Optional[WallDecoration]) -> None:
        tile = self.get(pos)
        if not isinstance(tile, WallTile):
            raise GeneratorBug(f"cannot decorate the non-wall tile at {pos}")
        tile.decoration = decoration

    def set_floor_sprite(self, pos: TilePos, sprite: FloorSprite) -> None:
        tile = self.get(pos)
        if not isinstance(tile, FloorTile):
            raise GeneratorBug(f"cannot set a floor sprite for the non-floor tile at {pos}")
        tile.sprite = sprite

    # ---- Query -----------------------------------------------------------
    def tile_positions(self) -> Iterator[TilePos]:
        cols = self.cols_len()
        for row in range(self.rows_len()):
            for col in range(cols):
                yield TilePos(row, col)

    def adjacent_positions(self, pos: TilePos) -> Iterator[TilePos]:
        """Positions next to ``pos`` in the four cardinal directions (N, E, S, W) that are on the grid."""
        for adj in (
            pos.adjacent_north(),
            pos.adjacent_east(self.cols_len()),
            pos.adjacent_south(self.rows_len()),
            pos.adjacent_west(),
        ):
            if adj is not None:
                yield adj

    def adjacents(self, pos: TilePos) -> Iterator[Tile]:
        for adj in self.adjacent_positions(pos):
            yield self.get(adj)

    def is_room_entrance(self, pos: TilePos) -> bool:
        """True for a floor tile with a floor tile of a different room beside it."""
        room_id = self.get(pos).floor_room_id()
        if room_id is None:
            return False
        for adj in self.adjacents(pos):
            other = adj.floor_room_id()
            if other is not None and other != room_id:
                return True
        return False


__all__ = ["TileGrid"]
