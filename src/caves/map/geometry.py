from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class Point:
    """A point in world coordinates (pixels). x grows right, y grows down."""

    x: int
    y: int

    def offset(self, dx: int, dy: int) -> "Point":
        return Point(self.x + dx, self.y + dy)


@dataclass(frozen=True)
class WorldRect:
    """An axis-aligned rectangle in world coordinates."""

    x: int
    y: int
    width: int
    height: int

    def right(self) -> int:
        return self.x + self.width

    def bottom(self) -> int:
        return self.y + self.height

    def contains_point(self, p: Point) -> bool:
        return (self.x <= p.x < self.right()) and (self.y <= p.y < self.bottom())

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class GridSize:
    """The dimensions of a 2D span of tiles."""

    rows: int
    cols: int

    def to_rect(self, tile_size: int) -> WorldRect:
        return WorldRect(0, 0, self.cols * tile_size, self.rows * tile_size)


@dataclass(frozen=True, order=True)
class TilePos:
    """The location of a single tile in a grid. Rows map to y, columns to x."""

    row: int
    col: int

    def difference(self, other: "TilePos") -> Tuple[int, int]:
        """Signed (delta row, delta col) of ``self - other``."""
        return (self.row - other.row, self.col - other.col)

    def adjacent_north(self) -> Optional["TilePos"]:
        if self.row == 0:
            return None
        return TilePos(self.row - 1, self.col)

    def adjacent_east(self, ncols: int) -> Optional["TilePos"]:
        if self.col >= ncols - 1:
            return None
        return TilePos(self.row, self.col + 1)

    def adjacent_south(self, nrows: int) -> Optional["TilePos"]:
        if self.row >= nrows - 1:
            return None
        return TilePos(self.row + 1, self.col)

    def adjacent_west(self) -> Optional["TilePos"]:
        if self.col == 0:
            return None
        return TilePos(self.row, self.col - 1)

    def to_point(self, tile_size: int) -> Point:
        """Top-left corner of this tile in world coordinates."""
        return Point(self.col * tile_size, self.row * tile_size)

    def center(self, tile_size: int) -> Point:
        return self.to_point(tile_size).offset(tile_size // 2, tile_size // 2)

    def tile_rect(self, tile_size: int) -> WorldRect:
        top_left = self.to_point(tile_size)
        return WorldRect(top_left.x, top_left.y, tile_size, tile_size)

    def __sub__(self, other: "TilePos") -> "TilePos":
        return TilePos(self.row - other.row, self.col - other.col)


__all__ = ["Point", "WorldRect", "GridSize", "TilePos"]
