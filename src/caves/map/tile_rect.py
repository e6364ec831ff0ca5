from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterator, Optional

from .geometry import GridSize, TilePos


@dataclass(frozen=True)
class TileRect:
    """A 2D span of tiles given by its top-left tile and its dimensions."""

    top_left: TilePos
    dim: GridSize

    def area(self) -> int:
        return self.dim.rows * self.dim.cols

    def top_right(self) -> TilePos:
        return TilePos(self.top_left.row, self.top_left.col + self.dim.cols - 1)

    def bottom_left(self) -> TilePos:
        return TilePos(self.top_left.row + self.dim.rows - 1, self.top_left.col)

    def bottom_right(self) -> TilePos:
        return TilePos(self.top_left.row + self.dim.rows - 1, self.top_left.col + self.dim.cols - 1)

    def is_corner(self, pos: TilePos) -> bool:
        return pos in (self.top_left, self.top_right(), self.bottom_left(), self.bottom_right())

    def center_tile(self) -> TilePos:
        """The "center" tile of this rectangle.

        When the exact center falls between tiles, this biases towards the
        bottom right.
        """
        return TilePos(self.top_left.row + self.dim.rows // 2, self.top_left.col + self.dim.cols // 2)

    # ---- Intersection ----------------------------------------------------
    def intersection(self, other: "TileRect") -> Optional["TileRect"]:
        row_start = max(self.top_left.row, other.top_left.row)
        col_start = max(self.top_left.col, other.top_left.col)
        row_end = min(self.top_left.row + self.dim.rows, other.top_left.row + other.dim.rows)
        col_end = min(self.top_left.col + self.dim.cols, other.top_left.col + other.dim.cols)
        if row_end <= row_start or col_end <= col_start:
            return None
        return TileRect(TilePos(row_start, col_start), GridSize(row_end - row_start, col_end - col_start))

    def has_intersection(self, other: "TileRect") -> bool:
        return self.intersection(other) is not None

    # ---- Iteration -------------------------------------------------------
    def tile_positions(self) -> Iterator[TilePos]:
        for row in range(self.top_left.row, self.top_left.row + self.dim.rows):
            for col in range(self.top_left.col, self.top_left.col + self.dim.cols):
                yield TilePos(row, col)

    def edge_positions(self) -> Iterator[TilePos]:
        """All positions on the edge of the rectangle, each corner exactly once."""
        tl = self.top_left
        br = self.bottom_right()
        for col in range(tl.col, tl.col + self.dim.cols):
            yield TilePos(tl.row, col)
            if br.row != tl.row:
                yield TilePos(br.row, col)
        for row in range(tl.row + 1, tl.row + self.dim.rows - 1):
            yield TilePos(row, tl.col)
            if br.col != tl.col:
                yield TilePos(row, br.col)

    # ---- Random sampling -------------------------------------------------
    def random_inner_tile(self, rng: random.Random) -> TilePos:
        """A random tile that is not on the edge of the rectangle."""
        return TilePos(
            self.top_left.row + rng.randrange(1, self.dim.rows - 1),
            self.top_left.col + rng.randrange(1, self.dim.cols - 1),
        )

    def random_left_vertical_edge_tile(self, rng: random.Random) -> TilePos:
        return TilePos(self.top_left.row + rng.randrange(self.dim.rows), self.top_left.col)

    def random_right_vertical_edge_tile(self, rng: random.Random) -> TilePos:
        return TilePos(
            self.top_left.row + rng.randrange(self.dim.rows),
            self.top_left.col + self.dim.cols - 1,
        )

    def to_dict(self) -> dict:
        return {
            "row": self.top_left.row,
            "col": self.top_left.col,
            "rows": self.dim.rows,
            "cols": self.dim.cols,
        }


__all__ = ["TileRect"]
