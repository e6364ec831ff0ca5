from __future__ import annotations

import logging
import random
from collections import deque
from typing import TYPE_CHECKING, Dict, List, Optional, Set

from ..map.floor_map import FloorMap
from ..map.geometry import GridSize, TilePos
from ..map.room import RoomId
from ..map.tile_rect import TileRect
from .attempts import Outcome, RanOutOfAttempts

if TYPE_CHECKING:
    from ..config import GenerationSettings

logger = logging.getLogger(__name__)

# Rooms that share this many tiles or fewer can only be touching at a corner
CORNER_OVERLAP_AREA = 4

Graph = Dict[int, List[int]]


class RoomPlacer:
    """Places the rooms of one level.

    Room rectangles are rejection-sampled until the level has as many rooms as
    requested. After every batch, rooms that were chopped up by their
    neighbours, rooms that sit flush against another room and rooms that are
    not connected to the main group are thrown away and only the shortfall is
    generated again. All candidates share one attempt budget.
    """

    def __init__(self, settings: "GenerationSettings") -> None:
        self.settings = settings

    def generate(self, rng: random.Random, floor_map: FloorMap, level: int) -> Outcome[int]:
        settings = self.settings
        nrooms = settings.rooms.sample(rng)

        rects: List[TileRect] = []
        attempts = 0
        while len(rects) < nrooms:
            for _ in range(nrooms - len(rects)):
                while True:
                    if attempts >= settings.attempts:
                        logger.debug("Level %d: ran out of attempts with %d/%d rooms", level, len(rects), nrooms)
                        return RanOutOfAttempts("rooms", settings.attempts)
                    attempts += 1

                    rect = self.random_room(rng, rects)
                    if rect is not None:
                        rects.append(rect)
                        break

            # Removing invalid rooms first may disconnect others
            rects = self.remove_invalid_rooms(rects)
            rects = self.remove_adjacent_rooms(rects)
            rects = self.remove_disconnected(rects)

        for rect in rects:
            room_id = floor_map.add_room(rect)
            place_rect(floor_map, room_id)

        if not self.assign_special_rooms(rng, floor_map, level):
            return RanOutOfAttempts("rooms", settings.attempts)

        logger.debug("Level %d: placed %d rooms using %d attempts", level, len(rects), attempts)
        return len(rects)

    # ---- Sampling --------------------------------------------------------
    def random_room(self, rng: random.Random, rects: List[TileRect]) -> Optional[TileRect]:
        """A random room rectangle, or None if it cannot go next to ``rects``."""
        settings = self.settings
        rect = TileRect(
            TilePos(rng.randrange(settings.rows), rng.randrange(settings.cols)),
            GridSize(settings.room_rows.sample(rng), settings.room_cols.sample(rng)),
        )

        if not self.fits(rect, rects):
            return None
        return rect

    def fits(self, rect: TileRect, rects: List[TileRect]) -> bool:
        """Whether ``rect`` lies on the grid and sits acceptably beside every room in ``rects``."""
        settings = self.settings
        bottom_right = rect.bottom_right()
        if bottom_right.row >= settings.rows or bottom_right.col >= settings.cols:
            return False

        for other in rects:
            common = rect.intersection(other)
            if common is not None:
                area = common.area()
                if area <= CORNER_OVERLAP_AREA:
                    return False
                # Neither room may lose more than max_overlap of its area to the other
                if area / other.area() > settings.max_overlap or area / rect.area() > settings.max_overlap:
                    return False

            # Rooms lined up on any edge would end up sharing a wall
            if edges_aligned(rect, other):
                return False

        return True

    # ---- Cleanup passes --------------------------------------------------
    def remove_invalid_rooms(self, rects: List[TileRect]) -> List[TileRect]:
        """Drop rooms that other rooms have covered or split into pieces.

        Runs in order, so a removed room no longer covers the rooms after it.
        """
        kept = list(rects)
        i = 0
        while i < len(kept):
            if self.is_invalid_rect(kept[i], kept):
                del kept[i]
            else:
                i += 1
        return kept

    def is_invalid_rect(self, room: TileRect, rects: List[TileRect]) -> bool:
        rows, cols = room.dim.rows, room.dim.cols
        # True where no other room covers the tile, offset by the room's top left
        uncovered = [[True] * cols for _ in range(rows)]
        for other in rects:
            if other == room:
                continue
            common = room.intersection(other)
            if common is None:
                continue
            for pos in common.tile_positions():
                local = pos - room.top_left
                uncovered[local.row][local.col] = False

        start = next(
            (TilePos(r, c) for r in range(rows) for c in range(cols) if uncovered[r][c]),
            None,
        )
        if start is None:
            # Completely covered
            return True

        seen: Set[TilePos] = {start}
        queue = deque([start])
        while queue:
            node = queue.popleft()
            for adj in (node.adjacent_north(), node.adjacent_east(cols), node.adjacent_south(rows), node.adjacent_west()):
                if adj is not None and adj not in seen and uncovered[adj.row][adj.col]:
                    seen.add(adj)
                    queue.append(adj)

        # Anything uncovered but unreached is a second piece of the room
        if any(uncovered[r][c] and TilePos(r, c) not in seen for r in range(rows) for c in range(cols)):
            return True

        span_rows = max(p.row for p in seen) - min(p.row for p in seen) + 1
        span_cols = max(p.col for p in seen) - min(p.col for p in seen) + 1
        return span_rows < self.settings.room_rows.min or span_cols < self.settings.room_cols.min

    @staticmethod
    def remove_adjacent_rooms(rects: List[TileRect]) -> List[TileRect]:
        """Drop rooms that touch another room edge to edge without overlapping.

        Such pairs can leave a room with no usable doorway.
        """
        kept = list(rects)
        i = 0
        while i < len(kept):
            room = kept[i]
            if any(other is not room and is_edge_adjacent(room, other) for other in kept):
                del kept[i]
            else:
                i += 1
        return kept

    @staticmethod
    def remove_disconnected(rects: List[TileRect]) -> List[TileRect]:
        """Keep only the largest group of rooms connected by overlaps.

        On ties the group found first (the one holding the lowest index) wins.
        """
        if not rects:
            return rects
        graph = intersection_graph(rects)
        components = connected_components(graph, len(rects))
        largest = components[0]
        for component in components[1:]:
            if len(component) > len(largest):
                largest = component
        return [rect for i, rect in enumerate(rects) if i in largest]

    # ---- Special rooms ---------------------------------------------------
    def assign_special_rooms(self, rng: random.Random, floor_map: FloorMap, level: int) -> bool:
        """Pick the player start (first level) and treasure chamber (last level).

        Returns False when the last level has no Normal room left to become the
        treasure chamber.
        """
        start_id: Optional[RoomId] = None
        if level == 1:
            start_id = RoomId(rng.randrange(floor_map.nrooms()))
            floor_map.room(start_id).become_player_start()
            # Redraw so no overlapping room covers this one
            place_rect(floor_map, start_id)

        if level == self.settings.levels:
            room_id = self.pick_treasure_chamber(floor_map)
            if room_id is None:
                return False
            floor_map.room(room_id).become_treasure_chamber()
            place_rect(floor_map, room_id)
            if start_id is not None:
                # Single level dungeon: the player must still start inside the start room
                place_rect(floor_map, start_id)

        return True

    @staticmethod
    def pick_treasure_chamber(floor_map: FloorMap) -> Optional[RoomId]:
        """The largest room at the end of a path, else the largest room overall.

        A room with a single neighbour cannot cut any other room off when it
        becomes the final room. Equal areas go to the lowest room id.
        """
        ids = [room_id for room_id, _ in floor_map.rooms()]
        graph = intersection_graph([room.boundary for _, room in floor_map.rooms()])
        candidates = [room_id for room_id in ids if floor_map.room(room_id).is_normal()]
        if not candidates:
            return None

        def area(room_id: RoomId) -> int:
            return floor_map.room(room_id).boundary.area()

        dead_ends = [room_id for room_id in candidates if len(graph[room_id.index]) == 1]
        # max() keeps the first of equal elements, so lower ids win ties
        return max(dead_ends or candidates, key=area)


def place_rect(floor_map: FloorMap, room_id: RoomId) -> None:
    """Stamp a room onto the grid: floor over the whole rectangle, walls on its edges."""
    boundary = floor_map.room(room_id).boundary
    grid = floor_map.grid
    for pos in boundary.tile_positions():
        grid.become_floor(pos, room_id)
    for pos in boundary.edge_positions():
        grid.become_wall(pos)


def is_edge_adjacent(a: TileRect, b: TileRect) -> bool:
    """True if ``a`` and ``b`` do not overlap but some tile of one is orthogonally next to the other."""
    if a.has_intersection(b):
        return False
    a_br, b_br = a.bottom_right(), b.bottom_right()
    rows_overlap = a.top_left.row <= b_br.row and b.top_left.row <= a_br.row
    cols_overlap = a.top_left.col <= b_br.col and b.top_left.col <= a_br.col
    side_by_side = a_br.col + 1 == b.top_left.col or b_br.col + 1 == a.top_left.col
    stacked = a_br.row + 1 == b.top_left.row or b_br.row + 1 == a.top_left.row
    return (rows_overlap and side_by_side) or (cols_overlap and stacked)


def edges_aligned(a: TileRect, b: TileRect) -> bool:
    """True if ``a`` and ``b`` share a top row, left column, bottom row or right column."""
    a_br, b_br = a.bottom_right(), b.bottom_right()
    return (
        a.top_left.row == b.top_left.row
        or a.top_left.col == b.top_left.col
        or a_br.row == b_br.row
        or a_br.col == b_br.col
    )


def intersection_graph(rects: List[TileRect]) -> Graph:
    """Adjacency list of rectangle indexes, linking every pair that overlaps."""
    graph: Graph = {i: [] for i in range(len(rects))}
    for i in range(len(rects)):
        for j in range(i + 1, len(rects)):
            if rects[i].has_intersection(rects[j]):
                graph[i].append(j)
                graph[j].append(i)
    return graph


def connected_components(graph: Graph, nodes: int) -> List[Set[int]]:
    """Components in discovery order, each found by BFS from its lowest node."""
    components: List[Set[int]] = []
    assigned: Set[int] = set()
    for start in range(nodes):
        if start in assigned:
            continue
        seen = {start}
        queue = deque([start])
        while queue:
            node = queue.popleft()
            for adj in graph.get(node, ()):
                if adj not in seen:
                    seen.add(adj)
                    queue.append(adj)
        assigned |= seen
        components.append(seen)
    return components


__all__ = [
    "RoomPlacer",
    "place_rect",
    "is_edge_adjacent",
    "edges_aligned",
    "intersection_graph",
    "connected_components",
    "CORNER_OVERLAP_AREA",
]
