"""Placing objects on the inside of room walls.

The shared routine (:class:`ObjectPlacer`) walks a shuffled list of eligible
rooms, spending one attempt per room per pass. What to sample, how to check
a candidate and what to create are supplied as small strategy objects so the
same routine serves both kinds of staircase.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from itertools import cycle
from typing import TYPE_CHECKING, Callable, List, Optional

from ..map.floor_map import FloorMap
from ..map.geometry import TilePos
from ..map.grid import TileGrid
from ..map.room import Room, RoomId
from ..map.spawns import StairsSpawn
from ..map.tile_rect import TileRect
from ..map.tiles import StairsDirection, TileObject, ToNextLevel, ToPrevLevel
from .attempts import Outcome, RanOutOfAttempts
from .doorways import unreachable_rooms

if TYPE_CHECKING:
    from ..config import GenerationSettings

logger = logging.getLogger(__name__)


class EdgeSampler:
    """Picks a random tile on the edge of a room rectangle."""

    def sample(self, rng: random.Random, rect: TileRect) -> TilePos:
        raise NotImplementedError


class LeftEdgeSampler(EdgeSampler):
    def sample(self, rng: random.Random, rect: TileRect) -> TilePos:
        return rect.random_left_vertical_edge_tile(rng)


class RightEdgeSampler(EdgeSampler):
    def sample(self, rng: random.Random, rect: TileRect) -> TilePos:
        return rect.random_right_vertical_edge_tile(rng)


class PlacementValidator:
    """Extra, object specific checks on a tile chosen by :func:`find_place`."""

    def validate(self, grid: TileGrid, pos: TilePos) -> bool:
        return True


class StaircaseValidator(PlacementValidator):
    """Staircases need room around them.

    A staircase may not be beside another staircase, nor beside a tile that is
    beside an entrance (the entrance would be walled off when the staircase is
    surrounded). It must be enterable from exactly one side of its row.
    """

    def validate(self, grid: TileGrid, pos: TilePos) -> bool:
        open_sides = 0
        for adj in grid.adjacent_positions(pos):
            tile = grid.get(adj)
            # All staircases sit on vertical room edges, so the way in is in the same row
            if adj.row == pos.row and tile.is_traversable():
                open_sides += 1
            if tile.has_staircase():
                return False
            if any(grid.is_room_entrance(adj2) for adj2 in grid.adjacent_positions(adj)):
                return False
        return open_sides == 1


# Creates the object to place from its pairing id and facing
ObjectFactory = Callable[[int, StairsDirection], TileObject]


@dataclass(frozen=True)
class StairsKind:
    """Everything that differs between the two kinds of staircase."""

    name: str
    room_filter: Callable[[Room], bool]
    sampler: EdgeSampler
    validator: PlacementValidator
    factory: ObjectFactory
    to_next_level: bool


# Only sprites facing away from left and right walls exist, so stairs go on vertical edges
TO_NEXT_LEVEL = StairsKind(
    name="to_next_level",
    room_filter=Room.can_contain_to_next_level,
    sampler=RightEdgeSampler(),
    validator=StaircaseValidator(),
    factory=ToNextLevel,
    to_next_level=True,
)

TO_PREV_LEVEL = StairsKind(
    name="to_prev_level",
    room_filter=Room.can_contain_to_prev_level,
    sampler=LeftEdgeSampler(),
    validator=StaircaseValidator(),
    factory=ToPrevLevel,
    to_next_level=False,
)


class ObjectPlacer:
    def __init__(self, settings: "GenerationSettings") -> None:
        self.settings = settings

    def place_stairs(self, rng: random.Random, floor_map: FloorMap, kind: StairsKind, level: int = 0) -> Outcome[List[TilePos]]:
        """Place ``next_prev_tiles`` staircases of ``kind`` and wall them in."""
        placed = self.place_object_in_rooms(
            rng,
            floor_map,
            kind.room_filter,
            self.settings.next_prev_tiles,
            kind.sampler,
            kind.validator,
            kind.factory,
            phase=kind.name,
        )
        if isinstance(placed, RanOutOfAttempts):
            logger.debug("Level %d: could not place %s stairs", level, kind.name)
            return placed

        surround_stairways(floor_map.grid, placed)
        if unreachable_rooms(floor_map):
            # The new walls closed off part of the level
            logger.debug("Level %d: %s stairs cut off a room", level, kind.name)
            return RanOutOfAttempts(kind.name, 0)
        for pos in placed:
            obj = floor_map.grid.get(pos).object
            floor_map.spawns.append(
                StairsSpawn(
                    tile=pos,
                    position=floor_map.tile_center(pos),
                    bounding_box=pos.tile_rect(floor_map.tile_size),
                    id=obj.id,
                    direction=obj.direction,
                    to_next_level=kind.to_next_level,
                )
            )
        logger.debug("Level %d: placed %d %s stairs", level, len(placed), kind.name)
        return placed

    def place_object_in_rooms(
        self,
        rng: random.Random,
        floor_map: FloorMap,
        room_filter: Callable[[Room], bool],
        count: int,
        sampler: EdgeSampler,
        validator: PlacementValidator,
        factory: ObjectFactory,
        phase: str = "objects",
    ) -> Outcome[List[TilePos]]:
        """Place ``count`` objects, each in a different attempt on a shuffled cycle of rooms.

        One attempt is spent per room before moving on: some rooms simply have
        no valid spot, and the attempt budget is far larger than any room.
        The n-th object placed gets pairing id n.
        """
        if count == 0:
            return []
        rooms = [(room_id, room.boundary) for room_id, room in floor_map.rooms() if room_filter(room)]
        if len(rooms) < count:
            logger.debug("Only %d eligible rooms for %d %s", len(rooms), count, phase)
            return RanOutOfAttempts(phase, 0)
        rng.shuffle(rooms)

        grid = floor_map.grid
        attempts = 0
        placed: List[TilePos] = []
        for room_id, rect in cycle(rooms):
            if len(placed) >= count:
                break
            if attempts >= self.settings.attempts:
                return RanOutOfAttempts(phase, self.settings.attempts)
            attempts += 1

            pos = sampler.sample(rng, rect)
            # Overlapping rooms may have turned the edge into floor
            if not grid.get(pos).is_wall():
                continue
            # Corners only touch other walls and other rooms
            if rect.is_corner(pos):
                continue

            inner = find_place(grid, pos, room_id)
            if inner is None or not validator.validate(grid, inner):
                continue

            # Face away from the wall
            direction = StairsDirection.towards_target(pos, inner)
            grid.place_object(inner, factory(len(placed), direction))
            placed.append(inner)

        return placed


def find_place(grid: TileGrid, pos: TilePos, room_id: RoomId) -> Optional[TilePos]:
    """The floor tile inside ``room_id`` next to the wall at ``pos``, if an object may go there.

    The wall must touch exactly one floor tile of the room; anything else is
    a wall beside an entrance or beside another room.
    """
    if not grid.get(pos).is_wall():
        return None
    inner_tiles = [adj for adj in grid.adjacent_positions(pos) if grid.get(adj).is_room_floor(room_id)]
    if len(inner_tiles) != 1:
        return None
    inner = inner_tiles[0]

    if grid.get(inner).has_object():
        return None

    # Catches a wall right next to an entrance:
    #
    #     ######x#
    #     #
    #     #      #
    #     ########
    if any(grid.is_room_entrance(adj) for adj in grid.adjacent_positions(inner)):
        return None
    return inner


def surround_stairways(grid: TileGrid, staircases: List[TilePos]) -> None:
    """Wall in each staircase above and below, leaving only its way in open."""
    for stairs in staircases:
        for adj in grid.adjacent_positions(stairs):
            # Stairs are on vertical edges, so the sides to close are in the same column
            if adj.col == stairs.col and not grid.get(adj).is_wall():
                grid.become_wall(adj)


__all__ = [
    "EdgeSampler",
    "LeftEdgeSampler",
    "RightEdgeSampler",
    "PlacementValidator",
    "StaircaseValidator",
    "StairsKind",
    "TO_NEXT_LEVEL",
    "TO_PREV_LEVEL",
    "ObjectPlacer",
    "find_place",
    "surround_stairways",
]
