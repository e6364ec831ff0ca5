from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ..exceptions import GeneratorBug
from .geometry import TilePos
from .room import RoomId
from .sprites import FloorSprite, WallDecoration, WallSprite


class DoorState(Enum):
    OPEN = "open"
    CLOSED = "closed"
    LOCKED = "locked"


class Orientation(Enum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"


class StairsDirection(Enum):
    LEFT = "left"
    RIGHT = "right"

    @classmethod
    def towards_target(cls, pos: TilePos, target: TilePos) -> "StairsDirection":
        """The facing that makes a tile at ``pos`` look at ``target``.

        The positions must be in the same row; stairs only face left or right.
        """
        drow, dcol = pos.difference(target)
        if drow != 0 or dcol == 0:
            raise GeneratorBug(f"stairs at {pos} cannot face {target}: only left or right is supported")
        return cls.LEFT if dcol > 0 else cls.RIGHT


class Item(Enum):
    TREASURE_KEY = "treasure_key"
    ROOM_KEY = "room_key"
    POTION = "potion"


class TileObject:
    """Something placed on top of a floor tile."""

    symbol = " "

    def is_traversable(self) -> bool:
        return True

    def is_staircase(self) -> bool:
        return False

    def to_dict(self) -> dict:
        raise NotImplementedError


@dataclass(frozen=True)
class ToNextLevel(TileObject):
    """Stepping here leads to the ToPrevLevel with the same id one level down."""

    id: int
    direction: StairsDirection
    symbol = "↓"

    def is_staircase(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {"kind": "to_next_level", "id": self.id, "direction": self.direction.value}


@dataclass(frozen=True)
class ToPrevLevel(TileObject):
    """Stepping here leads to the ToNextLevel with the same id one level up."""

    id: int
    direction: StairsDirection
    symbol = "↑"

    def is_staircase(self) -> bool:
        return True

    def to_dict(self) -> dict:
        return {"kind": "to_prev_level", "id": self.id, "direction": self.direction.value}


@dataclass(frozen=True)
class Door(TileObject):
    """A door between two rooms; locked doors need a room key."""

    state: DoorState
    orientation: Orientation
    symbol = "+"

    def is_traversable(self) -> bool:
        return self.state is DoorState.OPEN

    def is_passable(self) -> bool:
        """Closed doors open on contact; only locked ones block the way."""
        return self.state is not DoorState.LOCKED

    def to_dict(self) -> dict:
        return {"kind": "door", "state": self.state.value, "orientation": self.orientation.value}


@dataclass(frozen=True)
class Gate(TileObject):
    """Like a door, but only opened by an external event (switch, cleared challenge room)."""

    state: DoorState
    orientation: Orientation
    symbol = "="

    def is_traversable(self) -> bool:
        return self.state is DoorState.OPEN

    def to_dict(self) -> dict:
        return {"kind": "gate", "state": self.state.value, "orientation": self.orientation.value}


@dataclass(frozen=True)
class Chest(TileObject):
    item: Optional[Item] = None
    symbol = "$"

    def is_traversable(self) -> bool:
        return False

    def to_dict(self) -> dict:
        return {"kind": "chest", "item": self.item.value if self.item else None}


class Tile:
    """Base class of the three tile variants: floor, wall and empty."""

    def is_floor(self) -> bool:
        return False

    def is_wall(self) -> bool:
        return False

    def is_empty(self) -> bool:
        return False

    @property
    def object(self) -> Optional[TileObject]:
        return None

    def has_object(self) -> bool:
        return self.object is not None

    def has_staircase(self) -> bool:
        obj = self.object
        return obj is not None and obj.is_staircase()

    def floor_room_id(self) -> Optional[RoomId]:
        return None

    def is_room_floor(self, room_id: RoomId) -> bool:
        return self.floor_room_id() == room_id

    def is_traversable(self) -> bool:
        return False


@dataclass
class FloorTile(Tile):
    room_id: RoomId
    sprite: FloorSprite = FloorSprite.FLOOR_1
    object: Optional[TileObject] = None

    def is_floor(self) -> bool:
        return True

    def floor_room_id(self) -> Optional[RoomId]:
        return self.room_id

    def is_traversable(self) -> bool:
        return self.object is None or self.object.is_traversable()


@dataclass
class WallTile(Tile):
    sprite: WallSprite = field(default_factory=WallSprite)
    decoration: Optional[WallDecoration] = None

    def is_wall(self) -> bool:
        return True


@dataclass
class EmptyTile(Tile):
    def is_empty(self) -> bool:
        return True


__all__ = [
    "DoorState",
    "Orientation",
    "StairsDirection",
    "Item",
    "TileObject",
    "ToNextLevel",
    "ToPrevLevel",
    "Door",
    "Gate",
    "Chest",
    "Tile",
    "FloorTile",
    "WallTile",
    "EmptyTile",
]
