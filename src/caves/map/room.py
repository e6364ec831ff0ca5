from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..exceptions import GeneratorBug
from .tile_rect import TileRect


@dataclass(frozen=True, order=True)
class RoomId:
    """Index of a room in its level's room list. Never reused within a level."""

    index: int

    def __str__(self) -> str:
        return str(self.index)


class RoomType(Enum):
    # Most rooms: may contain enemies, chests, staircases
    NORMAL = "normal"
    # Rewards the player for clearing every enemy inside
    CHALLENGE = "challenge"
    # Where the player spawns; only on the first level
    PLAYER_START = "player_start"
    # The goal of the game; only on the last level
    TREASURE_CHAMBER = "treasure_chamber"


@dataclass
class Room:
    """A rectangular region of the map with a role."""

    boundary: TileRect
    room_type: RoomType = RoomType.NORMAL

    def is_normal(self) -> bool:
        return self.room_type is RoomType.NORMAL

    def is_player_start(self) -> bool:
        return self.room_type is RoomType.PLAYER_START

    def is_treasure_chamber(self) -> bool:
        return self.room_type is RoomType.TREASURE_CHAMBER

    def can_contain_to_next_level(self) -> bool:
        return self.room_type is RoomType.NORMAL

    def can_contain_to_prev_level(self) -> bool:
        # Currently the same rooms as those that can lead to the next level
        return self.can_contain_to_next_level()

    def can_generate_enemies(self) -> bool:
        return self.room_type is RoomType.NORMAL

    def become_player_start(self) -> None:
        self._become(RoomType.PLAYER_START)

    def become_treasure_chamber(self) -> None:
        self._become(RoomType.TREASURE_CHAMBER)

    def _become(self, room_type: RoomType) -> None:
        if self.room_type is not RoomType.NORMAL:
            raise GeneratorBug(f"cannot turn a {self.room_type.value} room into a {room_type.value} room")
        self.room_type = room_type

    def to_dict(self) -> dict:
        return {"type": self.room_type.value, "boundary": self.boundary.to_dict()}


__all__ = ["RoomId", "RoomType", "Room"]
