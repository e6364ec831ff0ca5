"""Records emitted for the entity/world setup collaborator.

The generator never builds entities itself. It leaves one record per thing that
needs an entity (doors, staircases, torches, enemies), each with a world
position and a bounding box, and the game layer turns them into whatever its
entity system needs.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .geometry import Point, TilePos, WorldRect
from .tiles import Orientation, StairsDirection


@dataclass(frozen=True)
class Spawn:
    tile: TilePos
    position: Point
    bounding_box: WorldRect

    kind = "spawn"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "tile": [self.tile.row, self.tile.col],
            "position": [self.position.x, self.position.y],
            "bounding_box": self.bounding_box.to_dict(),
        }


@dataclass(frozen=True)
class DoorSpawn(Spawn):
    orientation: Orientation = Orientation.HORIZONTAL

    kind = "door"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["orientation"] = self.orientation.value
        return data


@dataclass(frozen=True)
class StairsSpawn(Spawn):
    id: int = 0
    direction: StairsDirection = StairsDirection.LEFT
    # True for stairs leading down to the next level
    to_next_level: bool = True

    kind = "stairs"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"id": self.id, "direction": self.direction.value, "to_next_level": self.to_next_level})
        return data


@dataclass(frozen=True)
class TorchSpawn(Spawn):
    kind = "torch"


@dataclass(frozen=True)
class EnemySpawn(Spawn):
    enemy: str = ""
    attack: int = 0
    speed: int = 0
    health_points: int = 0
    hit_wait: int = 0

    kind = "enemy"

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "enemy": self.enemy,
                "attack": self.attack,
                "speed": self.speed,
                "health_points": self.health_points,
                "hit_wait": self.hit_wait,
            }
        )
        return data


def centered_box(center: Point, width: int, height: int) -> WorldRect:
    return WorldRect(center.x - width // 2, center.y - height // 2, width, height)


__all__ = [
    "Spawn",
    "DoorSpawn",
    "StairsSpawn",
    "TorchSpawn",
    "EnemySpawn",
    "centered_box",
]
