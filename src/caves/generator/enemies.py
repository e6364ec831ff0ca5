from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Dict, List, Set, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..map.floor_map import FloorMap
from ..map.geometry import TilePos
from ..map.room import RoomId
from ..map.spawns import EnemySpawn, centered_box
from .attempts import Outcome, RanOutOfAttempts

if TYPE_CHECKING:
    from ..config import GenerationSettings

logger = logging.getLogger(__name__)


class EnemyValues(BaseModel):
    """Stats for one kind of enemy."""

    model_config = ConfigDict(frozen=True)

    attack: int = Field(..., ge=0, description="Damage dealt per hit (HP)")
    speed: int = Field(..., ge=0, description="Movements per second")
    health_points: int = Field(..., gt=0)
    hit_wait: int = Field(0, ge=0, description="Frames to wait between hits")
    width: int = Field(16, gt=0, description="Bounding box width in world units")
    height: int = Field(16, gt=0, description="Bounding box height in world units")


class EnemyTable(BaseModel):
    """Which enemies may appear on each level, with relative weights.

    ``levels[0]`` applies to level 1, ``levels[1]`` to level 2 and so on. Levels
    deeper than the table use its last entry.
    """

    model_config = ConfigDict(frozen=True)

    kinds: Dict[str, EnemyValues] = Field(..., min_length=1)
    levels: List[Dict[str, float]] = Field(..., min_length=1)

    @field_validator("levels")
    @classmethod
    def ensure_positive_weights(cls, v: List[Dict[str, float]]) -> List[Dict[str, float]]:
        for index, weights in enumerate(v, start=1):
            if any(w < 0 for w in weights.values()):
                raise ValueError(f"level {index}: enemy weights must be non-negative")
            if sum(weights.values()) <= 0:
                raise ValueError(f"level {index}: at least one enemy needs a positive weight")
        return v

    @model_validator(mode="after")
    def ensure_known_kinds(self) -> "EnemyTable":
        for index, weights in enumerate(self.levels, start=1):
            unknown = sorted(set(weights) - set(self.kinds))
            if unknown:
                raise ValueError(f"level {index}: unknown enemy kinds {unknown}")
        return self

    def weights_for_level(self, level: int) -> Dict[str, float]:
        # Levels start at 1
        return self.levels[min(level, len(self.levels)) - 1]

    def random_enemy(self, rng: random.Random, level: int) -> Tuple[str, EnemyValues]:
        weights = self.weights_for_level(level)
        keys: List[str] = []
        cumulative: List[float] = []
        total = 0.0
        for kind in sorted(weights):
            w = weights[kind]
            if w == 0:
                continue
            total += w
            keys.append(kind)
            cumulative.append(total)

        r = rng.random() * total
        for i, c in enumerate(cumulative):
            if r <= c:
                return keys[i], self.kinds[keys[i]]
        return keys[-1], self.kinds[keys[-1]]


class EnemyPlacer:
    """Scatters enemies over the inner tiles of every Normal room.

    Tiles beside a wall or a room entrance stay free so that stairs, doors and
    later items are never blocked.
    """

    def __init__(self, settings: "GenerationSettings") -> None:
        self.settings = settings

    def place(self, rng: random.Random, floor_map: FloorMap, level: int) -> Outcome[int]:
        settings = self.settings
        total = 0
        for room_id, room in floor_map.rooms():
            if not room.can_generate_enemies():
                continue

            max_enemies = int(floor_map.room_exact_area(room_id) * settings.max_room_enemy_area)
            # Small or heavily overlapped rooms may have no free inner tiles at all
            free = sum(1 for pos in room.boundary.tile_positions() if self._can_hold_enemy(floor_map, room_id, pos))
            nenemies = min(settings.room_enemies.sample(rng), max_enemies, free)

            placed: Set[TilePos] = set()
            attempts = 0
            while len(placed) < nenemies:
                if attempts >= settings.attempts:
                    logger.debug("Level %d: gave up placing enemies in room %s", level, room_id)
                    return RanOutOfAttempts("enemies", settings.attempts)
                attempts += 1

                pos = room.boundary.random_inner_tile(rng)
                if pos in placed or not self._can_hold_enemy(floor_map, room_id, pos):
                    continue

                kind, values = settings.enemies.random_enemy(rng, level)
                center = floor_map.tile_center(pos)
                floor_map.spawns.append(
                    EnemySpawn(
                        tile=pos,
                        position=center,
                        bounding_box=centered_box(center, values.width, values.height),
                        enemy=kind,
                        attack=values.attack,
                        speed=values.speed,
                        health_points=values.health_points,
                        hit_wait=values.hit_wait,
                    )
                )
                placed.add(pos)
            total += len(placed)

        logger.debug("Level %d: placed %d enemies", level, total)
        return total

    @staticmethod
    def _can_hold_enemy(floor_map: FloorMap, room_id: RoomId, pos: TilePos) -> bool:
        grid = floor_map.grid
        tile = grid.get(pos)
        if not tile.is_room_floor(room_id) or tile.has_object():
            return False
        # Though the tile may be "inner", it can still be next to a wall or entrance
        return not any(grid.get(adj).is_wall() or grid.is_room_entrance(adj) for adj in grid.adjacent_positions(pos))


__all__ = ["EnemyValues", "EnemyTable", "EnemyPlacer"]
