from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from ..map.floor_map import FloorMap
from ..map.geometry import GridSize
from .attempts import Outcome, RanOutOfAttempts
from .cosmetics import CosmeticLayoutPass
from .doorways import DoorwayConnector
from .enemies import EnemyPlacer
from .placement import TO_NEXT_LEVEL, TO_PREV_LEVEL, ObjectPlacer
from .rooms import RoomPlacer
from .validation import validate_level

if TYPE_CHECKING:
    from ..config import GenerationSettings

logger = logging.getLogger(__name__)


class LevelGenerator:
    """Builds a single level by running each phase in turn on one FloorMap.

    Phases: rooms, doorways, stairs down (not on the last level), stairs up
    (not on the first level), enemies, cosmetics and finally validation.
    The first phase to run out of attempts ends the level.
    """

    def __init__(self, settings: "GenerationSettings") -> None:
        self.settings = settings
        self.rooms = RoomPlacer(settings)
        self.doorways = DoorwayConnector()
        self.objects = ObjectPlacer(settings)
        self.enemies = EnemyPlacer(settings)
        self.cosmetics = CosmeticLayoutPass()

    def generate(self, rng: random.Random, level: int) -> Outcome[FloorMap]:
        settings = self.settings
        floor_map = FloorMap(GridSize(settings.rows, settings.cols), settings.tile_size)

        outcome = self.rooms.generate(rng, floor_map, level)
        if isinstance(outcome, RanOutOfAttempts):
            return outcome

        outcome = self.doorways.connect(rng, floor_map, level)
        if isinstance(outcome, RanOutOfAttempts):
            return outcome

        if level < settings.levels:
            outcome = self.objects.place_stairs(rng, floor_map, TO_NEXT_LEVEL, level)
            if isinstance(outcome, RanOutOfAttempts):
                return outcome
        if level > 1:
            outcome = self.objects.place_stairs(rng, floor_map, TO_PREV_LEVEL, level)
            if isinstance(outcome, RanOutOfAttempts):
                return outcome

        outcome = self.enemies.place(rng, floor_map, level)
        if isinstance(outcome, RanOutOfAttempts):
            return outcome

        self.cosmetics.apply(rng, floor_map)

        if settings.validate_levels:
            validate_level(floor_map, level, settings)

        logger.debug("Level %d generated: %r", level, floor_map)
        return floor_map


def generate_level(settings: "GenerationSettings", level: int, rng: random.Random) -> Outcome[FloorMap]:
    """Module level entry point so worker processes can run it."""
    return LevelGenerator(settings).generate(rng, level)


__all__ = ["LevelGenerator", "generate_level"]
