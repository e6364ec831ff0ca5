from __future__ import annotations

import logging
import os
import random
from concurrent.futures import ProcessPoolExecutor
from typing import TYPE_CHECKING, List

from ..exceptions import UnsatisfiableConfig
from ..game import Game
from ..map.floor_map import FloorMap
from .attempts import Outcome, RanOutOfAttempts
from .level import generate_level
from .map_key import MapKey

if TYPE_CHECKING:
    from ..config import GenerationSettings

logger = logging.getLogger(__name__)

# After this many failed batches the settings are taken to be unsatisfiable
MAX_BATCHES = 10
# Bits drawn from the master RNG to seed each child RNG
CHILD_SEED_BITS = 256


def derive_rng(rng: random.Random) -> random.Random:
    """A new, independent RNG seeded from the next bits of ``rng``."""
    return random.Random(rng.getrandbits(CHILD_SEED_BITS))


class GameGenerator:
    """Generates every level of a dungeon from a MapKey.

    One child RNG per level is drawn from the key's RNG before any level
    starts, so each level depends only on its own RNG and the settings. The
    levels may therefore be built in parallel without changing the result. If
    any level runs out of attempts the whole batch is thrown away, the master
    RNG reseeds itself and everything is generated again.
    """

    def __init__(self, settings: "GenerationSettings") -> None:
        self.settings = settings

    def generate(self) -> Game:
        return self.generate_with_key(MapKey.random())

    def generate_with_key(self, key: MapKey) -> Game:
        settings = self.settings
        rng = key.to_rng()
        logger.info("Generating %d levels with key %s", settings.levels, key)

        for batch in range(1, MAX_BATCHES + 1):
            level_rngs = [derive_rng(rng) for _ in range(settings.levels)]
            outcomes = self._run_levels(level_rngs)

            failures = [(level, o) for level, o in enumerate(outcomes, start=1) if isinstance(o, RanOutOfAttempts)]
            if not failures:
                logger.info("Generated %d levels with key %s (batch %d)", settings.levels, key, batch)
                return Game(key, outcomes)

            for level, failure in failures:
                logger.debug("Batch %d, level %d: %s", batch, level, failure)
            logger.warning(
                "Batch %d/%d failed on %d level(s); reseeding and retrying",
                batch,
                MAX_BATCHES,
                len(failures),
            )
            rng = derive_rng(rng)

        raise UnsatisfiableConfig(key, MAX_BATCHES)

    def _run_levels(self, level_rngs: List[random.Random]) -> List[Outcome[FloorMap]]:
        settings = self.settings
        levels = list(range(1, settings.levels + 1))
        workers = self._worker_count()
        if workers <= 1:
            return [generate_level(settings, level, level_rng) for level, level_rng in zip(levels, level_rngs)]

        with ProcessPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(generate_level, [settings] * len(levels), levels, level_rngs))

    def _worker_count(self) -> int:
        workers = self.settings.workers or os.cpu_count() or 1
        return min(workers, self.settings.levels)


__all__ = ["GameGenerator", "derive_rng", "MAX_BATCHES"]
