from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Sequence

from .exceptions import GeneratorBug, LevelOutOfRange
from .map.floor_map import FloorMap
from .map.geometry import Point

if TYPE_CHECKING:
    from .generator.map_key import MapKey

logger = logging.getLogger(__name__)


class Game:
    """A generated dungeon: its levels, the key that made them and the current level.

    Levels are numbered from 1 for display; the cursor itself is a 0-based
    index that only moves through :meth:`to_next_level` and
    :meth:`to_prev_level`.
    """

    def __init__(self, key: MapKey, levels: Sequence[FloorMap]) -> None:
        if not levels:
            raise ValueError("a game needs at least one level")
        self.key = key
        self._levels: List[FloorMap] = list(levels)
        self._current = 0

    @property
    def current_level_index(self) -> int:
        return self._current

    def current_level(self) -> FloorMap:
        return self._levels[self._current]

    def levels(self) -> List[FloorMap]:
        return list(self._levels)

    def nlevels(self) -> int:
        return len(self._levels)

    def to_next_level(self) -> FloorMap:
        if self._current + 1 >= len(self._levels):
            raise LevelOutOfRange(f"already on the last level ({len(self._levels)})")
        self._current += 1
        logger.info("Moved down to level %d", self._current + 1)
        return self.current_level()

    def to_prev_level(self) -> FloorMap:
        if self._current == 0:
            raise LevelOutOfRange("already on the first level")
        self._current -= 1
        logger.info("Moved up to level %d", self._current + 1)
        return self.current_level()

    def game_start(self) -> Point:
        """Where the player spawns: the middle of the center tile of the start room on level 1."""
        first = self._levels[0]
        for room_id, room in first.rooms():
            if room.is_player_start():
                center = room.boundary.center_tile()
                if not first.tile(center).is_room_floor(room_id):
                    raise GeneratorBug("the center of the player start room is not a tile in that room")
                return first.tile_center(center)
        raise GeneratorBug("the first level has no player start room")

    def to_dict(self) -> Dict[str, Any]:
        start = self.game_start()
        return {
            "key": str(self.key),
            "game_start": [start.x, start.y],
            "levels": [dict(level.to_dict(), level=index) for index, level in enumerate(self._levels, start=1)],
        }

    def __repr__(self) -> str:
        return f"Game(key={self.key!r}, levels={len(self._levels)})"


__all__ = ["Game"]
