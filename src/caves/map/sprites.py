"""Cosmetic sprite descriptors attached to tiles.

These only name *which* variant a tile should use. Looking the variant up in a
spritesheet is the renderer's job.
"""
from __future__ import annotations

import random
from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class FloorSprite(Enum):
    FLOOR_1 = 1
    FLOOR_2 = 2
    FLOOR_3 = 3
    FLOOR_4 = 4
    FLOOR_5 = 5
    FLOOR_6 = 6
    FLOOR_7 = 7
    FLOOR_8 = 8
    FLOOR_9 = 9
    FLOOR_10 = 10
    FLOOR_11 = 11
    FLOOR_12 = 12


class WallSpriteAlternate(Enum):
    ALT_0 = "alt0"
    ALT_1 = "alt1"
    ALT_2 = "alt2"
    BRICK_PILLAR = "brick_pillar"
    TORCH_LIT = "torch_lit"
    ENTRANCE_LEFT = "entrance_left"
    ENTRANCE_RIGHT = "entrance_right"

    @classmethod
    def random_plain(cls, rng: random.Random) -> "WallSpriteAlternate":
        """One of the three interchangeable plain wall styles."""
        return rng.choice((cls.ALT_0, cls.ALT_1, cls.ALT_2))


class WallDecoration(Enum):
    TORCH = "torch"


@dataclass(frozen=True)
class WallSprite:
    """Which neighbors of a wall tile are also walls, plus the style variant."""

    wall_north: bool = False
    wall_east: bool = False
    wall_south: bool = False
    wall_west: bool = False
    alt: WallSpriteAlternate = WallSpriteAlternate.ALT_0

    def mask(self) -> int:
        """4-bit neighbor mask: N=1, E=2, S=4, W=8."""
        return (
            int(self.wall_north)
            | int(self.wall_east) << 1
            | int(self.wall_south) << 2
            | int(self.wall_west) << 3
        )


_F = FloorSprite

# Patterns are stamped in a non-overlapping way over the floor tiles of a map.
FLOOR_PATTERNS: Tuple[Tuple[Tuple[FloorSprite, ...], ...], ...] = (
    (
        (_F.FLOOR_1, _F.FLOOR_2, _F.FLOOR_3, _F.FLOOR_1),
        (_F.FLOOR_5, _F.FLOOR_6, _F.FLOOR_7, _F.FLOOR_8),
        (_F.FLOOR_9, _F.FLOOR_10, _F.FLOOR_11, _F.FLOOR_12),
        (_F.FLOOR_1, _F.FLOOR_5, _F.FLOOR_8, _F.FLOOR_1),
    ),
    (
        (_F.FLOOR_5, _F.FLOOR_8),
        (_F.FLOOR_9, _F.FLOOR_12),
        (_F.FLOOR_5, _F.FLOOR_8),
    ),
    (
        (_F.FLOOR_1, _F.FLOOR_5, _F.FLOOR_8, _F.FLOOR_1),
        (_F.FLOOR_1, _F.FLOOR_2, _F.FLOOR_3, _F.FLOOR_1),
        (_F.FLOOR_5, _F.FLOOR_6, _F.FLOOR_6, _F.FLOOR_8),
        (_F.FLOOR_1, _F.FLOOR_9, _F.FLOOR_12, _F.FLOOR_1),
        (_F.FLOOR_1, _F.FLOOR_5, _F.FLOOR_8, _F.FLOOR_1),
    ),
    (
        (_F.FLOOR_5, _F.FLOOR_8),
        (_F.FLOOR_9, _F.FLOOR_12),
    ),
    (
        (_F.FLOOR_5, _F.FLOOR_8),
        (_F.FLOOR_2, _F.FLOOR_3),
        (_F.FLOOR_5, _F.FLOOR_8),
    ),
    (
        (_F.FLOOR_1, _F.FLOOR_2, _F.FLOOR_3, _F.FLOOR_1, _F.FLOOR_1),
        (_F.FLOOR_5, _F.FLOOR_6, _F.FLOOR_6, _F.FLOOR_8, _F.FLOOR_1),
        (_F.FLOOR_9, _F.FLOOR_10, _F.FLOOR_11, _F.FLOOR_12, _F.FLOOR_1),
        (_F.FLOOR_5, _F.FLOOR_7, _F.FLOOR_6, _F.FLOOR_6, _F.FLOOR_8),
        (_F.FLOOR_9, _F.FLOOR_12, _F.FLOOR_9, _F.FLOOR_12, _F.FLOOR_1),
        (_F.FLOOR_1, _F.FLOOR_5, _F.FLOOR_8, _F.FLOOR_1, _F.FLOOR_1),
    ),
    (
        (_F.FLOOR_1, _F.FLOOR_9, _F.FLOOR_1, _F.FLOOR_1),
        (_F.FLOOR_5, _F.FLOOR_6, _F.FLOOR_8, _F.FLOOR_1),
        (_F.FLOOR_1, _F.FLOOR_2, _F.FLOOR_3, _F.FLOOR_1),
        (_F.FLOOR_5, _F.FLOOR_7, _F.FLOOR_6, _F.FLOOR_8),
        (_F.FLOOR_9, _F.FLOOR_10, _F.FLOOR_11, _F.FLOOR_12),
        (_F.FLOOR_1, _F.FLOOR_5, _F.FLOOR_8, _F.FLOOR_1),
    ),
    (
        (_F.FLOOR_1, _F.FLOOR_9, _F.FLOOR_1),
        (_F.FLOOR_5, _F.FLOOR_7, _F.FLOOR_8),
        (_F.FLOOR_1, _F.FLOOR_9, _F.FLOOR_1),
    ),
    (
        (_F.FLOOR_1, _F.FLOOR_9, _F.FLOOR_1),
        (_F.FLOOR_5, _F.FLOOR_6, _F.FLOOR_8),
        (_F.FLOOR_1, _F.FLOOR_9, _F.FLOOR_12),
        (_F.FLOOR_1, _F.FLOOR_5, _F.FLOOR_8),
    ),
)

__all__ = ["FloorSprite", "WallSpriteAlternate", "WallDecoration", "WallSprite", "FLOOR_PATTERNS"]
