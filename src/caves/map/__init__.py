"""
Map model for caves.

Coordinates, rectangles, tiles, rooms and the per-level FloorMap aggregate that
the generator builds and renderers/game code read.
"""
from .floor_map import FloorMap
from .geometry import GridSize, Point, TilePos, WorldRect
from .grid import TileGrid
from .room import Room, RoomId, RoomType
from .spawns import DoorSpawn, EnemySpawn, Spawn, StairsSpawn, TorchSpawn
from .tile_rect import TileRect
from .tiles import (
    Chest,
    Door,
    DoorState,
    EmptyTile,
    FloorTile,
    Gate,
    Orientation,
    StairsDirection,
    Tile,
    TileObject,
    ToNextLevel,
    ToPrevLevel,
    WallTile,
)

__all__ = [
    "FloorMap",
    "GridSize",
    "Point",
    "TilePos",
    "WorldRect",
    "TileGrid",
    "Room",
    "RoomId",
    "RoomType",
    "Spawn",
    "DoorSpawn",
    "StairsSpawn",
    "TorchSpawn",
    "EnemySpawn",
    "TileRect",
    "Chest",
    "Door",
    "DoorState",
    "EmptyTile",
    "FloorTile",
    "Gate",
    "Orientation",
    "StairsDirection",
    "Tile",
    "TileObject",
    "ToNextLevel",
    "ToPrevLevel",
    "WallTile",
]
