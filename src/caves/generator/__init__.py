"""
Level generation for caves.

Every phase takes an explicit ``random.Random`` and returns either its result
or a RanOutOfAttempts value; GameGenerator owns the retry-with-reseed loop.
"""
from .attempts import RanOutOfAttempts
from .bounds import Bounds
from .game import GameGenerator
from .level import LevelGenerator
from .map_key import MapKey

__all__ = ["RanOutOfAttempts", "Bounds", "GameGenerator", "LevelGenerator", "MapKey"]
