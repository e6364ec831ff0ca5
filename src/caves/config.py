"""Generation settings.

Settings are an immutable pydantic model. Defaults ship with the package in
``caves/data/default_settings.yaml``; a user YAML file is overlaid on top of
them, and ``CAVES_*`` environment variables can override single values.
"""
from __future__ import annotations

import logging
import os
from importlib import resources
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .exceptions import ConfigError
from .generator.bounds import Bounds
from .generator.enemies import EnemyTable

logger = logging.getLogger(__name__)

ENV_PREFIX = "CAVES_"
# The smallest room that still has one tile of floor inside its walls
MIN_ROOM_SPAN = 3

DEFAULT_ENEMIES: Dict[str, Any] = {
    "kinds": {
        "rat": {"attack": 5, "speed": 3, "health_points": 15, "hit_wait": 12, "width": 16, "height": 16},
    },
    "levels": [{"rat": 1.0}],
}

_BOUNDS_FIELDS = ("rooms", "room_rows", "room_cols", "doors", "room_enemies")


class GenerationSettings(BaseModel):
    """Everything the generator needs to know to build a dungeon."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    attempts: int = Field(2000, gt=0, description="Attempt budget for each bounded search")
    levels: int = Field(10, ge=1, description="Number of levels in the dungeon")
    rows: int = Field(40, ge=MIN_ROOM_SPAN, description="Rows in each level grid")
    cols: int = Field(50, ge=MIN_ROOM_SPAN, description="Columns in each level grid")
    tile_size: int = Field(16, gt=0, description="World units (pixels) per tile")
    rooms: Bounds = Field(default_factory=lambda: Bounds(6, 9), description="Rooms per level")
    room_rows: Bounds = Field(default_factory=lambda: Bounds(7, 14), description="Rows per room")
    room_cols: Bounds = Field(default_factory=lambda: Bounds(8, 16), description="Columns per room")
    max_overlap: float = Field(0.35, ge=0.0, le=1.0, description="Largest overlap fraction of either room")
    doors: Bounds = Field(default_factory=lambda: Bounds(1, 3), description="Doors per room pair")
    next_prev_tiles: int = Field(2, ge=0, description="Staircases between each pair of levels")
    room_enemies: Bounds = Field(default_factory=lambda: Bounds(0, 5), description="Enemies per room")
    max_room_enemy_area: float = Field(0.4, ge=0.0, le=1.0)
    enemies: EnemyTable = Field(default_factory=lambda: EnemyTable.model_validate(DEFAULT_ENEMIES))
    workers: int = Field(0, ge=0, description="Worker processes; 0 = one per CPU, 1 = in-process")
    validate_levels: bool = Field(True, description="Check structural invariants of every level")

    @field_validator(*_BOUNDS_FIELDS, mode="plain")
    @classmethod
    def coerce_bounds(cls, v: Any) -> Bounds:
        v = Bounds.from_value(v)
        if not isinstance(v.min, int) or not isinstance(v.max, int):
            raise ValueError(f"expected whole numbers, got {v}")
        if v.min < 0:
            raise ValueError(f"bounds must not be negative, got {v}")
        return v

    @model_validator(mode="after")
    def ensure_consistent(self) -> "GenerationSettings":
        if self.rooms.min < 1:
            raise ValueError("every level needs at least one room")
        if self.doors.min < 1:
            raise ValueError("doors must allow at least one door between connected rooms")
        if self.room_rows.min < MIN_ROOM_SPAN or self.room_cols.min < MIN_ROOM_SPAN:
            raise ValueError(f"rooms must be at least {MIN_ROOM_SPAN}x{MIN_ROOM_SPAN} tiles")
        if self.room_rows.max > self.rows or self.room_cols.max > self.cols:
            raise ValueError(
                f"rooms up to {self.room_rows.max}x{self.room_cols.max} cannot fit a {self.rows}x{self.cols} grid"
            )
        return self

    # ---- Loading ---------------------------------------------------------
    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "GenerationSettings":
        try:
            return cls.model_validate(dict(data or {}))
        except (ValidationError, ValueError, KeyError, TypeError) as e:
            raise ConfigError(f"Invalid generation settings: {e}") from e

    @classmethod
    def default(cls) -> "GenerationSettings":
        return cls.from_mapping(_load_default_data())

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "GenerationSettings":
        """Load settings from a YAML file, overlaid on the packaged defaults."""
        path = Path(path)
        if not path.exists():
            raise ConfigError(f"Settings file not found: {path}")
        with path.open("r", encoding="utf-8") as f:
            try:
                user_data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Could not parse {path}: {e}") from e
        if not isinstance(user_data, dict):
            raise ConfigError(f"Expected a mapping at the top level of {path}")
        logger.info("Loaded generation settings from %s", path)
        return cls.from_mapping(_deep_merge(_load_default_data(), user_data))

    @classmethod
    def from_env(
        cls,
        base: Optional["GenerationSettings"] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "GenerationSettings":
        """Apply ``CAVES_<FIELD>`` environment overrides on top of ``base``.

        Bounds are given as ``min,max`` (e.g. ``CAVES_ROOMS=4,6``) or a single number.
        """
        base = base or cls.default()
        environ = os.environ if environ is None else environ
        overrides: Dict[str, Any] = {}
        for name in cls.model_fields:
            raw = environ.get(ENV_PREFIX + name.upper())
            if raw is None or name == "enemies":
                continue
            if name in _BOUNDS_FIELDS:
                parts = [_parse_number(part) for part in raw.split(",")]
                overrides[name] = parts[0] if len(parts) == 1 else parts
            else:
                overrides[name] = raw.strip()
            logger.debug("Setting %s overridden from environment: %s", name, raw)
        if not overrides:
            return base
        return base.with_overrides(**overrides)

    def with_overrides(self, **overrides: Any) -> "GenerationSettings":
        """A copy of these settings with some fields replaced (and re-validated)."""
        data = self.to_dict()
        data.update(overrides)
        return type(self).from_mapping(data)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name in type(self).model_fields:
            value = getattr(self, name)
            if isinstance(value, Bounds):
                value = value.to_list()
            elif isinstance(value, BaseModel):
                value = value.model_dump()
            data[name] = value
        return data


def _parse_number(text: str) -> Union[int, float]:
    text = text.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError as e:
        raise ConfigError(f"Expected a number, got {text!r}") from e


def _load_default_data() -> Dict[str, Any]:
    with resources.files("caves.data").joinpath("default_settings.yaml").open("r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _deep_merge(base: Mapping[str, Any], overlay: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for k, v in (overlay or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            merged[k] = _deep_merge(base[k], v)
        else:
            merged[k] = v
    return merged


__all__ = ["GenerationSettings", "ENV_PREFIX", "MIN_ROOM_SPAN"]
