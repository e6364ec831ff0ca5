from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Generic, Mapping, Sequence, TypeVar, Union

T = TypeVar("T", int, float)


@dataclass(frozen=True)
class Bounds(Generic[T]):
    """An inclusive ``[min, max]`` range that can be sampled uniformly."""

    min: T
    max: T

    def __post_init__(self) -> None:
        if self.min > self.max:
            raise ValueError(f"Bounds min ({self.min}) must not exceed max ({self.max})")

    @classmethod
    def from_value(cls, value: Union["Bounds[Any]", Sequence[Any], Mapping[str, Any], int, float]) -> "Bounds[Any]":
        """Coerce a config value into Bounds.

        Accepts an existing Bounds, a ``[min, max]`` pair, a ``{min, max}``
        mapping or a single number (meaning exactly that number).
        """
        if isinstance(value, Bounds):
            return value
        if isinstance(value, Mapping):
            if "min" not in value or "max" not in value:
                raise ValueError(f"bounds mapping needs both min and max, got {dict(value)!r}")
            return cls(value["min"], value["max"])
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cls(value, value)
        if isinstance(value, Sequence) and not isinstance(value, (str, bytes)) and len(value) == 2:
            return cls(value[0], value[1])
        raise ValueError(f"Cannot interpret {value!r} as bounds; expected [min, max] or {{min, max}}")

    def sample(self, rng: random.Random) -> T:
        if isinstance(self.min, int) and isinstance(self.max, int):
            return rng.randint(self.min, self.max)
        return rng.uniform(self.min, self.max)

    def to_list(self) -> list:
        return [self.min, self.max]

    def __str__(self) -> str:
        return f"{self.min}..={self.max}"


__all__ = ["Bounds"]
