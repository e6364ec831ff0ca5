from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class RanOutOfAttempts:
    """A bounded random search spent its whole budget without success.

    Phases return this instead of raising so the orchestrator can decide to
    reseed and retry. It is an ordinary outcome, not an error. ``attempts``
    is 0 when a one-shot check failed with no search behind it.
    """

    phase: str
    attempts: int

    def __str__(self) -> str:
        if self.attempts == 0:
            return f"{self.phase} failed its connectivity check"
        return f"{self.phase} ran out of attempts after {self.attempts} tries"


# A phase either produces its value or reports exhaustion
Outcome = Union[T, RanOutOfAttempts]


__all__ = ["RanOutOfAttempts", "Outcome"]
