"""
Domain models for the bike garage.

`BicycleRecord` is the entity held by the registry. Its `model` is fixed at
construction; `speed` and `state` are mutated in place by registry operations
and the ride state machine.
"""
from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class BikeState(str, Enum):
    IDLE = "idle"
    RIDING = "riding"
    SERVICING = "servicing"


class BicycleRecord(BaseModel):
    """
    A single bicycle in the garage.

    Records order by speed, so `sorted(garage.all())` yields the slowest first.
    """

    model: str = Field(..., frozen=True, description="Model name; identity of the record.")
    speed: int = Field(..., description="Speed in km/h. Not range-checked.")
    state: BikeState = Field(BikeState.IDLE, description="Current ride state.")

    def clone(self) -> "BicycleRecord":
        """Return an independent copy with the same model and speed, in the idle state."""
        return BicycleRecord(model=self.model, speed=self.speed)

    def __lt__(self, other: "BicycleRecord") -> bool:
        if not isinstance(other, BicycleRecord):
            return NotImplemented
        return self.speed < other.speed

    def __str__(self) -> str:
        return f"{self.model} — {self.speed} km/h — state: {self.state.value}"


__all__ = ["BicycleRecord", "BikeState"]
