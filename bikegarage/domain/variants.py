"""
Bicycle variants serviced by the service desk.

Each variant is a pydantic model tagged by `kind`; `Bicycle` is the
discriminated union over them. Every variant exposes `describe()` and
`validate_for_service()`, the latter raising `ServiceValidationError` when the
bike cannot be serviced.
"""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from bikegarage.errors import ServiceValidationError

MIN_BATTERY_WH = 100


class _BicycleBase(BaseModel):
    brand: str
    year: int


class MountainBike(_BicycleBase):
    kind: Literal["mountain"] = "mountain"
    suspension_mm: int

    def describe(self) -> str:
        return f"Mountain Bike: {self.brand}, {self.year}, Suspension: {self.suspension_mm} mm"

    def validate_for_service(self) -> None:
        if self.suspension_mm <= 0:
            raise ServiceValidationError(self.brand, "Suspension value must be positive!")


class RoadBike(_BicycleBase):
    kind: Literal["road"] = "road"
    weight_kg: float

    def describe(self) -> str:
        return f"Road Bike: {self.brand}, {self.year}, Weight: {self.weight_kg} kg"

    def validate_for_service(self) -> None:
        if self.weight_kg <= 0:
            raise ServiceValidationError(self.brand, "Weight must be positive!")


class ElectricBike(_BicycleBase):
    kind: Literal["electric"] = "electric"
    battery_wh: int

    def describe(self) -> str:
        return f"E-Bike: {self.brand}, {self.year}, Battery: {self.battery_wh} Wh"

    def validate_for_service(self) -> None:
        if self.battery_wh < MIN_BATTERY_WH:
            raise ServiceValidationError(self.brand, "Battery too weak!")


Bicycle = Annotated[Union[MountainBike, RoadBike, ElectricBike], Field(discriminator="kind")]

_bicycle_adapter: TypeAdapter[Bicycle] = TypeAdapter(Bicycle)


def parse_bicycle(data: dict) -> Bicycle:
    """Build the right variant from a plain mapping carrying a `kind` tag."""
    return _bicycle_adapter.validate_python(data)


__all__ = [
    "Bicycle",
    "ElectricBike",
    "MIN_BATTERY_WH",
    "MountainBike",
    "RoadBike",
    "parse_bicycle",
]
