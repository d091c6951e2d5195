"""
Domain package for the bike garage.

Exports the registry entity and the serviceable bicycle variants. Keep this
package focused on data definitions and validation concerns.
"""

from bikegarage.domain.models import BicycleRecord, BikeState
from bikegarage.domain.variants import (
    Bicycle,
    ElectricBike,
    MountainBike,
    RoadBike,
    parse_bicycle,
)

__all__ = [
    "BicycleRecord",
    "BikeState",
    "Bicycle",
    "ElectricBike",
    "MountainBike",
    "RoadBike",
    "parse_bicycle",
]
