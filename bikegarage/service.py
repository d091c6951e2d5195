"""
Service desk for bicycle variants.

Keeps an ordered list of bikes, publishes `added`/`removed`/`serviced`/`changed`
events to subscribers, and services bikes one by one. A bike that fails its
check is logged and recorded; the loop carries on with the next bike.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List

from bikegarage.domain.variants import Bicycle, ElectricBike, MountainBike, RoadBike
from bikegarage.errors import ServiceValidationError
from bikegarage.utils.logging import get_logger

log = get_logger(__name__)

Observer = Callable[[Bicycle], object]
BikeCondition = Callable[[Bicycle], bool]
EVENTS = ("added", "removed", "serviced", "changed")


@dataclass(frozen=True)
class ServiceFailure:
    brand: str
    kind: str
    reason: str


@dataclass
class ServiceSummary:
    serviced: List[str] = field(default_factory=list)
    failures: List[ServiceFailure] = field(default_factory=list)


def default_bikes() -> List[Bicycle]:
    return [
        MountainBike(brand="Trek", year=2023, suspension_mm=120),
        RoadBike(brand="Giant", year=2022, weight_kg=8.5),
        ElectricBike(brand="Cube", year=2024, battery_wh=400),
    ]


class ServiceDesk:
    def __init__(self) -> None:
        self._bikes: List[Bicycle] = []
        self._observers: Dict[str, List[Observer]] = {event: [] for event in EVENTS}

    def subscribe(self, event: str, observer: Observer) -> None:
        if event not in self._observers:
            raise ValueError(f"Unknown event '{event}'. Available: {', '.join(EVENTS)}")
        self._observers[event].append(observer)

    def _emit(self, event: str, bike: Bicycle) -> None:
        for observer in self._observers[event]:
            try:
                observer(bike)
            except Exception:  # noqa: BLE001 - a subscriber must not break the desk
                log.exception(f"[EVENT FAILED] {event}", extra={"event": event, "brand": bike.brand})

    def add(self, bike: Bicycle) -> None:
        self._bikes.append(bike)
        self._emit("added", bike)

    def remove(self, bike: Bicycle) -> bool:
        try:
            self._bikes.remove(bike)
        except ValueError:
            return False
        self._emit("removed", bike)
        return True

    def rebrand(self, bike: Bicycle, brand: str) -> None:
        """Rename `bike` in place and publish a `changed` event."""
        previous, bike.brand = bike.brand, brand
        log.info(f"{previous}: data changed", extra={"brand": brand})
        self._emit("changed", bike)

    def show(self) -> List[str]:
        return [bike.describe() for bike in self._bikes]

    def newer_than(self, year: int) -> Iterator[Bicycle]:
        """Yield bikes built strictly after `year`, in desk order."""
        for bike in self._bikes:
            if bike.year > year:
                yield bike

    def sorted_by_year(self) -> List[Bicycle]:
        return sorted(self._bikes, key=lambda bike: bike.year)

    def count_where(self, condition: BikeCondition) -> int:
        return sum(1 for bike in self._bikes if condition(bike))

    def service_all(self) -> ServiceSummary:
        summary = ServiceSummary()
        # Observers may add or remove bikes while the loop runs.
        for bike in list(self._bikes):
            try:
                bike.validate_for_service()
            except ServiceValidationError as exc:
                log.warning(
                    f"Error servicing {exc.brand}: {exc.reason}",
                    extra={"brand": exc.brand, "kind": bike.kind},
                )
                summary.failures.append(ServiceFailure(exc.brand, bike.kind, exc.reason))
                continue
            summary.serviced.append(bike.brand)
            log.info(f"Serviced {bike.brand}", extra={"brand": bike.brand, "kind": bike.kind})
            self._emit("serviced", bike)
        return summary

    def __len__(self) -> int:
        return len(self._bikes)


__all__ = [
    "EVENTS",
    "ServiceDesk",
    "ServiceFailure",
    "ServiceSummary",
    "default_bikes",
]
