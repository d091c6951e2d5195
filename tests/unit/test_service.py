from __future__ import annotations

import pytest

from bikegarage.domain.variants import ElectricBike, MountainBike, RoadBike, parse_bicycle
from bikegarage.errors import ServiceValidationError
from bikegarage.service import ServiceDesk, ServiceFailure, default_bikes


def test_parse_bicycle_selects_variant_by_kind():
    bike = parse_bicycle({"kind": "road", "brand": "Giant", "year": 2022, "weight_kg": 8.5})
    assert isinstance(bike, RoadBike)
    assert bike.describe() == "Road Bike: Giant, 2022, Weight: 8.5 kg"


@pytest.mark.parametrize(
    "bike, reason",
    [
        (MountainBike(brand="Trek", year=2023, suspension_mm=0), "Suspension value must be positive!"),
        (RoadBike(brand="Giant", year=2022, weight_kg=-1), "Weight must be positive!"),
        (ElectricBike(brand="Cube", year=2024, battery_wh=99), "Battery too weak!"),
    ],
)
def test_validate_for_service_rejects_bad_values(bike, reason):
    with pytest.raises(ServiceValidationError) as exc_info:
        bike.validate_for_service()
    assert exc_info.value.reason == reason
    assert exc_info.value.brand == bike.brand


def test_service_all_continues_after_failure():
    desk = ServiceDesk()
    desk.add(MountainBike(brand="Trek", year=2023, suspension_mm=120))
    desk.add(ElectricBike(brand="Weak", year=2024, battery_wh=50))
    desk.add(RoadBike(brand="Giant", year=2022, weight_kg=8.5))

    summary = desk.service_all()

    assert summary.serviced == ["Trek", "Giant"]
    assert summary.failures == [ServiceFailure("Weak", "electric", "Battery too weak!")]


def test_events_are_published():
    desk = ServiceDesk()
    events: list[tuple[str, str]] = []
    for event in ("added", "removed", "serviced"):
        desk.subscribe(event, lambda bike, event=event: events.append((event, bike.brand)))

    trek, giant, _ = default_bikes()
    desk.add(trek)
    desk.add(giant)
    desk.service_all()
    assert desk.remove(trek) is True
    assert desk.remove(trek) is False

    assert events == [
        ("added", "Trek"),
        ("added", "Giant"),
        ("serviced", "Trek"),
        ("serviced", "Giant"),
        ("removed", "Trek"),
    ]
    assert len(desk) == 1


def test_failing_observer_does_not_break_desk():
    desk = ServiceDesk()
    seen: list[str] = []

    def broken(bike):
        raise RuntimeError("observer blew up")

    desk.subscribe("added", broken)
    desk.subscribe("added", lambda bike: seen.append(bike.brand))
    desk.add(default_bikes()[0])

    assert seen == ["Trek"]
    assert desk.show() == ["Mountain Bike: Trek, 2023, Suspension: 120 mm"]


def test_subscribe_rejects_unknown_event():
    with pytest.raises(ValueError, match="Unknown event"):
        ServiceDesk().subscribe("painted", print)


def test_service_all_records_every_failure_of_a_shared_brand():
    desk = ServiceDesk()
    desk.add(ElectricBike(brand="Cube", year=2024, battery_wh=50))
    desk.add(MountainBike(brand="Cube", year=2021, suspension_mm=0))

    summary = desk.service_all()

    assert summary.serviced == []
    assert summary.failures == [
        ServiceFailure("Cube", "electric", "Battery too weak!"),
        ServiceFailure("Cube", "mountain", "Suspension value must be positive!"),
    ]


def test_service_all_visits_every_bike_when_observer_removes_one():
    desk = ServiceDesk()
    for bike in default_bikes():
        desk.add(bike)
    desk.subscribe("serviced", lambda bike: desk.remove(bike))

    summary = desk.service_all()

    assert summary.serviced == ["Trek", "Giant", "Cube"]
    assert len(desk) == 0


def _lab_bikes() -> ServiceDesk:
    desk = ServiceDesk()
    desk.add(MountainBike(brand="Trek", year=2023, suspension_mm=120))
    desk.add(MountainBike(brand="Scott", year=2020, suspension_mm=80))
    desk.add(RoadBike(brand="Giant", year=2022, weight_kg=8.5))
    desk.add(RoadBike(brand="Cube", year=2019, weight_kg=7.9))
    return desk


def test_newer_than_yields_lazily_in_desk_order():
    desk = _lab_bikes()
    newer = desk.newer_than(2020)
    desk.add(ElectricBike(brand="Haibike", year=2024, battery_wh=500))

    assert [bike.brand for bike in newer] == ["Trek", "Giant", "Haibike"]


def test_sorted_by_year_and_count_where():
    desk = _lab_bikes()

    assert [bike.year for bike in desk.sorted_by_year()] == [2019, 2020, 2022, 2023]
    assert desk.count_where(lambda bike: bike.year >= 2022) == 2
    assert desk.count_where(lambda bike: isinstance(bike, RoadBike)) == 2


def test_rebrand_publishes_changed_event():
    desk = ServiceDesk()
    trek = default_bikes()[0]
    desk.add(trek)
    changed: list[str] = []
    desk.subscribe("changed", lambda bike: changed.append(bike.brand))

    desk.rebrand(trek, "Trek Pro")

    assert trek.brand == "Trek Pro"
    assert changed == ["Trek Pro"]
    assert desk.show() == ["Mountain Bike: Trek Pro, 2023, Suspension: 120 mm"]
