from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from bikegarage.domain.models import BicycleRecord
from bikegarage.registry import AbstractGarage, available_read_modes, make_garage

WORKERS = 8
ADDS_PER_WORKER = 250


@pytest.mark.parametrize("read_mode", available_read_modes())
def test_concurrent_adds_lose_nothing(read_mode: str) -> None:
    garage = make_garage(read_mode)

    def add_many(worker: int) -> None:
        for index in range(ADDS_PER_WORKER):
            garage.add(BicycleRecord(model=f"w{worker}-{index}", speed=index))

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        list(pool.map(add_many, range(WORKERS)))

    assert len(garage) == WORKERS * ADDS_PER_WORKER
    models = [record.model for record in garage.all()]
    assert len(set(models)) == WORKERS * ADDS_PER_WORKER
    for worker in range(WORKERS):
        own = [model for model in models if model.startswith(f"w{worker}-")]
        assert own == [f"w{worker}-{index}" for index in range(ADDS_PER_WORKER)]


def test_interleaved_increases_apply_every_delta(seeded_garage: AbstractGarage) -> None:
    deltas = [5, 10] * 50
    barrier = threading.Barrier(len(deltas))

    def bump(delta: int) -> None:
        barrier.wait()
        seeded_garage.increase_speed_safe(delta)

    threads = [threading.Thread(target=bump, args=(delta,)) for delta in deltas]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    total = sum(deltas)
    assert [record.speed for record in seeded_garage.all()] == [
        35 + total,
        42 + total,
        28 + total,
        40 + total,
    ]


def test_guarded_reader_never_sees_partial_bulk_update() -> None:
    garage = make_garage("guarded", [BicycleRecord(model=str(i), speed=0) for i in range(50)])
    stop = threading.Event()
    torn: list[set[int]] = []

    def reader() -> None:
        while not stop.is_set():
            speeds = {record.speed for record in garage.all()}
            if len(speeds) != 1:
                torn.append(speeds)

    thread = threading.Thread(target=reader)
    thread.start()
    try:
        for _ in range(200):
            garage.increase_speed_safe(1)
    finally:
        stop.set()
        thread.join()

    assert torn == []
    assert {record.speed for record in garage.all()} == {200}
