"""
Registry interfaces for the bike garage.

Concrete garages (naive, guarded) implement `AbstractGarage`, which derives the
query operations (`filter`, `faster_than`, `average_speed`, ...) from a single
`_iter_records` hook. The hook decides the read discipline: live records
without a lock, or detached copies of a locked snapshot.
"""

from __future__ import annotations

import abc
import statistics
import threading
from typing import Callable, Generic, Iterable, Iterator, Protocol, TypeVar, runtime_checkable

from bikegarage.domain.models import BicycleRecord
from bikegarage.errors import EmptyGarageError
from bikegarage.utils.logging import get_logger

log = get_logger(__name__)

T = TypeVar("T")
Predicate = Callable[[BicycleRecord], bool]


class LazyView(Generic[T]):
    """
    Restartable lazy sequence.

    Nothing is computed until iteration starts, and every `iter()` call runs
    the producer again, so a view reflects the garage as of each traversal.
    """

    def __init__(self, producer: Callable[[], Iterator[T]]) -> None:
        self._producer = producer

    def __iter__(self) -> Iterator[T]:
        return self._producer()


@runtime_checkable
class Garage(Protocol):
    """
    Common interface of every registry implementation.

    Attributes
    ----------
    name : str
        Short machine-friendly identifier of the read discipline.
    description : str
        Human-friendly summary of how reads are synchronized.
    """

    name: str
    description: str

    def add(self, record: BicycleRecord) -> None: ...

    def all(self) -> Iterable[BicycleRecord]: ...

    def filter(self, predicate: Predicate) -> Iterable[BicycleRecord]: ...

    def for_each(self, action: Callable[[BicycleRecord], object]) -> None: ...

    def increase_speed_safe(self, delta: int) -> None: ...


class AbstractGarage(abc.ABC):
    """
    Shared implementation of the write path and the derived queries.

    Writers (`add`, `increase_speed_safe`) always hold `_lock`. Subclasses set
    `name` and `description` and implement `_iter_records`.
    """

    name: str
    description: str

    def __init__(self, records: Iterable[BicycleRecord] = ()) -> None:
        self._records: list[BicycleRecord] = []
        self._lock = threading.Lock()
        for record in records:
            self.add(record)

    @abc.abstractmethod
    def _iter_records(self) -> Iterator[BicycleRecord]:  # pragma: no cover - interface only
        """Yield the records readers are allowed to see, in insertion order."""
        raise NotImplementedError

    def add(self, record: BicycleRecord) -> None:
        with self._lock:
            self._records.append(record)

    def increase_speed_safe(self, delta: int) -> None:
        """
        Add `delta` to every record's speed while holding the registry lock.

        Mutually exclusive with `add` and with other calls to this method.
        Negative deltas are applied as-is.
        """
        with self._lock:
            for record in self._records:
                record.speed += delta
            count = len(self._records)
        log.debug("Speed increased", extra={"delta": delta, "records": count})

    def all(self) -> LazyView[BicycleRecord]:
        return LazyView(self._iter_records)

    def filter(self, predicate: Predicate) -> LazyView[BicycleRecord]:
        def _matching() -> Iterator[BicycleRecord]:
            for record in self._iter_records():
                if predicate(record):
                    yield record

        return LazyView(_matching)

    def faster_than(self, min_speed: int) -> Iterator[BicycleRecord]:
        """Yield records strictly faster than `min_speed`."""
        for record in self._iter_records():
            if record.speed > min_speed:
                yield record

    def models_faster_than(self, min_speed: int) -> LazyView[str]:
        return LazyView(lambda: (record.model for record in self.faster_than(min_speed)))

    def for_each(self, action: Callable[[BicycleRecord], object]) -> None:
        for record in self._iter_records():
            action(record)

    def average_speed(self) -> float:
        speeds = [record.speed for record in self._iter_records()]
        if not speeds:
            raise EmptyGarageError("Cannot average speed of an empty garage")
        return float(statistics.mean(speeds))

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


__all__ = ["AbstractGarage", "Garage", "LazyView", "Predicate"]
