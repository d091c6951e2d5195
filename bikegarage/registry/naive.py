"""
Naive garage: locked writes, unlocked reads.

Reproduces the original registry as written. Readers iterate the live backing
list without the lock and receive the stored records themselves, so a reader
running next to `increase_speed_safe` may see some records already bumped and
others not yet.
"""

from __future__ import annotations

from typing import Iterator

from bikegarage.domain.models import BicycleRecord
from bikegarage.registry.abstract import AbstractGarage


class NaiveGarage(AbstractGarage):
    """
    Registry whose read paths skip the lock.

    WARNING: readers may observe a partially applied bulk update. Keep as a
    baseline for comparison with `GuardedGarage` only.
    """

    name: str = "naive"
    description: str = "Mutex on add/increase only; reads traverse the live list unlocked."

    def _iter_records(self) -> Iterator[BicycleRecord]:
        yield from self._records


__all__ = ["NaiveGarage"]
