"""
Guarded garage: one lock for reads and writes.

Every traversal copies the backing list under the same lock the writers use
and hands out detached copies of the records. A reader therefore sees the
garage either entirely before or entirely after a bulk speed update, and
cannot mutate the stored records through what it was given.
"""

from __future__ import annotations

from typing import Iterator, List

from bikegarage.domain.models import BicycleRecord
from bikegarage.registry.abstract import AbstractGarage


class GuardedGarage(AbstractGarage):
    """
    Registry with a single synchronization discipline for every access.
    """

    name: str = "guarded"
    description: str = "Mutex on every access; reads iterate a snapshot of record copies."

    def snapshot(self) -> List[BicycleRecord]:
        """Return copies of all records, taken atomically under the lock."""
        with self._lock:
            return [record.model_copy() for record in self._records]

    def _iter_records(self) -> Iterator[BicycleRecord]:
        # Snapshot is taken when traversal starts, not when the view is created.
        yield from self.snapshot()


__all__ = ["GuardedGarage"]
