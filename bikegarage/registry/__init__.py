"""
Registry package for the bike garage.

Re-exports the garage interfaces and both read disciplines, plus
`make_garage` which resolves a configured read mode to an empty registry.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, List

from bikegarage.domain.models import BicycleRecord
from bikegarage.registry.abstract import AbstractGarage, Garage, LazyView, Predicate
from bikegarage.registry.guarded import GuardedGarage
from bikegarage.registry.naive import NaiveGarage


def _garage_factories() -> Dict[str, Callable[[Iterable[BicycleRecord]], AbstractGarage]]:
    """Registry of available read disciplines."""
    return {
        "guarded": lambda records: GuardedGarage(records),
        "naive": lambda records: NaiveGarage(records),
    }


def available_read_modes() -> List[str]:
    """List available read mode names."""
    return sorted(_garage_factories().keys())


def make_garage(read_mode: str, records: Iterable[BicycleRecord] = ()) -> AbstractGarage:
    factories = _garage_factories()
    if read_mode not in factories:
        raise ValueError(f"Unknown read mode '{read_mode}'. Available: {', '.join(factories)}")
    return factories[read_mode](records)


__all__ = [
    # Abstracts
    "AbstractGarage",
    "Garage",
    "LazyView",
    "Predicate",
    # Concrete garages
    "GuardedGarage",
    "NaiveGarage",
    # Factory
    "available_read_modes",
    "make_garage",
]
