"""
Bike Garage - thread-safe bicycle registry with a cancellable task group.

This package demonstrates, on a small in-memory garage of bicycles:

- A registry whose writes are serialized by a mutex (naive and guarded reads)
- Lazy, restartable filtering and queries over the registry
- Worker threads mutating shared state under the lock
- Cooperative cancellation of long-running asyncio jobs via a shared token
- A service desk over tagged bicycle variants with per-item validation
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from bikegarage.config import Settings, get_settings
from bikegarage.domain import BicycleRecord, BikeState
from bikegarage.errors import (
    EmptyGarageError,
    GarageError,
    OperationCancelled,
    ServiceValidationError,
)
from bikegarage.orchestrator import (
    CancellationToken,
    GarageRunner,
    RunConfig,
    RunReport,
    RunState,
    run_garage,
)
from bikegarage.registry import GuardedGarage, NaiveGarage, make_garage
from bikegarage.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "BicycleRecord",
    "BikeState",
    # Errors
    "EmptyGarageError",
    "GarageError",
    "OperationCancelled",
    "ServiceValidationError",
    # Registry
    "GuardedGarage",
    "NaiveGarage",
    "make_garage",
    # Runner
    "CancellationToken",
    "GarageRunner",
    "RunConfig",
    "RunReport",
    "RunState",
    "run_garage",
    # Logging
    "configure_logging",
    "get_logger",
]
