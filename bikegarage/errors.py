"""Exception hierarchy shared by the registry, runner and service desk."""

from __future__ import annotations


class GarageError(Exception):
    """Base class for every error raised by this package."""


class EmptyGarageError(GarageError):
    """Raised when an aggregate is requested from a garage with no records."""


class ServiceValidationError(GarageError):
    """
    A bicycle failed its pre-service check.

    Raised per item; callers servicing a batch log it and move on.
    """

    def __init__(self, brand: str, reason: str) -> None:
        super().__init__(reason)
        self.brand = brand
        self.reason = reason


class OperationCancelled(GarageError):
    """A long-running job observed the shared cancellation token."""

    def __init__(self, job: str) -> None:
        super().__init__(f"{job} cancelled")
        self.job = job


__all__ = [
    "EmptyGarageError",
    "GarageError",
    "OperationCancelled",
    "ServiceValidationError",
]
