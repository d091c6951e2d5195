"""
Utilities package for the bike garage.

Exports shared helpers for logging and profiling. Keep this package free of
registry or runner logic.
"""

from bikegarage.utils.logging import configure_logging, get_logger
from bikegarage.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
