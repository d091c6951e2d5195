"""
Pytest configuration for the bike garage.

Provides fixtures for:
- Settings with the simulated delays scaled down for fast tests
- Seeded garages for each read discipline
- Run configurations reproducing the cancellation scenarios
"""

from __future__ import annotations

from typing import Generator

import pytest

from bikegarage.config import Settings, get_settings
from bikegarage.domain.models import BicycleRecord
from bikegarage.orchestrator import DEFAULT_SEEDS, RunConfig
from bikegarage.registry import AbstractGarage, available_read_modes, make_garage

# Scenario durations divided by 5: cancel at 2000ms, jobs of 3000ms and 1500ms.
CANCEL_AFTER_MS = 400
LOAD_DELAY_MS = 600
AVERAGE_DELAY_MS = 300


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """
    Settings fixture with millisecond-scale delays for the ride state machine.
    """
    return Settings(
        log_level="DEBUG",
        ride_delay_ms=10,
        stop_delay_ms=5,
        service_delay_ms=15,
    )


def seed_records() -> list[BicycleRecord]:
    return [BicycleRecord(model=model, speed=speed) for model, speed in DEFAULT_SEEDS]


@pytest.fixture(params=available_read_modes())
def seeded_garage(request: pytest.FixtureRequest) -> AbstractGarage:
    """Garage holding Giant 35, Trek 42, Cube 28, Scott 40, for every read mode."""
    return make_garage(request.param, seed_records())


@pytest.fixture
def cancelling_config() -> RunConfig:
    return RunConfig(
        cancel_after_ms=CANCEL_AFTER_MS,
        load_delay_ms=LOAD_DELAY_MS,
        average_delay_ms=AVERAGE_DELAY_MS,
    )
