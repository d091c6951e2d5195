"""
Ride state machine for a single bicycle.

Transitions suspend for a configurable delay. An illegal transition is logged
and leaves the bike untouched; each coroutine returns whether it ran.

    idle --start_riding--> riding --stop--> idle
    idle|riding --service--> servicing --(delay)--> idle
"""

from __future__ import annotations

import asyncio
from typing import Optional

from bikegarage.config import Settings, get_settings
from bikegarage.domain.models import BicycleRecord, BikeState
from bikegarage.utils.logging import get_logger

log = get_logger(__name__)


class RideController:
    def __init__(self, bike: BicycleRecord, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        self.bike = bike
        self.ride_delay = settings.ride_delay_ms / 1000.0
        self.stop_delay = settings.stop_delay_ms / 1000.0
        self.service_delay = settings.service_delay_ms / 1000.0

    def _reject(self, action: str) -> bool:
        log.warning(
            f"{self.bike.model}: cannot {action} from state {self.bike.state.value}",
            extra={"bike": self.bike.model, "state": self.bike.state.value},
        )
        return False

    async def start_riding(self) -> bool:
        if self.bike.state is not BikeState.IDLE:
            return self._reject("start riding")
        log.info(f"{self.bike.model}: starting to ride")
        self.bike.state = BikeState.RIDING
        await asyncio.sleep(self.ride_delay)
        log.info(f"{self.bike.model}: now {self.bike.state.value}")
        return True

    async def stop(self) -> bool:
        if self.bike.state is not BikeState.RIDING:
            return self._reject("stop")
        log.info(f"{self.bike.model}: stopping")
        await asyncio.sleep(self.stop_delay)
        self.bike.state = BikeState.IDLE
        log.info(f"{self.bike.model}: now {self.bike.state.value}")
        return True

    async def service(self) -> bool:
        if self.bike.state is BikeState.SERVICING:
            log.warning(f"{self.bike.model}: already in service", extra={"bike": self.bike.model})
            return False
        log.info(f"{self.bike.model}: service started")
        self.bike.state = BikeState.SERVICING
        await asyncio.sleep(self.service_delay)
        self.bike.state = BikeState.IDLE
        log.info(f"{self.bike.model}: service finished, now {self.bike.state.value}")
        return True


async def demo_ride(bike: BicycleRecord, settings: Optional[Settings] = None) -> BicycleRecord:
    """Replay the lab sequence: ride, service while riding, stop (rejected), service again."""
    controller = RideController(bike, settings)
    await controller.start_riding()
    await controller.service()
    await controller.stop()
    await controller.service()
    return bike


__all__ = ["RideController", "demo_ride"]
