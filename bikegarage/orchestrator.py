"""
Task group runner for the bike garage.

Seeds a registry, runs the concurrent speed-mutation jobs on worker threads,
then runs the long-running simulated jobs as asyncio tasks alongside a
canceller that fires a shared cancellation token. Outcomes are joined and
aggregated into a single `RunReport`.

Usage (example from CLI):
    from bikegarage.orchestrator import RunConfig, run_garage

    report = run_garage(RunConfig(cancel_after_ms=2000))
    print(report.state)
"""

from __future__ import annotations

import asyncio
import contextlib
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from bikegarage.config import ReadMode, Settings, check_speed_deltas, get_settings
from bikegarage.domain.models import BicycleRecord
from bikegarage.errors import GarageError, OperationCancelled
from bikegarage.registry import AbstractGarage, make_garage
from bikegarage.utils.logging import get_logger
from bikegarage.utils.profiler import ProfileStats, profile_block

log = get_logger(__name__)

DEFAULT_SEEDS: Tuple[Tuple[str, int], ...] = (
    ("Giant", 35),
    ("Trek", 42),
    ("Cube", 28),
    ("Scott", 40),
)


class RunState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class JobStatus(str, Enum):
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class JobOutcome:
    name: str
    status: JobStatus
    duration_seconds: float
    result: Any = None
    error: Optional[str] = None


@dataclass
class RunReport:
    """
    Aggregate result of one runner execution.

    Job results are applied here only for jobs that completed: a cancelled
    `average_speed` job leaves `average_speed` as None.
    """

    state: RunState
    read_mode: str
    records: List[BicycleRecord] = field(default_factory=list)
    jobs: List[JobOutcome] = field(default_factory=list)
    average_speed: Optional[float] = None
    loaded_records: Optional[int] = None
    report_lines: Optional[List[str]] = None
    phases: Dict[str, ProfileStats] = field(default_factory=dict)

    @property
    def cancelled_jobs(self) -> List[str]:
        return [job.name for job in self.jobs if job.status is JobStatus.CANCELLED]


class RunConfig(BaseModel):
    """Per-run parameters; defaults come from `Settings` via `from_settings`."""

    seeds: List[Tuple[str, int]] = Field(default_factory=lambda: list(DEFAULT_SEEDS))
    read_mode: ReadMode = "guarded"
    speed_deltas: List[int] = Field(default_factory=lambda: [5, 10])
    load_delay_ms: int = 3000
    average_delay_ms: int = 1500
    report_delay_ms: int = 2500
    cancel_after_ms: Optional[int] = 2000
    enable_report_job: bool = False

    @field_validator("speed_deltas")
    @classmethod
    def validate_speed_deltas(cls, value: List[int]) -> List[int]:
        return check_speed_deltas(value)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, **overrides: Any) -> "RunConfig":
        settings = settings or get_settings()
        values: Dict[str, Any] = {
            "read_mode": settings.read_mode,
            "speed_deltas": list(settings.speed_deltas),
            "load_delay_ms": settings.load_delay_ms,
            "average_delay_ms": settings.average_delay_ms,
            "report_delay_ms": settings.report_delay_ms,
            "cancel_after_ms": settings.cancel_after_ms,
            "enable_report_job": settings.enable_report_job,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


class CancellationToken:
    """
    One-shot broadcast cancellation signal for cooperative jobs.

    Once `cancel()` is called every job currently suspended in `sleep()` wakes
    up and raises `OperationCancelled`; later sleeps raise immediately.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self, job: str) -> None:
        if self._event.is_set():
            raise OperationCancelled(job)

    async def sleep(self, seconds: float, job: str) -> None:
        """Wait `seconds`, aborting early with `OperationCancelled` if cancelled."""
        self.raise_if_cancelled(job)
        with contextlib.suppress(asyncio.TimeoutError):
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        self.raise_if_cancelled(job)


LongJob = Callable[[CancellationToken], Awaitable[Any]]


class GarageRunner:
    """
    Drives one run through `not_started -> running -> completed | cancelled`.
    """

    def __init__(self, config: Optional[RunConfig] = None) -> None:
        self.config = config or RunConfig.from_settings()
        self.state = RunState.NOT_STARTED
        self.garage: AbstractGarage = make_garage(self.config.read_mode)

    # ------------------------------------------------------------------ phases

    def seed(self) -> None:
        for model, speed in self.config.seeds:
            self.garage.add(BicycleRecord(model=model, speed=speed))
        log.info("[SEED] Garage seeded", extra={"records": len(self.garage)})

    def run_mutations(self) -> None:
        """Run the two `increase_speed_safe` worker threads, one per delta, and join both."""
        deltas = self.config.speed_deltas
        with ThreadPoolExecutor(max_workers=len(deltas), thread_name_prefix="mutator") as pool:
            futures = [
                pool.submit(self._mutate, f"increase_speed_{index}", delta)
                for index, delta in enumerate(deltas, start=1)
            ]
            for future in futures:
                future.result()

    def _mutate(self, name: str, delta: int) -> None:
        log.info(f"[JOB START] {name}: increasing speed by {delta}", extra={"job": name})
        self.garage.increase_speed_safe(delta)
        log.info(f"[JOB COMPLETE] {name}", extra={"job": name, "delta": delta})

    def _long_jobs(self) -> Dict[str, LongJob]:
        jobs: Dict[str, LongJob] = {
            "load_garage": self._load_garage,
            "average_speed": self._average_speed,
        }
        if self.config.enable_report_job:
            jobs["save_report"] = self._save_report
        return jobs

    async def _load_garage(self, token: CancellationToken) -> int:
        await token.sleep(self.config.load_delay_ms / 1000.0, "load_garage")
        return len(self.garage)

    async def _average_speed(self, token: CancellationToken) -> float:
        await token.sleep(self.config.average_delay_ms / 1000.0, "average_speed")
        return self.garage.average_speed()

    async def _save_report(self, token: CancellationToken) -> List[str]:
        await token.sleep(self.config.report_delay_ms / 1000.0, "save_report")
        return [str(record) for record in self.garage.all()]

    async def _cancel_after(self, token: CancellationToken, delay_ms: int) -> None:
        await asyncio.sleep(delay_ms / 1000.0)
        token.cancel()
        log.warning("[CANCEL] Cancellation requested for long-running jobs")

    async def _run_job(self, name: str, job: LongJob, token: CancellationToken) -> JobOutcome:
        log.info(f"[JOB START] {name}", extra={"job": name})
        start = time.perf_counter()
        try:
            result = await job(token)
        except OperationCancelled:
            # Reported once, in aggregate, by the join.
            log.debug(f"[JOB CANCELLED] {name}", extra={"job": name})
            return JobOutcome(name, JobStatus.CANCELLED, time.perf_counter() - start)
        except GarageError as exc:
            log.error(f"[JOB FAILED] {name}: {exc}", extra={"job": name})
            return JobOutcome(
                name, JobStatus.FAILED, time.perf_counter() - start, error=str(exc)
            )
        log.info(f"[JOB COMPLETE] {name}", extra={"job": name})
        return JobOutcome(name, JobStatus.COMPLETED, time.perf_counter() - start, result=result)

    async def run_long_jobs(self) -> List[JobOutcome]:
        """Run the long-running jobs and the canceller; join and return per-job outcomes."""
        token = CancellationToken()
        tasks = [
            asyncio.create_task(self._run_job(name, job, token), name=name)
            for name, job in self._long_jobs().items()
        ]
        canceller: Optional[asyncio.Task[None]] = None
        if self.config.cancel_after_ms is not None:
            canceller = asyncio.create_task(
                self._cancel_after(token, self.config.cancel_after_ms), name="canceller"
            )
        try:
            outcomes = list(await asyncio.gather(*tasks))
        finally:
            if canceller is not None and not canceller.done():
                canceller.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await canceller
        return outcomes

    # -------------------------------------------------------------------- run

    def _apply(self, report: RunReport) -> None:
        for outcome in report.jobs:
            if outcome.status is not JobStatus.COMPLETED:
                continue
            if outcome.name == "average_speed":
                report.average_speed = outcome.result
                log.info(f"Average speed: {outcome.result}", extra={"average_speed": outcome.result})
            elif outcome.name == "load_garage":
                report.loaded_records = outcome.result
                log.info("Garage loaded", extra={"records": outcome.result})
            elif outcome.name == "save_report":
                report.report_lines = outcome.result
                log.info("Report saved", extra={"lines": len(outcome.result)})

    async def run_async(self) -> RunReport:
        """Execute the full run from inside a running event loop."""
        if self.state is not RunState.NOT_STARTED:
            raise RuntimeError(f"Runner already used (state={self.state.value})")
        self.state = RunState.RUNNING
        log.info("[RUN START]", extra={"read_mode": self.garage.name})
        phases: Dict[str, ProfileStats] = {}

        self.seed()
        with profile_block("mutations") as stats:
            await asyncio.to_thread(self.run_mutations)
        phases["mutations"] = stats

        with profile_block("long_running") as stats:
            outcomes = await self.run_long_jobs()
        phases["long_running"] = stats

        cancelled = [outcome.name for outcome in outcomes if outcome.status is JobStatus.CANCELLED]
        self.state = RunState.CANCELLED if cancelled else RunState.COMPLETED
        report = RunReport(
            state=self.state,
            read_mode=self.garage.name,
            records=[record.model_copy() for record in self.garage.all()],
            jobs=outcomes,
            phases=phases,
        )
        self._apply(report)

        if cancelled:
            log.warning(
                "[RUN CANCELLED] One or more long-running jobs were cancelled",
                extra={"cancelled_jobs": cancelled},
            )
        else:
            log.info("[RUN COMPLETE] All long-running jobs finished")
        return report

    def run(self) -> RunReport:
        """
        Execute the full run from synchronous code.

        Raises RuntimeError when called from inside a running event loop; use
        `run_async` there instead.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.run_async())
        raise RuntimeError("GarageRunner.run() cannot be called from an async context")


def run_garage(config: Optional[RunConfig] = None) -> RunReport:
    """Build a runner for `config` (or the current settings) and execute it."""
    return GarageRunner(config).run()


__all__ = [
    "CancellationToken",
    "DEFAULT_SEEDS",
    "GarageRunner",
    "JobOutcome",
    "JobStatus",
    "RunConfig",
    "RunReport",
    "RunState",
    "run_garage",
]
