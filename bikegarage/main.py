from __future__ import annotations

import asyncio
import sys
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from bikegarage.config import get_settings
from bikegarage.domain.models import BicycleRecord
from bikegarage.orchestrator import RunConfig, run_garage
from bikegarage.registry import available_read_modes
from bikegarage.reporter import garage_table, print_lines, print_report
from bikegarage.rides import demo_ride
from bikegarage.service import ServiceDesk, default_bikes
from bikegarage.utils.logging import configure_logging

app = typer.Typer(help="Bike garage concurrency demo CLI.")


def _configure() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


def _describe_errors(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
    )


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"env={settings.app_env} read_mode={settings.read_mode} deltas={settings.speed_deltas} | "
        f"load={settings.load_delay_ms}ms average={settings.average_delay_ms}ms "
        f"report={settings.report_delay_ms}ms cancel_after={settings.cancel_after_ms}ms "
        f"report_job={settings.enable_report_job}"
    )


@app.command()
def run(
    read_mode: Optional[str] = typer.Option(
        None,
        "--read-mode",
        "-m",
        help="Registry read discipline (guarded or naive; 'list' to show them).",
    ),
    cancel_after_ms: Optional[int] = typer.Option(
        None, "--cancel-after-ms", help="Fire the cancellation token after this many ms."
    ),
    no_cancel: bool = typer.Option(False, "--no-cancel", help="Never fire the cancellation token."),
    load_delay_ms: Optional[int] = typer.Option(None, "--load-delay-ms"),
    average_delay_ms: Optional[int] = typer.Option(None, "--average-delay-ms"),
    report_job: Optional[bool] = typer.Option(
        None, "--report-job/--no-report-job", help="Also run the simulated save-report job."
    ),
    delta: Optional[list[int]] = typer.Option(
        None, "--delta", "-d", help="Speed delta for a mutation worker; give it exactly twice with distinct values."
    ),
) -> None:
    """
    Seed the garage, run mutation workers and cancellable jobs, print the report.
    """
    if read_mode == "list":
        typer.echo("Available read modes: " + ", ".join(available_read_modes()))
        return

    if read_mode is not None and read_mode not in available_read_modes():
        raise typer.BadParameter(
            f"Unknown read mode '{read_mode}'. Available: {', '.join(available_read_modes())}",
            param_hint="--read-mode",
        )

    _configure()
    try:
        config = RunConfig.from_settings(
            read_mode=read_mode,
            cancel_after_ms=cancel_after_ms,
            load_delay_ms=load_delay_ms,
            average_delay_ms=average_delay_ms,
            enable_report_job=report_job,
            speed_deltas=delta or None,
        )
    except ValidationError as exc:
        raise typer.BadParameter(_describe_errors(exc)) from exc
    if no_cancel:
        config.cancel_after_ms = None
    report = run_garage(config)
    print_report(report)


@app.command()
def service() -> None:
    """
    Service the default bikes; failed checks are logged and skipped.
    """
    _configure()
    desk = ServiceDesk()
    desk.subscribe("added", lambda bike: typer.echo(f"Added: {bike.brand}"))
    desk.subscribe("serviced", lambda bike: typer.echo(f"Serviced: {bike.brand}"))
    for bike in default_bikes():
        desk.add(bike)
    print_lines(desk.show(), "Bicycles")
    summary = desk.service_all()
    typer.echo(f"Serviced {len(summary.serviced)}, failed {len(summary.failures)}.")


@app.command()
def ride(
    model: str = typer.Option("SpecialBike", "--model"),
    speed: int = typer.Option(38, "--speed"),
) -> None:
    """
    Walk one bike through the ride state machine.
    """
    _configure()
    bike = asyncio.run(demo_ride(BicycleRecord(model=model, speed=speed)))
    Console().print(garage_table([bike], title="Final bike state"))


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
