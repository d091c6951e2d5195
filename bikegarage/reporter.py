from __future__ import annotations

from typing import Iterable, List, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from bikegarage.domain.models import BicycleRecord
from bikegarage.orchestrator import JobStatus, RunReport, RunState

_STATUS_STYLES = {
    JobStatus.COMPLETED: "green",
    JobStatus.CANCELLED: "yellow",
    JobStatus.FAILED: "red",
}


def garage_table(records: Iterable[BicycleRecord], title: str = "Garage") -> Table:
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Model", style="cyan", no_wrap=True)
    table.add_column("Speed (km/h)", justify="right", style="magenta")
    table.add_column("State", style="blue")
    for index, record in enumerate(records, start=1):
        table.add_row(str(index), record.model, str(record.speed), record.state.value)
    return table


def print_report(report: RunReport, console: Optional[Console] = None) -> None:
    """
    Render a run report: final garage contents, per-job outcomes and the
    aggregate terminal state.
    """
    console = console or Console()

    console.print(garage_table(report.records, title=f"Garage ({report.read_mode} reads)"))

    jobs = Table(title="Long-running jobs", box=box.ROUNDED)
    jobs.add_column("Job", style="cyan", no_wrap=True)
    jobs.add_column("Outcome")
    jobs.add_column("Duration (s)", justify="right", style="green")
    jobs.add_column("Result")
    for job in report.jobs:
        style = _STATUS_STYLES[job.status]
        if job.status is JobStatus.COMPLETED:
            result = _format_result(job.result)
        else:
            result = job.error or "-"
        jobs.add_row(
            job.name, f"[{style}]{job.status.value}[/{style}]", f"{job.duration_seconds:.2f}", result
        )
    console.print(jobs)

    console.print(phase_table(report))

    phases = ", ".join(
        f"{name}={stats.duration_seconds:.2f}s" for name, stats in report.phases.items()
    )
    if report.state is RunState.CANCELLED:
        console.print(
            f"[bold yellow]Run cancelled[/bold yellow] "
            f"(cancelled: {', '.join(report.cancelled_jobs)}) [dim]{phases}[/dim]"
        )
    else:
        console.print(f"[bold green]Run completed[/bold green] [dim]{phases}[/dim]")


def phase_table(report: RunReport) -> Table:
    table = Table(title="Run phases", box=box.ROUNDED)
    table.add_column("Phase", style="cyan", no_wrap=True)
    table.add_column("Duration (s)", justify="right", style="green")
    table.add_column("Peak Memory (MB)", justify="right", style="yellow")
    table.add_column("CPU %", justify="right", style="red")
    for name, stats in report.phases.items():
        mem_mb = (stats.peak_rss_bytes or 0) / (1024 * 1024)
        cpu = stats.cpu_percent or 0.0
        table.add_row(name, f"{stats.duration_seconds:.2f}", f"{mem_mb:.2f}", f"{cpu:.1f}")
    return table


def _format_result(result: object) -> str:
    if isinstance(result, float):
        return f"{result:.2f}"
    if isinstance(result, list):
        return f"{len(result)} lines"
    return str(result)


def print_lines(lines: List[str], title: str, console: Optional[Console] = None) -> None:
    console = console or Console()
    console.print(f"[bold]{title}[/bold]")
    if not lines:
        console.print("[yellow]Nothing to display.[/yellow]")
    for line in lines:
        console.print(f"  {line}")
