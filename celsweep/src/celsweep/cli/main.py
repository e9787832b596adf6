"""CLI entrypoint for celsweep."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from celsweep import __version__, api
from celsweep.core.options import PruneOptions
from celsweep.core.pipeline import CleanupPipeline, CleanupResult, CleanupStatus, confirmation_message
from celsweep.errors import AdapterNotFoundError, CelsweepError
from celsweep.validate import Severity, ValidationIOError, ValidationReport

console = Console()
app = typer.Typer(help="Find and remove unexposed cels from animation scene snapshots.")

LOG = logging.getLogger("celsweep")
LOG_JSON = False


def _configure_logging(verbosity: int, json_logs: bool) -> None:
    global LOG_JSON
    LOG_JSON = json_logs
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(message)s")


def _log(event: str, **payload: object) -> None:
    if LOG_JSON:
        record = {"event": event, **payload}
        console.print_json(data=record)
    else:
        details = " ".join(f"{key}={value}" for key, value in payload.items())
        console.log(f"{event} {details}" if details else event)


def _version_callback(value: bool) -> None:
    """Print the package version and exit when requested."""
    if value:
        console.print(f"celsweep [bold cyan]{__version__}[/bold cyan]")
        raise typer.Exit()


def _load_options(config: Optional[Path], dedup: Optional[str], dry_run: bool) -> PruneOptions:
    try:
        options = PruneOptions.from_file(config) if config else PruneOptions()
        if dedup is not None:
            options.dedup = dedup.lower()  # type: ignore[assignment]
        if dry_run:
            options.dry_run = True
    except (OSError, ValueError, ValidationError) as exc:
        console.print(f"[bold red]Invalid options:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    options.skip_confirmation = True
    return options


def _plans_table(result: CleanupResult) -> Table:
    table = Table(title="Asset groups")
    table.add_column("Asset", style="cyan")
    table.add_column("Column")
    table.add_column("Exposed", justify="right")
    table.add_column("Stored", justify="right")
    table.add_column("Unexposed", style="red")
    for plan in result.plans:
        table.add_row(
            plan.asset_id,
            plan.column,
            str(len(plan.exposed)),
            str(len(plan.stored)),
            ", ".join(plan.victims) or "-",
        )
    return table


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the celsweep version and exit.",
    ),
) -> None:
    """Initialize the CLI before command dispatch."""
    return None


@app.command()
def prune(
    scene: Path = typer.Argument(..., exists=True, dir_okay=False, help="Scene snapshot (JSON or YAML)."),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Where to write the cleaned scene."),
    in_place: bool = typer.Option(False, "--in-place", help="Rewrite the input scene file."),
    select: Optional[List[str]] = typer.Option(
        None, "--select", "-s", help="Node path to process (repeatable); defaults to the saved selection."
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Report unexposed cels without deleting them."),
    dedup: Optional[str] = typer.Option(None, "--dedup", help="Duplicate column exclusion: 'full' or 'adjacent'."),
    config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, help="YAML options file."),
    adapter: Optional[str] = typer.Option(None, "--adapter", "-a", help="Host adapter to use."),
    verbose: int = typer.Option(0, "--verbose", "-V", count=True, help="Increase log verbosity (repeatable)."),
    log_json: bool = typer.Option(False, "--log-json", help="Emit JSON structured logs."),
) -> None:
    """Remove unexposed cels from the selected drawings of a scene snapshot."""
    _configure_logging(verbose, log_json)
    options = _load_options(config, dedup, dry_run)
    if not options.dry_run and out is None and not in_place:
        console.print("[bold red]Provide --out or --in-place to write the cleaned scene.[/bold red]")
        raise typer.Exit(code=2)

    try:
        host = api.open_scene(scene, adapter=adapter)
    except AdapterNotFoundError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1) from exc
    except (OSError, ValueError) as exc:
        console.print(f"[bold red]Unable to read scene:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc
    _log("scene.loaded", adapter=host.name, scene=str(scene))

    pipeline = CleanupPipeline(host, options)
    tracks = pipeline.selected_tracks(select or None)
    if tracks and not options.dry_run and not yes:
        if not typer.confirm(confirmation_message(len(tracks)), default=False):
            _log("prune.aborted", tracks=len(tracks))
            raise typer.Exit(code=0)

    try:
        result = pipeline.run(select or None, skip_confirmation=True)
    except CelsweepError as exc:
        _log("prune.error", error=str(exc))
        raise typer.Exit(code=1) from exc

    if result.status is CleanupStatus.EMPTY_SELECTION:
        console.print("[bold yellow]No drawing nodes selected; nothing to do.[/bold yellow]")
        raise typer.Exit(code=1)
    for diagnostic in result.diagnostics:
        _log("track.skipped", track=diagnostic.track, reason=diagnostic.reason)
    if result.status is CleanupStatus.DRY_RUN:
        console.print(_plans_table(result))
        _log("prune.dry_run", assets=len(result.plans), planned=sum(len(p.victims) for p in result.plans))
        return

    target = api.save_scene(host, out if out is not None else scene)
    _log("prune.completed", output=str(target), deleted=result.deleted_count)


@app.command()
def inspect(
    scene: Path = typer.Argument(..., exists=True, dir_okay=False, help="Scene snapshot (JSON or YAML)."),
    select: Optional[List[str]] = typer.Option(None, "--select", "-s", help="Node path to inspect (repeatable)."),
    dedup: Optional[str] = typer.Option(None, "--dedup", help="Duplicate column exclusion: 'full' or 'adjacent'."),
    adapter: Optional[str] = typer.Option(None, "--adapter", "-a", help="Host adapter to use."),
) -> None:
    """Show the asset groups of a selection and the cels a cleanup would delete."""
    options = _load_options(None, dedup, True)
    try:
        host = api.open_scene(scene, adapter=adapter)
    except (AdapterNotFoundError, OSError, ValueError) as exc:
        console.print(f"[bold red]Unable to read scene:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    result = api.plan_cleanup(host, select or None, options=options)
    if result.status is CleanupStatus.EMPTY_SELECTION:
        console.print("[bold yellow]No drawing nodes selected.[/bold yellow]")
        raise typer.Exit(code=1)
    console.print(_plans_table(result))
    for diagnostic in result.diagnostics:
        console.print(f"[yellow]Skipped {diagnostic.track}:[/yellow] {diagnostic.reason}")


@app.command()
def validate(
    scene: Path = typer.Argument(..., help="Scene snapshot (JSON or YAML)."),
    json_report: Optional[Path] = typer.Option(None, "--json", help="Write machine-readable report to a JSON file."),
) -> None:
    """Validate a scene snapshot and emit a machine-readable report."""
    try:
        report: ValidationReport = api.validate(scene)
    except ValidationIOError as exc:
        console.print(f"[bold red]Unable to read scene:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if json_report is not None:
        json_report.parent.mkdir(parents=True, exist_ok=True)
        json_report.write_text(report.model_dump_json(indent=2))

    severity_style = {
        Severity.INFO: "cyan",
        Severity.WARNING: "yellow",
        Severity.ERROR: "red",
    }

    if report.issues:
        console.print("[bold]Validation Issues:[/bold]")
        for issue in report.issues:
            style = severity_style.get(issue.severity, "white")
            console.print(
                f"{issue.severity.value.upper()} {issue.code}: {issue.message} ({issue.path})",
                style=style,
                markup=False,
            )
    else:
        console.print("[bold green]No issues detected.[/bold green]")

    summary_parts = ", ".join(f"{key}={value}" for key, value in report.summary.items())
    console.print(f"[bold cyan]Summary:[/bold cyan] {summary_parts}")

    if report.ok:
        console.print("[bold green]Validation passed.[/bold green]")
        raise typer.Exit(code=0)

    console.print("[bold red]Validation completed with errors.[/bold red]")
    raise typer.Exit(code=1)
