"""
Command-line interface for Quicksilver using Typer.
"""

import dataclasses
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from quicksilver import __version__
from quicksilver.api import load_request
from quicksilver.api import solve as api_solve
from quicksilver.config import (
    QuicksilverParams,
    load_default_params,
    load_quicksilver_params,
)
from quicksilver.core_types import DispatchSolution, parse_timestamp
from quicksilver.server import run_server
from quicksilver.utils.logging import (
    LogLevel,
    ProgressTracker,
    log_error,
    log_progress,
    log_success,
    setup_logging,
)
from quicksilver.utils.save_results import save_solution

app = typer.Typer(
    help="Quicksilver: greedy courier dispatch with capacity and time windows",
    add_completion=False,
)
console = Console()


def _get_default_config() -> QuicksilverParams | None:
    """Load the packaged default configuration, if readable."""
    try:
        return load_default_params()
    except (FileNotFoundError, ValueError):
        return None


# Load default config once at module level
_DEFAULT_CONFIG = _get_default_config()


def _load_params(config: Path | None) -> QuicksilverParams:
    if config is None:
        if _DEFAULT_CONFIG is None:
            raise RuntimeError("No default configuration found")
        return _DEFAULT_CONFIG
    return load_quicksilver_params(config)


def _print_solution(name: str, solution: DispatchSolution, n_couriers: int) -> None:
    table = Table(title=f"Dispatch Results: {name}", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Couriers Used", f"{len(solution.routes)}/{n_couriers}")
    table.add_row("Tasks Assigned", str(solution.assigned_count))
    table.add_row("Tasks Unassigned", str(len(solution.unassigned)))
    table.add_row("Dispatcher", solution.solver_name)
    table.add_row("Solver Time", f"{solution.solver_runtime_sec * 1000:.1f}ms")
    console.print(table)

    if solution.routes:
        routes_table = Table(title="Routes", show_header=True)
        routes_table.add_column("Courier", style="cyan")
        routes_table.add_column("Tasks", style="green")
        for route in solution.routes:
            routes_table.add_row(route.courier_guid, " → ".join(route.route))
        console.print(routes_table)

    if solution.unassigned:
        console.print(f"[yellow]Unassigned:[/yellow] {', '.join(solution.unassigned)}")


@app.command()
def solve(
    requests: list[Path] = typer.Argument(
        ..., help="Path(s) to JSON dispatch request files"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to configuration YAML file"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Directory to save results to"
    ),
    format: str | None = typer.Option(
        None,
        "--format",
        "-f",
        help="Output format (json, csv). Defaults to the configured format",
    ),
    planning_start: str | None = typer.Option(
        None,
        "--planning-start",
        help="ISO-8601 instant the dispatch clock starts at (default: request value or now)",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Minimal output (errors only)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """
    Assign the tasks of one or more dispatch requests to their couriers.

    Each request is solved independently with a fresh simulation. Results are
    printed as a summary table and, with --output, saved next to each other
    as <request>_result.<format>.
    """
    # Setup logging based on flags
    _setup_logging_from_flags(verbose, quiet, debug)

    # -----------------------------
    # Validate CLI inputs first
    # -----------------------------
    missing = [path for path in requests if not path.exists()]
    if missing:
        log_error(f"Request file not found: {', '.join(str(p) for p in missing)}")
        raise typer.Exit(1)

    if config and not config.exists():
        log_error(f"Config file not found: {config}")
        raise typer.Exit(1)

    if format is not None and format not in ["json", "csv"]:
        log_error("Invalid format. Choose 'json' or 'csv'")
        raise typer.Exit(1)

    try:
        params = _load_params(config)
        anchor = (
            parse_timestamp(planning_start, "--planning-start")
            if planning_start
            else None
        )
    except (RuntimeError, ValueError) as e:
        log_error(str(e))
        raise typer.Exit(1)

    format = format or params.io.format
    progress = ProgressTracker([path.name for path in requests]) if len(requests) > 1 else None

    completed = False
    try:
        for path in requests:
            log_progress(f"Solving {path.name}...")
            request = load_request(path)
            solution = api_solve(request, config=params, planning_start=anchor)

            if not quiet:
                _print_solution(path.stem, solution, len(request.couriers))

            if output is not None:
                saved = save_solution(
                    solution,
                    filename=output / f"{path.stem}_result.{format}",
                    format=format,
                )
                log_success(f"Results saved to {saved.name}")

            if progress is not None:
                progress.advance(
                    f"{path.name}: {len(solution.unassigned)} unassigned",
                    status="success" if not solution.unassigned else "warning",
                )
        completed = True
    except FileNotFoundError as e:
        log_error(str(e))
        raise typer.Exit(1)
    except ValueError as e:
        log_error(str(e))
        raise typer.Exit(1)
    finally:
        if progress is not None:
            progress.close(success=completed)


@app.command()
def serve(
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to configuration YAML file"
    ),
    host: str | None = typer.Option(None, "--host", help="Interface to bind to"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on"),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Minimal output (errors only)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """
    Serve the greedy dispatcher over HTTP at POST /vpr/greedy.
    """
    _setup_logging_from_flags(verbose, quiet, debug)

    if config and not config.exists():
        log_error(f"Config file not found: {config}")
        raise typer.Exit(1)

    try:
        params = _load_params(config)
        server = dataclasses.replace(
            params.server,
            host=host if host is not None else params.server.host,
            port=port if port is not None else params.server.port,
        )
    except (RuntimeError, ValueError) as e:
        log_error(str(e))
        raise typer.Exit(1)

    params = dataclasses.replace(params, server=server)
    console.print(
        f"[bold cyan]Quicksilver listening on http://{server.host}:{server.port}/vpr/greedy[/bold cyan]"
    )
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")
    run_server(params)


@app.command()
def version() -> None:
    """
    Show the Quicksilver version.
    """
    console.print(f"Quicksilver version {__version__}")


def _setup_logging_from_flags(
    verbose: bool = False, quiet: bool = False, debug: bool = False
):
    """Setup logging based on CLI flags or environment variable."""
    level_from_flags: LogLevel | None = None
    if debug:
        level_from_flags = LogLevel.DEBUG
    elif verbose:
        level_from_flags = LogLevel.VERBOSE
    elif quiet:
        level_from_flags = LogLevel.QUIET

    if level_from_flags is not None:
        setup_logging(level_from_flags)
    else:
        # No flags set, let setup_logging handle it (will check env var)
        setup_logging()


if __name__ == "__main__":
    app()
