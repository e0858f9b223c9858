from __future__ import annotations

# ruff: noqa: I001  (import-sorting suppressed for local grouping inside commands)

import logging
from dataclasses import replace
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

"""CLI entrypoints for dfopt.

Imports of the optimization subpackages are deferred to command bodies to
keep simple commands lightweight.
"""

if TYPE_CHECKING:  # pragma: no cover - for static analysis only
    from .config import MethodConfig
    from .core import ObjectiveFunction

app = typer.Typer(help="dfopt — derivative-free optimization runs")
console = Console()


def _configure_logging(verbose: int) -> None:
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.command()
def version() -> None:
    """Print version."""
    from . import __version__

    console.print(f"dfopt {__version__}")


@app.command()
def methods() -> None:
    """List the search methods and their default parameters."""
    from .config import DEFAULT_HOOKE_JEEVES, DEFAULT_NELDER_MEAD, config_to_dict

    table = Table(title="Methods")
    table.add_column("Method")
    table.add_column("Defaults")
    for cfg in (DEFAULT_NELDER_MEAD, DEFAULT_HOOKE_JEEVES):
        values = config_to_dict(cfg)
        values.pop("method")
        table.add_row(cfg.method, ", ".join(f"{k}={v}" for k, v in values.items()))
    console.print(table)


@app.command()
def problems() -> None:
    """List the available benchmark problems."""
    from .problems import list_specs

    table = Table(title="Benchmark problems")
    table.add_column("Name")
    table.add_column("Description")
    for spec in list_specs():
        table.add_row(spec.name, spec.description or "-")
    console.print(table)


def _print_config(config: "MethodConfig") -> None:
    from .config import config_to_dict

    table = Table(show_header=False)
    for key, value in config_to_dict(config).items():
        table.add_row(key, str(value))
    console.print(table)


def _execute(
    config: "MethodConfig",
    objective: "ObjectiveFunction",
    out_dir: Path,
    write_csv: bool,
) -> Path:
    from .optim import IteratedSearch, create_method

    search = IteratedSearch(config, create_method(config))
    search.set_objective(objective)
    stats = search.statistics
    for i, sol in enumerate(search.run_batch()):
        console.print(f"Run {i} ({stats.time(i):.3f}s)\t: {sol.value}")

    best = stats.best_overall()
    console.print(f"Best value: {best.value}\nBest x: {list(best.coordinates)}")
    out = stats.write_json(out_dir / f"{config.method}-stats.json")
    if write_csv:
        stats.write_csv(out_dir / f"{config.method}-stats.csv")
    console.print(f"Wrote statistics to: [bold]{out}[/bold]")
    return out


def _override(
    config: "MethodConfig", seed: Optional[int], numruns: Optional[int]
) -> "MethodConfig":
    run = config.run
    if seed is not None:
        run = replace(run, seed=seed)
    if numruns is not None:
        run = replace(run, numruns=numruns)
    return replace(config, run=run)


@app.command("run")
def run_cmd(
    configuration: Path = typer.Argument(..., help="JSON method configuration file."),
    problem: str = typer.Option("sphere", help="Benchmark problem name."),
    dimension: int = typer.Option(2, help="Number of variables."),
    range_: float = typer.Option(5.0, "--range", help="Domain is [-range, range]^dimension."),
    out_dir: Path = typer.Option(Path("."), help="Directory for <method>-stats.json."),
    seed: Optional[int] = typer.Option(None, help="Override the configured seed."),
    numruns: Optional[int] = typer.Option(None, help="Override the configured number of runs."),
    csv: bool = typer.Option(False, "--csv", help="Also write raw samples as CSV."),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v progress, -vv trace."),
) -> None:
    """Run a multi-start search on a benchmark problem."""
    from .config import ConfigurationError, load_config
    from .problems import create_problem

    _configure_logging(verbose)
    try:
        config = _override(load_config(configuration), seed, numruns)
        objective = create_problem(problem, dimension, range_)
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))

    console.print(f"Configuration:\t {configuration}")
    console.print(f"Problem:\t {problem.lower()} ({dimension}, {range_})")
    _print_config(config)
    _execute(config, objective, out_dir, csv)


@app.command("experiment")
def experiment_cmd(
    run_file: Path = typer.Argument(
        ..., help="JSON run file with configuration, problem, dimension and range."
    ),
    out_dir: Path = typer.Option(Path("."), help="Directory for <method>-stats.json."),
    csv: bool = typer.Option(False, "--csv", help="Also write raw samples as CSV."),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v progress, -vv trace."),
) -> None:
    """Run the experiment described by a run file."""
    from .config import ConfigurationError, load_config, load_run_description
    from .problems import create_problem

    _configure_logging(verbose)
    try:
        desc = load_run_description(run_file)
        config = load_config(desc.configuration)
        objective = create_problem(desc.problem, desc.dimension, desc.range)
    except ConfigurationError as e:
        raise typer.BadParameter(str(e))

    console.print(f"Configuration:\t {desc.configuration}")
    console.print(f"Problem:\t {desc.problem} ({desc.dimension}, {desc.range})")
    _print_config(config)
    _execute(config, objective, out_dir, csv)


@app.command("validate")
def validate_cmd(
    stats_file: Path = typer.Argument(..., help="Exported <method>-stats.json file."),
) -> None:
    """Check the ordering invariants of an exported statistics file."""
    import json

    from .metrics.validate import StatisticsError, ensure_stats_file

    try:
        count = ensure_stats_file(stats_file)
    except FileNotFoundError:
        typer.echo(f"statistics file not found: {stats_file}", err=True)
        raise typer.Exit(code=2)
    except (StatisticsError, json.JSONDecodeError) as e:
        typer.echo(f"statistics check failed: {e}", err=True)
        raise typer.Exit(code=1)
    console.print(f"statistics OK ({count} runs)")


def main() -> None:  # pragma: no cover - console script
    app()
