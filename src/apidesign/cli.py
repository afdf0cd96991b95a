from __future__ import annotations

from pathlib import Path
from typing import Optional

import json
import typer
from rich.console import Console
from rich.table import Table

from apidesign.config import get_settings, setup_logging
from apidesign.export.summary import summarize
from apidesign.loader import BuildResult, DesignLoadError, run_build


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()


def _build(design_file: str) -> BuildResult:
    try:
        return run_build(Path(design_file))
    except DesignLoadError as e:
        raise typer.BadParameter(str(e))


def _print_errors(result: BuildResult, limit: int) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("KIND", no_wrap=True)
    table.add_column("WHERE")
    table.add_column("MESSAGE")
    for e in result.errors[:limit]:
        table.add_row(e.kind.value, e.location or "-", e.message)
    console.print(table)
    if len(result.errors) > limit:
        console.print(f"  … and {len(result.errors) - limit} more")


@app.command()
def check(
    design_file: str = typer.Argument(..., help="Python file defining design(ctx)"),
    max_errors: Optional[int] = typer.Option(None, help="Max errors to print"),
) -> None:
    """Run a build pass and report every configuration error found."""
    result = _build(design_file)
    limit = max_errors if max_errors is not None else get_settings().max_errors_shown

    console.print(f"[bold]Design:[/bold] {result.path}")
    if not result.ok:
        console.print(f"[bold red]{len(result.errors)} error(s)[/bold red]")
        _print_errors(result, limit)
        raise typer.Exit(code=1)

    actions = sum(len(r.actions) for r in result.design.resources.values())
    console.print(
        f"[bold green]ok[/bold green] resources={len(result.design.resources)}, actions={actions}"
    )


@app.command()
def routes(
    design_file: str = typer.Argument(..., help="Python file defining design(ctx)"),
    format: str = typer.Option("table", help="Output format: table|json"),
) -> None:
    """List the routes of every action, in registration order."""
    result = _build(design_file)

    fmt = format.lower().strip()
    if fmt not in ("table", "json"):
        raise typer.BadParameter("format must be one of: table, json")

    specs = summarize(result.design)

    if fmt == "json":
        typer.echo(json.dumps([s.model_dump() for s in specs], indent=2))
    else:
        table = Table(show_header=True, header_style="bold")
        table.add_column("METHOD", no_wrap=True)
        table.add_column("PATH")
        table.add_column("ACTION")
        table.add_column("PAYLOAD")
        for r in specs:
            for a in r.actions:
                for route in a.routes:
                    table.add_row(route.method, route.full_path, f"{r.name}.{a.name}", a.payload or "")
        console.print(table)

    if not result.ok:
        console.print(
            f"[bold red]{len(result.errors)} error(s)[/bold red], run [bold]apidesign check[/bold] for details"
        )
        raise typer.Exit(code=1)


@app.command()
def ping() -> None:
    console.print("pong")


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app()


if __name__ == "__main__":
    main()
