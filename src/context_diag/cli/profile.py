"""Profile CLI commands: validate profile files and list built-in templates."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - Typer evaluates type hints at runtime
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from context_diag.profiles import (
    TEMPLATES,
    ProfileLoadError,
    ProfileValidator,
    get_template,
    load_profiles,
)

app = typer.Typer(no_args_is_help=True)
console = Console()


@app.command()
def validate(
    profiles: Annotated[
        Path, typer.Option("--profiles", "-p", help="Path to context-profiles.json")
    ],
) -> None:
    """Validate a context-profiles.json file."""
    try:
        config = load_profiles(profiles)
    except ProfileLoadError as e:
        console.print("[red]Schema validation failed:[/red]")
        console.print(f"  {e}")
        raise typer.Exit(1) from None

    console.print(f"Loaded {len(config.profiles)} profile(s) from {profiles}")
    results = ProfileValidator().evaluate(config)

    for r in results:
        color = "yellow" if r.severity == "warning" else "red"
        prefix = f"[{r.profile_id}]" if r.profile_id else "[global]"
        console.print(f"  [{color}]{r.severity}[/{color}] {prefix} {r.field}: {r.message}")

    errors = [r for r in results if r.severity == "error"]
    if errors:
        console.print(f"\n[red]Found {len(errors)} validation error(s)[/red]")
        raise typer.Exit(1)

    console.print("\n[green]✓[/green] All profiles are valid!")
    for p in config.profiles:
        a = p.alerts
        console.print(
            f"  - {p.id}: {p.label} ({p.model})  "
            f"warning {a.warning_threshold:.0%} | dumb zone {a.dumb_zone_threshold:.0%} | "
            f"turns {a.expected_turns[0]}-{a.expected_turns[1]}"
        )


@app.command()
def templates(
    name: Annotated[
        str | None, typer.Argument(help="Template to print as JSON (omit to list all)")
    ] = None,
) -> None:
    """List built-in profile templates, or print one as JSON."""
    if name:
        try:
            template = get_template(name)
        except ValueError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1) from None
        console.print_json(template.model_dump_json(by_alias=True))
        return

    table = Table(title="Profile Templates")
    table.add_column("Name", style="cyan")
    table.add_column("Warning", justify="right")
    table.add_column("Dumb zone", justify="right")
    table.add_column("Compaction target", justify="right")
    table.add_column("Expected turns", style="green")

    for t in TEMPLATES.values():
        a = t.alerts
        table.add_row(
            t.id,
            f"{a.warning_threshold:.0%}",
            f"{a.dumb_zone_threshold:.0%}",
            f"{a.compaction_target:.0%}",
            f"{a.expected_turns[0]}-{a.expected_turns[1]}",
        )

    console.print(table)
