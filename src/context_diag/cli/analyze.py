"""Analyze command - evaluate a recorded session and report agent health."""

from __future__ import annotations

from pathlib import Path  # noqa: TC003 - Typer evaluates type hints at runtime
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from context_diag.analysis import SessionAnalysis, analyze_session
from context_diag.models import DiagSettings, HealthGrade, ProfilesConfig
from context_diag.parser import find_project_dir, parse_session
from context_diag.profiles import ProfileLoadError, load_profiles

console = Console()

HEALTH_STYLES = {
    HealthGrade.HEALTHY: "green",
    HealthGrade.DEGRADED: "yellow",
    HealthGrade.UNHEALTHY: "red",
}


def _load_profiles_or_exit(path: Path | None) -> ProfilesConfig | None:
    if path is None:
        return None
    try:
        return load_profiles(path)
    except ProfileLoadError as e:
        console.print(f"[red]Failed to load profiles:[/red] {e}")
        raise typer.Exit(1) from None


def _print_report(analysis: SessionAnalysis) -> None:
    summary = analysis.summary
    style = HEALTH_STYLES[summary.overall_health]
    console.print(f"[bold]Session:[/bold] {summary.session_id}")
    console.print(f"[bold]Overall health:[/bold] [{style}]{summary.overall_health}[/{style}]")
    console.print(f"[dim]{summary.start_time} → {summary.end_time}[/dim]")
    console.print()

    table = Table(title="Agents")
    table.add_column("Agent", style="cyan")
    table.add_column("Model")
    table.add_column("Profile")
    table.add_column("Turns", justify="right")
    table.add_column("Peak", justify="right")
    table.add_column("Final", justify="right")
    table.add_column("Compactions", justify="right")
    table.add_column("Health")
    for agent in summary.agents:
        agent_style = HEALTH_STYLES[agent.health]
        table.add_row(
            agent.agent_id,
            agent.model,
            agent.profile_id or "[dim]fallback[/dim]",
            str(agent.total_turns),
            f"{agent.peak_pct:.1%}",
            f"{agent.final_pct:.1%}",
            str(agent.compactions),
            f"[{agent_style}]{agent.health}[/{agent_style}]",
        )
    console.print(table)

    if summary.insights:
        console.print()
        console.print("[bold]Insights[/bold]")
        for insight in summary.insights:
            console.print(
                f"  [cyan]{insight.agent_id}[/cyan] ({insight.category}): {insight.message}"
            )

    if summary.suggestions:
        console.print()
        console.print("[bold]Suggestions[/bold]")
        for s in summary.suggestions:
            action = f" [dim]→ {s.action}[/dim]" if s.action else ""
            console.print(f"  [magenta]P{s.priority}[/magenta] {s.message}{action}")

    console.print()
    console.print(f"Events: {len(analysis.events)}")


def analyze(
    session: Annotated[
        Path | None,
        typer.Option(
            "--session",
            "-s",
            help="Project directory holding session transcripts"
            " (default: the current directory's project under CONTEXT_DIAG_PROJECTS_DIR)",
        ),
    ] = None,
    session_id: Annotated[
        str | None,
        typer.Option("--session-id", help="Session to analyze (default: most recent)"),
    ] = None,
    profiles: Annotated[
        Path | None, typer.Option("--profiles", "-p", help="Path to context-profiles.json")
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write events and summary as JSON")
    ] = None,
    format: Annotated[
        str, typer.Option("--format", "-f", help="Output format: text or json")
    ] = "text",
) -> None:
    """Evaluate a recorded session and report per-agent context health."""
    settings = DiagSettings()
    if session is None:
        session = find_project_dir(settings.projects_dir, Path.cwd())
        if session is None:
            console.print(f"[red]No Claude Code projects found in {settings.projects_dir}[/red]")
            raise typer.Exit(1)
    if not session.is_dir():
        console.print(f"[red]Session directory not found: {session}[/red]")
        raise typer.Exit(1)

    profiles_config = _load_profiles_or_exit(profiles or settings.profiles_path)

    parsed = parse_session(session, session_id)
    if parsed is None:
        console.print(f"[red]No session data found in {session}[/red]")
        raise typer.Exit(1)

    analysis = analyze_session(parsed, profiles_config)

    if output:
        output.write_text(analysis.model_dump_json(indent=2))
        console.print(f"[green]Analysis written to {output}[/green]")

    if format == "json":
        console.print_json(analysis.summary.model_dump_json())
    else:
        _print_report(analysis)
