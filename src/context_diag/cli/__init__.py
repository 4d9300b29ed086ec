"""context-diag CLI."""

import logging
from typing import Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from context_diag.cli.analyze import analyze
from context_diag.cli.profile import app as profile_app
from context_diag.models import DiagSettings

app = typer.Typer(
    name="context-diag",
    help="Context window diagnostics for LLM agent sessions",
    no_args_is_help=True,
)

app.command()(analyze)
app.add_typer(profile_app, name="profile", help="Profile operations")


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Context window diagnostics for LLM agent sessions."""
    try:
        settings = DiagSettings()
    except ValidationError as e:
        Console().print(f"[red]Invalid configuration:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None
    level = "DEBUG" if verbose else settings.log_level
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


if __name__ == "__main__":
    app()
