"""Main Typer application — imports and registers all CLI commands.

Entry point: ``fuzztriage`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import typer

from fuzztriage import __version__
from fuzztriage.cli.commands.check import check_cmd
from fuzztriage.cli.commands.detect import detect_cmd
from fuzztriage.cli.commands.run import run_cmd

app = typer.Typer(
    name="fuzztriage",
    help="fuzztriage: run Go fuzz tests in CI and publish new failing inputs to a branch.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="run", help="Run a fuzz campaign and publish a new failing input.")(run_cmd)
app.command(name="detect", help="Preview which new corpus entry a run would publish.")(detect_cmd)
app.command(name="check", help="Check that git, go and the GitHub settings are available.")(check_cmd)


@app.command(name="version", help="Print the fuzztriage version.")
def version_cmd() -> None:
    typer.echo(__version__)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
