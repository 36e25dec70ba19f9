"""``fuzztriage check`` — verify the toolchain and settings a run needs.

Reports whether ``git`` and ``go`` are on PATH (with their versions) and
whether a repository slug and token are configured.  Exits 1 if anything
required is missing.
"""

from __future__ import annotations

import shutil
import subprocess

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fuzztriage.config import TriageSettings

console = Console()


def _check_binary(name: str, version_args: list[str]) -> tuple[bool, str]:
    """Check if *name* is on PATH and report its version."""
    path = shutil.which(name)
    if not path:
        return False, "not found on PATH"
    try:
        result = subprocess.run(
            [path, *version_args],
            capture_output=True,
            text=True,
            timeout=10,
        )
        version = result.stdout.strip() or result.stderr.strip() or "unknown"
        return True, f"{path} ({version})"
    except (subprocess.SubprocessError, OSError):
        return True, f"{path} (version check failed)"


def check_cmd() -> None:
    """Check that git, go, a repository slug and a token are available."""
    settings = TriageSettings()

    checks: list[tuple[str, bool, str]] = []

    ok, detail = _check_binary("git", ["--version"])
    checks.append(("git", ok, detail))

    ok, detail = _check_binary("go", ["version"])
    checks.append(("go", ok, detail))

    checks.append(
        ("Repository", bool(settings.repository), settings.repository or "not configured")
    )
    checks.append(
        ("Token", bool(settings.github_token), "configured" if settings.github_token else "not configured")
    )
    checks.append(("GraphQL endpoint", True, settings.github_graphql_url))

    table = Table(show_header=True, header_style="bold cyan", expand=True)
    table.add_column("Component", min_width=16)
    table.add_column("Status", width=10, justify="center")
    table.add_column("Details")

    all_ok = True
    for name, ok, detail in checks:
        status = "[green]OK[/green]" if ok else "[red]MISSING[/red]"
        if not ok:
            all_ok = False
        table.add_row(name, status, detail)

    if all_ok:
        subtitle = "[bold green]Ready to fuzz.[/bold green]"
        border_style = "green"
    else:
        subtitle = "[bold red]Some requirements are missing.[/bold red]"
        border_style = "red"

    console.print()
    console.print(
        Panel(
            table,
            title="[bold]fuzztriage check[/bold]",
            subtitle=subtitle,
            border_style=border_style,
            padding=(1, 2),
        )
    )
    console.print()

    if not all_ok:
        raise typer.Exit(code=1)
