"""``fuzztriage detect`` — preview which corpus entry would be published.

Stages the work tree, lists corpus candidates, prints the branch name a
``run`` would create, and restores the index.  Never publishes, never
deletes files.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fuzztriage.config import TriageSettings
from fuzztriage.core.branch_publisher import build_branch_name
from fuzztriage.core.corpus_detector import CorpusDetector, classify_corpus_path, split_path
from fuzztriage.core.git import GitWorkTree
from fuzztriage.core.gotool import GoToolchain
from fuzztriage.core.process import CommandError, CommandRunner, SubprocessRunner
from fuzztriage.log import configure_logging
from fuzztriage.models.corpus import CorpusArtifact

console = Console()


def preview(
    runner: CommandRunner, working_directory: Path
) -> tuple[list[str], CorpusArtifact | None]:
    """Return the corpus candidates and, if unambiguous, the artifact a run would publish."""
    git = GitWorkTree(runner, working_directory)
    detector = CorpusDetector(git, GoToolchain(runner, working_directory))
    try:
        candidates = detector.find_candidates()
        artifact = detector.to_artifact(candidates[0]) if len(candidates) == 1 else None
    finally:
        git.restore_staged()
    return candidates, artifact


def detect_cmd(
    working_directory: Path = typer.Option(None, "--working-directory", "-C", help="Module directory."),
    head_branch_prefix: str = typer.Option(None, "--head-branch-prefix", help="Prefix of published branches."),
) -> None:
    """List new fuzz corpus entries in the working tree."""
    settings = TriageSettings()
    configure_logging(settings.log_level)
    cwd = working_directory or settings.working_directory
    prefix = (head_branch_prefix or settings.head_branch_prefix).strip("/")

    try:
        candidates, artifact = preview(SubprocessRunner(), cwd)
    except CommandError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2)

    if not candidates:
        console.print("[dim]No new corpus entries.[/dim]")
        return

    table = Table(title="New corpus entries")
    table.add_column("Path", style="cyan")
    table.add_column("Test")
    table.add_column("Corpus ID")
    for path in candidates:
        match = classify_corpus_path(split_path(path))
        if match is not None:
            table.add_row(escape(path), escape(match.test_func), escape(match.corpus_id))
    console.print(table)

    if artifact is None:
        console.print(
            f"[yellow]{len(candidates)} entries found; a run would not publish any of them.[/yellow]"
        )
        return
    console.print(f"[bold]Branch:[/bold] {escape(build_branch_name(prefix, artifact))}")
