"""``fuzztriage run`` — run a fuzz campaign and publish a new failing input.

Reads settings from FUZZTRIAGE_* (and GitHub Actions) environment variables;
every option given on the command line overrides its setting.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from fuzztriage.cli.render import render_outcome
from fuzztriage.config import ConfigurationError, TriageSettings
from fuzztriage.core.graphql import GraphQLClientError
from fuzztriage.core.orchestrator import FuzzCampaignOrchestrator
from fuzztriage.core.process import CommandError
from fuzztriage.core.repository import RepositoryResolutionError
from fuzztriage.log import configure_logging
from fuzztriage.models.outcome import FuzzOutcome

console = Console()
logger = logging.getLogger(__name__)


def step_outputs(outcome: FuzzOutcome) -> dict[str, str]:
    """GitHub Actions step outputs describing *outcome*."""
    outputs = {
        "found": "true" if outcome.report is not None else "false",
        "status": outcome.status.value,
        "branch-name": outcome.branch_name or "",
        "package": "",
        "test-func": "",
        "corpus-id": "",
    }
    if outcome.report is not None:
        artifact = outcome.report.artifact
        outputs.update(
            {"package": artifact.package, "test-func": artifact.test_func, "corpus-id": artifact.corpus_id}
        )
    return outputs


def write_step_outputs(outcome: FuzzOutcome, path: Path) -> None:
    with path.open("a", encoding="utf-8") as f:
        for key, value in step_outputs(outcome).items():
            f.write(f"{key}={value}\n")


def run_cmd(
    repository: str = typer.Option(None, "--repository", "-r", help="Repository slug, owner/name."),
    github_token: str = typer.Option(None, "--github-token", help="Token used for the GraphQL API."),
    github_graphql_url: str = typer.Option(None, "--github-graphql-url", help="GraphQL endpoint."),
    packages: str = typer.Option(None, "--packages", "-p", help="Package pattern passed to go test."),
    working_directory: Path = typer.Option(None, "--working-directory", "-C", help="Module directory."),
    fuzz_regexp: str = typer.Option(None, "--fuzz-regexp", help="Value of -fuzz."),
    fuzz_time: str = typer.Option(None, "--fuzz-time", help="Value of -fuzztime."),
    fuzz_minimize_time: str = typer.Option(None, "--fuzz-minimize-time", help="Value of -fuzzminimizetime."),
    head_branch_prefix: str = typer.Option(None, "--head-branch-prefix", help="Prefix of published branches."),
    fail_on_found: bool = typer.Option(
        False, "--fail-on-found/--no-fail-on-found", help="Exit 1 when the fuzzer found a failure."
    ),
) -> None:
    """Run the fuzz campaign; on failure publish the new corpus entry to a branch."""
    settings = TriageSettings()
    configure_logging(settings.log_level)

    try:
        config = settings.to_run_config(
            repository=repository,
            github_token=github_token,
            github_graphql_url=github_graphql_url,
            packages=packages,
            working_directory=working_directory,
            fuzz_regexp=fuzz_regexp,
            fuzz_time=fuzz_time,
            fuzz_minimize_time=fuzz_minimize_time,
            head_branch_prefix=head_branch_prefix,
        )
    except (ConfigurationError, ValidationError) as e:
        console.print(f"[bold red]Configuration error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2)

    orchestrator = FuzzCampaignOrchestrator(request_timeout=settings.request_timeout)
    try:
        outcome = orchestrator.run(config)
    except (CommandError, RepositoryResolutionError, GraphQLClientError) as e:
        logger.debug("run aborted", exc_info=True)
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=2)

    console.print()
    console.print(render_outcome(outcome))
    console.print()

    github_output = os.environ.get("GITHUB_OUTPUT")
    if github_output:
        write_step_outputs(outcome, Path(github_output))

    if fail_on_found and outcome.failed:
        raise typer.Exit(code=1)
