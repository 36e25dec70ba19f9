"""Go toolchain invocations: the fuzz campaign, package listing, replay."""

from __future__ import annotations

import logging
from pathlib import Path

from fuzztriage.core.process import CommandResult, CommandRunner, check_output
from fuzztriage.models.config import FuzzRunConfig

logger = logging.getLogger(__name__)


class GoToolchain:
    """Runs ``go`` subcommands in one working directory."""

    def __init__(self, runner: CommandRunner, working_directory: Path, go: str = "go") -> None:
        self._runner = runner
        self._go = go
        self.working_directory = working_directory

    def fuzz(self, config: FuzzRunConfig) -> CommandResult:
        """Run the fuzz campaign.  A non-zero exit is returned, not raised."""
        args = [
            self._go,
            "test",
            f"-fuzz={config.fuzz_regexp}",
            f"-fuzztime={config.fuzz_time}",
            f"-fuzzminimizetime={config.fuzz_minimize_time}",
            config.packages,
        ]
        return self._runner.run_command(args, self.working_directory)

    def list_package(self, selector: str) -> str:
        """Return the import path of the package named by *selector*."""
        output = check_output(
            self._runner, [self._go, "list", selector], self.working_directory
        ).stdout
        lines = [line.strip() for line in output.splitlines() if line.strip()]
        if len(lines) > 1:
            logger.warning("go list %s matched %d packages; using %s", selector, len(lines), lines[0])
        return lines[0] if lines else ""

    def run_test(self, selector: str, run_pattern: str) -> CommandResult:
        """Replay tests matching *run_pattern*; the exit code is informational."""
        return self._runner.run_command(
            [self._go, "test", f"-run={run_pattern}", selector], self.working_directory
        )
