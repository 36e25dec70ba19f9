"""Working-tree operations on the checked-out repository."""

from __future__ import annotations

import logging
from pathlib import Path

from fuzztriage.core.process import CommandError, CommandRunner, check_output

logger = logging.getLogger(__name__)


class GitWorkTree:
    """Thin wrapper over the ``git`` CLI scoped to one working directory.

    Every method raises ``CommandError`` when git fails: detection and
    cleanup are meaningless without a trustworthy view of the work tree.
    """

    def __init__(self, runner: CommandRunner, working_directory: Path) -> None:
        self._runner = runner
        self.working_directory = working_directory

    def _git(self, *args: str) -> str:
        return check_output(self._runner, ["git", *args], self.working_directory).stdout

    def head_commit(self) -> str:
        """Return the oid of HEAD."""
        oid = self._git("rev-parse", "HEAD").strip()
        if not oid:
            raise CommandError(["git", "rev-parse", "HEAD"], "empty output")
        return oid

    def stage_all(self) -> None:
        """Stage every change in the working directory (``git add .``)."""
        self._git("add", ".")

    def has_staged_changes(self) -> bool:
        """Whether the index differs from HEAD.

        ``git diff --exit-code`` answers with its exit status: 0 for no
        differences, 1 for differences.  Anything else is a git failure.
        """
        args = ["git", "diff", "--cached", "--exit-code", "--quiet"]
        result = self._runner.run_command(args, self.working_directory)
        if result.exit_code == 0:
            return False
        if result.exit_code == 1:
            return True
        raise CommandError(args, f"exited {result.exit_code}", result.exit_code)

    def staged_additions(self) -> list[str]:
        """Staged paths, excluding deletions, relative to the working directory.

        Paths are read NUL-terminated so git does not C-quote unusual names.
        """
        output = self._git(
            "diff",
            "--name-only",
            "-z",
            "--cached",
            "--no-renames",
            "--diff-filter=d",
            "--relative",
        )
        return [path for path in output.split("\0") if path]

    def restore_staged(self) -> None:
        """Reset the index to HEAD, leaving the work tree files alone."""
        self._git("restore", "--staged", ".")
