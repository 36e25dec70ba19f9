"""Process runner — the narrow capability every subprocess goes through.

Defines the ``CommandRunner`` Protocol that the detector, publisher, and
orchestrator depend on, along with ``SubprocessRunner``, the default backend
built on :mod:`subprocess`.  Tests substitute a scripted runner so no
real process is spawned.

A non-zero exit code is data, not a fault: ``run_command`` never raises for
it.  Callers that need a zero exit use ``check_output``, which raises
``CommandError``.
"""

from __future__ import annotations

import logging
import subprocess
import threading
from collections.abc import Sequence
from pathlib import Path
from typing import IO, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)


class CommandError(RuntimeError):
    """Raised when a command cannot be started or a checked command fails."""

    def __init__(self, args: Sequence[str], message: str, exit_code: int | None = None) -> None:
        super().__init__(f"{' '.join(args)}: {message}")
        self.command = list(args)
        self.exit_code = exit_code


class CommandResult(BaseModel):
    """Exit code plus captured output of one finished command."""

    model_config = ConfigDict(frozen=True)

    args: list[str]
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class CommandRunner(Protocol):
    """Protocol for process execution backends.

    Any object with a ``run_command(args, cwd) -> CommandResult`` method
    satisfies this protocol.
    """

    def run_command(self, args: Sequence[str], cwd: Path) -> CommandResult:
        """Run *args* in *cwd* and return its exit code and captured output.

        Must not raise for a non-zero exit code.  Raises ``CommandError``
        only when the process could not be started at all.
        """
        ...


def check_output(
    runner: CommandRunner, args: Sequence[str], cwd: Path
) -> CommandResult:
    """Run a command that must succeed; raise ``CommandError`` otherwise."""
    result = runner.run_command(args, cwd)
    if not result.ok:
        detail = result.stderr.strip() or result.stdout.strip() or "no output"
        raise CommandError(args, f"exited {result.exit_code}: {detail}", result.exit_code)
    return result


# ---------------------------------------------------------------------------
# Default implementation
# ---------------------------------------------------------------------------


class SubprocessRunner:
    """Runs commands as subprocesses, capturing stdout and stderr.

    Parameters
    ----------
    echo:
        When true, stdout and stderr are streamed to the log at INFO line by
        line while the command runs, so long-running tools (the fuzzer) and
        their build errors stay visible in CI logs.
    """

    def __init__(self, *, echo: bool = False) -> None:
        self._echo = echo

    def run_command(self, args: Sequence[str], cwd: Path) -> CommandResult:
        argv = [str(a) for a in args]
        logger.debug("running %s in %s", " ".join(argv), cwd)
        if self._echo:
            return self._stream(argv, cwd)

        try:
            completed = subprocess.run(
                argv,
                cwd=str(cwd),
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise CommandError(argv, f"could not start: {exc}") from exc

        if completed.stderr.strip():
            logger.debug("%s stderr:\n%s", argv[0], completed.stderr.rstrip())

        return CommandResult(
            args=argv,
            exit_code=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    def _stream(self, argv: list[str], cwd: Path) -> CommandResult:
        try:
            process = subprocess.Popen(
                argv,
                cwd=str(cwd),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                bufsize=1,
            )
        except OSError as exc:
            raise CommandError(argv, f"could not start: {exc}") from exc

        stdout_lines: list[str] = []
        stderr_lines: list[str] = []
        # stderr gets its own reader so neither pipe can fill up and block the child
        stderr_reader = threading.Thread(
            target=_forward_lines,
            args=(process.stderr, stderr_lines),
            name=f"{argv[0]}-stderr",
            daemon=True,
        )
        with process:
            stderr_reader.start()
            _forward_lines(process.stdout, stdout_lines)
            stderr_reader.join()
            exit_code = process.wait()

        return CommandResult(
            args=argv,
            exit_code=exit_code,
            stdout="".join(stdout_lines),
            stderr="".join(stderr_lines),
        )


def _forward_lines(stream: IO[str], sink: list[str]) -> None:
    for line in stream:
        sink.append(line)
        logger.info("%s", line.rstrip("\n"))
