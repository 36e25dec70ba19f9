"""Shared test fixtures for fuzztriage."""

from __future__ import annotations

import json
import os
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import httpx
import pytest

from fuzztriage.core.process import CommandResult
from fuzztriage.models.config import FuzzRunConfig

HEAD_OID = "0123456789abcdef0123456789abcdef01234567"
REPOSITORY_ID = "R_kgDOtest"


def _matches(argv: Sequence[str], prefix: Sequence[str]) -> bool:
    """Element-wise prefix match; ``-flag`` also matches ``-flag=value``."""
    if len(argv) < len(prefix):
        return False
    return all(a == p or a.startswith(p + "=") for a, p in zip(argv, prefix))


class FakeRunner:
    """Scripted ``CommandRunner``: answers by argv prefix and records every call.

    Unscripted commands succeed with empty output.  Later scripts for the
    same prefix win.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[list[str], Path]] = []
        self._scripts: list[tuple[tuple[str, ...], int, str, str]] = []

    def on(self, *prefix: str, exit_code: int = 0, stdout: str = "", stderr: str = "") -> FakeRunner:
        self._scripts.append((prefix, exit_code, stdout, stderr))
        return self

    def run_command(self, args: Sequence[str], cwd: Path) -> CommandResult:
        argv = list(args)
        self.calls.append((argv, cwd))
        for prefix, exit_code, stdout, stderr in reversed(self._scripts):
            if _matches(argv, prefix):
                return CommandResult(args=argv, exit_code=exit_code, stdout=stdout, stderr=stderr)
        return CommandResult(args=argv, exit_code=0)

    def commands(self, program: str | None = None) -> list[list[str]]:
        return [argv for argv, _ in self.calls if program is None or argv[0] == program]

    def ran(self, *prefix: str) -> bool:
        return any(_matches(argv, prefix) for argv, _ in self.calls)


class FakeGitHub:
    """``httpx.MockTransport`` handler standing in for the GraphQL endpoint."""

    def __init__(self) -> None:
        self.requests: list[dict[str, Any]] = []
        self.headers: list[httpx.Headers] = []
        self.repository_reply: Any = {"data": {"repository": {"id": REPOSITORY_ID}}}
        self.create_ref_reply: Any = None
        self.created_refs: set[str] = set()

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def mutations(self) -> list[dict[str, Any]]:
        return [r for r in self.requests if r["query"].lstrip().startswith("mutation")]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        self.headers.append(request.headers)
        if body["query"].lstrip().startswith("query"):
            return httpx.Response(200, json=self.repository_reply)

        if self.create_ref_reply is not None:
            return httpx.Response(200, json=self.create_ref_reply)
        ref = body["variables"]["input"]["name"]
        if ref in self.created_refs:
            return httpx.Response(
                200,
                json={
                    "data": {"createRef": None},
                    "errors": [{"type": "UNPROCESSABLE", "message": "Reference already exists"}],
                },
            )
        self.created_refs.add(ref)
        return httpx.Response(
            200,
            json={"data": {"createRef": {"clientMutationId": None, "ref": {"id": "REF_1", "name": ref}}}},
        )


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def run_config(tmp_path: Path) -> FuzzRunConfig:
    """A FuzzRunConfig rooted in a temp working directory."""
    return FuzzRunConfig(
        repository="octo/widgets",
        github_token="ghs_test",
        github_graphql_url="https://github.test/graphql",
        packages="./...",
        working_directory=tmp_path,
        fuzz_regexp="^FuzzParse$",
        fuzz_time="30s",
        fuzz_minimize_time="5s",
        head_branch_prefix="fuzz",
    )


@pytest.fixture
def failing_campaign(
    fake_runner: FakeRunner, run_config: FuzzRunConfig
) -> Callable[..., FakeRunner]:
    """Factory fixture: script a failed campaign that left *new_files* behind.

    Files are written under the working directory and reported by the
    staged diff.  ``packages`` maps a ``go list`` selector to its output.
    """

    def _factory(
        new_files: Sequence[str] = (),
        packages: dict[str, str] | None = None,
        other_changes: Sequence[str] = (),
    ) -> FakeRunner:
        for rel in [*new_files, *other_changes]:
            path = run_config.working_directory / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"go test fuzz v1\n[]byte(\"\\x00\")\n")

        staged = [*new_files, *other_changes]
        fake_runner.on("go", "test", "-fuzz", exit_code=1, stdout="--- FAIL: FuzzParse\n")
        fake_runner.on("git", "rev-parse", "HEAD", stdout=f"{HEAD_OID}\n")
        fake_runner.on("git", "diff", "--cached", "--exit-code", exit_code=1 if staged else 0)
        fake_runner.on("git", "diff", "--name-only", stdout="".join(f"{p}\0" for p in staged))
        for selector, output in (packages or {}).items():
            fake_runner.on("go", "list", selector, stdout=f"{output}\n")
        fake_runner.on("go", "test", "-run", exit_code=1, stdout="--- FAIL: FuzzParse/x\n")
        return fake_runner

    return _factory


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the runner's own GitHub / FUZZTRIAGE_* variables and .env out of tests."""
    for key in list(os.environ):
        if key.startswith(("FUZZTRIAGE_", "GITHUB_")):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
