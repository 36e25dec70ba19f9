"""Per-invocation fuzz run configuration."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

# A Go duration ("30s", "1m30s", "1.5h") or an iteration count ("1000x").
_FUZZ_DURATION_RE = re.compile(r"^(\d+x|(\d+(\.\d+)?(ns|us|µs|ms|s|m|h))+)$")


class FuzzRunConfig(BaseModel):
    """Immutable configuration for one fuzz campaign.

    Built once per invocation (see ``TriageSettings.to_run_config``) and
    read-only for the lifetime of the run.
    """

    model_config = ConfigDict(frozen=True)

    repository: str  # "owner/name"
    github_token: str
    github_graphql_url: str = "https://api.github.com/graphql"
    packages: str = "./..."
    working_directory: Path = Path(".")
    fuzz_regexp: str = "^Fuzz"
    fuzz_time: str = "5m"
    fuzz_minimize_time: str = "10s"
    head_branch_prefix: str = "fuzz"

    @field_validator("repository")
    @classmethod
    def _check_repository(cls, value: str) -> str:
        owner, sep, name = value.partition("/")
        if not sep or not owner or not name or "/" in name:
            raise ValueError(f"repository must be 'owner/name', got {value!r}")
        return value

    @field_validator("fuzz_time", "fuzz_minimize_time")
    @classmethod
    def _check_duration(cls, value: str) -> str:
        if not _FUZZ_DURATION_RE.match(value):
            raise ValueError(
                f"invalid fuzz duration {value!r}: expected e.g. '30s', '1m30s' or '1000x'"
            )
        return value

    @field_validator("head_branch_prefix")
    @classmethod
    def _check_prefix(cls, value: str) -> str:
        value = value.strip("/")
        if not value:
            raise ValueError("head_branch_prefix must not be empty")
        return value

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def name(self) -> str:
        return self.repository.split("/", 1)[1]
