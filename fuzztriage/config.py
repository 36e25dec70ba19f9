"""Environment-driven settings.

Reads from a .env file and FUZZTRIAGE_* environment variables.  Inside
GitHub Actions the repository, token and GraphQL endpoint fall back to the
variables the runner already provides.

Examples
--------
Override via environment::

    export FUZZTRIAGE_FUZZ_TIME=10m
    export FUZZTRIAGE_HEAD_BRANCH_PREFIX=fuzz-failures
    export FUZZTRIAGE_LOG_LEVEL=DEBUG
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fuzztriage.models.config import FuzzRunConfig


class ConfigurationError(ValueError):
    """Raised when required settings are missing before a run starts."""


class TriageSettings(BaseSettings):
    """Settings with environment variable overrides."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="FUZZTRIAGE_",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # GitHub
    repository: str = Field(
        default="",
        validation_alias=AliasChoices("FUZZTRIAGE_REPOSITORY", "GITHUB_REPOSITORY"),
    )
    github_token: str = Field(
        default="",
        repr=False,
        validation_alias=AliasChoices("FUZZTRIAGE_GITHUB_TOKEN", "GITHUB_TOKEN"),
    )
    github_graphql_url: str = Field(
        default="https://api.github.com/graphql",
        validation_alias=AliasChoices(
            "FUZZTRIAGE_GITHUB_GRAPHQL_URL", "GITHUB_GRAPHQL_URL"
        ),
    )
    request_timeout: float = 30.0

    # Fuzzing
    packages: str = "./..."
    working_directory: Path = Path(".")
    fuzz_regexp: str = "^Fuzz"
    fuzz_time: str = "5m"
    fuzz_minimize_time: str = "10s"
    head_branch_prefix: str = "fuzz"

    # Observability
    log_level: str = "INFO"

    def to_run_config(self, **overrides: Any) -> FuzzRunConfig:
        """Build the immutable run configuration; ``None`` overrides are ignored."""
        values: dict[str, Any] = {
            "repository": self.repository,
            "github_token": self.github_token,
            "github_graphql_url": self.github_graphql_url,
            "packages": self.packages,
            "working_directory": self.working_directory,
            "fuzz_regexp": self.fuzz_regexp,
            "fuzz_time": self.fuzz_time,
            "fuzz_minimize_time": self.fuzz_minimize_time,
            "head_branch_prefix": self.head_branch_prefix,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})

        missing = [k for k in ("repository", "github_token") if not values[k]]
        if missing:
            raise ConfigurationError(
                "missing required setting(s): "
                + ", ".join(missing)
                + " (set FUZZTRIAGE_REPOSITORY / FUZZTRIAGE_GITHUB_TOKEN or pass them on the command line)"
            )
        return FuzzRunConfig(**values)
