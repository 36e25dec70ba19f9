"""Logging setup for the CLI and GitHub Actions log groups."""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager

from rich.logging import RichHandler

logger = logging.getLogger(__name__)


def in_github_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def configure_logging(level: str = "INFO") -> None:
    """Route all log records through a single ``RichHandler``."""
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    root.addHandler(
        RichHandler(
            show_path=False,
            markup=False,
            rich_tracebacks=True,
            # CI logs are not a terminal; keep lines unwrapped there
            show_time=not in_github_actions(),
        )
    )
    root.setLevel(level.upper())


@contextmanager
def log_group(title: str) -> Iterator[None]:
    """Fold everything logged inside the block into one CI log group."""
    if in_github_actions():
        sys.stdout.write(f"::group::{title}\n")
        sys.stdout.flush()
        try:
            yield
        finally:
            sys.stdout.write("::endgroup::\n")
            sys.stdout.flush()
    else:
        logger.info("== %s", title)
        yield
