"""Corpus detector — finds the one new fuzz corpus entry in a dirty work tree.

``go test -fuzz`` records a failing input at
``<package>/testdata/fuzz/<FuzzFunc>/<id>``.  After a failed campaign we
stage everything and look for exactly one added file following that
layout.  Zero matches means the failure came from an existing seed; more
than one means we cannot tell which input belongs to the failure, and
publishing the wrong one is worse than publishing none.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from fuzztriage.core.git import GitWorkTree
from fuzztriage.core.gotool import GoToolchain
from fuzztriage.models.corpus import CorpusArtifact, CorpusPathMatch

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\\/]")


def split_path(path: str) -> list[str]:
    """Split *path* on either separator, dropping empty segments.

    >>> split_path("pkg/testdata/fuzz/FuzzParse/a1b2")
    ['pkg', 'testdata', 'fuzz', 'FuzzParse', 'a1b2']
    """
    return [segment for segment in _SEPARATORS.split(path) if segment]


def classify_corpus_path(segments: Sequence[str]) -> CorpusPathMatch | None:
    """Match ``.../testdata/fuzz/Fuzz*/<id>`` against a split path.

    Pure: no filesystem access.  Returns ``None`` for anything that is not
    a fuzz corpus entry.
    """
    if len(segments) < 4:
        return None
    if segments[-4] != "testdata" or segments[-3] != "fuzz":
        return None
    if not segments[-2].startswith("Fuzz"):
        return None
    return CorpusPathMatch(
        package_dir="/".join(segments[:-4]),
        test_func=segments[-2],
        corpus_id=segments[-1],
    )


class CorpusDetector:
    """Detects a new corpus entry after a failed fuzz campaign.

    Parameters
    ----------
    git:
        Work tree to inspect.  ``detect_new_corpus`` stages all changes;
        the caller is responsible for restoring the index afterwards.
    go:
        Used to resolve the import path of the package owning the entry.
    """

    def __init__(self, git: GitWorkTree, go: GoToolchain) -> None:
        self._git = git
        self._go = go

    def find_candidates(self) -> list[str]:
        """Stage everything and return the added paths that look like corpus entries."""
        self._git.stage_all()
        if not self._git.has_staged_changes():
            logger.info("no changes in the working tree")
            return []
        return [
            path
            for path in self._git.staged_additions()
            if classify_corpus_path(split_path(path)) is not None
        ]

    def detect_new_corpus(self) -> CorpusArtifact | None:
        """Return the single new corpus entry, or ``None``.

        Raises ``CommandError`` if git or ``go list`` fails.
        """
        candidates = self.find_candidates()
        if len(candidates) != 1:
            if candidates:
                logger.warning(
                    "found %d new corpus entries, cannot attribute the failure: %s",
                    len(candidates),
                    ", ".join(candidates),
                )
            else:
                logger.info("no new corpus entry found")
            return None

        return self.to_artifact(candidates[0])

    def to_artifact(self, path: str) -> CorpusArtifact:
        """Build the artifact for a corpus *path*, resolving its package import path."""
        match = classify_corpus_path(split_path(path))
        if match is None:
            raise ValueError(f"not a fuzz corpus path: {path}")
        selector = f"./{match.package_dir}" if match.package_dir else "."
        package = self._go.list_package(selector) or match.package_dir
        logger.info("new corpus found: %s", path)
        return CorpusArtifact(
            package=package,
            package_dir=match.package_dir,
            test_func=match.test_func,
            corpus_id=match.corpus_id,
            path=path,
        )
