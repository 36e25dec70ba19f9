"""Fuzz corpus identity models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CorpusPathMatch(BaseModel):
    """A path that follows the ``<pkg>/testdata/fuzz/Fuzz*/<id>`` convention."""

    model_config = ConfigDict(frozen=True)

    package_dir: str  # "" when the package is the working directory itself
    test_func: str
    corpus_id: str


class CorpusArtifact(BaseModel):
    """A new failing input written by ``go test -fuzz``.

    Lives only between detection and cleanup; the file at ``path`` is
    deleted once it has been published.
    """

    model_config = ConfigDict(frozen=True)

    package: str  # import path reported by ``go list``
    package_dir: str
    test_func: str
    corpus_id: str
    path: str  # relative to the working directory

    @property
    def package_selector(self) -> str:
        """Selector that names exactly the package owning this corpus entry."""
        return f"./{self.package_dir}" if self.package_dir else "."

    @property
    def run_selector(self) -> str:
        """``-run`` pattern that replays only this corpus entry."""
        return f"{self.test_func}/{self.corpus_id}"
