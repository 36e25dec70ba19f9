"""Outcome models — what a fuzz campaign produced and what was published."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from fuzztriage.models.corpus import CorpusArtifact


class FuzzStatus(str, Enum):
    """Terminal status of one campaign."""

    CLEAN = "clean"  # fuzz tool exited 0
    NO_ACTIONABLE_CORPUS = "no_actionable_corpus"  # failure, but zero or several candidates
    PUBLISHED = "published"
    PUBLISH_FAILED = "publish_failed"


class PublishResult(BaseModel):
    """Result of one ``createRef`` attempt, as surfaced by the publisher."""

    model_config = ConfigDict(frozen=True)

    branch_name: str
    ref_name: str
    created: bool
    errors: list[str] = []
    response: dict[str, Any] | None = None


class FuzzReport(BaseModel):
    """Data needed to render a report for a published corpus entry."""

    model_config = ConfigDict(frozen=True)

    artifact: CorpusArtifact
    branch_name: str
    publish_result: PublishResult
    reproduction_output: str = ""
    reproduction_exit_code: int | None = None
    corpus_base64: str = ""


class FuzzOutcome(BaseModel):
    """Returned by ``FuzzCampaignOrchestrator.run``."""

    model_config = ConfigDict(frozen=True)

    status: FuzzStatus
    exit_code: int
    fuzz_output: str = ""
    report: FuzzReport | None = None

    @property
    def failed(self) -> bool:
        """True when the fuzz tool reported a failure, published or not."""
        return self.status != FuzzStatus.CLEAN

    @property
    def branch_name(self) -> str | None:
        if self.report is None or not self.report.publish_result.created:
            return None
        return self.report.branch_name
