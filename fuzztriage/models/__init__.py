"""fuzztriage data models — all Pydantic v2, all frozen (immutable)."""

from fuzztriage.models.config import FuzzRunConfig
from fuzztriage.models.corpus import CorpusArtifact, CorpusPathMatch
from fuzztriage.models.graphql import (
    CreateRefInput,
    CreateRefMutation,
    CreateRefResponse,
    GraphQLErrorItem,
    RepositoryIdQuery,
    RepositoryIdResponse,
)
from fuzztriage.models.outcome import FuzzOutcome, FuzzReport, FuzzStatus, PublishResult
from fuzztriage.models.repository import BranchRequest, RepositoryRef

__all__ = [
    # config
    "FuzzRunConfig",
    # corpus
    "CorpusArtifact",
    "CorpusPathMatch",
    # repository
    "RepositoryRef",
    "BranchRequest",
    # graphql
    "GraphQLErrorItem",
    "RepositoryIdQuery",
    "RepositoryIdResponse",
    "CreateRefInput",
    "CreateRefMutation",
    "CreateRefResponse",
    # outcome
    "FuzzStatus",
    "PublishResult",
    "FuzzReport",
    "FuzzOutcome",
]
