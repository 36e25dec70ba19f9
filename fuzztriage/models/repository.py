"""Remote repository and branch request models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class RepositoryRef(BaseModel):
    """Remote repository node id plus the commit captured before the run."""

    model_config = ConfigDict(frozen=True)

    repository_id: str
    head_oid: str


class BranchRequest(BaseModel):
    """One remote branch-creation attempt."""

    model_config = ConfigDict(frozen=True)

    branch_name: str
    oid: str

    @property
    def ref_name(self) -> str:
        return f"refs/heads/{self.branch_name}"
