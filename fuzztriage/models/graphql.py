"""Typed request/response pairs for the GitHub GraphQL operations we use.

Each request model renders the ``{"query": ..., "variables": ...}`` wire body
via ``to_body()``; each response model validates the JSON reply.  Unknown
fields are ignored so additive schema changes do not break validation, but a
renamed or retyped field we depend on fails loudly.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class GraphQLErrorItem(BaseModel):
    """One entry of a GraphQL ``errors`` array."""

    model_config = ConfigDict(frozen=True)

    message: str
    type: str | None = None
    path: list[str | int] | None = None


class GraphQLResponse(BaseModel):
    """Common envelope of every GraphQL reply."""

    model_config = ConfigDict(frozen=True)

    errors: list[GraphQLErrorItem] = []

    @property
    def error_messages(self) -> list[str]:
        return [e.message for e in self.errors]


# ---------------------------------------------------------------------------
# query repository(owner, name) { id }
# ---------------------------------------------------------------------------


class RepositoryIdQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    QUERY: ClassVar[str] = (
        "query ($owner: String!, $name: String!) {\n"
        "  repository(owner: $owner, name: $name) {\n"
        "    id\n"
        "  }\n"
        "}"
    )

    owner: str
    name: str

    def to_body(self) -> dict[str, Any]:
        return {"query": self.QUERY, "variables": self.model_dump()}


class RepositoryNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str


class RepositoryIdData(BaseModel):
    model_config = ConfigDict(frozen=True)

    repository: RepositoryNode | None = None


class RepositoryIdResponse(GraphQLResponse):
    data: RepositoryIdData | None = None

    @property
    def repository_id(self) -> str | None:
        if self.data is None or self.data.repository is None:
            return None
        return self.data.repository.id


# ---------------------------------------------------------------------------
# mutation createRef(input: CreateRefInput!)
# ---------------------------------------------------------------------------


class CreateRefInput(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    repository_id: str = Field(alias="repositoryId")
    name: str  # fully qualified: "refs/heads/<branch>"
    oid: str


class CreateRefMutation(BaseModel):
    model_config = ConfigDict(frozen=True)

    QUERY: ClassVar[str] = (
        "mutation ($input: CreateRefInput!) {\n"
        "  createRef(input: $input) {\n"
        "    clientMutationId\n"
        "    ref {\n"
        "      id\n"
        "      name\n"
        "    }\n"
        "  }\n"
        "}"
    )

    input: CreateRefInput

    def to_body(self) -> dict[str, Any]:
        return {"query": self.QUERY, "variables": self.model_dump(by_alias=True)}


class RefNode(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class CreateRefPayload(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    client_mutation_id: str | None = Field(default=None, alias="clientMutationId")
    ref: RefNode | None = None


class CreateRefData(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    create_ref: CreateRefPayload | None = Field(default=None, alias="createRef")


class CreateRefResponse(GraphQLResponse):
    data: CreateRefData | None = None

    @property
    def created_ref(self) -> RefNode | None:
        if self.data is None or self.data.create_ref is None:
            return None
        return self.data.create_ref.ref
