"""Repository resolver — remote repository id and the pre-run base commit."""

from __future__ import annotations

import logging

from fuzztriage.core.git import GitWorkTree
from fuzztriage.core.graphql import GraphQLClient, GraphQLClientError
from fuzztriage.models.graphql import RepositoryIdQuery, RepositoryIdResponse

logger = logging.getLogger(__name__)


class RepositoryResolutionError(RuntimeError):
    """The repository could not be resolved.

    Indicates misconfiguration (wrong slug, token without access) rather
    than a transient fault, so it is never retried.
    """


def resolve_repository_id(client: GraphQLClient, owner: str, name: str) -> str:
    """Return the GraphQL node id of ``owner/name``."""
    try:
        response = client.execute(RepositoryIdQuery(owner=owner, name=name), RepositoryIdResponse)
    except GraphQLClientError as e:
        raise RepositoryResolutionError(f"failed to get repository id for {owner}/{name}: {e}") from e

    if response is None:
        raise RepositoryResolutionError("failed to get repository id: empty response")
    repository_id = response.repository_id
    if not repository_id:
        detail = "; ".join(response.error_messages) or "repository not found"
        raise RepositoryResolutionError(f"failed to get repository id for {owner}/{name}: {detail}")

    logger.debug("repositoryId: %s", repository_id)
    return repository_id


def resolve_head_commit(git: GitWorkTree) -> str:
    """Return the oid of HEAD.

    Must be called before the work tree is staged so the new branch points
    at the commit the campaign ran against.
    """
    return git.head_commit()
