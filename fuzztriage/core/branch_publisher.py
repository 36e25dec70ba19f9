"""Branch publisher — creates ``<prefix>/<package>/<FuzzFunc>/<id>`` remotely.

The branch name is a pure function of the configured prefix and the corpus
identity, so replaying the same failure against the same base commit asks
for the same ref and the server rejects the duplicate.  That rejection is
the only guard against concurrent runs publishing the same entry.
"""

from __future__ import annotations

import json
import logging

from fuzztriage.core.graphql import GraphQLClient, GraphQLClientError
from fuzztriage.models.corpus import CorpusArtifact
from fuzztriage.models.graphql import CreateRefInput, CreateRefMutation, CreateRefResponse
from fuzztriage.models.outcome import PublishResult
from fuzztriage.models.repository import BranchRequest

logger = logging.getLogger(__name__)


def build_branch_name(prefix: str, artifact: CorpusArtifact) -> str:
    """Return the branch name for *artifact*.

    >>> from fuzztriage.models.corpus import CorpusArtifact
    >>> a = CorpusArtifact(package="pkg", package_dir="pkg", test_func="FuzzParse",
    ...                    corpus_id="a1b2c3", path="pkg/testdata/fuzz/FuzzParse/a1b2c3")
    >>> build_branch_name("fuzz", a)
    'fuzz/pkg/FuzzParse/a1b2c3'
    """
    parts = [prefix.strip("/"), artifact.package.strip("/"), artifact.test_func, artifact.corpus_id]
    return "/".join(part for part in parts if part)


class BranchPublisher:
    """Publishes a ``BranchRequest`` with the ``createRef`` mutation.

    Never raises for a failed publication and never retries: the outcome is
    returned as a ``PublishResult`` for the caller to log and report.
    """

    def __init__(self, client: GraphQLClient) -> None:
        self._client = client

    def publish(self, repository_id: str, request: BranchRequest) -> PublishResult:
        mutation = CreateRefMutation(
            input=CreateRefInput(
                repository_id=repository_id,
                name=request.ref_name,
                oid=request.oid,
            )
        )
        logger.info("creating %s at %s", request.ref_name, request.oid)

        try:
            response, payload = self._client.execute_raw(mutation, CreateRefResponse)
        except GraphQLClientError as e:
            if e.payload is not None:
                logger.info("createRef response: %s", json.dumps(e.payload))
            logger.error("createRef for %s failed: %s", request.ref_name, e)
            return PublishResult(
                branch_name=request.branch_name,
                ref_name=request.ref_name,
                created=False,
                errors=[str(e)],
                response=e.payload if isinstance(e.payload, dict) else None,
            )

        if response is None:
            logger.error("createRef for %s returned no payload", request.ref_name)
            return PublishResult(
                branch_name=request.branch_name,
                ref_name=request.ref_name,
                created=False,
                errors=["empty response"],
            )

        logger.info("createRef response: %s", json.dumps(payload))
        errors = response.error_messages
        # non-GraphQL failures carry a single top-level message
        message = payload.get("message")
        if not errors and isinstance(message, str) and message:
            errors = [message]
        created = response.created_ref is not None and not errors
        if not created:
            logger.error("branch %s was not created: %s", request.branch_name, "; ".join(errors) or "no ref returned")
        return PublishResult(
            branch_name=request.branch_name,
            ref_name=request.ref_name,
            created=created,
            errors=errors,
            response=payload,
        )
