"""Fuzz campaign orchestrator — the top-level coordinator for one CI run.

Runs the fuzz campaign and, when it fails, drives the report pipeline:

1. Capture HEAD (before anything is staged)
2. Detect the single new corpus entry
3. Resolve the repository id
4. Create ``<prefix>/<package>/<FuzzFunc>/<id>`` at the captured HEAD
5. Replay the failing input for the report
6. Restore the index and delete the published corpus file

Nothing is retried: a second fuzz campaign would burn CI budget and may
not reproduce the failure.
"""

from __future__ import annotations

import base64
import logging

import httpx

from fuzztriage.core.branch_publisher import BranchPublisher, build_branch_name
from fuzztriage.core.corpus_detector import CorpusDetector
from fuzztriage.core.git import GitWorkTree
from fuzztriage.core.gotool import GoToolchain
from fuzztriage.core.graphql import GraphQLClient
from fuzztriage.core.process import CommandRunner, SubprocessRunner
from fuzztriage.core.repository import resolve_head_commit, resolve_repository_id
from fuzztriage.log import log_group
from fuzztriage.models.config import FuzzRunConfig
from fuzztriage.models.corpus import CorpusArtifact
from fuzztriage.models.outcome import FuzzOutcome, FuzzReport, FuzzStatus
from fuzztriage.models.repository import BranchRequest, RepositoryRef

logger = logging.getLogger(__name__)


class FuzzCampaignOrchestrator:
    """Runs one fuzz campaign and publishes what it finds.

    Parameters
    ----------
    runner:
        Process backend.  Defaults to a ``SubprocessRunner`` that echoes the
        fuzzer's output to the log.
    graphql_transport:
        Optional httpx transport, used by tests to answer GraphQL calls
        without a network.
    request_timeout:
        Timeout in seconds for each GraphQL request.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        *,
        graphql_transport: httpx.BaseTransport | None = None,
        request_timeout: float = 30.0,
    ) -> None:
        self.runner = runner or SubprocessRunner(echo=True)
        self._graphql_transport = graphql_transport
        self._request_timeout = request_timeout

    # ------------------------------------------------------------------
    # Campaign
    # ------------------------------------------------------------------

    def run(self, config: FuzzRunConfig) -> FuzzOutcome:
        """Run the campaign described by *config*.

        Raises ``CommandError`` or ``RepositoryResolutionError`` when the
        report pipeline cannot proceed; publication failures are reported
        on the outcome instead.
        """
        git = GitWorkTree(self.runner, config.working_directory)
        go = GoToolchain(self.runner, config.working_directory)

        with log_group("fuzzing"):
            fuzz = go.fuzz(config)

        if fuzz.exit_code == 0:
            logger.info("no fuzzing error")
            return FuzzOutcome(status=FuzzStatus.CLEAN, exit_code=0, fuzz_output=fuzz.stdout)

        logger.info("fuzzing error occurred (exit code %d)", fuzz.exit_code)
        with log_group("generate report"):
            report = self.generate_report(config, git, go)

        if report is None:
            status = FuzzStatus.NO_ACTIONABLE_CORPUS
        elif report.publish_result.created:
            status = FuzzStatus.PUBLISHED
        else:
            status = FuzzStatus.PUBLISH_FAILED
        return FuzzOutcome(
            status=status,
            exit_code=fuzz.exit_code,
            fuzz_output=fuzz.stdout,
            report=report,
        )

    # ------------------------------------------------------------------
    # Report pipeline
    # ------------------------------------------------------------------

    def generate_report(
        self, config: FuzzRunConfig, git: GitWorkTree, go: GoToolchain
    ) -> FuzzReport | None:
        """Detect, publish and clean up after a failed campaign.

        Returns ``None`` when there is no single new corpus entry.  The index
        is restored on every path once staging has begun.
        """
        head_oid = resolve_head_commit(git)
        try:
            artifact = CorpusDetector(git, go).detect_new_corpus()
            if artifact is None:
                return None
            return self._publish_and_replay(config, go, artifact, head_oid)
        finally:
            git.restore_staged()

    def _publish_and_replay(
        self, config: FuzzRunConfig, go: GoToolchain, artifact: CorpusArtifact, head_oid: str
    ) -> FuzzReport:
        with GraphQLClient(
            config.github_graphql_url,
            config.github_token,
            timeout=self._request_timeout,
            transport=self._graphql_transport,
        ) as client:
            repo = RepositoryRef(
                repository_id=resolve_repository_id(client, config.owner, config.name),
                head_oid=head_oid,
            )
            request = BranchRequest(
                branch_name=build_branch_name(config.head_branch_prefix, artifact),
                oid=repo.head_oid,
            )
            result = BranchPublisher(client).publish(repo.repository_id, request)

        # the replay is expected to fail; its output is what the report shows
        replay = go.run_test(artifact.package_selector, artifact.run_selector)

        corpus_file = config.working_directory / artifact.path
        corpus_base64 = base64.b64encode(corpus_file.read_bytes()).decode("ascii")
        logger.info("corpus %s (base64): %s", artifact.path, corpus_base64)
        corpus_file.unlink()
        logger.info("removed %s", artifact.path)

        return FuzzReport(
            artifact=artifact,
            branch_name=request.branch_name,
            publish_result=result,
            reproduction_output=replay.stdout,
            reproduction_exit_code=replay.exit_code,
            corpus_base64=corpus_base64,
        )
