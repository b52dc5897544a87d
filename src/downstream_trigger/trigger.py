"""Trigger downstream builds for the current commit.

The commit is resolved once, then one build request per target fans out on a
thread pool. Every request is joined before `run` returns, so each target's
outcome ends up in the report even when a sibling fails.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed

from downstream_trigger.errors import TriggerRequestError
from downstream_trigger.git import GitRepository
from downstream_trigger.models import (
    DEFAULT_COMMIT_ENV_VAR,
    DEFAULT_MESSAGE_PREFIX,
    BuildRequest,
    CommitIdentity,
    TriggerOutcome,
    TriggerReport,
    TriggerTarget,
)
from downstream_trigger.travis.client import TravisClient

logger = logging.getLogger(__name__)


class BuildTrigger:
    """Announces a commit to downstream projects on Travis CI."""

    def __init__(
        self,
        *,
        git: GitRepository,
        travis: TravisClient | None,
        message_prefix: str = DEFAULT_MESSAGE_PREFIX,
        commit_env_var: str = DEFAULT_COMMIT_ENV_VAR,
        max_workers: int = 4,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self._git = git
        self._travis = travis
        self._message_prefix = message_prefix
        self._commit_env_var = commit_env_var
        self._max_workers = max_workers

    def resolve_commit_identity(self) -> CommitIdentity:
        return self._git.resolve_commit_identity()

    def build_request(self, target: TriggerTarget, identity: CommitIdentity) -> BuildRequest:
        return BuildRequest.for_target(target, identity)

    def payload_for(self, request: BuildRequest) -> dict[str, object]:
        return request.to_payload(prefix=self._message_prefix, commit_env_var=self._commit_env_var)

    def trigger_build(self, target: TriggerTarget, request: BuildRequest) -> TriggerOutcome:
        """Send one build request and capture the result.

        Request failures are logged and returned, never raised.
        """

        if self._travis is None:
            raise RuntimeError("A TravisClient is required to send build requests")

        logger.info("Triggering build", extra={"target": str(target)})
        try:
            triggered = self._travis.create_request(
                owner=request.owner,
                repo=request.repo,
                payload=self.payload_for(request),
            )
        except TriggerRequestError as e:
            logger.error(
                "Failed to trigger build",
                extra={"target": str(target), "status_code": e.status_code, "error": str(e)},
            )
            return TriggerOutcome(target=target, ok=False, error=str(e), status_code=e.status_code)

        logger.info(
            "Triggered build",
            extra={
                "target": str(target),
                "request_id": triggered.request_id,
                "remaining_requests": triggered.remaining_requests,
            },
        )
        return TriggerOutcome(target=target, ok=True, triggered=triggered)

    def run(self, targets: Sequence[TriggerTarget], *, dry_run: bool = False) -> TriggerReport:
        """Resolve the commit and trigger every target.

        Raises:
            CommitResolutionError: before any request is sent.
        """

        identity = self.resolve_commit_identity()
        pending = [(target, self.build_request(target, identity)) for target in targets]

        if dry_run:
            for target, request in pending:
                logger.info(
                    "Dry run: build request not sent",
                    extra={"target": str(target), "payload": self.payload_for(request)},
                )
            outcomes = [TriggerOutcome(target=target, ok=True) for target, _ in pending]
            return TriggerReport(identity=identity, outcomes=outcomes, dry_run=True)

        if not pending:
            return TriggerReport(identity=identity, outcomes=[])

        results: dict[int, TriggerOutcome] = {}
        with ThreadPoolExecutor(
            max_workers=min(self._max_workers, len(pending)),
            thread_name_prefix="trigger",
        ) as executor:
            futures = {
                executor.submit(self.trigger_build, target, request): index
                for index, (target, request) in enumerate(pending)
            }
            for future in as_completed(futures):
                index = futures[future]
                target = pending[index][0]
                try:
                    results[index] = future.result()
                except Exception as e:
                    logger.exception(
                        "Unexpected error triggering build", extra={"target": str(target)}
                    )
                    results[index] = TriggerOutcome(target=target, ok=False, error=str(e))

        outcomes = [results[index] for index in range(len(pending))]
        report = TriggerReport(identity=identity, outcomes=outcomes)
        logger.info(
            "Trigger run finished",
            extra={
                "commit": identity.hash,
                "targets": len(outcomes),
                "failed": len(report.failures),
            },
        )
        return report
