"""
Squashes fixup! and squash! commits of a pull request on request
"""

import asyncio
import threading
from typing import Optional

import structlog

from src.models.errors import LocalRepoError
from src.models.events import Issue, Repository
from src.models.github import PullRequest
from src.models.status import StatusState, squash_status
from src.models.workflow import WorkflowOutcome, WorkflowResult
from .git_service import GitService, GitServiceError, RebaseConflictError
from .github_client import GitHubClient
from .pull_requests import fetch_pull_request
from .repo_locks import RepoLockRegistry
from .status_publisher import StatusPublisher

logger = structlog.get_logger()

SQUASH_FAILURE_DESCRIPTION = (
    "Failed to automatically squash the fixup! and squash! commits. Please squash manually"
)
SQUASH_SUCCESS_DESCRIPTION = "All fixup! and squash! commits successfully squashed"


class SquashWorkflow:
    """Autosquashes a pull request branch and reports the result as a commit status

    A rebase that does not apply cleanly is a normal outcome: it is reported
    to the reviewer as a failure status. Failing to talk to git or GitHub
    aborts the workflow with an error instead.
    """

    def __init__(self, github_client: GitHubClient, git_service: GitService,
                 publisher: StatusPublisher, repo_locks: RepoLockRegistry):
        self.github_client = github_client
        self.git_service = git_service
        self.publisher = publisher
        self.repo_locks = repo_locks

    async def run(self, issue: Issue) -> WorkflowResult:
        pr = await fetch_pull_request(self.github_client, issue)
        repository = issue.repository

        logger.info(
            "Squashing pull request",
            issue=issue.full_name,
            head_ref=pr.head_ref,
            base_ref=pr.base_ref,
        )

        cancelled = threading.Event()
        try:
            squashed_head_sha = await asyncio.to_thread(self._squash_locally, repository, pr, cancelled)
        except asyncio.CancelledError:
            # The worker thread cannot be interrupted; it stops at its next checkpoint
            cancelled.set()
            raise

        if squashed_head_sha is None:
            status = squash_status(StatusState.FAILURE, SQUASH_FAILURE_DESCRIPTION)
            await self.publisher.publish(repository, pr.head_sha, status)
            return WorkflowResult(
                WorkflowOutcome.REPORTED_FAILURE,
                "Failed to autosquash the commits with an interactive rebase. Reported the failure.",
            )

        status = squash_status(StatusState.SUCCESS, SQUASH_SUCCESS_DESCRIPTION)
        await self.publisher.publish(repository, squashed_head_sha, status)
        return WorkflowResult(WorkflowOutcome.SUCCEEDED, f"Squashed {issue.full_name}")

    def _squash_locally(self, repository: Repository, pr: PullRequest,
                        cancelled: threading.Event) -> Optional[str]:
        """Update, rebase and push under the repository lock.

        Returns the new HEAD SHA, or None when the rebase did not apply. Once
        `cancelled` is set, nothing more is done to the clone or the remote.
        """
        with self.repo_locks.lock_for(repository):
            _raise_if_cancelled(cancelled, repository, "update")
            try:
                local_repo = self.git_service.get_updated_repo(
                    repository.clone_url, repository.owner, repository.name
                )
            except GitServiceError as e:
                logger.error("Failed to update local repo", repository=repository.full_name, error=str(e))
                raise LocalRepoError("Failed to update the local repo", cause=e)

            _raise_if_cancelled(cancelled, repository, "rebase")

            try:
                local_repo.rebase_autosquash(pr.base_sha, pr.head_sha)
            except RebaseConflictError as e:
                logger.warning(
                    "Failed to autosquash the commits with an interactive rebase, setting a failure status",
                    repository=repository.full_name,
                    error=str(e),
                )
                return None
            except GitServiceError as e:
                logger.error("Failed to prepare the rebase", repository=repository.full_name, error=str(e))
                raise LocalRepoError("Failed to prepare the squash", cause=e)

            _raise_if_cancelled(cancelled, repository, "push")

            try:
                local_repo.force_push_head_to(pr.head_ref)
            except GitServiceError as e:
                logger.error("Failed to push squashed branch", repository=repository.full_name, error=str(e))
                raise LocalRepoError("Failed to push the squashed version", cause=e)

            try:
                return local_repo.get_head_sha()
            except GitServiceError as e:
                raise LocalRepoError("Failed to get the squashed branch's HEAD's SHA", cause=e)


def _raise_if_cancelled(cancelled: threading.Event, repository: Repository, step: str) -> None:
    if cancelled.is_set():
        logger.warning("Squash abandoned after the request was cancelled", repository=repository.full_name, step=step)
        raise LocalRepoError("Timed out while squashing")
