"""
Flags pull requests that still contain fixup! or squash! commits
"""

from typing import Iterable

import structlog

from src.models.events import PullRequestEvent
from src.models.status import StatusState, squash_status
from src.models.workflow import WorkflowOutcome, WorkflowResult
from .github_client import GitHubClient
from .pull_requests import fetch_commit_messages, fetch_pull_request
from .status_publisher import StatusPublisher

logger = structlog.get_logger()

FIXUP_PREFIXES = ("fixup! ", "squash! ")
TRIGGERING_ACTIONS = frozenset({"opened", "synchronize"})
PENDING_SQUASH_DESCRIPTION = "This PR needs to be squashed with !squash before merging"


def includes_fixup_commits(commit_messages: Iterable[str]) -> bool:
    return any(message.startswith(FIXUP_PREFIXES) for message in commit_messages)


class FixupDetectionWorkflow:
    """Sets a pending squash status when a pull request has fixup commits

    The status is never cleared here; only a successful !squash replaces it.
    """

    def __init__(self, github_client: GitHubClient, publisher: StatusPublisher):
        self.github_client = github_client
        self.publisher = publisher

    async def run(self, event: PullRequestEvent) -> WorkflowResult:
        if event.action not in TRIGGERING_ACTIONS:
            return WorkflowResult(WorkflowOutcome.IGNORED, "PR not opened or synchronized. Ignoring.")

        issue = event.issue()
        logger.info("Checking for fixup commits", issue=issue.full_name, action=event.action)

        commit_messages = await fetch_commit_messages(self.github_client, issue)
        if not includes_fixup_commits(commit_messages):
            return WorkflowResult(WorkflowOutcome.IGNORED, "No fixup commits found.")

        pr = await fetch_pull_request(self.github_client, issue)
        status = squash_status(StatusState.PENDING, PENDING_SQUASH_DESCRIPTION)
        await self.publisher.publish(issue.repository, pr.head_sha, status)
        return WorkflowResult(
            WorkflowOutcome.SUCCEEDED,
            f"Marked {issue.full_name} as needing a squash before merging",
        )
