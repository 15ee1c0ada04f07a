"""
Marks a pull request as peer reviewed
"""

import structlog

from src.models.events import Issue
from src.models.status import StatusState, peer_review_status
from src.models.workflow import WorkflowOutcome, WorkflowResult
from .github_client import GitHubClient
from .pull_requests import fetch_pull_request
from .status_publisher import StatusPublisher

logger = structlog.get_logger()

PEER_REVIEW_DESCRIPTION = "This PR has been peer reviewed"


class PeerReviewWorkflow:

    def __init__(self, github_client: GitHubClient, publisher: StatusPublisher):
        self.github_client = github_client
        self.publisher = publisher

    async def run(self, issue: Issue) -> WorkflowResult:
        logger.info("Marking pull request as peer reviewed", issue=issue.full_name)
        pr = await fetch_pull_request(self.github_client, issue)
        status = peer_review_status(StatusState.SUCCESS, PEER_REVIEW_DESCRIPTION)
        await self.publisher.publish(issue.repository, pr.head_sha, status)
        return WorkflowResult(WorkflowOutcome.SUCCEEDED, f"Marked {issue.full_name} as peer reviewed")
