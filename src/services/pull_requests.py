"""
Pull request lookups shared by the review workflows
"""

from typing import List

import structlog

from src.models.errors import UpstreamReadError
from src.models.events import Issue
from src.models.github import PullRequest
from .github_client import GitHubAPIError, GitHubClient

logger = structlog.get_logger()


async def fetch_pull_request(github_client: GitHubClient, issue: Issue) -> PullRequest:
    repository = issue.repository
    try:
        return await github_client.get_pull_request(repository.owner, repository.name, issue.number)
    except GitHubAPIError as e:
        logger.error("Failed to get pull request", issue=issue.full_name, error=str(e))
        raise UpstreamReadError(f"Getting PR {issue.full_name} failed", cause=e)


async def fetch_commit_messages(github_client: GitHubClient, issue: Issue) -> List[str]:
    repository = issue.repository
    try:
        return await github_client.list_commit_messages(repository.owner, repository.name, issue.number)
    except GitHubAPIError as e:
        logger.error("Failed to list pull request commits", issue=issue.full_name, error=str(e))
        raise UpstreamReadError(f"Getting commits for PR {issue.full_name} failed", cause=e)
