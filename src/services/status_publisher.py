"""
Publishes commit statuses back to GitHub
"""

import structlog

from src.models.errors import UpstreamWriteError
from src.models.events import Repository
from src.models.status import Status, StatusState
from .github_client import GitHubAPIError, GitHubClient

logger = structlog.get_logger()


class StatusPublishError(UpstreamWriteError):
    """Creating a commit status failed"""

    def __init__(self, repository: Repository, commit_sha: str,
                 target_state: StatusState, cause: BaseException = None):
        self.repository = repository
        self.commit_sha = commit_sha
        self.target_state = target_state
        super().__init__(
            f"Failed to create a {target_state.value} status for commit {commit_sha}",
            cause=cause,
        )


class StatusPublisher:
    """Writes statuses without reading the current one first"""

    def __init__(self, github_client: GitHubClient):
        self.github_client = github_client

    async def publish(self, repository: Repository, commit_sha: str, status: Status) -> None:
        try:
            await self.github_client.create_status(
                repository.owner, repository.name, commit_sha, status
            )
        except GitHubAPIError as e:
            logger.error(
                "Failed to create commit status",
                repository=repository.full_name,
                sha=commit_sha,
                context=status.context,
                state=status.state.value,
                error=str(e),
            )
            raise StatusPublishError(repository, commit_sha, status.state, cause=e)

        logger.info(
            "Commit status created",
            repository=repository.full_name,
            sha=commit_sha,
            context=status.context,
            state=status.state.value,
        )
