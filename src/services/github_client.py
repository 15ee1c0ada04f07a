"""
GitHub API client for pull request and commit status operations
"""

import asyncio
import httpx
import structlog
from typing import List, Dict, Any, Optional
from datetime import datetime

from config.settings import settings
from src.models.github import PullRequest
from src.models.status import Status

logger = structlog.get_logger()

COMMITS_PER_PAGE = 100


class GitHubAPIError(Exception):
    """Custom exception for GitHub API errors"""
    def __init__(self, message: str, status_code: int = None, response_data: dict = None):
        self.message = message
        self.status_code = status_code
        self.response_data = response_data
        super().__init__(message)


class GitHubClient:
    """GitHub API client for review helper operations"""

    def __init__(self, token: str = None, api_url: str = None,
                 timeout: float = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.token = token or settings.GITHUB_TOKEN
        if not self.token:
            raise ValueError("GitHub token is required")
        self.api_url = (api_url or settings.GITHUB_API_URL).rstrip("/")

        self.headers = {
            "Authorization": f"token {self.token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "GitHub-Review-Helper/1.0"
        }
        self.client = httpx.AsyncClient(
            headers=self.headers,
            timeout=httpx.Timeout(timeout or settings.GITHUB_TIMEOUT),
            limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            transport=transport,
        )
        self.rate_limit_remaining = 5000
        self.rate_limit_reset = datetime.now()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _send(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Send an authenticated request, raising GitHubAPIError on failure"""

        # Check rate limit
        if self.rate_limit_remaining <= 10 and datetime.now() < self.rate_limit_reset:
            wait_time = (self.rate_limit_reset - datetime.now()).total_seconds()
            logger.warning("Rate limit approaching, waiting", wait_time=wait_time)
            await asyncio.sleep(wait_time)

        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error("GitHub API request failed", error=str(e), url=url)
            raise GitHubAPIError(f"Request failed: {str(e)}")

        # Update rate limit info
        self.rate_limit_remaining = int(response.headers.get("X-RateLimit-Remaining", 5000))
        reset_timestamp = int(response.headers.get("X-RateLimit-Reset", 0))
        if reset_timestamp:
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp)

        if response.status_code >= 400:
            error_data = {}
            try:
                error_data = response.json()
            except ValueError:
                pass

            raise GitHubAPIError(
                f"GitHub API error: {response.status_code}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    async def _make_request(self, method: str, url: str, **kwargs) -> Any:
        """Make an authenticated request to GitHub API and decode the JSON body"""
        response = await self._send(method, url, **kwargs)
        return response.json() if response.content else {}

    def _repo_url(self, owner: str, name: str) -> str:
        return f"{self.api_url}/repos/{owner}/{name}"

    # Pull Request Operations
    async def get_pull_request(self, owner: str, name: str, number: int) -> PullRequest:
        """Get the head and base refs of a pull request"""
        url = f"{self._repo_url(owner, name)}/pulls/{number}"
        data = await self._make_request("GET", url)
        try:
            return PullRequest.from_api(data)
        except (KeyError, TypeError) as e:
            raise GitHubAPIError(f"Unexpected pull request response: missing {e}", response_data=data)

    async def list_commit_messages(self, owner: str, name: str, number: int) -> List[str]:
        """List the messages of all commits in a pull request, following pagination"""
        url = f"{self._repo_url(owner, name)}/pulls/{number}/commits"
        params = {"per_page": COMMITS_PER_PAGE}
        messages: List[str] = []

        while url:
            response = await self._send("GET", url, params=params)
            try:
                messages.extend(commit["commit"]["message"] for commit in response.json())
            except (ValueError, KeyError, TypeError) as e:
                raise GitHubAPIError(f"Unexpected commit list response: {e!r}", status_code=response.status_code)
            url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            params = None

        return messages

    # Status Operations
    async def create_status(self, owner: str, name: str, sha: str, status: Status) -> Dict[str, Any]:
        """Create a commit status; a newer status on the same context supersedes older ones"""
        url = f"{self._repo_url(owner, name)}/statuses/{sha}"
        return await self._make_request("POST", url, json=status.to_payload())
