"""
GitHub API and webhook data models

Only the fields the service consumes are declared; everything else GitHub
sends is ignored.
"""

from typing import Optional, Dict, Any
from pydantic import BaseModel


class GitHubUser(BaseModel):
    """GitHub user model"""

    login: str


class GitHubRepository(BaseModel):
    """GitHub repository model"""

    name: str
    owner: GitHubUser
    ssh_url: str


class GitHubPullRequestLink(BaseModel):
    """The pull_request object attached to issues that are pull requests"""

    url: Optional[str] = None


class GitHubIssue(BaseModel):
    """GitHub issue model"""

    number: int
    pull_request: Optional[GitHubPullRequestLink] = None


class GitHubIssueComment(BaseModel):
    """GitHub issue comment model"""

    body: str


class IssueCommentPayload(BaseModel):
    """Webhook payload for issue_comment events"""

    issue: GitHubIssue
    repository: GitHubRepository
    comment: GitHubIssueComment

    class Config:
        extra = "ignore"


class PullRequestPayload(BaseModel):
    """Webhook payload for pull_request events"""

    action: str
    number: int
    repository: GitHubRepository

    class Config:
        extra = "ignore"


class PullRequest(BaseModel):
    """The refs of a pull request needed to squash and publish statuses"""

    head_ref: str
    head_sha: str
    base_ref: str
    base_sha: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PullRequest":
        """Build from a GitHub "get a pull request" response"""
        return cls(
            head_ref=data["head"]["ref"],
            head_sha=data["head"]["sha"],
            base_ref=data["base"]["ref"],
            base_sha=data["base"]["sha"],
        )
