"""
Data models and schemas for the application
"""

from .events import Issue, IssueComment, PullRequestEvent, Repository
from .github import IssueCommentPayload, PullRequest, PullRequestPayload
from .responses import ErrorResponse, SuccessResponse, WebhookResponse
from .status import (
    PEER_REVIEW_CONTEXT,
    SQUASH_CONTEXT,
    Status,
    StatusState,
    peer_review_status,
    squash_status,
)

__all__ = [
    "Issue",
    "IssueComment",
    "PullRequestEvent",
    "Repository",
    "IssueCommentPayload",
    "PullRequest",
    "PullRequestPayload",
    "ErrorResponse",
    "SuccessResponse",
    "WebhookResponse",
    "PEER_REVIEW_CONTEXT",
    "SQUASH_CONTEXT",
    "Status",
    "StatusState",
    "peer_review_status",
    "squash_status",
]
