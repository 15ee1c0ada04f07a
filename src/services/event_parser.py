"""
Decodes raw webhook bodies into domain events
"""

import structlog
from pydantic import ValidationError

from src.models.errors import MalformedPayloadError
from src.models.events import IssueComment, PullRequestEvent, Repository
from src.models.github import GitHubRepository, IssueCommentPayload, PullRequestPayload

logger = structlog.get_logger()


class EventParseError(MalformedPayloadError):
    """The body is not valid JSON or lacks a required field"""


def _repository(repository: GitHubRepository) -> Repository:
    return Repository(
        owner=repository.owner.login,
        name=repository.name,
        clone_url=repository.ssh_url,
    )


def parse_issue_comment(body: bytes) -> IssueComment:
    """Parse an issue_comment webhook body"""
    try:
        payload = IssueCommentPayload.model_validate_json(body)
    except ValidationError as e:
        logger.error("Failed to parse issue comment payload", error=str(e))
        raise EventParseError(cause=e)

    pull_request = payload.issue.pull_request
    return IssueComment(
        issue_number=payload.issue.number,
        comment_body=payload.comment.body,
        is_pull_request=bool(pull_request and pull_request.url),
        repository=_repository(payload.repository),
    )


def parse_pull_request_event(body: bytes) -> PullRequestEvent:
    """Parse a pull_request webhook body"""
    try:
        payload = PullRequestPayload.model_validate_json(body)
    except ValidationError as e:
        logger.error("Failed to parse pull request payload", error=str(e))
        raise EventParseError(cause=e)

    return PullRequestEvent(
        issue_number=payload.number,
        action=payload.action,
        repository=_repository(payload.repository),
    )
