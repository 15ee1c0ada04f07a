"""
Authenticates GitHub events and routes them to the review workflows
"""

import asyncio
import structlog
from typing import List, Optional
from abc import ABC, abstractmethod

from src.models.errors import BadSignatureError, ReviewHelperError
from src.models.responses import ErrorResponse, SuccessResponse, WebhookResponse
from src.models.workflow import WorkflowResult
from src.utils.webhook_validator import validate_github_webhook
from .command_classifier import Command, classify
from .event_parser import parse_issue_comment, parse_pull_request_event
from .fixup_detection import FixupDetectionWorkflow
from .git_service import GitService
from .github_client import GitHubClient
from .peer_review_workflow import PeerReviewWorkflow
from .repo_locks import RepoLockRegistry
from .squash_workflow import SquashWorkflow
from .status_publisher import StatusPublisher

logger = structlog.get_logger()


def _to_response(result: WorkflowResult) -> SuccessResponse:
    logger.info("Workflow finished", outcome=result.outcome.value, message=result.message)
    return SuccessResponse(result.message)


class EventProcessor(ABC):
    """Abstract base class for event processors"""

    @abstractmethod
    def can_handle(self, event_type: str) -> bool:
        """Check if this processor can handle the event"""

    @abstractmethod
    async def process(self, body: bytes) -> SuccessResponse:
        """Process the verified event body and return the response"""


class CommentEventProcessor(EventProcessor):
    """Processes commands issued in pull request comments"""

    def __init__(self, squash_workflow: SquashWorkflow, peer_review_workflow: PeerReviewWorkflow):
        self.squash_workflow = squash_workflow
        self.peer_review_workflow = peer_review_workflow

    def can_handle(self, event_type: str) -> bool:
        return event_type == "issue_comment"

    async def process(self, body: bytes) -> SuccessResponse:
        issue_comment = parse_issue_comment(body)
        if not issue_comment.is_pull_request:
            return SuccessResponse("Not a PR. Ignoring.")

        command = classify(issue_comment.comment_body)
        issue = issue_comment.issue()

        if command is Command.SQUASH:
            return _to_response(await self.squash_workflow.run(issue))
        if command is Command.PEER_REVIEW:
            return _to_response(await self.peer_review_workflow.run(issue))
        return SuccessResponse("Not a command I understand. Ignoring.")


class PullRequestEventProcessor(EventProcessor):
    """Processes pull request lifecycle events"""

    def __init__(self, fixup_detection_workflow: FixupDetectionWorkflow):
        self.fixup_detection_workflow = fixup_detection_workflow

    def can_handle(self, event_type: str) -> bool:
        return event_type == "pull_request"

    async def process(self, body: bytes) -> SuccessResponse:
        pull_request_event = parse_pull_request_event(body)
        return _to_response(await self.fixup_detection_workflow.run(pull_request_event))


class EventRouter:
    """Routes GitHub events to appropriate processors"""

    def __init__(self, webhook_secret: str, github_client: GitHubClient, git_service: GitService,
                 repo_locks: RepoLockRegistry = None, request_timeout: Optional[float] = None):
        self.webhook_secret = webhook_secret
        self.github_client = github_client
        self.git_service = git_service
        self.repo_locks = repo_locks or RepoLockRegistry()
        self.request_timeout = request_timeout

        publisher = StatusPublisher(github_client)

        # Initialize processors
        self.processors: List[EventProcessor] = [
            CommentEventProcessor(
                SquashWorkflow(github_client, git_service, publisher, self.repo_locks),
                PeerReviewWorkflow(github_client, publisher),
            ),
            PullRequestEventProcessor(FixupDetectionWorkflow(github_client, publisher)),
        ]

    async def dispatch(self, body: bytes, signature: str, event_type: str) -> WebhookResponse:
        """Verify, route and process one webhook delivery"""
        try:
            if not validate_github_webhook(body, signature, self.webhook_secret):
                raise BadSignatureError()
            return await asyncio.wait_for(self.route_event(event_type, body), timeout=self.request_timeout)

        except ReviewHelperError as e:
            logger.error(
                "Event processing failed",
                event_type=event_type,
                status_code=e.status_code,
                error=str(e),
            )
            return ErrorResponse(e, e.status_code, e.user_message)
        except asyncio.TimeoutError as e:
            logger.error("Event processing timed out", event_type=event_type, timeout=self.request_timeout)
            return ErrorResponse(e, 502, "Timed out while handling the event")

    async def route_event(self, event_type: str, body: bytes) -> SuccessResponse:
        """Route event to appropriate processor"""
        for processor in self.processors:
            if processor.can_handle(event_type):
                response = await processor.process(body)

                logger.info(
                    "Event processed",
                    event_type=event_type,
                    processor=processor.__class__.__name__,
                    message=response.message,
                )

                return response

        return SuccessResponse("Not an event I understand. Ignoring.")
