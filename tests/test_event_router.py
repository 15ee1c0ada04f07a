"""
Tests for Event Router
"""

import asyncio

import pytest
from unittest.mock import AsyncMock

from src.models.errors import (
    BadSignatureError,
    LocalRepoError,
    MalformedPayloadError,
    MissingSignatureError,
    UpstreamReadError,
)
from src.models.responses import ErrorResponse, SuccessResponse
from src.models.status import PEER_REVIEW_CONTEXT, SQUASH_CONTEXT, StatusState
from src.services.event_router import (
    CommentEventProcessor,
    EventRouter,
    PullRequestEventProcessor,
)
from src.services.github_client import GitHubAPIError

from conftest import WEBHOOK_SECRET, issue_comment_body, pull_request_body, sign


class TestEventRouter:
    """Test cases for Event Router"""

    @pytest.fixture
    def event_router(self, mock_github_client, git_service):
        """Create event router instance for testing"""
        return EventRouter(
            webhook_secret=WEBHOOK_SECRET,
            github_client=mock_github_client,
            git_service=git_service,
        )

    async def _dispatch(self, event_router, body: bytes, event_type: str):
        return await event_router.dispatch(body, sign(body), event_type)

    def test_processors(self, event_router):
        assert [type(p) for p in event_router.processors] == [CommentEventProcessor, PullRequestEventProcessor]

    @pytest.mark.asyncio
    async def test_missing_signature(self, event_router, git_service, mock_github_client):
        response = await event_router.dispatch(issue_comment_body(), "", "issue_comment")

        assert isinstance(response, ErrorResponse)
        assert response.status_code == 401
        assert response.user_message == "Please provide a X-Hub-Signature"
        assert isinstance(response.cause, MissingSignatureError)
        assert git_service.events == []
        mock_github_client.get_pull_request.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_bad_signature(self, event_router, git_service):
        body = issue_comment_body()
        response = await event_router.dispatch(body, sign(body, "wrong-secret"), "issue_comment")

        assert response.status_code == 403
        assert response.user_message == "Bad X-Hub-Signature"
        assert isinstance(response.cause, BadSignatureError)
        assert git_service.events == []

    @pytest.mark.asyncio
    async def test_malformed_signature(self, event_router):
        response = await event_router.dispatch(issue_comment_body(), "sha1=zz", "issue_comment")

        assert response.status_code == 500
        assert response.user_message == "Failed to check the signature"

    @pytest.mark.asyncio
    async def test_unknown_event_is_ignored(self, event_router, mock_github_client):
        body = b'{"zen": "Keep it logically awesome."}'
        response = await self._dispatch(event_router, body, "ping")

        assert response == SuccessResponse("Not an event I understand. Ignoring.")
        mock_github_client.get_pull_request.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("comment", ["!squash", "+1", ":+1: done", "lgtm"])
    async def test_comment_on_plain_issue_is_ignored(self, event_router, mock_github_client, git_service, comment):
        response = await self._dispatch(event_router, issue_comment_body(comment, pr_url=""), "issue_comment")

        assert response == SuccessResponse("Not a PR. Ignoring.")
        mock_github_client.get_pull_request.assert_not_awaited()
        mock_github_client.create_status.assert_not_awaited()
        assert git_service.events == []

    @pytest.mark.asyncio
    async def test_unrecognized_command_is_ignored(self, event_router, mock_github_client):
        response = await self._dispatch(event_router, issue_comment_body("+10 is too many"), "issue_comment")

        assert response == SuccessResponse("Not a command I understand. Ignoring.")
        mock_github_client.create_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_squash_command(self, event_router, mock_github_client, git_service):
        response = await self._dispatch(event_router, issue_comment_body("!squash"), "issue_comment")

        assert isinstance(response, SuccessResponse)
        assert response.status_code == 200
        assert git_service.steps() == ["update", "rebase", "push", "head"]
        _, _, sha, status = mock_github_client.create_status.await_args.args
        assert sha == "squashed-sha"
        assert status.context == SQUASH_CONTEXT
        assert status.state is StatusState.SUCCESS

    @pytest.mark.asyncio
    async def test_squash_conflict_is_a_successful_request(
            self, mock_github_client, make_git_service, rebase_conflict):
        event_router = EventRouter(WEBHOOK_SECRET, mock_github_client, make_git_service(rebase_error=rebase_conflict))

        response = await self._dispatch(event_router, issue_comment_body("!squash"), "issue_comment")

        assert isinstance(response, SuccessResponse)
        _, _, sha, status = mock_github_client.create_status.await_args.args
        assert sha == "head-sha"
        assert status.state is StatusState.FAILURE

    @pytest.mark.asyncio
    async def test_squash_push_failure_is_a_gateway_error(self, mock_github_client, make_git_service, git_failure):
        event_router = EventRouter(WEBHOOK_SECRET, mock_github_client, make_git_service(push_error=git_failure))

        response = await self._dispatch(event_router, issue_comment_body("!squash"), "issue_comment")

        assert isinstance(response, ErrorResponse)
        assert response.status_code == 502
        assert response.user_message == "Failed to push the squashed version"
        assert isinstance(response.cause, LocalRepoError)
        mock_github_client.create_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_plus_one_command(self, event_router, mock_github_client, git_service):
        response = await self._dispatch(event_router, issue_comment_body("+1 sounds good"), "issue_comment")

        assert isinstance(response, SuccessResponse)
        assert git_service.events == []
        _, _, sha, status = mock_github_client.create_status.await_args.args
        assert sha == "head-sha"
        assert status.context == PEER_REVIEW_CONTEXT

    @pytest.mark.asyncio
    async def test_pull_request_lookup_failure_is_a_gateway_error(self, event_router, mock_github_client):
        mock_github_client.get_pull_request = AsyncMock(side_effect=GitHubAPIError("GitHub API error: 404", 404))

        response = await self._dispatch(event_router, issue_comment_body("+1"), "issue_comment")

        assert response.status_code == 502
        assert response.user_message == "Getting PR acme/widgets#7 failed"
        assert isinstance(response.cause, UpstreamReadError)

    @pytest.mark.asyncio
    async def test_unparseable_comment(self, event_router):
        response = await self._dispatch(event_router, b'{"issue": {}}', "issue_comment")

        assert response.status_code == 500
        assert response.user_message == "Failed to parse the request's body"
        assert isinstance(response.cause, MalformedPayloadError)

    @pytest.mark.asyncio
    async def test_unparseable_pull_request(self, event_router):
        response = await self._dispatch(event_router, b"not json", "pull_request")

        assert response.status_code == 500

    @pytest.mark.asyncio
    async def test_pull_request_with_fixups(self, event_router, mock_github_client):
        mock_github_client.list_commit_messages.return_value = ["fix typo", "fixup! add feature"]

        response = await self._dispatch(event_router, pull_request_body("synchronize"), "pull_request")

        assert isinstance(response, SuccessResponse)
        _, _, sha, status = mock_github_client.create_status.await_args.args
        assert status.state is StatusState.PENDING
        assert status.context == SQUASH_CONTEXT

    @pytest.mark.asyncio
    async def test_closed_pull_request_is_ignored(self, event_router, mock_github_client):
        response = await self._dispatch(event_router, pull_request_body("closed"), "pull_request")

        assert response == SuccessResponse("PR not opened or synchronized. Ignoring.")
        mock_github_client.list_commit_messages.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_request_timeout_is_a_gateway_error(self, mock_github_client, git_service):
        async def slow_lookup(*args):
            await asyncio.sleep(5)

        mock_github_client.get_pull_request = AsyncMock(side_effect=slow_lookup)
        event_router = EventRouter(WEBHOOK_SECRET, mock_github_client, git_service, request_timeout=0.05)

        response = await self._dispatch(event_router, issue_comment_body("+1"), "issue_comment")

        assert isinstance(response, ErrorResponse)
        assert response.status_code == 502
        mock_github_client.create_status.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_timeout_during_squash_stops_before_push(self, mock_github_client, make_git_service):
        git_service = make_git_service(delay=0.2)
        event_router = EventRouter(WEBHOOK_SECRET, mock_github_client, git_service, request_timeout=0.1)

        response = await self._dispatch(event_router, issue_comment_body("!squash"), "issue_comment")

        assert isinstance(response, ErrorResponse)
        assert response.status_code == 502
        assert git_service.steps() == ["update"]

        # The next squash waits for the abandoned one to let go of the lock
        git_service.delay = 0
        event_router.request_timeout = None
        response = await self._dispatch(event_router, issue_comment_body("!squash"), "issue_comment")

        assert isinstance(response, SuccessResponse)
        assert git_service.steps() == ["update", "update", "rebase", "push", "head"]
        mock_github_client.create_status.assert_awaited_once()
        assert mock_github_client.create_status.await_args.args[2] == "squashed-sha"
