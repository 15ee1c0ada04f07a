"""
Shared fixtures and in-memory collaborators for the test suite
"""

import hashlib
import hmac
import json
import os
import threading
import time
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, Mock

import pytest

# Settings require these before config.settings is imported anywhere
os.environ.setdefault("GITHUB_WEBHOOK_SECRET", "test-secret")
os.environ.setdefault("GITHUB_TOKEN", "test-token")

from src.models.events import Issue, Repository  # noqa: E402
from src.models.github import PullRequest  # noqa: E402
from src.services.git_service import GitServiceError, RebaseConflictError  # noqa: E402
from src.services.github_client import GitHubClient  # noqa: E402

WEBHOOK_SECRET = "test-secret"


class FakeLocalRepo:
    """Local clone double that records every step on its service"""

    def __init__(self, service: "RecordingGitService", key: Tuple[str, str]):
        self.service = service
        self.key = key

    def rebase_autosquash(self, base_sha: str, head_sha: str) -> None:
        self.service.record(self.key, "rebase", base_sha, head_sha)
        if self.service.rebase_error is not None:
            raise self.service.rebase_error

    def force_push_head_to(self, ref: str) -> None:
        self.service.record(self.key, "push", ref)
        if self.service.push_error is not None:
            raise self.service.push_error

    def get_head_sha(self) -> str:
        self.service.record(self.key, "head")
        if self.service.head_error is not None:
            raise self.service.head_error
        return self.service.squashed_head_sha


class RecordingGitService:
    """Git collaborator double; sleeps in each step so unguarded calls would interleave"""

    def __init__(self, delay: float = 0.0, rebase_error: Exception = None,
                 push_error: Exception = None, update_error: Exception = None,
                 head_error: Exception = None, squashed_head_sha: str = "squashed-sha",
                 barrier: Optional[threading.Barrier] = None):
        self.delay = delay
        self.rebase_error = rebase_error
        self.push_error = push_error
        self.update_error = update_error
        self.head_error = head_error
        self.squashed_head_sha = squashed_head_sha
        self.barrier = barrier
        self.events: List[Tuple[Tuple[str, str], str, tuple]] = []
        self._lock = threading.Lock()

    def record(self, key: Tuple[str, str], step: str, *args) -> None:
        with self._lock:
            self.events.append((key, step, args))
        if self.delay:
            time.sleep(self.delay)

    def steps(self) -> List[str]:
        return [step for _, step, _ in self.events]

    def get_updated_repo(self, clone_url: str, owner: str, name: str) -> FakeLocalRepo:
        key = (owner, name)
        if self.barrier is not None:
            self.barrier.wait()
        self.record(key, "update", clone_url)
        if self.update_error is not None:
            raise self.update_error
        return FakeLocalRepo(self, key)


def sign(body: bytes, secret: str = WEBHOOK_SECRET) -> str:
    return "sha1=" + hmac.new(secret.encode("utf-8"), body, hashlib.sha1).hexdigest()


def issue_comment_body(comment: str = "!squash", pr_url: Optional[str] = "https://api.github.com/repos/acme/widgets/pulls/7",
                       number: int = 7) -> bytes:
    issue: Dict[str, Any] = {"number": number, "title": "Add widgets", "state": "open"}
    if pr_url is not None:
        issue["pull_request"] = {"url": pr_url, "html_url": "https://github.com/acme/widgets/pull/7"}
    payload = {
        "action": "created",
        "issue": issue,
        "comment": {"id": 99, "body": comment, "user": {"login": "reviewer"}},
        "repository": {
            "id": 1,
            "name": "widgets",
            "full_name": "acme/widgets",
            "owner": {"login": "acme", "id": 2},
            "ssh_url": "git@github.com:acme/widgets.git",
        },
        "sender": {"login": "reviewer"},
    }
    return json.dumps(payload).encode("utf-8")


def pull_request_body(action: str = "opened", number: int = 7) -> bytes:
    payload = {
        "action": action,
        "number": number,
        "pull_request": {"url": "https://api.github.com/repos/acme/widgets/pulls/7", "id": 3},
        "repository": {
            "name": "widgets",
            "owner": {"login": "acme"},
            "ssh_url": "git@github.com:acme/widgets.git",
        },
    }
    return json.dumps(payload).encode("utf-8")


@pytest.fixture
def repository():
    return Repository(owner="acme", name="widgets", clone_url="git@github.com:acme/widgets.git")


@pytest.fixture
def issue(repository):
    return Issue(number=7, repository=repository)


@pytest.fixture
def pull_request():
    return PullRequest(head_ref="feature", head_sha="head-sha", base_ref="main", base_sha="base-sha")


@pytest.fixture
def mock_github_client(pull_request):
    """Mock GitHub client for testing"""
    client = Mock(spec=GitHubClient)
    client.get_pull_request = AsyncMock(return_value=pull_request)
    client.list_commit_messages = AsyncMock(return_value=["add feature"])
    client.create_status = AsyncMock(return_value={"id": 1})
    return client


@pytest.fixture
def git_service():
    return RecordingGitService()


@pytest.fixture
def make_git_service():
    return RecordingGitService


@pytest.fixture
def rebase_conflict():
    return RebaseConflictError("CONFLICT (content): Merge conflict in a.txt", command="rebase", return_code=1)


@pytest.fixture
def git_failure():
    return GitServiceError("fatal: unable to access remote", command="git push", return_code=128)
