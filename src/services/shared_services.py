"""
Shared service instances to prevent multiple initialization issues
"""

from pathlib import Path
from typing import Optional

from config.settings import settings
from .event_router import EventRouter
from .git_service import GitService
from .github_client import GitHubClient
from .repo_locks import RepoLockRegistry

# Global shared instances - initialized once
_repos_base_path: Optional[Path] = None
_github_client = None
_git_service = None
_repo_locks = None
_event_router = None


def configure_repos_base_path(path: Path) -> None:
    """Set where local clones live; must be called before the git service is created"""
    global _repos_base_path
    _repos_base_path = path


def get_github_client() -> GitHubClient:
    """Get shared GitHubClient instance"""
    global _github_client
    if _github_client is None:
        _github_client = GitHubClient()
    return _github_client


def get_git_service() -> GitService:
    """Get shared GitService instance"""
    global _git_service
    if _git_service is None:
        _git_service = GitService(repos_base_path=_repos_base_path)
    return _git_service


def get_repo_locks() -> RepoLockRegistry:
    """Get shared RepoLockRegistry instance"""
    global _repo_locks
    if _repo_locks is None:
        _repo_locks = RepoLockRegistry()
    return _repo_locks


def get_event_router() -> EventRouter:
    """Get shared EventRouter instance"""
    global _event_router
    if _event_router is None:
        _event_router = EventRouter(
            webhook_secret=settings.GITHUB_WEBHOOK_SECRET,
            github_client=get_github_client(),
            git_service=get_git_service(),
            repo_locks=get_repo_locks(),
            request_timeout=settings.REQUEST_TIMEOUT,
        )
    return _event_router


async def close_services() -> None:
    """Release network resources held by the shared services"""
    if _github_client is not None:
        await _github_client.aclose()


def reset_services():
    """Reset all shared services (for testing)"""
    global _repos_base_path, _github_client, _git_service, _repo_locks, _event_router
    _repos_base_path = None
    _github_client = None
    _git_service = None
    _repo_locks = None
    _event_router = None
