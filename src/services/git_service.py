"""
Git service for local clone management and history rewriting
"""

import structlog
from pathlib import Path
from typing import Dict

from git import Git, Repo, GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from config.settings import settings

logger = structlog.get_logger()

# Accept the generated todo list and combined commit messages as-is
NON_INTERACTIVE_EDITORS: Dict[str, str] = {
    "GIT_SEQUENCE_EDITOR": "true",
    "GIT_EDITOR": "true",
}


class GitServiceError(Exception):
    """Custom exception for git service errors"""
    def __init__(self, message: str, command: str = None, return_code: int = None):
        self.message = message
        self.command = command
        self.return_code = return_code
        super().__init__(message)


class RebaseConflictError(GitServiceError):
    """The autosquash rebase did not apply cleanly and was aborted"""


def _command_error(message: str, error: GitCommandError) -> GitServiceError:
    return GitServiceError(
        f"{message}: {error.stderr.strip() if error.stderr else error}",
        command=str(error.command),
        return_code=error.status if isinstance(error.status, int) else None,
    )


class LocalRepo:
    """A local clone that squashes and publishes a pull request branch"""

    def __init__(self, repo: Repo, timeout: int):
        self.repo = repo
        self.timeout = timeout

    @property
    def path(self) -> Path:
        return Path(self.repo.working_tree_dir)

    def rebase_autosquash(self, base_sha: str, head_sha: str) -> None:
        """Fold fixup! and squash! commits between base and head into their targets"""
        try:
            self.repo.git.checkout("--detach", head_sha, kill_after_timeout=self.timeout)
        except GitCommandError as e:
            raise _command_error(f"Failed to check out {head_sha}", e)

        try:
            self.repo.git.rebase(
                "--interactive", "--autosquash", base_sha,
                env=NON_INTERACTIVE_EDITORS,
                kill_after_timeout=self.timeout,
            )
        except GitCommandError as e:
            self.abort_rebase()
            raise RebaseConflictError(
                f"Autosquash rebase onto {base_sha} failed: {e.stderr.strip() if e.stderr else e}",
                command="rebase",
                return_code=e.status if isinstance(e.status, int) else None,
            )

        logger.info(
            "Autosquash rebase completed",
            path=str(self.path),
            base=base_sha[:8],
            head=head_sha[:8],
        )

    def force_push_head_to(self, ref: str) -> None:
        """Overwrite the remote branch with the current HEAD"""
        try:
            self.repo.git.push(
                "--force", "origin", f"HEAD:refs/heads/{ref}",
                kill_after_timeout=self.timeout,
            )
        except GitCommandError as e:
            raise _command_error(f"Failed to force push to {ref}", e)

        logger.info("Force pushed branch", path=str(self.path), ref=ref)

    def get_head_sha(self) -> str:
        try:
            return self.repo.head.commit.hexsha
        except ValueError as e:
            raise GitServiceError(f"Failed to resolve HEAD: {str(e)}")

    def rebase_in_progress(self) -> bool:
        git_dir = Path(self.repo.git_dir)
        return (git_dir / "rebase-merge").exists() or (git_dir / "rebase-apply").exists()

    def abort_rebase(self) -> None:
        if not self.rebase_in_progress():
            return
        try:
            self.repo.git.rebase("--abort", kill_after_timeout=self.timeout)
        except GitCommandError as e:
            logger.error("Failed to abort rebase", path=str(self.path), error=str(e))


class GitService:
    """Service for managing local clones of remote repositories"""

    def __init__(self, repos_base_path: Path = None, timeout: int = None,
                 user_name: str = None, user_email: str = None):
        base_path = repos_base_path or settings.REPOS_BASE_PATH
        if base_path is None:
            raise ValueError("A base path for local clones is required")
        self.repos_base_path = Path(base_path)
        self.timeout = timeout or settings.GIT_TIMEOUT
        self.user_name = user_name or settings.GIT_USER_NAME
        self.user_email = user_email or settings.GIT_USER_EMAIL

        # Ensure the clone base directory exists
        self.repos_base_path.mkdir(parents=True, exist_ok=True)

        logger.info(
            "Git service initialized",
            repos_base_path=str(self.repos_base_path),
            timeout=self.timeout,
        )

    def repo_path(self, owner: str, name: str) -> Path:
        return self.repos_base_path / owner / name

    def get_updated_repo(self, clone_url: str, owner: str, name: str) -> LocalRepo:
        """Clone the repository if absent, fetch it otherwise"""
        path = self.repo_path(owner, name)

        try:
            if (path / ".git").exists():
                local_repo = LocalRepo(Repo(path), self.timeout)
                # A killed process may have left a rebase behind
                local_repo.abort_rebase()
                local_repo.repo.git.fetch("--prune", "origin", kill_after_timeout=self.timeout)
                logger.info("Fetched repository", repository=f"{owner}/{name}", path=str(path))
            else:
                path.parent.mkdir(parents=True, exist_ok=True)
                Git(str(path.parent)).clone("--", clone_url, str(path), kill_after_timeout=self.timeout)
                local_repo = LocalRepo(Repo(path), self.timeout)
                logger.info("Cloned repository", repository=f"{owner}/{name}", path=str(path))

            with local_repo.repo.config_writer() as config:
                config.set_value("user", "name", self.user_name)
                config.set_value("user", "email", self.user_email)

            return local_repo

        except GitCommandError as e:
            logger.error("Git command failed while updating repository", repository=f"{owner}/{name}", error=str(e))
            raise _command_error(f"Failed to update {owner}/{name}", e)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise GitServiceError(f"Invalid git repository at {path}: {str(e)}")
        except OSError as e:
            raise GitServiceError(f"Failed to prepare {path}: {str(e)}")
