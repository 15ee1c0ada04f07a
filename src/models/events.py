"""
Domain events built from GitHub webhook payloads
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Repository:
    """A remote repository and the URL it is cloned from"""
    owner: str
    name: str
    clone_url: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class Issue:
    """The identity needed to look up a pull request"""
    number: int
    repository: Repository

    @property
    def full_name(self) -> str:
        return f"{self.repository.owner}/{self.repository.name}#{self.number}"


@dataclass(frozen=True)
class IssueComment:
    issue_number: int
    comment_body: str
    is_pull_request: bool
    repository: Repository

    def issue(self) -> Issue:
        return Issue(number=self.issue_number, repository=self.repository)


@dataclass(frozen=True)
class PullRequestEvent:
    issue_number: int
    action: str
    repository: Repository

    def issue(self) -> Issue:
        return Issue(number=self.issue_number, repository=self.repository)
