"""
Commit status model
"""

from dataclasses import dataclass
from enum import Enum

SQUASH_CONTEXT = "review/squash"
PEER_REVIEW_CONTEXT = "review/peer"


class StatusState(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class Status:
    """A commit status on one context track"""
    context: str
    state: StatusState
    description: str

    def to_payload(self) -> dict:
        """Body for the GitHub create-status endpoint"""
        return {
            "state": self.state.value,
            "description": self.description,
            "context": self.context,
        }


def squash_status(state: StatusState, description: str) -> Status:
    return Status(context=SQUASH_CONTEXT, state=state, description=description)


def peer_review_status(state: StatusState, description: str) -> Status:
    return Status(context=PEER_REVIEW_CONTEXT, state=state, description=description)
