"""
Workflow outcome model

A workflow that aborts on an operational fault raises a ReviewHelperError
instead of returning a result.
"""

from dataclasses import dataclass
from enum import Enum


class WorkflowOutcome(str, Enum):
    SUCCEEDED = "succeeded"
    REPORTED_FAILURE = "reported_failure"
    IGNORED = "ignored"


@dataclass(frozen=True)
class WorkflowResult:
    outcome: WorkflowOutcome
    message: str = ""
