"""
Classifies pull request comments into review commands
"""

import re
from enum import Enum

SQUASH_COMMAND = "!squash"

# A leading :+1: emoji, or a leading +1 that isn't the start of a larger number
STARTS_WITH_PLUS_ONE = re.compile(r"(:\+1:|\+1(\Z|\D))")


class Command(str, Enum):
    SQUASH = "squash"
    PEER_REVIEW = "peer_review"
    UNRECOGNIZED = "unrecognized"


def classify(comment_body: str) -> Command:
    """Map a comment body to the command it issues, if any"""
    if comment_body == SQUASH_COMMAND:
        return Command.SQUASH
    if STARTS_WITH_PLUS_ONE.match(comment_body):
        return Command.PEER_REVIEW
    return Command.UNRECOGNIZED
