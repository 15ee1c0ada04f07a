"""
Error taxonomy for webhook handling

Every error carries the HTTP status code and the user-facing message the
webhook endpoint answers with, plus the underlying cause for logging.
"""

from typing import Optional


class ReviewHelperError(Exception):
    """Base class for errors that abort a webhook request"""

    status_code: int = 500
    default_message: str = "Internal error"

    def __init__(self, user_message: str = None, cause: Optional[BaseException] = None):
        self.user_message = user_message or self.default_message
        self.cause = cause
        super().__init__(self.user_message)

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.user_message}: {self.cause}"
        return self.user_message


class AuthRejectedError(ReviewHelperError):
    """The request could not be authenticated"""

    status_code = 403


class MissingSignatureError(AuthRejectedError):
    status_code = 401
    default_message = "Please provide a X-Hub-Signature"


class BadSignatureError(AuthRejectedError):
    status_code = 403
    default_message = "Bad X-Hub-Signature"


class MalformedSignatureError(ReviewHelperError):
    """The signature header is present but its digest is not valid hex"""

    status_code = 500
    default_message = "Failed to check the signature"


class MalformedPayloadError(ReviewHelperError):
    """The request body could not be read or decoded"""

    status_code = 500
    default_message = "Failed to parse the request's body"


class UpstreamReadError(ReviewHelperError):
    """Reading a pull request or its commits from GitHub failed"""

    status_code = 502
    default_message = "Failed to read from GitHub"


class UpstreamWriteError(ReviewHelperError):
    """Writing to GitHub failed"""

    status_code = 502
    default_message = "Failed to write to GitHub"


class LocalRepoError(ReviewHelperError):
    """Cloning, fetching, pushing or inspecting the local clone failed"""

    status_code = 502
    default_message = "Failed to update the local repo"
