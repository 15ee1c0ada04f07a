"""
Uniform webhook response values
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class SuccessResponse:
    message: str = ""
    status_code: int = 200

    def to_content(self) -> Dict[str, Any]:
        return {"status": "ok", "message": self.message}


@dataclass(frozen=True)
class ErrorResponse:
    cause: Optional[BaseException]
    status_code: int
    user_message: str

    def to_content(self) -> Dict[str, Any]:
        return {"status": "error", "message": self.user_message}


WebhookResponse = Union[SuccessResponse, ErrorResponse]
