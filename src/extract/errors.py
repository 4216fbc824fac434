"""
Fetch Errors - Extract Layer

Failure taxonomy for patient data acquisition.
"""

from enum import Enum
from typing import Optional


class FetchErrorKind(str, Enum):
    """Why an acquisition failed"""

    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    MALFORMED_RESPONSE = "malformed_response"
    NETWORK_FAILURE = "network_failure"
    HTTP_ERROR = "http_error"
    RETRIES_EXHAUSTED = "retries_exhausted"
    CANCELLED = "cancelled"


class FetchError(Exception):
    """Raised when patient data could not be acquired

    Args:
        message: Human-readable description
        kind: Failure kind
        cause_kind: For RETRIES_EXHAUSTED, the retryable kind that ran out
        status_code: HTTP status of the last response, if one was received
        page: Page being fetched when the failure happened
        attempts: Number of HTTP attempts made for that page
    """

    def __init__(
        self,
        message: str,
        kind: FetchErrorKind,
        cause_kind: Optional[FetchErrorKind] = None,
        status_code: Optional[int] = None,
        page: Optional[int] = None,
        attempts: int = 0,
    ):
        super().__init__(message)
        self.kind = kind
        self.cause_kind = cause_kind
        self.status_code = status_code
        self.page = page
        self.attempts = attempts

    def __repr__(self) -> str:
        return (
            f"FetchError(kind={self.kind.value!r}, cause_kind="
            f"{self.cause_kind.value if self.cause_kind else None!r}, "
            f"status_code={self.status_code!r}, page={self.page!r}, "
            f"attempts={self.attempts!r})"
        )
