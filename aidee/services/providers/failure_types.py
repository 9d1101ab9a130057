"""
Failure normalization for provider calls and generation orchestration.
CallFailure describes what went wrong on the wire; ErrorKind is what callers branch on.
"""
from enum import Enum
from typing import Any


class CallFailure(str, Enum):
    """Transport-level failure of a single provider call."""

    HTTP_STATUS = "http_status"  # non-2xx other than auth
    AUTH = "auth"  # 401 / 403: bad or revoked key
    NON_JSON = "non_json"  # body not in the expected format (HTML error page, JSON instead of image)
    TIMEOUT = "timeout"
    TRANSPORT = "transport"  # DNS, connection reset, TLS


class ErrorKind(str, Enum):
    """Orchestration-level error kinds surfaced to callers."""

    INVALID_INPUT = "invalid_input"
    PROVIDER_FAILURE = "provider_failure"
    PARSE_ERROR = "parse_error"
    TASK_CREATION_FAILED = "task_creation_failed"
    TASK_FAILED = "task_failed"
    TASK_TIMED_OUT = "task_timed_out"


def classify_status(http_status: int) -> tuple[CallFailure, bool]:
    """
    Classify a non-2xx status.
    Returns (failure, retryable). Retry is the caller's fallback policy, never the client's.
    """
    if http_status in (401, 403):
        return (CallFailure.AUTH, False)
    if http_status in (408, 429):
        return (CallFailure.HTTP_STATUS, True)
    if 500 <= http_status < 600:
        return (CallFailure.HTTP_STATUS, True)
    return (CallFailure.HTTP_STATUS, False)


class ProviderCallError(Exception):
    """Raised by ProviderClient.call; one instance per failed outbound request."""

    def __init__(
        self,
        message: str,
        *,
        provider: str,
        kind: CallFailure,
        status_code: int | None = None,
        retryable: bool = False,
        detail: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.kind = kind
        self.status_code = status_code
        self.retryable = retryable
        self.detail = detail or {}

    def to_detail(self) -> dict[str, Any]:
        """Flatten into the detail dict carried by GenerationError."""
        detail: dict[str, Any] = {"call_failure": self.kind.value, "retryable": self.retryable}
        if self.status_code is not None:
            detail["http_status"] = self.status_code
        detail.update(self.detail)
        return detail


class GenerationError(Exception):
    """Orchestration failure surfaced to callers; kind tells them what to do next."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        provider: str | None = None,
        detail: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.provider = provider
        self.detail = detail or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "kind": self.kind.value, "provider": self.provider}
