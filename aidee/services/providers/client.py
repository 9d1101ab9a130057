"""
Uniform HTTP call wrapper used by every provider (language model and image).

One call = one outbound request with a bounded timeout. The client never retries;
it reports a distinct CallFailure so the orchestration layer can decide.
"""
import json
import logging
import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from aidee.core.providers import AuthConfig
from aidee.services.providers.failure_types import (
    CallFailure,
    ProviderCallError,
    classify_status,
)
from aidee.utils.metrics import provider_request_duration_seconds, provider_requests_total

logger = logging.getLogger(__name__)

# Upper bound for any single provider call, whatever the caller asks for.
MAX_TIMEOUT_SECONDS = 300.0


@dataclass
class RawResponse:
    """Body and declared content type; interpretation is up to the caller."""
    status_code: int
    content: bytes
    content_type: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def is_json(self) -> bool:
        return "json" in self.content_type.lower()

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    def json(self) -> Any:
        return json.loads(self.content)


def _error_message(body: bytes, fallback: str) -> str:
    """Best-effort extraction of the provider's own error message."""
    try:
        data = json.loads(body)
    except (ValueError, TypeError):
        return fallback
    if not isinstance(data, dict):
        return fallback
    error = data.get("error")
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    if isinstance(error, str) and error:
        return error
    if data.get("message"):
        return str(data["message"])
    errors = data.get("errors")
    if isinstance(errors, list) and errors:
        return str(errors[0])
    return fallback


class ProviderClient:
    """HTTP wrapper bound to one provider name (for logs and metrics)."""

    def __init__(self, provider: str, http_client: httpx.Client | None = None) -> None:
        self.provider = provider
        self._http_client = http_client

    def _record(self, status: str, started: float) -> None:
        provider_requests_total.labels(provider=self.provider, status=status).inc()
        provider_request_duration_seconds.labels(provider=self.provider).observe(
            time.monotonic() - started
        )

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if self._http_client is not None:
            return self._http_client.request(method, url, **kwargs)
        with httpx.Client() as client:
            return client.request(method, url, **kwargs)

    def call(
        self,
        endpoint: str,
        payload: dict[str, Any] | None = None,
        auth: AuthConfig | None = None,
        timeout: float = 30.0,
        *,
        method: str = "POST",
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        expect_json: bool = True,
    ) -> RawResponse:
        """
        Issue exactly one request.

        Raises:
            ProviderCallError: non-2xx status, non-JSON body when JSON was expected,
                timeout or transport failure.
        """
        timeout = max(0.1, min(float(timeout), MAX_TIMEOUT_SECONDS))
        req_headers = {"Accept": "application/json"} if expect_json else {}
        req_headers.update(headers or {})
        req_params = dict(params or {})
        if auth is not None:
            auth.apply(req_headers, req_params)

        kwargs: dict[str, Any] = {"headers": req_headers, "timeout": timeout}
        if req_params:
            kwargs["params"] = req_params
        if payload is not None and method.upper() != "GET":
            kwargs["json"] = payload

        started = time.monotonic()
        try:
            response = self._send(method.upper(), endpoint, **kwargs)
        except httpx.TimeoutException as e:
            self._record("timeout", started)
            logger.warning(
                "provider_call_timeout",
                extra={"provider": self.provider, "endpoint": endpoint, "error": str(e)},
            )
            raise ProviderCallError(
                f"{self.provider} request timed out after {timeout}s",
                provider=self.provider,
                kind=CallFailure.TIMEOUT,
                retryable=True,
            ) from e
        except httpx.HTTPError as e:
            self._record("transport_error", started)
            logger.warning(
                "provider_call_transport_error",
                extra={"provider": self.provider, "endpoint": endpoint, "error": str(e)},
            )
            raise ProviderCallError(
                f"{self.provider} request failed: {e}",
                provider=self.provider,
                kind=CallFailure.TRANSPORT,
                retryable=True,
            ) from e

        raw = RawResponse(
            status_code=response.status_code,
            content=response.content,
            content_type=response.headers.get("content-type", ""),
            headers=dict(response.headers),
        )
        self._record(str(response.status_code), started)

        if not 200 <= response.status_code < 300:
            failure, retryable = classify_status(response.status_code)
            message = _error_message(
                raw.content, f"{self.provider} request failed (status {response.status_code})"
            )
            detail: dict[str, Any] = {"body": raw.text[:200]}
            if response.status_code == 429 and response.headers.get("Retry-After"):
                detail["retry_after"] = response.headers["Retry-After"]
            logger.warning(
                "provider_call_failed",
                extra={
                    "provider": self.provider,
                    "endpoint": endpoint,
                    "status_code": response.status_code,
                    "kind": failure.value,
                },
            )
            raise ProviderCallError(
                message,
                provider=self.provider,
                kind=failure,
                status_code=response.status_code,
                retryable=retryable,
                detail=detail,
            )

        if expect_json and not raw.is_json:
            # Usually a bad key or quota page served as HTML.
            logger.warning(
                "provider_call_non_json",
                extra={"provider": self.provider, "endpoint": endpoint, "status_code": raw.status_code},
            )
            raise ProviderCallError(
                f"{self.provider} response is not JSON (content-type {raw.content_type or 'missing'})",
                provider=self.provider,
                kind=CallFailure.NON_JSON,
                status_code=raw.status_code,
                retryable=False,
                detail={"body": raw.text[:200]},
            )

        return raw
