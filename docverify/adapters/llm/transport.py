"""
HTTP Transport - Shared POST helper that maps HTTP failures to outcomes.

Providers call ``post_json`` with the process-wide pooled client and never
see httpx exceptions: timeouts, connection failures, 429 and 5xx come back
as transient, other 4xx as business errors.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from .models import ProviderOutcome

logger = logging.getLogger(__name__)

__all__ = ["HTTPCallResult", "classify_status", "post_json"]

# Statuses worth retrying besides 5xx
_RETRYABLE_STATUSES = frozenset({408, 409, 425, 429})


@dataclass
class HTTPCallResult:
    """Parsed JSON body or a classified failure."""

    outcome: ProviderOutcome
    data: dict[str, Any] = field(default_factory=dict)
    error: str = ""
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is ProviderOutcome.SUCCESS


def classify_status(status_code: int) -> ProviderOutcome:
    """Map an HTTP status to a provider outcome."""
    if 200 <= status_code < 300:
        return ProviderOutcome.SUCCESS
    if status_code in _RETRYABLE_STATUSES or status_code >= 500:
        return ProviderOutcome.TRANSIENT_ERROR
    return ProviderOutcome.BUSINESS_ERROR


def _error_detail(response: httpx.Response) -> str:
    """Pull a human-readable message out of an error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:500]

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("message") or error)
        if error:
            return str(error)
    return response.text[:500]


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    payload: dict[str, Any],
    *,
    timeout: float,
    headers: dict[str, str] | None = None,
    params: dict[str, str] | None = None,
) -> HTTPCallResult:
    """
    POST a JSON payload and classify the result.

    Args:
        client: Shared pooled HTTP client
        url: Absolute endpoint URL
        payload: JSON request body
        timeout: Per-request timeout in seconds
        headers: Extra request headers
        params: Query string parameters

    Returns:
        HTTPCallResult holding the decoded body on success
    """
    try:
        response = await client.post(
            url,
            json=payload,
            headers=headers,
            params=params,
            timeout=timeout,
        )
    except httpx.TimeoutException as e:
        logger.warning("Request to %s timed out after %.1fs", url, timeout)
        return HTTPCallResult(
            outcome=ProviderOutcome.TRANSIENT_ERROR,
            error=f"Request timed out: {e.__class__.__name__}",
        )
    except httpx.TransportError as e:
        logger.warning("Transport error calling %s: %s", url, e)
        return HTTPCallResult(
            outcome=ProviderOutcome.TRANSIENT_ERROR,
            error=f"Connection failed: {e}",
        )

    outcome = classify_status(response.status_code)
    if outcome is not ProviderOutcome.SUCCESS:
        detail = _error_detail(response)
        logger.error("Provider HTTP %d from %s: %s", response.status_code, url, detail)
        return HTTPCallResult(
            outcome=outcome,
            error=f"HTTP {response.status_code}: {detail}",
            status_code=response.status_code,
        )

    try:
        data = response.json()
    except ValueError:
        return HTTPCallResult(
            outcome=ProviderOutcome.TRANSIENT_ERROR,
            error="Response body is not valid JSON",
            status_code=response.status_code,
        )

    if not isinstance(data, dict):
        return HTTPCallResult(
            outcome=ProviderOutcome.TRANSIENT_ERROR,
            error="Response body is not a JSON object",
            status_code=response.status_code,
        )

    return HTTPCallResult(
        outcome=ProviderOutcome.SUCCESS,
        data=data,
        status_code=response.status_code,
    )
