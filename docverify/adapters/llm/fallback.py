"""
Provider Fallback - Retry transient failures, then walk the alternatives.

Policy:
    1. Call the primary, retrying only TRANSIENT_ERROR outcomes up to
       max_retry_attempts extra times with a fixed delay.
    2. On failure, try each alternative in registration order with the
       same retry policy.
    3. The first success wins. If everything fails, the primary's failure
       is returned with the alternatives' errors appended.
"""

from __future__ import annotations

import logging
import time

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_result,
    stop_after_attempt,
    wait_fixed,
)

from docverify.config import ErrorCode

from .contracts import Provider
from .models import ImagePayload, ProviderKind, ProviderResponse
from .registry import ProviderRegistry

logger = logging.getLogger(__name__)

__all__ = ["failure_code", "invoke_with_fallback", "invoke_with_retry"]


def _is_transient(response: ProviderResponse) -> bool:
    return response.is_transient


def _last_response(retry_state: RetryCallState) -> ProviderResponse:
    """Return the final attempt's outcome instead of raising RetryError."""
    assert retry_state.outcome is not None
    response: ProviderResponse = retry_state.outcome.result()
    return response


def _log_retry(retry_state: RetryCallState) -> None:
    response = retry_state.outcome.result() if retry_state.outcome else None
    logger.warning(
        "Transient failure from %s (attempt %d): %s. Retrying",
        response.provider_name if response else "provider",
        retry_state.attempt_number,
        response.error_message if response else "unknown error",
    )


async def _attempt(
    provider: Provider,
    prompt: str,
    image: ImagePayload | None,
) -> ProviderResponse:
    """Single call. Unexpected exceptions become transient outcomes."""
    try:
        return await provider.invoke(prompt, image)
    except Exception as e:
        logger.exception("Provider %s raised unexpectedly", provider.name)
        return ProviderResponse.transient(
            f"Unexpected provider error: {e}",
            provider.name,
            provider.config.model,
        )


async def invoke_with_retry(
    provider: Provider,
    prompt: str,
    image: ImagePayload | None = None,
) -> ProviderResponse:
    """
    Invoke one provider, retrying transient failures.

    Args:
        provider: Provider handle (carries its own retry policy)
        prompt: Prompt text
        image: Optional image for vision calls

    Returns:
        The first non-transient outcome, or the last transient one once
        attempts are exhausted
    """
    config = provider.config
    start = time.perf_counter()
    attempts = 0

    async def _counted() -> ProviderResponse:
        nonlocal attempts
        attempts += 1
        return await _attempt(provider, prompt, image)

    retrying = AsyncRetrying(
        retry=retry_if_result(_is_transient),
        stop=stop_after_attempt(config.max_retry_attempts + 1),
        wait=wait_fixed(config.retry_delay_seconds),
        before_sleep=_log_retry,
        retry_error_callback=_last_response,
    )
    response: ProviderResponse = await retrying(_counted)
    return response.model_copy(
        update={
            "attempts": attempts,
            "duration_seconds": time.perf_counter() - start,
            "attempted_providers": [provider.name],
        }
    )


async def invoke_with_fallback(
    registry: ProviderRegistry,
    kind: ProviderKind,
    primary_name: str,
    prompt: str,
    image: ImagePayload | None = None,
) -> ProviderResponse:
    """
    Invoke the configured primary, falling back to alternatives.

    Args:
        registry: Populated provider registry
        kind: Vision or analysis
        primary_name: Configured primary provider name
        prompt: Prompt text
        image: Optional image for vision calls

    Returns:
        The winning provider's response, or the primary's failure with
        every alternative's error appended

    Raises:
        ProviderNotFoundError: If the primary is not registered
    """
    primary, alternatives = registry.resolve(kind, primary_name)

    response = await invoke_with_retry(primary, prompt, image)
    if response.success:
        return response

    attempted = [primary.name]
    failures: list[ProviderResponse] = []

    for alternative in alternatives:
        logger.warning(
            "Primary %s provider %s failed (%s), trying alternative provider: %s",
            kind.value,
            primary.name,
            response.error_message,
            alternative.name,
        )
        attempted.append(alternative.name)
        alt_response = await invoke_with_retry(alternative, prompt, image)
        if alt_response.success:
            logger.info(
                "Alternative %s provider %s succeeded after primary %s failed",
                kind.value,
                alternative.name,
                primary.name,
            )
            return alt_response.model_copy(update={"attempted_providers": attempted})
        failures.append(alt_response)

    if not failures:
        return response

    summary = ", ".join(f"{f.provider_name} ({f.error_message})" for f in failures)
    logger.error(
        "All %s providers failed: primary %s and %d alternative(s)",
        kind.value,
        primary.name,
        len(failures),
    )
    return response.model_copy(
        update={
            "error_message": (
                f"Primary provider '{primary.name}' failed: {response.error_message}; "
                f"{len(failures)} alternative provider(s) also failed: {summary}"
            ),
            "attempted_providers": attempted,
        }
    )


def failure_code(response: ProviderResponse) -> ErrorCode:
    """Error code describing a failed fallback-invoke."""
    if len(response.attempted_providers) > 1:
        return ErrorCode.PROVIDERS_EXHAUSTED
    if response.is_transient:
        return ErrorCode.PROVIDER_TRANSIENT
    return ErrorCode.PROVIDER_REJECTED
