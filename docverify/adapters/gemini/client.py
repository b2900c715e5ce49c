"""
Gemini Provider - Google Gemini generateContent over REST.

Uses the shared pooled HTTP client and an API key header. Page images go
inline as base64 ``inline_data`` parts.
"""

from __future__ import annotations

import base64
import logging
import time
from typing import Any

import httpx

from docverify.adapters.llm import (
    ImagePayload,
    MetricsCollector,
    NullMetrics,
    ProviderConfig,
    ProviderResponse,
    post_json,
)

logger = logging.getLogger(__name__)

__all__ = ["GeminiProvider"]

# finishReason values that mean the model declined to answer
_BLOCKED_FINISH_REASONS = frozenset(
    {"SAFETY", "RECITATION", "BLOCKLIST", "PROHIBITED_CONTENT", "SPII"}
)


class GeminiProvider:
    """
    Gemini REST provider.

    Example:
        >>> config = ProviderConfig(provider_name="gemini", model="gemini-2.0-flash", api_key="...")
        >>> provider = GeminiProvider(config, http_client)
        >>> response = await provider.invoke("Extract all fields", image)
    """

    def __init__(
        self,
        config: ProviderConfig,
        client: httpx.AsyncClient,
        metrics: MetricsCollector | None = None,
        json_mode: bool = False,
    ) -> None:
        self.config = config
        self.name = config.provider_name
        self.json_mode = json_mode
        self._client = client
        self._metrics = metrics or NullMetrics()
        base_url = (config.base_url or "https://generativelanguage.googleapis.com/v1beta").rstrip("/")
        self._url = f"{base_url}/models/{config.model}:generateContent"

    def _build_payload(self, prompt: str, image: ImagePayload | None) -> dict[str, Any]:
        parts: list[dict[str, Any]] = [{"text": prompt}]
        if image is not None:
            parts.append(
                {
                    "inline_data": {
                        "mime_type": image.mime_type,
                        "data": base64.b64encode(image.data).decode("ascii"),
                    }
                }
            )

        generation_config: dict[str, Any] = {
            "temperature": self.config.temperature,
            "maxOutputTokens": self.config.max_tokens,
        }
        if self.json_mode:
            generation_config["responseMimeType"] = "application/json"

        return {
            "contents": [{"role": "user", "parts": parts}],
            "generationConfig": generation_config,
        }

    def _parse(self, data: dict[str, Any]) -> ProviderResponse:
        feedback = data.get("promptFeedback") or {}
        if feedback.get("blockReason"):
            return ProviderResponse.rejected(
                f"Prompt blocked: {feedback['blockReason']}", self.name, self.config.model
            )

        candidates = data.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return ProviderResponse.transient(
                "Malformed response: no candidates", self.name, self.config.model
            )

        candidate = candidates[0]
        finish_reason = candidate.get("finishReason", "")
        if finish_reason in _BLOCKED_FINISH_REASONS:
            return ProviderResponse.rejected(
                f"Response blocked: {finish_reason}", self.name, self.config.model
            )

        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)
        model = data.get("modelVersion") or self.config.model
        if not text.strip():
            return ProviderResponse.rejected("Empty response from model", self.name, model)
        return ProviderResponse.ok(text, self.name, model)

    async def invoke(
        self,
        prompt: str,
        image: ImagePayload | None = None,
    ) -> ProviderResponse:
        """
        Call generateContent.

        Args:
            prompt: Prompt text
            image: Optional page image

        Returns:
            Typed provider outcome
        """
        start = time.perf_counter()

        api_key = self.config.api_key.get_secret_value()
        if not api_key:
            response = ProviderResponse.rejected(
                "Gemini API key is not configured", self.name, self.config.model
            )
        else:
            call = await post_json(
                self._client,
                self._url,
                self._build_payload(prompt, image),
                timeout=self.config.timeout_seconds,
                headers={"x-goog-api-key": api_key},
            )
            if call.ok:
                response = self._parse(call.data)
            else:
                response = ProviderResponse(
                    outcome=call.outcome,
                    error_message=call.error,
                    provider_name=self.name,
                    model=self.config.model,
                )

        elapsed = time.perf_counter() - start
        self._metrics.record(self.name, response.outcome, elapsed)
        logger.debug(
            "Gemini %s call finished: outcome=%s in %.2fs",
            self.config.model,
            response.outcome.value,
            elapsed,
        )
        return response.model_copy(update={"duration_seconds": elapsed})
