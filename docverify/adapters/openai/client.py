"""
OpenAI Provider - Chat Completions over the shared HTTP client.

Images are sent inline as base64 data URLs. Analysis handles request a
JSON object response.
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

__all__ = ["OpenAIProvider"]


class OpenAIProvider:
    """
    OpenAI chat completions provider.

    Example:
        >>> config = ProviderConfig(provider_name="openai", model="gpt-4o", api_key="sk-...")
        >>> provider = OpenAIProvider(config, http_client)
        >>> response = await provider.invoke("Describe this page", image)
    """

    def __init__(
        self,
        config: ProviderConfig,
        client: httpx.AsyncClient,
        metrics: MetricsCollector | None = None,
        json_mode: bool = False,
    ) -> None:
        """
        Initialize OpenAI provider.

        Args:
            config: Provider configuration (model, key, limits)
            client: Shared pooled HTTP client
            metrics: Metrics sink for per-call outcomes
            json_mode: Ask the model for a JSON object response
        """
        self.config = config
        self.name = config.provider_name
        self.json_mode = json_mode
        self._client = client
        self._metrics = metrics or NullMetrics()
        self._url = f"{(config.base_url or 'https://api.openai.com/v1').rstrip('/')}/chat/completions"

    def _build_payload(self, prompt: str, image: ImagePayload | None) -> dict[str, Any]:
        content: str | list[dict[str, Any]] = prompt
        if image is not None:
            encoded = base64.b64encode(image.data).decode("ascii")
            content = [
                {"type": "text", "text": prompt},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{image.mime_type};base64,{encoded}"},
                },
            ]

        payload: dict[str, Any] = {
            "model": self.config.model,
            "messages": [{"role": "user", "content": content}],
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
        }
        if self.json_mode:
            payload["response_format"] = {"type": "json_object"}
        return payload

    def _parse(self, data: dict[str, Any]) -> ProviderResponse:
        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            return ProviderResponse.transient(
                "Malformed response: no choices", self.name, self.config.model
            )

        choice = choices[0]
        if choice.get("finish_reason") == "content_filter":
            return ProviderResponse.rejected(
                "Response blocked by content filter", self.name, self.config.model
            )

        message = choice.get("message") or {}
        if message.get("refusal"):
            return ProviderResponse.rejected(
                f"Model refused: {message['refusal']}", self.name, self.config.model
            )

        text = message.get("content") or ""
        if not text.strip():
            return ProviderResponse.rejected(
                "Empty response from model", self.name, data.get("model") or self.config.model
            )
        return ProviderResponse.ok(text, self.name, data.get("model") or self.config.model)

    async def invoke(
        self,
        prompt: str,
        image: ImagePayload | None = None,
    ) -> ProviderResponse:
        """
        Send a chat completion request.

        Args:
            prompt: Prompt text
            image: Optional page image

        Returns:
            Typed provider outcome
        """
        start = time.perf_counter()

        if not self.config.api_key.get_secret_value():
            response = ProviderResponse.rejected(
                "OpenAI API key is not configured", self.name, self.config.model
            )
        else:
            call = await post_json(
                self._client,
                self._url,
                self._build_payload(prompt, image),
                timeout=self.config.timeout_seconds,
                headers={
                    "Authorization": f"Bearer {self.config.api_key.get_secret_value()}"
                },
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
            "OpenAI %s call finished: outcome=%s in %.2fs",
            self.config.model,
            response.outcome.value,
            elapsed,
        )
        return response.model_copy(update={"duration_seconds": elapsed})
