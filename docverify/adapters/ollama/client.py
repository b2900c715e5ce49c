"""
Ollama Provider - Local models through /api/generate.

Features:
- Non-streaming generate calls on the shared HTTP client
- Vision models receive page images in the ``images`` list
- JSON output mode for analysis handles
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

__all__ = ["OllamaProvider"]


class OllamaProvider:
    """
    Ollama local LLM provider.

    Example:
        >>> config = ProviderConfig(provider_name="ollama", model="llama3.2-vision")
        >>> provider = OllamaProvider(config, http_client)
        >>> response = await provider.invoke("Read this invoice", image)
    """

    def __init__(
        self,
        config: ProviderConfig,
        client: httpx.AsyncClient,
        metrics: MetricsCollector | None = None,
        json_mode: bool = False,
    ) -> None:
        """
        Initialize Ollama provider.

        Args:
            config: Provider configuration; base_url is the Ollama server
            client: Shared pooled HTTP client
            metrics: Metrics sink for per-call outcomes
            json_mode: Constrain output to JSON
        """
        self.config = config
        self.name = config.provider_name
        self.json_mode = json_mode
        self._client = client
        self._metrics = metrics or NullMetrics()
        self._url = f"{(config.base_url or 'http://localhost:11434').rstrip('/')}/api/generate"

    def _build_payload(self, prompt: str, image: ImagePayload | None) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.config.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": self.config.temperature,
                "num_predict": self.config.max_tokens,
            },
        }
        if image is not None:
            payload["images"] = [base64.b64encode(image.data).decode("ascii")]
        if self.json_mode:
            payload["format"] = "json"
        return payload

    async def invoke(
        self,
        prompt: str,
        image: ImagePayload | None = None,
    ) -> ProviderResponse:
        """
        Generate a non-streaming response.

        Args:
            prompt: Prompt text
            image: Optional page image

        Returns:
            Typed provider outcome
        """
        start = time.perf_counter()

        call = await post_json(
            self._client,
            self._url,
            self._build_payload(prompt, image),
            timeout=self.config.timeout_seconds,
        )
        if not call.ok:
            response = ProviderResponse(
                outcome=call.outcome,
                error_message=call.error,
                provider_name=self.name,
                model=self.config.model,
            )
        else:
            text = call.data.get("response", "")
            model = call.data.get("model") or self.config.model
            if not isinstance(text, str) or not text.strip():
                response = ProviderResponse.rejected(
                    "Empty response from model", self.name, model
                )
            else:
                response = ProviderResponse.ok(text, self.name, model)

        elapsed = time.perf_counter() - start
        self._metrics.record(self.name, response.outcome, elapsed)
        logger.debug(
            "Ollama %s call finished: outcome=%s in %.2fs",
            self.config.model,
            response.outcome.value,
            elapsed,
        )
        return response.model_copy(update={"duration_seconds": elapsed})
