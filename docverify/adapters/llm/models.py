"""
LLM Models - Provider configuration and typed invocation outcomes.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, SecretStr


class ProviderKind(str, Enum):
    """The two phases a provider can serve."""

    VISION = "vision"
    ANALYSIS = "analysis"


class ProviderOutcome(str, Enum):
    """Tag deciding what happens after an invocation."""

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"  # retried, then fallback
    BUSINESS_ERROR = "business_error"  # straight to fallback


class ProviderConfig(BaseModel):
    """Configuration for a single provider handle."""

    provider_name: str
    model: str
    api_key: SecretStr = SecretStr("")
    base_url: str = ""
    max_tokens: int = Field(default=2000, gt=0)
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    timeout_seconds: float = Field(default=120.0, gt=0)
    max_retry_attempts: int = Field(default=2, ge=0)
    retry_delay_seconds: float = Field(default=2.0, ge=0.0)

    model_config = {"frozen": True}


class ImagePayload(BaseModel):
    """Raster image sent alongside a vision prompt."""

    data: bytes
    mime_type: str = "application/octet-stream"

    model_config = {"frozen": True}


class ProviderResponse(BaseModel):
    """Outcome of one provider invocation (possibly after retries)."""

    outcome: ProviderOutcome
    text: str = ""
    error_message: str = ""
    model: str = ""
    provider_name: str = ""
    attempts: int = 1
    duration_seconds: float = 0.0
    attempted_providers: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def success(self) -> bool:
        """Whether the provider produced a usable answer."""
        return self.outcome is ProviderOutcome.SUCCESS

    @property
    def is_transient(self) -> bool:
        """Whether the failure is eligible for retry."""
        return self.outcome is ProviderOutcome.TRANSIENT_ERROR

    @classmethod
    def ok(cls, text: str, provider_name: str, model: str) -> ProviderResponse:
        return cls(
            outcome=ProviderOutcome.SUCCESS,
            text=text,
            provider_name=provider_name,
            model=model,
        )

    @classmethod
    def transient(
        cls, error_message: str, provider_name: str, model: str
    ) -> ProviderResponse:
        return cls(
            outcome=ProviderOutcome.TRANSIENT_ERROR,
            error_message=error_message,
            provider_name=provider_name,
            model=model,
        )

    @classmethod
    def rejected(
        cls, error_message: str, provider_name: str, model: str
    ) -> ProviderResponse:
        return cls(
            outcome=ProviderOutcome.BUSINESS_ERROR,
            error_message=error_message,
            provider_name=provider_name,
            model=model,
        )
