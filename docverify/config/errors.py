"""
Error Taxonomy - Consistent error codes across the application.

Usage:
    from docverify.config.errors import ErrorCode, DocVerifyError

    raise DocVerifyError(ErrorCode.INPUT_INVALID, "File is empty")

Only input, configuration and fatal document-processing errors are raised as
exceptions. Provider and parse failures travel as typed results.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standardized error codes for machine-readable error responses."""

    # Input errors (never retried)
    INPUT_INVALID = "INPUT_INVALID"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"

    # Configuration errors
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Provider errors
    PROVIDER_TRANSIENT = "PROVIDER_TRANSIENT"
    PROVIDER_REJECTED = "PROVIDER_REJECTED"
    PROVIDERS_EXHAUSTED = "PROVIDERS_EXHAUSTED"

    # Response parsing
    PARSE_ERROR = "PARSE_ERROR"

    # Document backend
    DOCUMENT_PROCESSING_FAILED = "DOCUMENT_PROCESSING_FAILED"

    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    NOT_FOUND = "NOT_FOUND"


class DocVerifyError(Exception):
    """Base exception with error code support."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code.value}] {message}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to API-friendly dictionary."""
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class InputError(DocVerifyError):
    """Missing or invalid caller input."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.INPUT_INVALID, message, details)


class UnsupportedMediaTypeError(DocVerifyError):
    """Uploaded file type is not a PDF or supported raster image."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.UNSUPPORTED_MEDIA_TYPE, message, details)


class ConfigurationError(DocVerifyError):
    """Configuration is inconsistent with the registered providers."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.CONFIGURATION_ERROR, message, details)


class ProviderNotFoundError(ConfigurationError):
    """A configured provider name matches no registered provider."""

    def __init__(self, provider_name: str, kind: str, available: list[str]) -> None:
        super().__init__(
            f"Primary {kind} provider '{provider_name}' not found.",
            {"provider": provider_name, "kind": kind, "available": available},
        )
        self.provider_name = provider_name
        self.kind = kind


class DocumentProcessingError(DocVerifyError):
    """The PDF backend crashed. Fatal, never converted into a result."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(ErrorCode.DOCUMENT_PROCESSING_FAILED, message, details)
