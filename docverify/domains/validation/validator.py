"""
Validation Orchestrator - Cross-check extracted data against reference JSON.

Flow:
    preconditions -> comparison prompt -> analysis fallback-invoke -> parse
"""

from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING

from docverify.adapters.llm import ProviderKind, failure_code, invoke_with_fallback
from docverify.config import ErrorCode, ProviderNotFoundError

from .models import ParseError, ValidationResult
from .parser import ResponseParser
from .prompts import build_comparison_prompt, build_validation_prompt

if TYPE_CHECKING:
    from docverify.adapters.llm import ProviderRegistry

logger = logging.getLogger(__name__)

__all__ = ["ValidationOrchestrator"]


class ValidationOrchestrator:
    """
    Analysis-phase orchestrator.

    Example:
        >>> validator = ValidationOrchestrator(registry, primary_provider="openai")
        >>> result = await validator.validate(extracted, "invoice", ["total"], reference)
        >>> result.is_valid, len(result.discrepancies)
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        primary_provider: str,
        parser: ResponseParser | None = None,
    ) -> None:
        """
        Initialize validator.

        Args:
            registry: Provider registry holding analysis providers
            primary_provider: Name of the configured primary analysis provider
            parser: Response parser (default: ResponseParser())
        """
        self._registry = registry
        self._primary = primary_provider
        self._parser = parser or ResponseParser()

    async def validate(
        self,
        extracted_data: str,
        document_type: str,
        fields_to_validate: list[str] | None,
        reference_json: str,
    ) -> ValidationResult:
        """
        Compare extracted data with reference data.

        Args:
            extracted_data: Text produced by the extraction phase
            document_type: Document type label (e.g. "invoice")
            fields_to_validate: Fields to focus on; empty means all
            reference_json: Caller-supplied reference data

        Returns:
            ValidationResult. Never raises for provider or parse failures.
        """
        start = time.perf_counter()

        if not extracted_data or not extracted_data.strip():
            return ValidationResult.failure(
                "Extracted data is required for validation",
                ErrorCode.INPUT_INVALID,
            )
        if not document_type or not document_type.strip():
            return ValidationResult.failure(
                "Document type is required for validation",
                ErrorCode.INPUT_INVALID,
            )

        prompt = build_comparison_prompt(
            extracted_data,
            build_validation_prompt(document_type, fields_to_validate, reference_json),
        )

        try:
            response = await invoke_with_fallback(
                self._registry,
                ProviderKind.ANALYSIS,
                self._primary,
                prompt,
            )
        except ProviderNotFoundError as e:
            logger.error("Validation aborted: %s", e.message)
            return ValidationResult.failure(
                e.message,
                ErrorCode.CONFIGURATION_ERROR,
                processing_time=time.perf_counter() - start,
            )

        if not response.success:
            logger.error("Validation failed: %s", response.error_message)
            return ValidationResult.failure(
                response.error_message,
                failure_code(response),
                model_used=response.model,
                provider_name=response.provider_name,
                processing_time=time.perf_counter() - start,
            )

        parsed = self._parser.parse(response.text)
        elapsed = time.perf_counter() - start

        if isinstance(parsed, ParseError):
            logger.warning(
                "Unparseable analysis from %s: %s", response.provider_name, parsed.reason
            )
            return ValidationResult.failure(
                f"Failed to parse analysis response: {parsed.reason}",
                ErrorCode.PARSE_ERROR,
                analysis_text=response.text,
                model_used=response.model,
                provider_name=response.provider_name,
                processing_time=elapsed,
            )

        logger.info(
            "Validation complete via %s: valid=%s confidence=%.2f discrepancies=%d in %.1fs",
            response.provider_name,
            parsed.is_valid,
            parsed.confidence_score,
            len(parsed.discrepancies),
            elapsed,
        )
        return ValidationResult(
            success=True,
            is_valid=parsed.is_valid,
            analysis_text=parsed.analysis,
            discrepancies=parsed.discrepancies,
            confidence_score=parsed.confidence_score,
            model_used=response.model,
            provider_name=response.provider_name,
            processing_time=elapsed,
            warnings=parsed.warnings,
        )
