"""
Orchestration Models - Data types for the two-phase pipeline.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from docverify.config import ErrorCode
from docverify.domains.extraction.models import ExtractionResult
from docverify.domains.validation.models import Discrepancy, ValidationResult


class PipelinePhase(str, Enum):
    """Pipeline phases, in execution order."""

    EXTRACTION = "extraction"
    VALIDATION = "validation"


class PipelineStep(BaseModel):
    """Single step in pipeline execution."""

    name: PipelinePhase
    status: str  # "completed", "failed", "skipped"
    duration_ms: float = 0.0
    error: str | None = None


def _discrepancy_to_wire(discrepancy: Discrepancy) -> dict[str, Any]:
    return {
        "field": discrepancy.field,
        "extractedValue": discrepancy.extracted_value,
        "providedValue": discrepancy.provided_value,
        "discrepancyType": discrepancy.discrepancy_type.value,
        "description": discrepancy.description,
        "severity": discrepancy.severity,
    }


class PipelineResult(BaseModel):
    """Result of extraction followed by validation."""

    request_id: str
    success: bool
    failed_phase: PipelinePhase | None = None
    error: str | None = None
    error_code: ErrorCode | None = None
    extraction: ExtractionResult | None = None
    validation: ValidationResult | None = None
    steps: list[PipelineStep] = Field(default_factory=list)
    total_duration_ms: float = 0.0

    def to_response(self) -> dict[str, Any]:
        """
        Wire shape for HTTP and CLI JSON output.

        Returns:
            Dict with ``success``, ``extractionPhase``, ``validationPhase`` and,
            on failure, ``failedPhase``, ``error`` and ``errorCode``
        """
        body: dict[str, Any] = {"success": self.success, "requestId": self.request_id}

        if self.extraction is not None:
            body["extractionPhase"] = {
                "success": self.extraction.success,
                "modelUsed": self.extraction.model_used,
                "providerName": self.extraction.provider_name,
                "extractedData": self.extraction.extracted_data,
                "metadata": self.extraction.metadata,
                "processingTime": self.extraction.processing_time,
            }

        if self.validation is not None:
            body["validationPhase"] = {
                "success": self.validation.success,
                "modelUsed": self.validation.model_used,
                "providerName": self.validation.provider_name,
                "isValid": self.validation.is_valid,
                "analysis": self.validation.analysis_text,
                "discrepancies": [_discrepancy_to_wire(d) for d in self.validation.discrepancies],
                "confidence": self.validation.confidence_score,
                "warnings": self.validation.warnings,
                "processingTime": self.validation.processing_time,
            }

        if not self.success:
            body["failedPhase"] = self.failed_phase.value if self.failed_phase else None
            body["error"] = self.error
            body["errorCode"] = self.error_code.value if self.error_code else None

        return body
