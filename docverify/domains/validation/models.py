"""
Validation Models - Data types for the validation domain.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from docverify.config import ErrorCode


class DiscrepancyType(str, Enum):
    """Kind of difference between extracted and reference data."""

    MISMATCH = "mismatch"
    MISSING = "missing"
    FORMAT = "format"
    OTHER = "other"

    @classmethod
    def from_value(cls, value: Any) -> DiscrepancyType:
        """Map a model-supplied string, falling back to OTHER."""
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        return cls.OTHER


class Discrepancy(BaseModel):
    """One field-level difference reported by the analysis model."""

    field: str = ""
    extracted_value: str = ""
    provided_value: str = ""
    discrepancy_type: DiscrepancyType = DiscrepancyType.OTHER
    description: str = ""
    severity: float = Field(default=0.0, ge=0.0, le=1.0)


class ParsedAnalysis(BaseModel):
    """Successfully decoded analysis response."""

    is_valid: bool
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    analysis: str
    discrepancies: list[Discrepancy] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    raw_text: str = ""


class ParsedExtraction(BaseModel):
    """Successfully decoded vision extraction response."""

    document_type: str = ""
    extracted_fields: dict[str, Any] = Field(default_factory=dict)
    tables: list[dict[str, Any]] = Field(default_factory=list)
    confidence: str = ""
    document_quality: str = ""
    extraction_notes: str = ""
    warnings: list[str] = Field(default_factory=list)
    raw_text: str = ""


class ParseError(BaseModel):
    """Why a model response could not be decoded."""

    reason: str
    fields: list[str] = Field(default_factory=list)
    raw_text: str = ""


class ValidationResult(BaseModel):
    """Result of the validation phase."""

    success: bool
    is_valid: bool = False
    analysis_text: str = ""
    discrepancies: list[Discrepancy] = Field(default_factory=list)
    confidence_score: float = Field(default=0.0, ge=0.0, le=1.0)
    error_message: str | None = None
    error_code: ErrorCode | None = None
    model_used: str = ""
    provider_name: str = ""
    processing_time: float = 0.0
    warnings: list[str] = Field(default_factory=list)

    model_config = {"frozen": True}

    @property
    def discrepancy_count(self) -> int:
        return len(self.discrepancies)

    @classmethod
    def failure(
        cls,
        error_message: str,
        error_code: ErrorCode,
        **kwargs: Any,
    ) -> ValidationResult:
        """Build a failed result."""
        return cls(success=False, error_message=error_message, error_code=error_code, **kwargs)
