"""
Tests for the validation pipeline facade.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from docverify.adapters.llm import (
    ProviderConfig,
    ProviderKind,
    ProviderRegistry,
    ProviderResponse,
)
from docverify.config import ErrorCode, Settings
from docverify.domains.extraction import DocumentInput, ExtractionOrchestrator, ExtractionResult
from docverify.domains.validation import (
    Discrepancy,
    DiscrepancyType,
    ValidationOrchestrator,
    ValidationResult,
)

from .models import PipelinePhase
from .pipeline import PipelineFacade, build_pipeline


@pytest.fixture
def document() -> DocumentInput:
    return DocumentInput(content=b"\x89PNG", filename="invoice.png", content_type="image/png")


@pytest.fixture
def extraction_ok() -> ExtractionResult:
    return ExtractionResult(
        success=True,
        extracted_data='{"total": "100.00"}',
        model_used="gpt-4o",
        provider_name="openai",
        processing_time=1.5,
        metadata={"structured": True},
    )


@pytest.fixture
def validation_ok() -> ValidationResult:
    return ValidationResult(
        success=True,
        is_valid=False,
        analysis_text="Total differs",
        discrepancies=[
            Discrepancy(
                field="total",
                extracted_value="100.00",
                provided_value="110.00",
                discrepancy_type=DiscrepancyType.MISMATCH,
                description="Amounts differ",
                severity=0.8,
            )
        ],
        confidence_score=0.9,
        model_used="gpt-4o-mini",
        provider_name="openai",
        processing_time=0.7,
    )


def _pipeline(extraction: ExtractionResult, validation: ValidationResult | None = None) -> PipelineFacade:
    extractor = AsyncMock()
    extractor.extract.return_value = extraction
    validator = AsyncMock()
    validator.validate.return_value = validation
    return PipelineFacade(extractor, validator)


# --- Run Tests ---


async def test_run_success(
    document: DocumentInput,
    extraction_ok: ExtractionResult,
    validation_ok: ValidationResult,
) -> None:
    pipeline = _pipeline(extraction_ok, validation_ok)

    result = await pipeline.run(document, '{"total": "110.00"}', "invoice", ["total"])

    assert result.success
    assert result.failed_phase is None
    assert [s.status for s in result.steps] == ["completed", "completed"]
    pipeline.extractor.extract.assert_awaited_once_with(document, "invoice", ["total"])
    pipeline.validator.validate.assert_awaited_once_with(
        '{"total": "100.00"}', "invoice", ["total"], '{"total": "110.00"}'
    )


async def test_extraction_failure_skips_validation(document: DocumentInput) -> None:
    """Test validation never runs after a failed extraction."""
    failed = ExtractionResult.failure("All providers down", ErrorCode.PROVIDERS_EXHAUSTED)
    pipeline = _pipeline(failed)

    result = await pipeline.run(document, "{}")

    assert not result.success
    assert result.failed_phase is PipelinePhase.EXTRACTION
    assert result.error == "All providers down"
    assert result.error_code is ErrorCode.PROVIDERS_EXHAUSTED
    assert result.validation is None
    assert result.steps[-1].status == "skipped"
    pipeline.validator.validate.assert_not_awaited()


async def test_validation_failure_reported(
    document: DocumentInput,
    extraction_ok: ExtractionResult,
) -> None:
    failed = ValidationResult.failure(
        "Failed to parse analysis response: Response contains no JSON object",
        ErrorCode.PARSE_ERROR,
        analysis_text="free text verdict",
    )
    pipeline = _pipeline(extraction_ok, failed)

    result = await pipeline.run(document, "{}")

    assert not result.success
    assert result.failed_phase is PipelinePhase.VALIDATION
    assert result.error_code is ErrorCode.PARSE_ERROR
    assert result.validation is not None
    assert result.validation.analysis_text == "free text verdict"


# --- Wire Shape Tests ---


async def test_to_response_success_shape(
    document: DocumentInput,
    extraction_ok: ExtractionResult,
    validation_ok: ValidationResult,
) -> None:
    result = await _pipeline(extraction_ok, validation_ok).run(document, "{}")

    body = result.to_response()

    assert body["success"] is True
    assert "error" not in body
    assert body["extractionPhase"] == {
        "success": True,
        "modelUsed": "gpt-4o",
        "providerName": "openai",
        "extractedData": '{"total": "100.00"}',
        "metadata": {"structured": True},
        "processingTime": 1.5,
    }
    validation = body["validationPhase"]
    assert validation["isValid"] is False
    assert validation["analysis"] == "Total differs"
    assert validation["confidence"] == 0.9
    assert validation["discrepancies"] == [
        {
            "field": "total",
            "extractedValue": "100.00",
            "providedValue": "110.00",
            "discrepancyType": "mismatch",
            "description": "Amounts differ",
            "severity": 0.8,
        }
    ]


async def test_to_response_failure_shape(document: DocumentInput) -> None:
    failed = ExtractionResult.failure("bad image", ErrorCode.PROVIDER_REJECTED)

    body = (await _pipeline(failed).run(document, "{}")).to_response()

    assert body["success"] is False
    assert body["failedPhase"] == "extraction"
    assert body["error"] == "bad image"
    assert body["errorCode"] == "PROVIDER_REJECTED"
    assert "validationPhase" not in body


# --- Wiring Tests ---


def test_build_pipeline_uses_settings() -> None:
    settings = Settings(
        _env_file=None, vision_provider="gemini", analysis_provider="ollama", max_concurrent_pages=2
    )

    pipeline = build_pipeline(settings, ProviderRegistry())

    assert isinstance(pipeline.extractor, ExtractionOrchestrator)
    assert isinstance(pipeline.validator, ValidationOrchestrator)


async def test_end_to_end_with_stub_providers(document: DocumentInput) -> None:
    """Test both phases through real orchestrators and fallback."""
    vision = AsyncMock()
    vision.name = "openai"
    vision.config = ProviderConfig(provider_name="openai", model="gpt-4o", max_retry_attempts=0)
    vision.invoke.return_value = ProviderResponse.ok('{"total": "100.00"}', "openai", "gpt-4o")

    analysis = AsyncMock()
    analysis.name = "openai"
    analysis.config = ProviderConfig(provider_name="openai", model="gpt-4o-mini", max_retry_attempts=0)
    analysis.invoke.return_value = ProviderResponse.ok(
        '```json\n{"isValid": true, "confidenceScore": 0.95, "analysis": "Match"}\n```',
        "openai",
        "gpt-4o-mini",
    )

    registry = ProviderRegistry()
    registry.register(ProviderKind.VISION, vision)
    registry.register(ProviderKind.ANALYSIS, analysis)
    pipeline = build_pipeline(Settings(_env_file=None), registry)

    result = await pipeline.run(document, '{"total": "100.00"}', "invoice")

    assert result.success
    body = result.to_response()
    assert body["extractionPhase"]["modelUsed"] == "gpt-4o"
    assert body["validationPhase"]["isValid"] is True
    assert body["validationPhase"]["confidence"] == 0.95
    assert body["validationPhase"]["discrepancies"] == []
