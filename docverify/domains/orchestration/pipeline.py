"""
Validation Pipeline - Extraction then cross-validation.

The facade owns no business rules: it sequences the two orchestrators,
stops after a failed extraction, and records per-phase timing.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import TYPE_CHECKING

from docverify.adapters.pdf import PyMuPDFBackend
from docverify.domains.extraction import ExtractionOrchestrator
from docverify.domains.validation import ValidationOrchestrator

from .models import PipelinePhase, PipelineResult, PipelineStep

if TYPE_CHECKING:
    from docverify.adapters.llm import ProviderRegistry
    from docverify.config import Settings
    from docverify.domains.extraction import DocumentInput, Extractor
    from docverify.domains.validation import Validator

logger = logging.getLogger(__name__)

__all__ = ["PipelineFacade", "build_pipeline"]


class PipelineFacade:
    """
    Two-phase document validation pipeline.

    Example:
        >>> pipeline = PipelineFacade(extractor, validator)
        >>> result = await pipeline.run(document, reference_json, "invoice", ["total"])
        >>> result.to_response()["success"]
    """

    def __init__(self, extractor: Extractor, validator: Validator) -> None:
        """
        Initialize pipeline.

        Args:
            extractor: Vision-phase orchestrator
            validator: Analysis-phase orchestrator
        """
        self.extractor = extractor
        self.validator = validator

    async def run(
        self,
        document: DocumentInput,
        reference_json: str,
        document_type: str = "document",
        fields_to_validate: list[str] | None = None,
    ) -> PipelineResult:
        """
        Extract the document, then validate it against the reference data.

        Args:
            document: Submitted PDF or image
            reference_json: Caller-supplied reference data
            document_type: Document type label for both prompts
            fields_to_validate: Priority fields for both phases

        Returns:
            PipelineResult naming the failed phase, if any

        Raises:
            DocumentProcessingError: If the PDF backend crashes
        """
        request_id = str(uuid.uuid4())
        start = time.perf_counter()
        steps: list[PipelineStep] = []
        logger.info(
            "[%s] Pipeline start: %s (%s, %d bytes)",
            request_id[:8],
            document.filename,
            document_type,
            document.size_bytes,
        )

        step_start = time.perf_counter()
        extraction = await self.extractor.extract(document, document_type, fields_to_validate)
        steps.append(
            PipelineStep(
                name=PipelinePhase.EXTRACTION,
                status="completed" if extraction.success else "failed",
                duration_ms=(time.perf_counter() - step_start) * 1000,
                error=extraction.error_message,
            )
        )

        if not extraction.success:
            logger.error("[%s] Extraction failed: %s", request_id[:8], extraction.error_message)
            steps.append(PipelineStep(name=PipelinePhase.VALIDATION, status="skipped"))
            return PipelineResult(
                request_id=request_id,
                success=False,
                failed_phase=PipelinePhase.EXTRACTION,
                error=extraction.error_message,
                error_code=extraction.error_code,
                extraction=extraction,
                steps=steps,
                total_duration_ms=(time.perf_counter() - start) * 1000,
            )

        step_start = time.perf_counter()
        validation = await self.validator.validate(
            extraction.extracted_data,
            document_type,
            fields_to_validate,
            reference_json,
        )
        steps.append(
            PipelineStep(
                name=PipelinePhase.VALIDATION,
                status="completed" if validation.success else "failed",
                duration_ms=(time.perf_counter() - step_start) * 1000,
                error=validation.error_message,
            )
        )
        total_ms = (time.perf_counter() - start) * 1000

        if not validation.success:
            logger.error("[%s] Validation failed: %s", request_id[:8], validation.error_message)
            return PipelineResult(
                request_id=request_id,
                success=False,
                failed_phase=PipelinePhase.VALIDATION,
                error=validation.error_message,
                error_code=validation.error_code,
                extraction=extraction,
                validation=validation,
                steps=steps,
                total_duration_ms=total_ms,
            )

        logger.info(
            "[%s] Pipeline complete: valid=%s discrepancies=%d in %.0fms",
            request_id[:8],
            validation.is_valid,
            len(validation.discrepancies),
            total_ms,
        )
        return PipelineResult(
            request_id=request_id,
            success=True,
            extraction=extraction,
            validation=validation,
            steps=steps,
            total_duration_ms=total_ms,
        )


def build_pipeline(settings: Settings, registry: ProviderRegistry) -> PipelineFacade:
    """Wire the default orchestrators from settings and a populated registry."""
    extractor = ExtractionOrchestrator(
        registry,
        settings.vision_provider,
        PyMuPDFBackend(dpi=settings.pdf_render_dpi),
        max_concurrent_pages=settings.max_concurrent_pages,
    )
    validator = ValidationOrchestrator(registry, settings.analysis_provider)
    return PipelineFacade(extractor, validator)
