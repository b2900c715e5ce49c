"""
Extraction Orchestrator - Vision extraction for images and PDFs.

Raster images go straight to the vision providers. PDFs are classified
first: text-based PDFs use their native text layer, image-based PDFs are
rasterized and every page is extracted concurrently, then aggregated in page
order.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import PurePath
from typing import TYPE_CHECKING, Any

from docverify.adapters.llm import (
    ImagePayload,
    ProviderKind,
    failure_code,
    invoke_with_fallback,
)
from docverify.config import ErrorCode, ProviderNotFoundError
from docverify.domains.validation.models import ParsedExtraction
from docverify.domains.validation.parser import ResponseParser

from .classifier import DocumentClassifier
from .models import DocumentInput, DocumentKind, ExtractionResult
from .prompts import build_extraction_prompt

if TYPE_CHECKING:
    from docverify.adapters.llm import ProviderRegistry
    from docverify.adapters.pdf import PageImage, PdfBackend

logger = logging.getLogger(__name__)

__all__ = ["NATIVE_TEXT_MODEL", "ExtractionOrchestrator", "image_mime_type"]

NATIVE_TEXT_MODEL = "native-text-extraction"

_IMAGE_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
}


def image_mime_type(file_name: str) -> str:
    """MIME type from the file extension."""
    return _IMAGE_MIME_TYPES.get(PurePath(file_name).suffix.lower(), "application/octet-stream")


class ExtractionOrchestrator:
    """
    Vision-phase orchestrator.

    Example:
        >>> extractor = ExtractionOrchestrator(registry, "openai", PyMuPDFBackend())
        >>> document = DocumentInput(content=pdf_bytes, filename="invoice.pdf")
        >>> result = await extractor.extract(document, "invoice", ["total"])
        >>> print(result.extracted_data)
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        primary_provider: str,
        pdf_backend: PdfBackend,
        classifier: DocumentClassifier | None = None,
        parser: ResponseParser | None = None,
        max_concurrent_pages: int = 4,
    ) -> None:
        """
        Initialize extractor.

        Args:
            registry: Provider registry holding vision providers
            primary_provider: Name of the configured primary vision provider
            pdf_backend: PDF text extraction and rasterization backend
            classifier: Text/image classifier (default word-count heuristic)
            parser: Parser used to enrich metadata from JSON responses
            max_concurrent_pages: Upper bound on concurrent page extractions
        """
        self._registry = registry
        self._primary = primary_provider
        self._pdf = pdf_backend
        self._classifier = classifier or DocumentClassifier()
        self._parser = parser or ResponseParser()
        self._max_concurrent_pages = max(1, max_concurrent_pages)

    async def extract(
        self,
        document: DocumentInput,
        document_type: str = "document",
        fields_to_extract: list[str] | None = None,
    ) -> ExtractionResult:
        """
        Extract data from a PDF or raster image.

        Args:
            document: Submitted document
            document_type: Document type label used in the prompt
            fields_to_extract: Priority fields for the prompt

        Returns:
            ExtractionResult. Provider failures are reported in the result.

        Raises:
            DocumentProcessingError: If the PDF backend crashes
        """
        if document.is_pdf:
            return await self.extract_from_pdf(
                document.content, document.filename, document_type, fields_to_extract
            )
        return await self.extract_from_image(
            document.content, document.filename, document_type, fields_to_extract
        )

    async def extract_from_image(
        self,
        image_data: bytes,
        file_name: str,
        document_type: str = "document",
        fields_to_extract: list[str] | None = None,
    ) -> ExtractionResult:
        """Single-image extraction through the vision providers."""
        start = time.perf_counter()
        prompt = build_extraction_prompt(document_type, fields_to_extract)
        try:
            result = await self._extract_image(image_data, file_name, prompt)
        except ProviderNotFoundError as e:
            return self._configuration_failure(e, start)
        return result.model_copy(update={"processing_time": time.perf_counter() - start})

    async def extract_from_pdf(
        self,
        pdf_data: bytes,
        file_name: str,
        document_type: str = "document",
        fields_to_extract: list[str] | None = None,
    ) -> ExtractionResult:
        """
        Classify a PDF, then use native text or per-page vision extraction.

        Raises:
            DocumentProcessingError: If the PDF backend crashes
        """
        start = time.perf_counter()
        logger.info("Starting PDF extraction: %s (%d bytes)", file_name, len(pdf_data))

        raw_text = await self._pdf.extract_text(pdf_data)
        word_count = self._classifier.word_count(raw_text)
        kind = self._classifier.classify(raw_text)
        logger.info("Classified %s as %s-based (%d words)", file_name, kind.value, word_count)

        if kind is DocumentKind.TEXT:
            return ExtractionResult(
                success=bool(raw_text.strip()),
                extracted_data=raw_text,
                error_message=None if raw_text.strip() else "PDF contains no text",
                error_code=None if raw_text.strip() else ErrorCode.INPUT_INVALID,
                model_used=NATIVE_TEXT_MODEL,
                provider_name=self._pdf.name,
                processing_time=time.perf_counter() - start,
                metadata={"document_kind": kind.value, "word_count": word_count},
            )

        try:
            self._registry.resolve(ProviderKind.VISION, self._primary)
        except ProviderNotFoundError as e:
            return self._configuration_failure(e, start)

        pages = await self._pdf.render_pages(pdf_data)
        if not pages:
            return ExtractionResult.failure(
                "PDF has no pages",
                ErrorCode.INPUT_INVALID,
                processing_time=time.perf_counter() - start,
            )

        prompt = build_extraction_prompt(document_type, fields_to_extract)
        page_results = await self._extract_pages(pages, file_name, prompt)
        result = self._aggregate(page_results, word_count)

        logger.info(
            "PDF extraction complete: %s - %d/%d page(s) in %.1fs",
            file_name,
            result.metadata["successful_pages"],
            len(pages),
            time.perf_counter() - start,
        )
        return result.model_copy(update={"processing_time": time.perf_counter() - start})

    async def _extract_pages(
        self,
        pages: list[PageImage],
        file_name: str,
        prompt: str,
    ) -> list[tuple[int, ExtractionResult]]:
        """Bounded fan-out over pages; results sorted by page number."""
        semaphore = asyncio.Semaphore(self._max_concurrent_pages)
        stem = PurePath(file_name).stem or "document"

        async def extract_with_limit(page: PageImage) -> tuple[int, ExtractionResult]:
            async with semaphore:
                logger.debug("Extracting page %d of %s", page.page_number, file_name)
                result = await self._extract_image(
                    page.data, f"{stem}_page_{page.page_number}.png", prompt
                )
                return page.page_number, result

        tasks = [asyncio.create_task(extract_with_limit(page)) for page in pages]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            # One page failed hard; stop the rest from calling providers
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return sorted(results, key=lambda item: item[0])

    def _aggregate(
        self,
        page_results: list[tuple[int, ExtractionResult]],
        word_count: int,
    ) -> ExtractionResult:
        succeeded = [(n, r) for n, r in page_results if r.success]
        failed = [
            {"page": n, "error": r.error_message or "unknown error"}
            for n, r in page_results
            if not r.success
        ]
        for page in failed:
            logger.warning("Page %d failed: %s", page["page"], page["error"])

        # model/provider of the last successful page, else the last page processed
        source = succeeded[-1][1] if succeeded else page_results[-1][1]
        metadata: dict[str, Any] = {
            "document_kind": DocumentKind.IMAGE.value,
            "word_count": word_count,
            "total_pages": len(page_results),
            "successful_pages": len(succeeded),
            "failed_pages": failed,
        }

        if not succeeded:
            summary = "; ".join(f"page {p['page']}: {p['error']}" for p in failed)
            return ExtractionResult.failure(
                f"All {len(page_results)} page(s) failed: {summary}",
                source.error_code or ErrorCode.PROVIDERS_EXHAUSTED,
                model_used=source.model_used,
                provider_name=source.provider_name,
                metadata=metadata,
            )

        fields_extracted = sum(r.metadata.get("fields_extracted", 0) for _, r in succeeded)
        if fields_extracted:
            metadata["fields_extracted"] = fields_extracted

        return ExtractionResult(
            success=True,
            extracted_data="\n\n".join(f"// Page {n}\n{r.extracted_data}" for n, r in succeeded),
            model_used=source.model_used,
            provider_name=source.provider_name,
            metadata=metadata,
        )

    async def _extract_image(
        self,
        image_data: bytes,
        file_name: str,
        prompt: str,
    ) -> ExtractionResult:
        image = ImagePayload(data=image_data, mime_type=image_mime_type(file_name))
        response = await invoke_with_fallback(
            self._registry,
            ProviderKind.VISION,
            self._primary,
            prompt,
            image,
        )

        if not response.success:
            return ExtractionResult.failure(
                response.error_message,
                failure_code(response),
                model_used=response.model,
                provider_name=response.provider_name,
                processing_time=response.duration_seconds,
            )

        return ExtractionResult(
            success=True,
            extracted_data=response.text,
            model_used=response.model,
            provider_name=response.provider_name,
            processing_time=response.duration_seconds,
            metadata=self._describe(response.text, response.attempted_providers),
        )

    def _describe(self, text: str, attempted: list[str]) -> dict[str, Any]:
        """Metadata from the structured response, when the model followed the contract."""
        metadata: dict[str, Any] = {"attempted_providers": attempted}
        parsed = self._parser.parse_extraction(text)
        if isinstance(parsed, ParsedExtraction):
            metadata.update(
                structured=True,
                fields_extracted=len(parsed.extracted_fields),
                document_quality=parsed.document_quality,
                confidence=parsed.confidence,
            )
        else:
            metadata["structured"] = False
        return metadata

    def _configuration_failure(self, error: ProviderNotFoundError, start: float) -> ExtractionResult:
        logger.error("Extraction aborted: %s", error.message)
        return ExtractionResult.failure(
            error.message,
            ErrorCode.CONFIGURATION_ERROR,
            processing_time=time.perf_counter() - start,
        )
