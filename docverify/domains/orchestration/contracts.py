"""
Orchestration Contracts - Interfaces for orchestration domain.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .models import PipelineResult

if TYPE_CHECKING:
    from docverify.domains.extraction import DocumentInput


@runtime_checkable
class PipelineOrchestrator(Protocol):
    """Contract for the end-to-end validation pipeline."""

    async def run(
        self,
        document: DocumentInput,
        reference_json: str,
        document_type: str = "document",
        fields_to_validate: list[str] | None = None,
    ) -> PipelineResult:
        """
        Run extraction then validation.

        Args:
            document: Submitted document
            reference_json: Reference data to validate against
            document_type: Document type label
            fields_to_validate: Priority fields

        Returns:
            Pipeline result
        """
        ...
