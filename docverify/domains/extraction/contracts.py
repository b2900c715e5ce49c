"""
Extraction Contracts - Interfaces for extraction domain.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .models import DocumentInput, ExtractionResult


@runtime_checkable
class Extractor(Protocol):
    """
    Contract for the vision extraction phase.

    Example:
        >>> class MyExtractor:
        ...     async def extract(self, document, document_type="document", fields_to_extract=None):
        ...         ...
        >>> assert isinstance(MyExtractor(), Extractor)
    """

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
            document_type: Document type label
            fields_to_extract: Priority fields

        Returns:
            Extraction result
        """
        ...
