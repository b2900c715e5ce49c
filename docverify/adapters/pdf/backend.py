"""
PDF Backend - Text extraction and page rasterization via PyMuPDF.

PyMuPDF is synchronous, so every call runs in a worker thread. Any failure
inside the library is fatal for the request and surfaces as
DocumentProcessingError.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol, runtime_checkable

import pymupdf
from pydantic import BaseModel

from docverify.config import DocumentProcessingError

logger = logging.getLogger(__name__)

__all__ = ["PageImage", "PdfBackend", "PyMuPDFBackend"]


class PageImage(BaseModel):
    """One rasterized PDF page (1-based page number)."""

    page_number: int
    data: bytes
    mime_type: str = "image/png"

    model_config = {"frozen": True}


@runtime_checkable
class PdfBackend(Protocol):
    """Contract for PDF text extraction and rasterization."""

    name: str

    async def extract_text(self, pdf_bytes: bytes) -> str:
        """Page texts joined with newlines."""
        ...

    async def render_pages(self, pdf_bytes: bytes) -> list[PageImage]:
        """One PNG per page, in page order."""
        ...


class PyMuPDFBackend:
    """
    PyMuPDF implementation of PdfBackend.

    Example:
        >>> backend = PyMuPDFBackend(dpi=150)
        >>> text = await backend.extract_text(pdf_bytes)
        >>> pages = await backend.render_pages(pdf_bytes)
    """

    name = "pymupdf"

    def __init__(self, dpi: int = 150) -> None:
        self.dpi = dpi

    def _open(self, pdf_bytes: bytes) -> pymupdf.Document:
        try:
            return pymupdf.open(stream=pdf_bytes, filetype="pdf")
        except Exception as e:
            raise DocumentProcessingError(
                "Failed to open PDF document", {"reason": str(e)}
            ) from e

    def _extract_text_sync(self, pdf_bytes: bytes) -> str:
        doc = self._open(pdf_bytes)
        try:
            return "\n".join(page.get_text() for page in doc)
        except Exception as e:
            raise DocumentProcessingError(
                "Failed to extract PDF text", {"reason": str(e)}
            ) from e
        finally:
            doc.close()

    def _render_pages_sync(self, pdf_bytes: bytes) -> list[PageImage]:
        doc = self._open(pdf_bytes)
        try:
            return [
                PageImage(
                    page_number=index + 1,
                    data=page.get_pixmap(dpi=self.dpi).tobytes("png"),
                )
                for index, page in enumerate(doc)
            ]
        except Exception as e:
            raise DocumentProcessingError(
                "Failed to render PDF pages", {"reason": str(e)}
            ) from e
        finally:
            doc.close()

    async def extract_text(self, pdf_bytes: bytes) -> str:
        """
        Extract the native text layer.

        Raises:
            DocumentProcessingError: If the PDF cannot be read
        """
        text = await asyncio.to_thread(self._extract_text_sync, pdf_bytes)
        logger.debug("Extracted %d characters of native PDF text", len(text))
        return text

    async def render_pages(self, pdf_bytes: bytes) -> list[PageImage]:
        """
        Rasterize every page to PNG.

        Raises:
            DocumentProcessingError: If the PDF cannot be rendered
        """
        pages = await asyncio.to_thread(self._render_pages_sync, pdf_bytes)
        logger.info("Rendered %d PDF page(s) at %d dpi", len(pages), self.dpi)
        return pages
