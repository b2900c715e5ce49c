"""
Tests for the PyMuPDF backend.
"""

from __future__ import annotations

import pymupdf
import pytest

from docverify.config import DocumentProcessingError

from .backend import PdfBackend, PyMuPDFBackend


def _make_pdf(*page_texts: str) -> bytes:
    doc = pymupdf.open()
    for text in page_texts:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def backend() -> PyMuPDFBackend:
    return PyMuPDFBackend(dpi=72)


def test_backend_satisfies_protocol(backend: PyMuPDFBackend) -> None:
    assert isinstance(backend, PdfBackend)
    assert backend.name == "pymupdf"


async def test_extract_text_joins_pages(backend: PyMuPDFBackend) -> None:
    """Test page texts come back in order."""
    text = await backend.extract_text(_make_pdf("First page", "Second page"))

    assert text.index("First page") < text.index("Second page")


async def test_extract_text_blank_pdf(backend: PyMuPDFBackend) -> None:
    text = await backend.extract_text(_make_pdf(""))

    assert text.strip() == ""


async def test_render_pages_numbered_pngs(backend: PyMuPDFBackend) -> None:
    """Test one PNG per page with 1-based numbering."""
    pages = await backend.render_pages(_make_pdf("a", "b", "c"))

    assert [p.page_number for p in pages] == [1, 2, 3]
    assert all(p.mime_type == "image/png" for p in pages)
    assert all(p.data.startswith(b"\x89PNG") for p in pages)


async def test_corrupt_pdf_raises_processing_error(backend: PyMuPDFBackend) -> None:
    """Test library failures surface as the fatal error type."""
    with pytest.raises(DocumentProcessingError):
        await backend.render_pages(b"not a pdf at all")

    with pytest.raises(DocumentProcessingError):
        await backend.extract_text(b"not a pdf at all")
