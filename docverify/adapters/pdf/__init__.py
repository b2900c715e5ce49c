"""
PDF Adapter - Native text extraction and page rasterization.
"""

from .backend import PageImage, PdfBackend, PyMuPDFBackend

__all__ = ["PageImage", "PdfBackend", "PyMuPDFBackend"]
