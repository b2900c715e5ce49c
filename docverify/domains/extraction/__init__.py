"""
Extraction Domain - Document to text extraction.

This domain handles:
- Text-based vs image-based PDF classification
- Native text extraction
- Page-level vision extraction with multi-page aggregation
"""

from .classifier import IMAGE_BASED_WORD_THRESHOLD, DocumentClassifier
from .contracts import Extractor
from .extractor import NATIVE_TEXT_MODEL, ExtractionOrchestrator, image_mime_type
from .models import SUPPORTED_CONTENT_TYPES, DocumentInput, DocumentKind, ExtractionResult
from .prompts import build_extraction_prompt

__all__ = [
    # Contracts
    "Extractor",
    # Models
    "DocumentInput",
    "DocumentKind",
    "ExtractionResult",
    # Implementations
    "DocumentClassifier",
    "ExtractionOrchestrator",
    "build_extraction_prompt",
    "image_mime_type",
    "IMAGE_BASED_WORD_THRESHOLD",
    "NATIVE_TEXT_MODEL",
    "SUPPORTED_CONTENT_TYPES",
]
