"""
Document Classifier - Decide whether a PDF needs vision extraction.

A PDF whose native text layer holds fewer than IMAGE_BASED_WORD_THRESHOLD
whitespace-separated tokens is treated as scanned.
"""

from __future__ import annotations

from .models import DocumentKind

__all__ = ["IMAGE_BASED_WORD_THRESHOLD", "DocumentClassifier"]

IMAGE_BASED_WORD_THRESHOLD = 50


class DocumentClassifier:
    """
    Word-count heuristic for text-based vs image-based PDFs.

    Example:
        >>> classifier = DocumentClassifier()
        >>> classifier.is_image_based("Scanned page 1")
        True
    """

    def __init__(self, threshold: int = IMAGE_BASED_WORD_THRESHOLD) -> None:
        self.threshold = threshold

    @staticmethod
    def word_count(raw_text: str | None) -> int:
        if not raw_text:
            return 0
        return len(raw_text.split())

    def is_image_based(self, raw_text: str | None) -> bool:
        """True when the text layer is too thin to trust."""
        return self.word_count(raw_text) < self.threshold

    def classify(self, raw_text: str | None) -> DocumentKind:
        return DocumentKind.IMAGE if self.is_image_based(raw_text) else DocumentKind.TEXT
