"""
Extraction Models - Data types for extraction domain.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath
from typing import Any

from pydantic import BaseModel, Field, model_validator

from docverify.config import ErrorCode

PDF_CONTENT_TYPE = "application/pdf"

SUPPORTED_CONTENT_TYPES = frozenset(
    {
        PDF_CONTENT_TYPE,
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "image/bmp",
        "image/webp",
    }
)


class DocumentKind(str, Enum):
    """How a PDF carries its content."""

    TEXT = "text"  # native text layer, no vision call needed
    IMAGE = "image"  # scanned, rasterize and send to a vision provider


class DocumentInput(BaseModel):
    """Submitted document bytes plus what the caller told us about them."""

    content: bytes
    filename: str = "document"
    content_type: str | None = None

    model_config = {"frozen": True}

    @model_validator(mode="before")
    @classmethod
    def normalize_content_type(cls, data: Any) -> Any:
        """Lower-case the content type and drop MIME parameters."""
        if isinstance(data, dict) and isinstance(data.get("content_type"), str):
            data = {**data, "content_type": data["content_type"].split(";")[0].strip().lower()}
        return data

    @property
    def extension(self) -> str:
        return PurePath(self.filename).suffix.lower()

    @property
    def is_pdf(self) -> bool:
        """PDF by content type, file extension or magic bytes."""
        return (
            self.content_type == PDF_CONTENT_TYPE
            or self.extension == ".pdf"
            or self.content.startswith(b"%PDF")
        )

    @property
    def size_bytes(self) -> int:
        return len(self.content)


class ExtractionResult(BaseModel):
    """Result of the extraction phase (one image or an aggregated PDF)."""

    success: bool
    extracted_data: str = ""
    error_message: str | None = None
    error_code: ErrorCode | None = None
    model_used: str = ""
    provider_name: str = ""
    processing_time: float = 0.0
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @classmethod
    def failure(
        cls,
        error_message: str,
        error_code: ErrorCode,
        **kwargs: Any,
    ) -> ExtractionResult:
        """Build a failed result."""
        return cls(success=False, error_message=error_message, error_code=error_code, **kwargs)
