"""
Validation Routes - Document cross-validation endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse

from docverify.config import InputError, UnsupportedMediaTypeError
from docverify.domains.extraction import SUPPORTED_CONTENT_TYPES, DocumentInput
from docverify.domains.orchestration import PipelineFacade

from ..deps import get_pipeline
from ..middleware import request_id_of

logger = logging.getLogger(__name__)

router = APIRouter()


def split_fields(values: list[str] | None) -> list[str] | None:
    """Flatten repeated and comma-separated field names."""
    if not values:
        return None
    fields = [part.strip() for value in values for part in value.split(",")]
    return [f for f in fields if f] or None


@router.post("/cross-validate")
async def cross_validate(
    request: Request,
    file: UploadFile | None = File(None),
    json_data: str | None = Form(None),
    document_type: str = Form("document"),
    fields_to_validate: list[str] | None = Form(None),
    pipeline: PipelineFacade = Depends(get_pipeline),
) -> JSONResponse:
    """
    Extract a document and validate it against caller-supplied reference data.

    Accepts a PDF or image upload plus the reference JSON as a form field.
    Returns 200 with both phases on success, or 500 naming the failed phase.
    """
    if file is None:
        raise InputError("No file provided")
    if not json_data or not json_data.strip():
        raise InputError("No JSON data provided for validation")

    content_type = (file.content_type or "").split(";")[0].strip().lower()
    if content_type not in SUPPORTED_CONTENT_TYPES:
        raise UnsupportedMediaTypeError(
            f"Unsupported file type: {file.content_type}",
            {"supported": sorted(SUPPORTED_CONTENT_TYPES)},
        )

    content = await file.read()
    if not content:
        raise InputError("Uploaded file is empty")

    document = DocumentInput(
        content=content,
        filename=file.filename or "document",
        content_type=content_type,
    )
    result = await pipeline.run(
        document,
        json_data,
        document_type or "document",
        split_fields(fields_to_validate),
    )

    body = result.to_response()
    if not result.success:
        logger.error(
            "Cross-validation failed in %s phase: %s request_id=%s",
            body["failedPhase"],
            result.error,
            request_id_of(request),
        )
        body["error"] = f"Error during {body['failedPhase']}: {result.error}"
        return JSONResponse(status_code=500, content=body)

    return JSONResponse(content=body)
