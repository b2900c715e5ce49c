"""
API Middleware - Request context and error translation.

RequestContextMiddleware tags every request with an ID and logs its latency.
ErrorHandlerMiddleware turns DocVerifyError into the JSON error envelope.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from docverify.config.errors import DocVerifyError, ErrorCode

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

CallNext = Callable[[Request], Awaitable[Response]]

_STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.INPUT_INVALID: 400,
    ErrorCode.UNSUPPORTED_MEDIA_TYPE: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.PROVIDER_TRANSIENT: 503,
}


def error_code_to_status(code: ErrorCode) -> int:
    """HTTP status for an error code; anything unlisted is a server fault."""
    return _STATUS_BY_CODE.get(code, 500)


def request_id_of(request: Request) -> str:
    return getattr(request.state, "request_id", "unknown")


def error_envelope(request: Request, error: dict[str, Any]) -> dict[str, Any]:
    return {"error": error, "request_id": request_id_of(request)}


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign a request ID, time the request and log one access line."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.2f}"
        logger.info(
            "%s %s -> %d in %.1fms request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Render DocVerifyError (and anything unexpected) as a JSON error envelope."""

    async def dispatch(self, request: Request, call_next: CallNext) -> Response:
        try:
            return await call_next(request)
        except DocVerifyError as e:
            status = error_code_to_status(e.code)
            if status >= 500:
                logger.error("%s: %s request_id=%s", e.code.value, e.message, request_id_of(request))
            else:
                logger.warning("Rejected request: %s request_id=%s", e.message, request_id_of(request))
            return JSONResponse(status_code=status, content=error_envelope(request, e.to_dict()))
        except Exception:
            logger.exception("Unhandled error request_id=%s", request_id_of(request))
            body = error_envelope(
                request,
                {
                    "code": ErrorCode.INTERNAL_ERROR.value,
                    "message": "Internal server error",
                    "details": {},
                },
            )
            return JSONResponse(status_code=500, content=body)
