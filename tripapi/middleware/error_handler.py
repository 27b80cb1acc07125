"""
Exception handlers producing the ``{"error", "details"}`` response body.

GeoAPIError subclasses carry their own status code; request validation
failures become 400; anything unexpected becomes a 500 with a generic
message, logged with its stack trace under a short error id.
"""

import hashlib
import logging
import sys
import time
import traceback
from typing import Any, Dict, List

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from tripapi.middleware.request_id import generate_request_id
from tripapi.providers.errors import GeoAPIError

logger = logging.getLogger("tripapi.middleware.error_handler")

INVALID_REQUEST_DATA = "Invalid request data"
INVALID_JSON = "Invalid JSON in request body"
INTERNAL_ERROR = "Internal server error"


def error_body(message: str, details: Any = None) -> Dict[str, Any]:
    """Build an error response body; ``details`` is left out when empty."""
    body: Dict[str, Any] = {"error": message}
    if details is not None:
        body["details"] = details
    return body


def make_error_id(request: Request) -> str:
    return hashlib.md5(f"{time.time()}-{request.url.path}".encode()).hexdigest()[:8]


def format_stack_trace(stack_trace: str) -> str:
    """Indent a stack trace for the log."""
    return "\n".join(f"  │ {line}" for line in stack_trace.split("\n") if line.strip())


def validation_details(errors: List[Dict[str, Any]]) -> List[Dict[str, str]]:
    """Flatten pydantic errors into ``[{field, message}]``."""
    details = []
    for error in errors:
        loc = list(error.get("loc") or [])
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        details.append({
            "field": ".".join(str(part) for part in loc),
            "message": error.get("msg", ""),
        })
    return details


def _is_json_error(errors: List[Dict[str, Any]]) -> bool:
    return any(error.get("type") == "json_invalid" for error in errors)


def setup_error_handlers(app):
    """
    Register the exception handlers on a FastAPI application.
    """

    @app.exception_handler(GeoAPIError)
    async def geo_api_exception_handler(request: Request, exc: GeoAPIError):
        error_id = make_error_id(request)
        message = (
            f"GEO#{error_id}: {request.method} {request.url.path} - "
            f"{exc.error_type} ({exc.status_code}): {exc.message}"
        )
        if exc.status_code >= 500:
            logger.error(f"❌ {message}")
        else:
            logger.warning(f"⚠️ {message}")

        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, exc.to_details()),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        error_id = make_error_id(request)
        errors = list(exc.errors())

        if _is_json_error(errors):
            logger.warning(f"⚠️ VALID#{error_id}: invalid JSON in {request.method} {request.url.path}")
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST,
                content=error_body(INVALID_JSON),
            )

        details = validation_details(errors)
        logger.warning(
            f"⚠️ VALID#{error_id}: {request.method} {request.url.path} - "
            + "; ".join(f"{d['field']}: {d['message']}" for d in details)
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_body(INVALID_REQUEST_DATA, details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        error_id = make_error_id(request)
        logger.warning(f"⚠️ HTTP#{error_id}: {exc.status_code} - {exc.detail}")

        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(str(exc.detail)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        error_id = make_error_id(request)
        # Runs outside RequestIDMiddleware, so the header is set here
        request_id = getattr(request.state, "request_id", None) or generate_request_id()

        exc_type, exc_value, exc_traceback = sys.exc_info()
        if exc_value is None:
            exc_type, exc_value, exc_traceback = type(exc), exc, exc.__traceback__
        stack_trace = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))

        logger.error(
            f"❌ EXC#{error_id}: {request.method} {request.url.path} - "
            f"{exc.__class__.__name__}: {exc}\n"
            f"╭─ Stack Trace ─────────────────────────╮\n"
            f"{format_stack_trace(stack_trace)}\n"
            f"╰───────────────────────────────────────╯"
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_body(INTERNAL_ERROR, {"type": "internal", "error_id": error_id}),
            headers={"X-Request-ID": request_id},
        )

