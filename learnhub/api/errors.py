# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exception handlers rendering every failure in the error envelope.

Routes never translate domain errors themselves: any LearnHubError that
escapes a route is rendered here using the kind's status and error code.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from learnhub.core.errors import LearnHubError
from learnhub.models.common import ErrorResponse
from learnhub.utils.logging import get_logger

logger = get_logger(__name__)

_HTTP_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHENTICATED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_409_CONFLICT: "CONFLICT",
}


def error_response(
    status_code: int,
    message: str,
    error_code: str,
    reason: str | None = None,
) -> JSONResponse:
    """Build a JSON response carrying the error envelope."""
    body = ErrorResponse(message=message, error_code=error_code, reason=reason)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", by_alias=True),
    )


async def learnhub_error_handler(request: Request, exc: LearnHubError) -> JSONResponse:
    """Render a domain error by its kind."""
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            method=request.method,
            path=request.url.path,
            error=str(exc),
            exc_info=exc,
        )
    else:
        logger.info(
            "request_rejected",
            method=request.method,
            path=request.url.path,
            error_code=exc.error_code,
            reason=exc.reason,
        )
    return error_response(exc.status_code, exc.message, exc.error_code, exc.reason)


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render request body, path and query validation failures."""
    details = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        message = error.get("msg", "Invalid value")
        details.append(f"{location}: {message}" if location else message)

    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "; ".join(details) or "Invalid request",
        "VALIDATION",
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException,
) -> JSONResponse:
    """Render framework HTTP errors (unknown route, wrong method)."""
    return error_response(
        exc.status_code,
        str(exc.detail),
        _HTTP_ERROR_CODES.get(exc.status_code, "INTERNAL" if exc.status_code >= 500 else "VALIDATION"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render anything unexpected as INTERNAL."""
    logger.exception("unhandled_error", method=request.method, path=request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "Server error",
        "INTERNAL",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach all envelope handlers to the application."""
    app.add_exception_handler(LearnHubError, learnhub_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
