"""
Error Handling for the Open Douban API

Centralized error handling:
- Structured error responses
- Logging of errors
- Translation of upstream client failures
"""

import traceback
from datetime import datetime

from fastapi import Request
from fastapi.responses import JSONResponse
from loguru import logger

from opendouban.identification.api_client import OddbClientError


class OpenDoubanException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        detail: str = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class NotFoundError(OpenDoubanException):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            detail=f"No {resource} with identifier '{identifier}' exists",
        )


class ExternalServiceError(OpenDoubanException):
    """Upstream API failure."""

    def __init__(self, service: str, detail: str = None):
        super().__init__(
            message=f"{service} request failed",
            code="UPSTREAM_ERROR",
            status_code=502,
            detail=detail,
        )


def create_error_response(
    error: str,
    code: str,
    status_code: int,
    detail: str = None,
) -> JSONResponse:
    """Create standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "code": code,
            "detail": detail,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )


def setup_exception_handlers(app):
    """Register exception handlers with FastAPI app."""

    @app.exception_handler(OpenDoubanException)
    async def opendouban_exception_handler(request: Request, exc: OpenDoubanException):
        logger.warning(f"API error: {exc.code} - {exc.message}")
        return create_error_response(
            error=exc.message,
            code=exc.code,
            status_code=exc.status_code,
            detail=exc.detail,
        )

    @app.exception_handler(OddbClientError)
    async def upstream_exception_handler(request: Request, exc: OddbClientError):
        logger.warning(
            f"Upstream failure on {request.url.path}: {type(exc).__name__}: {exc} "
            f"(status={exc.status_code})"
        )
        error = ExternalServiceError("Open Douban", detail=str(exc))
        return create_error_response(
            error=error.message,
            code=error.code,
            status_code=error.status_code,
            detail=error.detail,
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}\n{traceback.format_exc()}"
        )
        return create_error_response(
            error="Internal Server Error",
            code="INTERNAL_ERROR",
            status_code=500,
            detail="An unexpected error occurred",
        )
