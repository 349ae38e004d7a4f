"""
Centralized error handling middleware for FastAPI.

Provides consistent error responses and logging for all API routes.
"""

import logging
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class InkifyError(Exception):
    """Base exception for request-level errors."""

    def __init__(self, message: str, status_code: int = 500, details: Any = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(message)


class ParameterError(InkifyError):
    """Raised when a query parameter fails validation."""

    def __init__(self, field: str, reason: str, message: str | None = None):
        self.field = field
        self.reason = reason
        super().__init__(
            message=message or f"Invalid parameter '{field}': {reason}",
            status_code=400,
            details={"field": field, "reason": reason},
        )


class MissingFieldError(ParameterError):
    """Raised when a required parameter is absent or blank."""

    def __init__(self, field: str):
        super().__init__(field, "parameter is required", f"{field} parameter is required")


class InvalidFieldError(ParameterError):
    """Raised when a parameter is present but cannot be parsed or is out of range."""


class RenderRejectedError(InkifyError):
    """Raised when the rendering engine rejects the job (unknown theme, font, language)."""

    def __init__(self, message: str, kind: str):
        super().__init__(
            message=message,
            status_code=400,
            details={"kind": kind},
        )


class RenderFailedError(InkifyError):
    """Raised when the rendering engine fails internally."""

    def __init__(self, reason: str):
        super().__init__(
            message="Failed to render image",
            status_code=500,
            details={"reason": reason},
        )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware that catches unhandled exceptions and returns consistent error responses.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response

        except InkifyError as e:
            logger.error(
                f"InkifyError: {e.message}",
                extra={"status_code": e.status_code, "details": e.details},
            )
            return JSONResponse(
                status_code=e.status_code,
                content=format_error_response(e.message, e.details),
            )

        except Exception as e:
            # Log full stack trace for unexpected errors
            logger.exception(f"Unhandled exception: {str(e)}")
            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal server error",
                    "message": str(e) if logger.isEnabledFor(logging.DEBUG) else None,
                },
            )


def format_error_response(message: str, details: Any = None) -> dict:
    """
    Format a consistent error response.

    Args:
        message: Human-readable error message
        details: Additional error details (optional)

    Returns:
        dict: Formatted error response
    """
    response = {"error": message}
    if details:
        response["details"] = details
    return response
