"""FastAPI middleware and request-level error types."""

from .error_handler import (
    ErrorHandlerMiddleware,
    InkifyError,
    ParameterError,
    MissingFieldError,
    InvalidFieldError,
    RenderRejectedError,
    RenderFailedError,
    format_error_response,
)

__all__ = [
    "ErrorHandlerMiddleware",
    "InkifyError",
    "ParameterError",
    "MissingFieldError",
    "InvalidFieldError",
    "RenderRejectedError",
    "RenderFailedError",
    "format_error_response",
]
