"""Pydantic models for render jobs and API schemas."""

from .render_job import PartialRenderJob, RenderJob
from .error_response import ErrorResponse

__all__ = [
    "PartialRenderJob",
    "RenderJob",
    "ErrorResponse",
]
