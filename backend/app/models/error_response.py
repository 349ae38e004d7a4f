"""Pydantic model for JSON error payloads."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Error body returned by GET /generate when no image is produced.

    Attributes:
        error: Human-readable error message
        details: Machine-readable context such as the offending field
    """

    error: str = Field(
        ...,
        description="Human-readable error message",
    )
    details: Optional[dict[str, Any]] = Field(
        None,
        description="Offending field and reason, or the engine error kind",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "Invalid parameter 'tab_width': must be >= 0",
                    "details": {"field": "tab_width", "reason": "must be >= 0"},
                }
            ]
        },
    }
