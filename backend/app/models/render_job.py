"""Pydantic models for resolved render jobs."""

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, Field

Rgba = Tuple[int, int, int, int]

# Code bodies longer than this are summarized in log context
LOG_CODE_LIMIT = 2000
LOG_CODE_PREVIEW = 80


class PartialRenderJob(BaseModel):
    """
    Validated render parameters for one /generate request.

    Every field is resolved to its final value except ``language``, which
    holds exactly what the caller supplied (None when absent).
    """

    model_config = {"frozen": True}

    code: str = Field(..., min_length=1, description="Code to render")
    language: Optional[str] = Field(
        None,
        description="Language name, alias or file extension; None means undecided",
    )
    theme: str = Field("Dracula", description="Syntax highlighting theme name")
    font: str = Field(
        "Fira Code",
        description="Font list, e.g. 'Hack; SimSun=31'",
    )
    tab_width: int = Field(4, ge=0, description="Tab width in spaces")
    line_pad: int = Field(2, ge=0, description="Padding between lines")
    line_offset: int = Field(1, ge=0, description="Number of the first line")
    pad_horiz: int = Field(80, ge=0, description="Horizontal padding around the window")
    pad_vert: int = Field(100, ge=0, description="Vertical padding around the window")
    shadow_blur_radius: float = Field(
        0.0,
        ge=0,
        description="Shadow blur radius (0 hides the shadow)",
    )
    shadow_offset_x: int = Field(0, description="Shadow offset along the X axis")
    shadow_offset_y: int = Field(0, description="Shadow offset along the Y axis")
    no_line_number: bool = Field(False, description="Hide line numbers")
    no_round_corner: bool = Field(False, description="Keep window corners square")
    no_window_controls: bool = Field(False, description="Hide the window controls")
    shadow_color: Rgba = Field((0, 0, 0, 0), description="Shadow colour as RGBA")
    background: Rgba = Field((0, 0, 0, 0), description="Background colour as RGBA")
    window_title: str = Field("Inkify", description="Window title text")
    highlight_lines: Tuple[int, ...] = Field(
        (),
        description="Sorted, de-duplicated 1-based line numbers to highlight",
    )
    background_image: Optional[str] = Field(
        None,
        description="URL of an image used as background for the padding area",
    )

    def log_context(self) -> dict:
        """Return job parameters for log records, summarizing oversized code."""
        context = self.model_dump()
        if len(self.code) > LOG_CODE_LIMIT:
            context["code"] = {
                "length": len(self.code),
                "preview": self.code[:LOG_CODE_PREVIEW],
            }
        return context


class RenderJob(PartialRenderJob):
    """
    Fully resolved render job handed to the rendering engine.

    Attributes:
        language_source: Where ``language`` came from: the caller ("user"),
            the classifier ("classifier"), or nobody, leaving detection to
            the rendering engine ("engine").
    """

    language_source: Literal["user", "classifier", "engine"] = Field(
        "engine",
        description="Origin of the resolved language",
    )
