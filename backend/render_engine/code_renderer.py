"""
Pygments + Pillow rendering engine.

Highlights code with the Pygments ImageFormatter, then composes the
window (title bar, rounded corners, shadow, padding, background).
"""

import logging
import time
from io import BytesIO
from typing import Optional

import httpx
from PIL import Image, UnidentifiedImageError
from pygments import highlight
from pygments.formatters.img import FontNotFound, ImageFormatter

from app.models import RenderJob
from .base import RenderEngine
from .catalog import resolve_lexer, resolve_style
from .compositor import (
    CORNER_RADIUS,
    add_window_chrome,
    compose_canvas,
    encode_png,
    round_corners,
    to_rgba,
)
from .exceptions import RenderEngineError, RenderInternalError, UnknownFontError
from .fonts import (
    DEFAULT_FONT,
    DEFAULT_FONT_SIZE,
    FALLBACK_FONT_FAMILIES,
    parse_font_list,
    title_font_size,
)

logger = logging.getLogger(__name__)

IMAGE_PAD = 16
LINE_NUMBER_FG = "#6272a4"


class PygmentsRenderEngine(RenderEngine):
    """
    Render engine using Pygments for highlighting and Pillow for composition.

    Holds only configuration; every render() call works on its own images,
    so one instance is shared by all requests.
    """

    def __init__(
        self,
        default_font: str = DEFAULT_FONT,
        default_font_size: float = DEFAULT_FONT_SIZE,
        background_timeout: float = 10.0,
        max_background_bytes: int = 10 * 1024 * 1024,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.default_font = default_font
        self.default_font_size = default_font_size
        self.background_timeout = background_timeout
        self.max_background_bytes = max_background_bytes
        self._transport = transport
        logger.info("[PYGMENTS] PygmentsRenderEngine initialized")

    @property
    def engine_name(self) -> str:
        return "pygments"

    def render(self, job: RenderJob) -> bytes:
        start_time = time.time()
        style = resolve_style(job.theme)
        lexer = resolve_lexer(job.language, job.code, tabsize=job.tab_width)

        try:
            formatter = self._build_formatter(job, style)
            code_image = Image.open(BytesIO(highlight(job.code, lexer, formatter)))

            background = to_rgba(style.background_color or "#ffffff")
            window = add_window_chrome(
                code_image,
                background=background,
                title=job.window_title,
                show_controls=not job.no_window_controls,
                title_size=title_font_size(formatter.fonts.font_size),
            )
            if not job.no_round_corner:
                window = round_corners(window, CORNER_RADIUS)

            canvas = compose_canvas(
                window,
                pad_horiz=job.pad_horiz,
                pad_vert=job.pad_vert,
                background=job.background,
                shadow_color=job.shadow_color,
                blur_radius=job.shadow_blur_radius,
                offset_x=job.shadow_offset_x,
                offset_y=job.shadow_offset_y,
                background_image=self._fetch_background(job.background_image),
            )
            data = encode_png(canvas)
        except RenderEngineError:
            raise
        except Exception as e:
            logger.exception(f"[PYGMENTS] Render failed: {e}")
            raise RenderInternalError(f"Rendering failed: {e}") from e

        logger.info(
            f"[PYGMENTS] Rendered {canvas.width}x{canvas.height} image "
            f"with lexer={lexer.name} in {time.time() - start_time:.3f}s"
        )
        return data

    def _build_formatter(self, job: RenderJob, style) -> ImageFormatter:
        """
        Create the ImageFormatter for the first loadable family in job.font.

        When job.font is the configured default and none of its families is
        installed, the common monospace families in FALLBACK_FONT_FAMILIES
        are tried before giving up.

        Raises:
            UnknownFontError: If no family in a requested font list is installed
            RenderInternalError: If neither the default font nor any fallback is installed
        """
        families = parse_font_list(job.font, self.default_font_size)
        for name, size in families:
            formatter = self._load_formatter(job, style, name, size)
            if formatter is not None:
                return formatter

        if job.font != self.default_font:
            raise UnknownFontError(f"Invalid font: {job.font}")

        size = families[0][1]
        for name in FALLBACK_FONT_FAMILIES:
            formatter = self._load_formatter(job, style, name, size)
            if formatter is not None:
                logger.warning(f"[PYGMENTS] Default font {job.font} not installed, using {name}")
                return formatter
        raise RenderInternalError(
            f"Default font {job.font} and fallbacks "
            f"{', '.join(FALLBACK_FONT_FAMILIES)} are not installed"
        )

    def _load_formatter(self, job: RenderJob, style, name: str, size: float) -> Optional[ImageFormatter]:
        try:
            return ImageFormatter(
                style=style,
                font_name=name,
                font_size=max(1, int(round(size))),
                line_numbers=not job.no_line_number,
                line_number_start=job.line_offset,
                line_number_bg=style.background_color,
                line_number_fg=LINE_NUMBER_FG,
                line_number_separator=False,
                line_pad=job.line_pad,
                image_pad=IMAGE_PAD,
                hl_lines=list(job.highlight_lines),
                image_format="png",
            )
        except (FontNotFound, OSError):
            logger.debug(f"[PYGMENTS] Font not available: {name}")
            return None

    def _fetch_background(self, url: Optional[str]) -> Optional[Image.Image]:
        """
        Download the background image.

        Download or decode failures fall back to the solid background.
        """
        if url is None:
            return None

        try:
            with httpx.Client(
                timeout=self.background_timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    buffer = bytearray()
                    for chunk in response.iter_bytes():
                        buffer.extend(chunk)
                        if len(buffer) > self.max_background_bytes:
                            logger.warning(
                                f"[PYGMENTS] Background image exceeds "
                                f"{self.max_background_bytes} bytes: {url}"
                            )
                            return None
            image = Image.open(BytesIO(bytes(buffer)))
            image.load()
            return image
        except (httpx.HTTPError, UnidentifiedImageError, OSError) as e:
            logger.warning(f"[PYGMENTS] Background image unavailable ({url}): {e}")
            return None
