"""
Window composition for highlighted code images.

Takes the bare highlighted raster and dresses it as a window: title bar
with traffic-light controls, rounded corners, drop shadow and padding on a
solid or image background.
"""

from io import BytesIO
from typing import Optional, Tuple

from PIL import Image, ImageColor, ImageDraw, ImageFilter, ImageFont, ImageOps

Rgba = Tuple[int, int, int, int]

TITLE_BAR_HEIGHT = 48
CORNER_RADIUS = 12
CONTROL_RADIUS = 7
CONTROL_MARGIN = 22
CONTROL_SPACING = 22
CONTROL_COLORS = ((255, 95, 86, 255), (255, 189, 46, 255), (39, 201, 63, 255))


def to_rgba(color: str) -> Rgba:
    """Convert a Pygments style colour ("#282a36") to RGBA."""
    return ImageColor.getcolor(color, "RGBA")


def contrast_color(background: Rgba) -> Rgba:
    """Pick a light or dark text colour readable on the given background."""
    r, g, b = background[:3]
    luminance = 0.299 * r + 0.587 * g + 0.114 * b
    return (40, 42, 54, 255) if luminance > 150 else (220, 220, 220, 255)


def add_window_chrome(
    code_image: Image.Image,
    background: Rgba,
    title: str,
    show_controls: bool,
    title_size: int = 18,
) -> Image.Image:
    """
    Put a title bar above the code image.

    The bar is left out entirely when there are neither controls nor a title.
    """
    code_image = code_image.convert("RGBA")
    if not show_controls and not title:
        return code_image

    width, height = code_image.size
    window = Image.new("RGBA", (width, height + TITLE_BAR_HEIGHT), background)
    window.paste(code_image, (0, TITLE_BAR_HEIGHT))
    draw = ImageDraw.Draw(window)
    center_y = TITLE_BAR_HEIGHT // 2

    if show_controls:
        for index, color in enumerate(CONTROL_COLORS):
            center_x = CONTROL_MARGIN + index * CONTROL_SPACING
            draw.ellipse(
                (
                    center_x - CONTROL_RADIUS,
                    center_y - CONTROL_RADIUS,
                    center_x + CONTROL_RADIUS,
                    center_y + CONTROL_RADIUS,
                ),
                fill=color,
            )

    if title:
        font = ImageFont.load_default(size=title_size)
        draw.text(
            (width // 2, center_y),
            title,
            fill=contrast_color(background),
            font=font,
            anchor="mm",
        )

    return window


def round_corners(image: Image.Image, radius: int = CORNER_RADIUS) -> Image.Image:
    """Return a copy whose corners outside the given radius are transparent."""
    image = image.convert("RGBA")
    mask = Image.new("L", image.size, 0)
    ImageDraw.Draw(mask).rounded_rectangle(
        (0, 0, image.width - 1, image.height - 1),
        radius=radius,
        fill=255,
    )
    alpha = Image.composite(image.getchannel("A"), mask, mask)
    rounded = image.copy()
    rounded.putalpha(alpha)
    return rounded


def compose_canvas(
    window: Image.Image,
    pad_horiz: int,
    pad_vert: int,
    background: Rgba,
    shadow_color: Rgba,
    blur_radius: float,
    offset_x: int,
    offset_y: int,
    background_image: Optional[Image.Image] = None,
) -> Image.Image:
    """
    Place the window on a padded canvas with an optional drop shadow.

    A blur radius of 0 draws no shadow. A background image, when given,
    is scaled and cropped to cover the whole canvas.
    """
    window = window.convert("RGBA")
    size = (window.width + 2 * pad_horiz, window.height + 2 * pad_vert)

    if background_image is not None:
        canvas = ImageOps.fit(background_image.convert("RGBA"), size)
    else:
        canvas = Image.new("RGBA", size, background)

    if blur_radius > 0:
        shadow = Image.new("RGBA", size, (0, 0, 0, 0))
        shape = Image.new("RGBA", window.size, shadow_color)
        shadow.paste(shape, (pad_horiz + offset_x, pad_vert + offset_y), window.getchannel("A"))
        shadow = shadow.filter(ImageFilter.GaussianBlur(blur_radius))
        canvas = Image.alpha_composite(canvas, shadow)

    canvas.alpha_composite(window, (pad_horiz, pad_vert))
    return canvas


def encode_png(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
