"""Unit tests for window composition."""

from io import BytesIO

from PIL import Image

from render_engine.compositor import (
    TITLE_BAR_HEIGHT,
    add_window_chrome,
    compose_canvas,
    contrast_color,
    encode_png,
    round_corners,
    to_rgba,
)

DARK = (40, 42, 54, 255)
CLEAR = (0, 0, 0, 0)


def code_image(width=200, height=100):
    return Image.new("RGB", (width, height), DARK[:3])


class TestWindowChrome:
    """Tests for the title bar."""

    def test_bar_added_for_controls(self):
        window = add_window_chrome(code_image(), DARK, title="", show_controls=True)
        assert window.size == (200, 100 + TITLE_BAR_HEIGHT)
        assert window.mode == "RGBA"

    def test_bar_added_for_title_only(self):
        window = add_window_chrome(code_image(), DARK, title="main.rs", show_controls=False)
        assert window.size == (200, 100 + TITLE_BAR_HEIGHT)

    def test_no_bar_without_controls_or_title(self):
        window = add_window_chrome(code_image(), DARK, title="", show_controls=False)
        assert window.size == (200, 100)

    def test_controls_drawn_in_bar(self):
        window = add_window_chrome(code_image(), DARK, title="", show_controls=True)
        # Centre of the first (red) control
        assert window.getpixel((22, TITLE_BAR_HEIGHT // 2)) == (255, 95, 86, 255)


class TestRoundCorners:
    def test_corners_transparent_centre_opaque(self):
        rounded = round_corners(Image.new("RGBA", (100, 80), DARK), radius=12)

        assert rounded.getpixel((0, 0))[3] == 0
        assert rounded.getpixel((99, 79))[3] == 0
        assert rounded.getpixel((50, 40)) == DARK

    def test_original_untouched(self):
        original = Image.new("RGBA", (50, 50), DARK)
        round_corners(original, radius=10)
        assert original.getpixel((0, 0)) == DARK


class TestComposeCanvas:
    """Tests for padding, shadow and background."""

    def test_canvas_size_includes_padding(self):
        window = Image.new("RGBA", (100, 50), DARK)
        canvas = compose_canvas(window, 80, 100, CLEAR, CLEAR, 0.0, 0, 0)

        assert canvas.size == (260, 250)
        assert canvas.getpixel((0, 0)) == CLEAR
        assert canvas.getpixel((130, 125)) == DARK

    def test_solid_background(self):
        window = Image.new("RGBA", (10, 10), DARK)
        canvas = compose_canvas(window, 5, 5, (255, 255, 255, 255), CLEAR, 0.0, 0, 0)
        assert canvas.getpixel((0, 0)) == (255, 255, 255, 255)

    def test_zero_blur_draws_no_shadow(self):
        window = Image.new("RGBA", (20, 20), DARK)
        canvas = compose_canvas(window, 10, 10, CLEAR, (0, 0, 0, 255), 0.0, 5, 5)
        # Where an offset shadow would peek out below-right of the window
        assert canvas.getpixel((32, 32)) == CLEAR

    def test_blurred_shadow_drawn(self):
        window = Image.new("RGBA", (20, 20), DARK)
        canvas = compose_canvas(window, 10, 10, CLEAR, (0, 0, 0, 255), 2.0, 5, 5)
        assert canvas.getpixel((32, 32))[3] > 0

    def test_background_image_covers_canvas(self):
        window = Image.new("RGBA", (20, 20), DARK)
        background = Image.new("RGB", (7, 3), (0, 128, 255))

        canvas = compose_canvas(window, 10, 10, CLEAR, CLEAR, 0.0, 0, 0, background)

        assert canvas.size == (40, 40)
        assert canvas.getpixel((0, 0)) == (0, 128, 255, 255)


class TestHelpers:
    def test_to_rgba(self):
        assert to_rgba("#282a36") == (40, 42, 54, 255)

    def test_contrast_color(self):
        light_text = contrast_color(DARK)
        dark_text = contrast_color((250, 250, 250, 255))
        assert sum(light_text[:3]) > sum(dark_text[:3])

    def test_encode_png(self):
        data = encode_png(Image.new("RGBA", (3, 2), DARK))
        assert data.startswith(b"\x89PNG")
        assert Image.open(BytesIO(data)).size == (3, 2)
