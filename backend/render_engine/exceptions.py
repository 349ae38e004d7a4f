"""Exceptions raised by rendering engines."""


class RenderEngineError(Exception):
    """Base exception for rendering engine errors."""

    kind = "internal"
    client_error = False


class UnknownThemeError(RenderEngineError):
    """Requested theme is not in the theme catalog."""

    kind = "unknown_theme"
    client_error = True


class UnknownFontError(RenderEngineError):
    """None of the requested font families could be loaded."""

    kind = "unknown_font"
    client_error = True


class UnknownLanguageError(RenderEngineError):
    """Requested language has no matching lexer."""

    kind = "unknown_language"
    client_error = True


class RenderInternalError(RenderEngineError):
    """Highlighting, rasterization or encoding failed."""

    kind = "internal"
