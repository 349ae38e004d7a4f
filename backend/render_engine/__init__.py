"""Code image rendering engine: highlighting, window composition, catalogs."""

from .base import RenderEngine
from .catalog import list_languages, list_themes
from .code_renderer import PygmentsRenderEngine
from .exceptions import (
    RenderEngineError,
    RenderInternalError,
    UnknownFontError,
    UnknownLanguageError,
    UnknownThemeError,
)
from .fonts import list_fonts

__all__ = [
    "RenderEngine",
    "PygmentsRenderEngine",
    "RenderEngineError",
    "RenderInternalError",
    "UnknownFontError",
    "UnknownLanguageError",
    "UnknownThemeError",
    "list_fonts",
    "list_languages",
    "list_themes",
]
