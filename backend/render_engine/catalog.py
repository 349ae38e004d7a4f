"""
Theme and language catalogs backed by Pygments.

Catalogs are computed once per process and are read-only afterwards, so
concurrent requests share them without locking.
"""

from functools import lru_cache
from typing import Optional

from pygments.lexer import Lexer
from pygments.lexers import (
    get_all_lexers,
    get_lexer_by_name,
    get_lexer_for_filename,
    guess_lexer,
)
from pygments.lexers.special import TextLexer
from pygments.style import Style
from pygments.styles import get_all_styles, get_style_by_name
from pygments.util import ClassNotFound

from .exceptions import UnknownLanguageError, UnknownThemeError


def _normalize(name: str) -> str:
    return name.strip().lower().replace(" ", "-").replace("_", "-")


@lru_cache(maxsize=None)
def _style_index() -> dict[str, str]:
    return {_normalize(name): name for name in get_all_styles()}


def list_themes() -> list[str]:
    """
    Returns list of available theme names.

    Returns:
        Sorted Pygments style names (e.g., ["dracula", "monokai", ...])
    """
    return sorted(_style_index().values())


def resolve_style(theme: str) -> type[Style]:
    """
    Look up a theme by name, ignoring case and treating spaces, dashes and
    underscores alike ("Dracula", "Github Dark").

    Raises:
        UnknownThemeError: If no style matches
    """
    name = _style_index().get(_normalize(theme))
    if name is None:
        raise UnknownThemeError(f"Invalid theme: {theme}")
    return get_style_by_name(name)


@lru_cache(maxsize=None)
def _lexer_names() -> dict[str, str]:
    """Map lowercased display names to their first alias."""
    names = {}
    for name, aliases, _, _ in get_all_lexers():
        if aliases:
            names.setdefault(name.lower(), aliases[0])
    return names


def list_languages() -> list[str]:
    """Returns sorted, de-duplicated display names of every lexer with an alias."""
    return sorted({name for name, aliases, _, _ in get_all_lexers() if aliases})


def resolve_lexer(language: Optional[str], code: str, **options) -> Lexer:
    """
    Pick a lexer for the code.

    ``language`` may be an alias ("rs"), a display name ("Rust") or a file
    extension ("py"). None falls back to Pygments' own content guess, and to
    plain text when that finds nothing.

    Args:
        language: Requested language or None
        code: Code to highlight, used only for guessing
        **options: Lexer options (e.g. tabsize)

    Raises:
        UnknownLanguageError: If an explicit language matches no lexer
    """
    if language is None:
        try:
            return guess_lexer(code, **options)
        except ClassNotFound:
            return TextLexer(**options)

    token = language.strip().lower()
    alias = _lexer_names().get(token, token)
    try:
        return get_lexer_by_name(alias, **options)
    except ClassNotFound:
        pass

    try:
        return get_lexer_for_filename(f"snippet.{token.lstrip('.')}", code, **options)
    except ClassNotFound:
        raise UnknownLanguageError(f"Invalid language: {language}")
