"""
Parameter resolution for GET /generate.

Turns the raw query-string mapping into a validated PartialRenderJob.
Each field is an independent parse-with-default rule: absent fields take
their documented default, present fields must parse and fall in range or
the whole request fails with InvalidFieldError naming that field.
"""

import re
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable, Mapping, Optional

from PIL import ImageColor
from pydantic import HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.middleware import InvalidFieldError, MissingFieldError
from app.models import PartialRenderJob
from render_engine.fonts import parse_font_list

TRUE_TOKENS = frozenset({"true", "1", "yes", "on"})
FALSE_TOKENS = frozenset({"false", "0", "no", "off"})

U32_MAX = 2**32 - 1
MAX_TAB_WIDTH = 255
MAX_LINE_PAD = 1000
MAX_PADDING = 2000
MAX_SHADOW_OFFSET = 2000
MAX_BLUR_RADIUS = 500.0
MAX_HIGHLIGHT_LINE = 100000
MAX_NAME_LENGTH = 128
MAX_TITLE_LENGTH = 256

_INTEGER = re.compile(r"^[+-]?[0-9]+$")
_NUMBER = re.compile(r"^[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)$")
_LINE_SPEC = re.compile(r"^([0-9]+)(?:\s*-\s*([0-9]+))?$")
_LINE_SEPARATORS = re.compile(r"[,;]")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_LEADING_BLANK_LINES = re.compile(r"^(?:[ \t]*\r?\n)+")

_url_adapter = TypeAdapter(HttpUrl)


def parse_int(field: str, value: str, minimum: int, maximum: int) -> int:
    """Parse a base-10 integer and range-check it."""
    text = value.strip()
    if not _INTEGER.match(text):
        raise InvalidFieldError(field, f"expected an integer, got '{value}'")
    number = int(text)
    if number < minimum:
        raise InvalidFieldError(field, f"must be >= {minimum}")
    if number > maximum:
        raise InvalidFieldError(field, f"must be <= {maximum}")
    return number


def parse_float(field: str, value: str, minimum: float, maximum: float) -> float:
    """Parse a decimal number and range-check it."""
    text = value.strip()
    if not _NUMBER.match(text):
        raise InvalidFieldError(field, f"expected a number, got '{value}'")
    number = float(text)
    if number < minimum:
        raise InvalidFieldError(field, f"must be >= {minimum:g}")
    if number > maximum:
        raise InvalidFieldError(field, f"must be <= {maximum:g}")
    return number


def parse_bool(field: str, value: str) -> bool:
    """Parse one of the accepted truthy/falsy tokens, case-insensitively."""
    token = value.strip().lower()
    if token in TRUE_TOKENS:
        return True
    if token in FALSE_TOKENS:
        return False
    accepted = ", ".join(sorted(TRUE_TOKENS | FALSE_TOKENS))
    raise InvalidFieldError(field, f"expected one of {accepted}, got '{value}'")


def parse_color(field: str, value: str) -> tuple[int, int, int, int]:
    """Parse a colour (#rgb, #rrggbbaa, rgb(), hsl(), named) into RGBA."""
    try:
        color = ImageColor.getcolor(value.strip(), "RGBA")
    except ValueError:
        raise InvalidFieldError(field, f"invalid color '{value}'")
    if any(channel < 0 or channel > 255 for channel in color):
        raise InvalidFieldError(field, f"color channels must be 0-255, got '{value}'")
    return color


def parse_line_ranges(field: str, value: str) -> tuple[int, ...]:
    """
    Parse highlighted lines such as "3,5-7" or "1-3; 4".

    Returns:
        Sorted tuple of unique 1-based line numbers.
    """
    lines: set[int] = set()
    for token in _LINE_SEPARATORS.split(value):
        token = token.strip()
        match = _LINE_SPEC.match(token)
        if not match:
            raise InvalidFieldError(field, f"invalid line or range '{token}'")
        start = int(match.group(1))
        end = int(match.group(2)) if match.group(2) is not None else start
        if start < 1:
            raise InvalidFieldError(field, "line numbers start at 1")
        if end < start:
            raise InvalidFieldError(field, f"range '{token}' is reversed")
        if end > MAX_HIGHLIGHT_LINE:
            raise InvalidFieldError(field, f"line numbers must be <= {MAX_HIGHLIGHT_LINE}")
        lines.update(range(start, end + 1))
    return tuple(sorted(lines))


def parse_name(field: str, value: str) -> str:
    """Format check for catalog names (theme); membership is the engine's concern."""
    name = value.strip()
    if not name:
        raise InvalidFieldError(field, "must not be empty")
    if len(name) > MAX_NAME_LENGTH or _CONTROL_CHARS.search(name):
        raise InvalidFieldError(field, "malformed name")
    return name


def parse_font(field: str, value: str) -> str:
    """Validate the font list syntax: 'Family[=size]; Fallback[=size]'."""
    font = parse_name(field, value)
    try:
        parse_font_list(font)
    except ValueError as e:
        raise InvalidFieldError(field, str(e))
    return font


def parse_title(field: str, value: str) -> str:
    if len(value) > MAX_TITLE_LENGTH:
        raise InvalidFieldError(field, f"must be at most {MAX_TITLE_LENGTH} characters")
    if _CONTROL_CHARS.search(value):
        raise InvalidFieldError(field, "must not contain control characters")
    return value


def parse_url(field: str, value: str) -> str:
    """Check the value is a well-formed http(s) URL; it is not fetched here."""
    url = value.strip()
    try:
        _url_adapter.validate_python(url)
    except PydanticValidationError:
        raise InvalidFieldError(field, f"invalid URL '{value}'")
    return url


@dataclass(frozen=True)
class FieldRule:
    """How one optional query parameter is parsed and what it defaults to."""

    name: str
    parse: Callable[[str, str], Any]
    default: Any


def build_rules(default_theme: str = "Dracula", default_font: str = "Fira Code") -> tuple[FieldRule, ...]:
    """Return the parse-with-default rule for every optional parameter."""
    return (
        FieldRule("theme", parse_name, default_theme),
        FieldRule("font", parse_font, default_font),
        FieldRule("tab_width", partial(parse_int, minimum=0, maximum=MAX_TAB_WIDTH), 4),
        FieldRule("line_pad", partial(parse_int, minimum=0, maximum=MAX_LINE_PAD), 2),
        FieldRule("line_offset", partial(parse_int, minimum=0, maximum=U32_MAX), 1),
        FieldRule("pad_horiz", partial(parse_int, minimum=0, maximum=MAX_PADDING), 80),
        FieldRule("pad_vert", partial(parse_int, minimum=0, maximum=MAX_PADDING), 100),
        FieldRule(
            "shadow_blur_radius",
            partial(parse_float, minimum=0.0, maximum=MAX_BLUR_RADIUS),
            0.0,
        ),
        FieldRule(
            "shadow_offset_x",
            partial(parse_int, minimum=-MAX_SHADOW_OFFSET, maximum=MAX_SHADOW_OFFSET),
            0,
        ),
        FieldRule(
            "shadow_offset_y",
            partial(parse_int, minimum=-MAX_SHADOW_OFFSET, maximum=MAX_SHADOW_OFFSET),
            0,
        ),
        FieldRule("no_line_number", parse_bool, False),
        FieldRule("no_round_corner", parse_bool, False),
        FieldRule("no_window_controls", parse_bool, False),
        FieldRule("shadow_color", parse_color, (0, 0, 0, 0)),
        FieldRule("background", parse_color, (0, 0, 0, 0)),
        FieldRule("window_title", parse_title, "Inkify"),
        FieldRule("highlight_lines", parse_line_ranges, ()),
        FieldRule("background_image", parse_url, None),
    )


DEFAULT_RULES = build_rules()


def resolve_parameters(
    raw: Mapping[str, str],
    rules: tuple[FieldRule, ...] = DEFAULT_RULES,
) -> PartialRenderJob:
    """
    Validate and default raw query parameters into a PartialRenderJob.

    Unknown keys are ignored. ``language`` is carried through as supplied
    (trimmed; blank counts as absent) and left for language resolution.

    Args:
        raw: Query parameters as received, all values strings
        rules: Field rules, see build_rules()

    Returns:
        PartialRenderJob with every field but language final

    Raises:
        MissingFieldError: If code is absent or blank
        InvalidFieldError: If any present field fails to parse or range-check
    """
    code = raw.get("code")
    if code is None or not code.strip():
        raise MissingFieldError("code")

    fields: dict[str, Any] = {"code": _trim_code(code), "language": _supplied_language(raw)}
    for rule in rules:
        value = raw.get(rule.name)
        fields[rule.name] = rule.default if value is None else rule.parse(rule.name, value)

    return PartialRenderJob(**fields)


def _supplied_language(raw: Mapping[str, str]) -> Optional[str]:
    language = raw.get("language")
    if language is None:
        return None
    language = language.strip()
    if len(language) > MAX_NAME_LENGTH or _CONTROL_CHARS.search(language):
        raise InvalidFieldError("language", "malformed name")
    return language or None


def _trim_code(code: str) -> str:
    # Leading blank lines and trailing whitespace go; first-line indentation stays
    return _LEADING_BLANK_LINES.sub("", code).rstrip()
