"""
Font list parsing and system font discovery.

Font strings follow the form "Hack; SimSun=31": families separated by
semicolons, each optionally followed by "=<size>".
"""

import logging
import subprocess
from typing import List, Tuple

logger = logging.getLogger(__name__)

DEFAULT_FONT = "Fira Code"
DEFAULT_FONT_SIZE = 26.0

# Tried in order when the configured default font is not installed
FALLBACK_FONT_FAMILIES = (
    "DejaVu Sans Mono",
    "Liberation Mono",
    "Noto Sans Mono",
    "Courier New",
    "Menlo",
)

FontList = List[Tuple[str, float]]


def parse_font_list(font: str, default_size: float = DEFAULT_FONT_SIZE) -> FontList:
    """
    Parse a font string into (family, size) pairs.

    Args:
        font: Font string, e.g. "Hack; SimSun=31"
        default_size: Size used for entries without an explicit size

    Returns:
        List of (family, size) in the order given

    Raises:
        ValueError: If an entry has no family name or a non-positive/unparseable size
    """
    result: FontList = []
    for entry in font.split(";"):
        name, sep, size_text = entry.partition("=")
        name = name.strip()
        if not name:
            raise ValueError(f"empty font name in '{font}'")
        size = default_size
        if sep:
            try:
                size = float(size_text.strip())
            except ValueError:
                raise ValueError(f"invalid font size '{size_text.strip()}' for {name}")
            if size <= 0:
                raise ValueError(f"font size for {name} must be positive")
        result.append((name, size))
    return result


def list_fonts(fc_list_binary: str = "fc-list") -> List[str]:
    """
    Returns sorted font families known to fontconfig.

    Returns an empty list when fontconfig is not installed.
    """
    try:
        result = subprocess.run(
            [fc_list_binary, ":", "family"],
            capture_output=True,
            text=True,
            timeout=10,
            check=True,
        )
    except (
        FileNotFoundError,
        subprocess.CalledProcessError,
        subprocess.TimeoutExpired,
    ) as e:
        logger.warning(f"Font listing unavailable: {e}")
        return []

    families = set()
    for line in result.stdout.splitlines():
        for family in line.split(","):
            family = family.strip()
            if family:
                families.add(family)
    return sorted(families)


def title_font_size(font_size: int, ratio: float = 0.7) -> int:
    return max(10, int(font_size * ratio))
