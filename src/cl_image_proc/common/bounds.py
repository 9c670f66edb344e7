"""Parsers for the dimension reports printed by external image tools."""

import re

from ..errors import Error
from .schemas import Bounds

GEOMETRY_RE = re.compile(r"(\d+)x(\d+)")
PIXEL_PROPERTY_RE = re.compile(r"(pixelWidth|pixelHeight):\s*(\d+)")


def _positive(width: int, height: int, text: str) -> Bounds:
    if width <= 0 or height <= 0:
        raise Error(f"Reported dimensions are not positive: {text.strip()!r}")
    return Bounds(width, height)


def parse_geometry(text: str) -> Bounds:
    """Parse ``WIDTHxHEIGHT`` text, as printed by ImageMagick ``identify``.

    The first match wins, so for multi-frame images the first frame's
    dimensions are used.

    Raises:
        Error: If no ``<digits>x<digits>`` substring is present
    """
    match = GEOMETRY_RE.search(text)
    if match is None:
        raise Error(f"Cannot read image dimensions from {text.strip()!r}")
    return _positive(int(match.group(1)), int(match.group(2)), text)


def parse_pixel_properties(text: str) -> Bounds:
    """Parse ``pixelWidth: N`` / ``pixelHeight: N`` lines, as printed by ``sips -g``.

    The two lines may come in either order.

    Raises:
        Error: If either property is missing
    """
    found = {key: int(value) for key, value in PIXEL_PROPERTY_RE.findall(text)}
    if "pixelWidth" not in found or "pixelHeight" not in found:
        raise Error(f"Cannot read image dimensions from {text.strip()!r}")
    return _positive(found["pixelWidth"], found["pixelHeight"], text)
