"""Common module - schemas and the bounds parser."""

from .bounds import parse_geometry, parse_pixel_properties
from .schemas import (
    Bounds,
    FitPolicy,
    FitSpec,
    ResizeOptions,
    ResizeRequest,
    ResizeResult,
    check_bounds,
)

__all__ = [
    "Bounds",
    "FitPolicy",
    "FitSpec",
    "ResizeOptions",
    "ResizeRequest",
    "ResizeResult",
    "check_bounds",
    "parse_geometry",
    "parse_pixel_properties",
]
