"""Pure geometry fitting.

Computes target dimensions from source bounds and a desired width and/or
height. All intermediate values are exact fractions; rounding (half-up)
happens once, on the final dimensions.

    fit_sizes((1024, 500), width=50)                         # Bounds(50, 24)
    fit_sizes_with_crop((780, 520), width=260, height=250)   # Bounds(375, 250)
"""

import math
from fractions import Fraction

from .common.schemas import Bounds, FitSpec, check_bounds
from .errors import InvalidOptions


def round_half_up(value: Fraction) -> int:
    return math.floor(value + Fraction(1, 2))


def _to_pixels(width: Fraction, height: Fraction) -> Bounds:
    # Extreme aspect ratios must not collapse a side to nothing
    return Bounds(max(round_half_up(width), 1), max(round_half_up(height), 1))


def fit(bounds: tuple[int, int], spec: FitSpec) -> Bounds:
    """Fit ``bounds`` inside the width and/or height of ``spec``.

    The aspect ratio is kept, and the result never exceeds a requested side.
    When both sides are requested, the one needing the smaller scale factor
    drives the fit and the other side follows proportionally.

    Raises:
        InvalidOptions: If ``spec`` has neither width nor height
    """
    source = check_bounds(bounds)
    ratio = Fraction(source.width, source.height)

    if spec.width is None and spec.height is None:
        raise InvalidOptions(f"The options {spec.model_dump()} do not contain proper bounds")

    if spec.height is None or (
        spec.width is not None
        and Fraction(spec.width, source.width) <= Fraction(spec.height, source.height)
    ):
        target_width = Fraction(spec.width)  # pyright: ignore[reportArgumentType]
        result = _to_pixels(target_width, target_width / ratio)
    else:
        target_height = Fraction(spec.height)
        result = _to_pixels(target_height * ratio, target_height)

    # Rounding may push a side past what was asked for
    width = min(result.width, spec.width) if spec.width is not None else result.width
    height = min(result.height, spec.height) if spec.height is not None else result.height
    return Bounds(width, height)


def fit_crop(bounds: tuple[int, int], spec: FitSpec) -> Bounds:
    """Scale ``bounds`` so that the result covers the whole requested rect.

    The larger of the two scale factors is used, so one side matches the
    request and the other overflows it. Nothing is cropped here; clip the
    overflow when displaying the image.

    Raises:
        InvalidOptions: If ``spec`` lacks width or height
    """
    source = check_bounds(bounds)
    if spec.width is None or spec.height is None:
        raise InvalidOptions("Fitting with crop requires both width and height")

    scale = max(Fraction(spec.width, source.width), Fraction(spec.height, source.height))
    return _to_pixels(source.width * scale, source.height * scale)


def fit_sizes(bounds: tuple[int, int], width: object = None, height: object = None) -> Bounds:
    """``fit`` taking loosely typed width/height (ints, numeric strings or None)."""
    return fit(bounds, FitSpec.of(width=width, height=height))


def fit_sizes_with_crop(bounds: tuple[int, int], width: object, height: object) -> Bounds:
    """``fit_crop`` taking loosely typed width/height (ints or numeric strings)."""
    return fit_crop(bounds, FitSpec.of(width=width, height=height))
