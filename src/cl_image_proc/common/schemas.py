"""Typed values passed between the processor, the fitter and the backends."""

from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path
from typing import NamedTuple, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    ValidationError,
    field_validator,
    model_validator,
)

from ..errors import InvalidOptions

# ─────────────────────────────────────────────────────────────
# Bounds
# ─────────────────────────────────────────────────────────────


class Bounds(NamedTuple):
    """Pixel dimensions of an image, ``(width, height)``."""

    width: int
    height: int


def check_bounds(bounds: tuple[int, int]) -> Bounds:
    """Coerce a ``(width, height)`` pair to ``Bounds``, rejecting non-positive sides."""
    try:
        width, height = (int(side) for side in bounds)
    except (TypeError, ValueError) as exc:
        raise InvalidOptions(f"Bounds must be a pair of integers, got {bounds!r}") from exc
    if width <= 0 or height <= 0:
        raise InvalidOptions(f"Bounds must be positive, got {width}x{height}")
    return Bounds(width, height)


def _error_summary(exc: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(loc) for loc in err['loc']) or 'options'}: {err['msg']}"
        for err in exc.errors()
    )


def _reject_bool(value: object) -> object:
    # bool is an int subclass and pydantic would accept True as 1
    if isinstance(value, bool):
        raise ValueError("must be an integer, not a boolean")
    return value


# ─────────────────────────────────────────────────────────────
# Fit specification
# ─────────────────────────────────────────────────────────────


class FitSpec(BaseModel):
    """Desired width and/or height. Missing entries are simply absent."""

    model_config = ConfigDict(frozen=True)

    width: PositiveInt | None = Field(default=None, description="Target width in pixels")
    height: PositiveInt | None = Field(default=None, description="Target height in pixels")

    @field_validator("width", "height", mode="before")
    @classmethod
    def reject_bools(cls, value: object) -> object:
        return _reject_bool(value)

    @classmethod
    def of(cls, width: object = None, height: object = None) -> Self:
        """Build a spec from loosely typed values (ints or numeric strings)."""
        try:
            return cls.model_validate({"width": width, "height": height})
        except ValidationError as exc:
            raise InvalidOptions(f"Invalid fit specification: {_error_summary(exc)}") from exc

    @property
    def has_width(self) -> bool:
        return self.width is not None

    @property
    def has_height(self) -> bool:
        return self.height is not None


# ─────────────────────────────────────────────────────────────
# Resize request / result
# ─────────────────────────────────────────────────────────────


class FitPolicy(StrEnum):
    EXACT = "exact"
    FIT_INSIDE = "fit_inside"
    FIT_FILL = "fit_fill"


class ResizeRequest(BaseModel):
    """A single resize call. Created per call and never stored on a backend."""

    model_config = ConfigDict(frozen=True)

    source_path: Path
    dest_path: Path
    policy: FitPolicy
    spec: FitSpec

    @model_validator(mode="after")
    def validate_spec_for_policy(self) -> Self:
        if self.policy is FitPolicy.FIT_INSIDE:
            if not (self.spec.has_width or self.spec.has_height):
                raise ValueError("Pass width, height or both")
        elif not (self.spec.has_width and self.spec.has_height):
            raise ValueError(f"Policy {self.policy.value} requires both width and height")
        return self


class ResizeResult(BaseModel):
    """Where the resized image went and its dimensions."""

    model_config = ConfigDict(frozen=True)

    dest_path: Path
    width: PositiveInt
    height: PositiveInt

    @property
    def bounds(self) -> Bounds:
        return Bounds(self.width, self.height)


# ─────────────────────────────────────────────────────────────
# Options accepted by the resize() dispatcher
# ─────────────────────────────────────────────────────────────


class ResizeOptions(BaseModel):
    """Options for ``resize()``.

    Attributes:
        width: Maximum width of the target rect
        height: Maximum height of the target rect
        fill: Cover the rect (crop-fill) instead of fitting inside it.
              Only honoured when both width and height are given.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    width: PositiveInt | None = None
    height: PositiveInt | None = None
    fill: bool = False

    @field_validator("width", "height", mode="before")
    @classmethod
    def reject_bools(cls, value: object) -> object:
        return _reject_bool(value)

    @model_validator(mode="before")
    @classmethod
    def reject_nil_values(cls, data: object) -> object:
        if isinstance(data, Mapping):
            for key, value in data.items():  # pyright: ignore[reportUnknownVariableType]
                if value is None:
                    raise ValueError(f"{key!r} cannot be set to None")
        return data

    @model_validator(mode="after")
    def require_a_dimension(self) -> Self:
        if self.width is None and self.height is None:
            raise ValueError("Pass width, height or both")
        return self

    @classmethod
    def parse(cls, options: "ResizeOptions | Mapping[str, object]") -> "ResizeOptions":
        if isinstance(options, ResizeOptions):
            return options
        if isinstance(options, str):
            raise InvalidOptions("Geometry strings are not supported, pass width and/or height")
        try:
            return cls.model_validate(options)
        except ValidationError as exc:
            raise InvalidOptions(f"Invalid resize options: {_error_summary(exc)}") from exc
