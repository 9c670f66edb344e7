"""Resize orchestration.

``ImageProcessor`` validates a request, asks its backend for the source
bounds, computes the target size and hands the exact resize to the backend.
All per-call data travels in a ``ResizeRequest``; the processor itself only
holds the backend, so a single instance is safe to share between threads.

    processor = ImageProcessor()
    thumb = processor.resize("image.png", "thumb-{width}x{height}.png", {"width": 50, "height": 50})
"""

import os
from collections.abc import Mapping
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from .backends import ImageBackend
from .common.schemas import (
    Bounds,
    FitPolicy,
    FitSpec,
    ResizeOptions,
    ResizeRequest,
    ResizeResult,
)
from .engine import get_engine
from .errors import (
    DestinationLocked,
    InvalidOptions,
    MissingInput,
    NoDestinationDir,
    NoOverwrites,
)
from .geometry import fit, fit_crop
from .utils.profiling import timed

PathLike = str | os.PathLike[str]

WIDTH_TOKEN = "{width}"
HEIGHT_TOKEN = "{height}"


def fill_dest_template(dest: Path, target: Bounds) -> Path:
    """Substitute the target dimensions into the file name of ``dest``.

    Two conventions are understood: printf-style, where a name containing
    ``%`` is formatted with ``(width, height)`` (``thumb_%dx%d.jpg``), and
    the ``{width}`` / ``{height}`` tokens (``thumb_{width}x{height}.jpg``).

    Raises:
        InvalidOptions: If a ``%`` pattern does not take exactly two values
    """
    name = dest.name
    if "%" in name:
        try:
            name = name % (target.width, target.height)
        except (TypeError, ValueError, KeyError) as exc:
            raise InvalidOptions(f"Bad destination pattern {dest.name!r}: {exc}") from exc
    if WIDTH_TOKEN in name or HEIGHT_TOKEN in name:
        name = name.replace(WIDTH_TOKEN, str(target.width)).replace(HEIGHT_TOKEN, str(target.height))
    return dest if name == dest.name else dest.with_name(name)


def validate_paths(source_path: PathLike, dest_path: PathLike) -> tuple[Path, Path]:
    """Resolve both paths and check the source can be read and the destination written.

    Returns:
        The absolute source and destination paths

    Raises:
        MissingInput, NoDestinationDir, DestinationLocked, NoOverwrites
    """
    source = Path(source_path).expanduser().resolve()
    dest = Path(dest_path).expanduser().resolve()
    dest_dir = dest.parent

    if not source.exists():
        raise MissingInput(f"No such file or directory {source}")
    if not dest_dir.is_dir():
        raise NoDestinationDir(f"No destination directory {dest_dir}")
    if not os.access(dest_dir, os.W_OK):
        raise DestinationLocked(f"Cannot write to {dest_dir}")
    if dest.exists():
        raise NoOverwrites(f"This will overwrite {dest}")
    return source, dest


class ImageProcessor:
    """Runs resize requests against one backend."""

    def __init__(self, backend: ImageBackend | None = None) -> None:
        """
        Args:
            backend: Backend to use. Defaults to the process-wide active engine.
        """
        self.backend: ImageBackend = backend if backend is not None else get_engine()

    def get_bounds(self, path: PathLike) -> Bounds:
        """Quickly get bounds of an image, e.g. ``(100, 120)``."""
        return self.backend.get_bounds(Path(path).expanduser().resolve())

    def plan(self, bounds: Bounds, request: ResizeRequest) -> Bounds:
        """Target dimensions for ``request`` given the source ``bounds``."""
        match request.policy:
            case FitPolicy.EXACT:
                # Both sides are guaranteed by ResizeRequest validation
                return Bounds(request.spec.width or 0, request.spec.height or 0)
            case FitPolicy.FIT_INSIDE:
                return fit(bounds, request.spec)
            case FitPolicy.FIT_FILL:
                return fit_crop(bounds, request.spec)

    @timed
    def execute(self, request: ResizeRequest) -> ResizeResult:
        """Validate, fit and resize. Nothing touches the backend until validation passed."""
        source, dest = validate_paths(request.source_path, request.dest_path)
        # Malformed name patterns fail here, before the backend is called
        _ = fill_dest_template(dest, Bounds(1, 1))
        self.backend.check_source(source)

        bounds = self.backend.get_bounds(source)
        target = self.plan(bounds, request)

        final_dest = fill_dest_template(dest, target)
        if final_dest != dest and final_dest.exists():
            raise NoOverwrites(f"This will overwrite {final_dest}")

        self.backend.resize_exact(source, final_dest, target.width, target.height)
        logger.info(
            f"Resized {source} ({bounds.width}x{bounds.height}) to {final_dest} "
            + f"({target.width}x{target.height}) with {self.backend.name}"
        )
        return ResizeResult(dest_path=final_dest, width=target.width, height=target.height)

    # ─────────────────────────────────────────────
    # Public resize operations
    # ─────────────────────────────────────────────

    def _run(
        self,
        source_path: PathLike,
        dest_path: PathLike,
        policy: FitPolicy,
        width: object = None,
        height: object = None,
    ) -> str:
        spec = FitSpec.of(width=width, height=height)
        try:
            request = ResizeRequest(
                source_path=Path(source_path),
                dest_path=Path(dest_path),
                policy=policy,
                spec=spec,
            )
        except ValidationError as exc:
            raise InvalidOptions(str(exc)) from exc
        return str(self.execute(request).dest_path)

    def resize_exact(
        self, source_path: PathLike, dest_path: PathLike, width: object, height: object
    ) -> str:
        """Resize to exactly ``width`` x ``height``. Will stretch and squash."""
        return self._run(source_path, dest_path, FitPolicy.EXACT, width, height)

    def resize_fit_both(
        self, source_path: PathLike, dest_path: PathLike, width: object, height: object
    ) -> str:
        """Resize proportionally so the image fits into the ``width`` x ``height`` rect."""
        return self._run(source_path, dest_path, FitPolicy.FIT_INSIDE, width, height)

    resize_fit = resize_fit_both

    def resize_fit_width(self, source_path: PathLike, dest_path: PathLike, width: object) -> str:
        return self._run(source_path, dest_path, FitPolicy.FIT_INSIDE, width=width)

    def resize_fit_height(self, source_path: PathLike, dest_path: PathLike, height: object) -> str:
        return self._run(source_path, dest_path, FitPolicy.FIT_INSIDE, height=height)

    def resize_fit_square(self, source_path: PathLike, dest_path: PathLike, side: object) -> str:
        """Fit the biggest side of the image to the side of a square. A must for thumbs."""
        return self.resize_fit_both(source_path, dest_path, side, side)

    def resize_fit_fill(
        self, source_path: PathLike, dest_path: PathLike, width: object, height: object
    ) -> str:
        """Resize so the image always covers the ``width`` x ``height`` rect.

        One side overflows the rect; clip it when displaying (e.g. with CSS
        ``overflow: hidden``).
        """
        return self._run(source_path, dest_path, FitPolicy.FIT_FILL, width, height)

    def resize(
        self,
        source_path: PathLike,
        dest_path: PathLike,
        options: ResizeOptions | Mapping[str, object],
    ) -> str:
        """Resize according to ``options`` (``width``, ``height``, ``fill``).

        Both sides and ``fill`` crop-fill the rect, both sides fit inside it,
        a single side fits that side.

        Raises:
            InvalidOptions: For unknown options, None values, or no width/height
        """
        opts = ResizeOptions.parse(options)

        if opts.width is not None and opts.height is not None:
            if opts.fill:
                return self.resize_fit_fill(source_path, dest_path, opts.width, opts.height)
            return self.resize_fit_both(source_path, dest_path, opts.width, opts.height)
        if opts.width is not None:
            return self.resize_fit_width(source_path, dest_path, opts.width)
        return self.resize_fit_height(source_path, dest_path, opts.height)


# ─────────────────────────────────────────────
# Module-level shortcuts using the active engine
# ─────────────────────────────────────────────


def get_bounds(path: PathLike) -> Bounds:
    return ImageProcessor().get_bounds(path)


def resize(
    source_path: PathLike, dest_path: PathLike, options: ResizeOptions | Mapping[str, object]
) -> str:
    return ImageProcessor().resize(source_path, dest_path, options)


def resize_exact(source_path: PathLike, dest_path: PathLike, width: object, height: object) -> str:
    return ImageProcessor().resize_exact(source_path, dest_path, width, height)


def resize_fit_both(
    source_path: PathLike, dest_path: PathLike, width: object, height: object
) -> str:
    return ImageProcessor().resize_fit_both(source_path, dest_path, width, height)


resize_fit = resize_fit_both


def resize_fit_width(source_path: PathLike, dest_path: PathLike, width: object) -> str:
    return ImageProcessor().resize_fit_width(source_path, dest_path, width)


def resize_fit_height(source_path: PathLike, dest_path: PathLike, height: object) -> str:
    return ImageProcessor().resize_fit_height(source_path, dest_path, height)


def resize_fit_square(source_path: PathLike, dest_path: PathLike, side: object) -> str:
    return ImageProcessor().resize_fit_square(source_path, dest_path, side)


def resize_fit_fill(source_path: PathLike, dest_path: PathLike, width: object, height: object) -> str:
    return ImageProcessor().resize_fit_fill(source_path, dest_path, width, height)
