"""In-process Pillow backend."""

from pathlib import Path
import sys
from typing import ClassVar

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

from PIL import Image, UnidentifiedImageError

from ..common.schemas import Bounds
from ..errors import Error
from .base import ImageBackend

# Modes the JPEG encoder can write directly
JPEG_MODES = frozenset({"L", "RGB", "CMYK"})


def target_format(dest: Path, source_format: str | None) -> str | None:
    """Pillow format name for ``dest``, falling back to the source format."""
    if not dest.suffix:
        return source_format
    return Image.registered_extensions().get(dest.suffix.lower())


class PillowBackend(ImageBackend):
    """Resizes with Pillow directly instead of shelling out."""

    name: ClassVar[str] = "pillow"

    @classmethod
    @override
    def is_available(cls) -> bool:
        return True

    @override
    def read_bounds(self, source: Path) -> Bounds:
        try:
            with Image.open(source) as img:
                width, height = img.size
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            raise Error(f"Cannot read image dimensions of {source}: {exc}") from exc
        if width <= 0 or height <= 0:
            raise Error(f"Image {source} reports dimensions {width}x{height}")
        return Bounds(width, height)

    @override
    def process_exact(self, source: Path, dest: Path, width: int, height: int) -> None:
        try:
            with Image.open(source) as img:
                fmt = target_format(dest, img.format)
                if fmt is None:
                    raise Error(f"Unknown output format for {dest.name}")

                resized = img.resize((width, height), Image.Resampling.LANCZOS)

                # JPEG has no alpha channel or palette
                if fmt == "JPEG" and resized.mode not in JPEG_MODES:
                    resized = resized.convert("RGB")

                resized.save(dest, format=fmt)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise Error(f"Pillow failed to resize {source}: {exc}") from exc
