"""macOS ``sips`` backend."""

import re
import shutil
import sys
from pathlib import Path
from typing import ClassVar

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

from ..common.bounds import parse_pixel_properties
from ..common.schemas import Bounds
from ..errors import FormatUnsupported
from .base import CommandLineBackend

FORMAT_MAP: dict[str, str] = {
    ".tif": "tiff",
    ".tiff": "tiff",
    ".png": "png",
    ".gif": "gif",
    ".jpg": "jpeg",
    ".jpeg": "jpeg",
}
DEFAULT_FORMAT = "jpeg"

# sips cannot resample indexed colour images
INDEXED_FORMATS = frozenset({"png", "gif"})


def detect_source_format(source: str | Path) -> str:
    """Guess the sips format token from the file extension, defaulting to jpeg."""
    return FORMAT_MAP.get(Path(source).suffix.lower(), DEFAULT_FORMAT)


class SipsBackend(CommandLineBackend):
    name: ClassVar[str] = "sips"

    HARMLESS: ClassVar[tuple[re.Pattern[str], ...]] = (
        re.compile(r"XRefStm encountered but"),
        re.compile(r"CGColor"),
    )

    @classmethod
    @override
    def is_available(cls) -> bool:
        return sys.platform == "darwin" and shutil.which("sips") is not None

    @override
    def check_source(self, source: Path) -> None:
        if detect_source_format(source) in INDEXED_FORMATS:
            raise FormatUnsupported(
                f"sips cannot resize indexed color GIF or PNG images ({source.name})"
            )

    @override
    def read_bounds(self, source: Path) -> Bounds:
        return parse_pixel_properties(
            self.run_tool(["sips", "-g", "pixelWidth", "-g", "pixelHeight", str(source)])
        )

    @override
    def process_exact(self, source: Path, dest: Path, width: int, height: int) -> None:
        # sips takes the height first
        _ = self.run_tool(
            [
                "sips",
                "-s",
                "format",
                detect_source_format(source),
                "--resampleHeightWidth",
                str(height),
                str(width),
                str(source),
                "--out",
                str(dest),
            ]
        )
