"""ImageMagick backend (``identify`` / ``convert``)."""

import re
import shutil
from pathlib import Path
import sys
from typing import ClassVar

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

from ..common.bounds import parse_geometry
from ..common.schemas import Bounds
from .base import CommandLineBackend


class ConvertBackend(CommandLineBackend):
    name: ClassVar[str] = "convert"

    HARMLESS: ClassVar[tuple[re.Pattern[str], ...]] = (
        re.compile(r"unknown field with tag"),
        # ImageMagick 7 still ships convert, but nags about it
        re.compile(r"The convert command is deprecated"),
    )

    @classmethod
    @override
    def is_available(cls) -> bool:
        return shutil.which("convert") is not None and shutil.which("identify") is not None

    @override
    def read_bounds(self, source: Path) -> Bounds:
        return parse_geometry(self.run_tool(["identify", "-format", "%wx%h\n", str(source)]))

    @override
    def process_exact(self, source: Path, dest: Path, width: int, height: int) -> None:
        # The trailing "!" makes ImageMagick ignore the aspect ratio
        _ = self.run_tool(
            [
                "convert",
                "-filter",
                "Gaussian",
                "-resize",
                f"{width}x{height}!",
                str(source),
                str(dest),
            ]
        )
