"""Resize backends."""

from .base import CommandLineBackend, ImageBackend
from .convert import ConvertBackend
from .pillow import PillowBackend
from .sips import SipsBackend

BACKENDS: dict[str, type[ImageBackend]] = {
    ConvertBackend.name: ConvertBackend,
    SipsBackend.name: SipsBackend,
    PillowBackend.name: PillowBackend,
}

__all__ = [
    "BACKENDS",
    "CommandLineBackend",
    "ConvertBackend",
    "ImageBackend",
    "PillowBackend",
    "SipsBackend",
]
