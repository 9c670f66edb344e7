"""Test configuration and fixtures for cl_image_proc.

This module provides:
- Pytest configuration (markers, external tool checks)
- Sample images generated with Pillow
- A recording fake backend
- Isolation of the process-wide engine selection
"""

import shutil
import sys
from pathlib import Path
from typing import ClassVar

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

import pytest
from PIL import Image

from cl_image_proc import Bounds, ImageBackend, set_engine
from cl_image_proc.engine import ENGINE_ENV_VAR

LANDSCAPE_BOUNDS = (780, 520)
PORTRAIT_BOUNDS = (466, 699)


# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_runtest_setup(item: pytest.Item) -> None:
    """Skip tests whose external tool is not installed."""
    if item.get_closest_marker("requires_convert") and not (
        shutil.which("convert") and shutil.which("identify")
    ):
        pytest.skip("ImageMagick not installed (brew install imagemagick / apt-get install imagemagick)")

    if item.get_closest_marker("requires_sips") and not (
        sys.platform == "darwin" and shutil.which("sips")
    ):
        pytest.skip("sips is only available on macOS")


# ============================================================================
# Engine isolation
# ============================================================================


@pytest.fixture(autouse=True)
def reset_engine(monkeypatch: pytest.MonkeyPatch):
    """Every test starts with no engine assigned and no engine env var."""
    monkeypatch.delenv(ENGINE_ENV_VAR, raising=False)
    set_engine(None)
    yield
    set_engine(None)


# ============================================================================
# Fake backend
# ============================================================================


class FakeBackend(ImageBackend):
    """Backend reporting fixed bounds and writing a marker file on resize."""

    name: ClassVar[str] = "fake"

    def __init__(self, bounds: tuple[int, int] = LANDSCAPE_BOUNDS) -> None:
        super().__init__()
        self.bounds: Bounds = Bounds(*bounds)
        self.bounds_calls: list[Path] = []
        self.resize_calls: list[tuple[Path, Path, int, int]] = []

    @classmethod
    @override
    def is_available(cls) -> bool:
        return True

    @override
    def read_bounds(self, source: Path) -> Bounds:
        self.bounds_calls.append(source)
        return self.bounds

    @override
    def process_exact(self, source: Path, dest: Path, width: int, height: int) -> None:
        self.resize_calls.append((source, dest, width, height))
        _ = dest.write_text(f"{width}x{height}")


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


# ============================================================================
# Sample images
# ============================================================================


def make_image(path: Path, size: tuple[int, int], mode: str = "RGB") -> Path:
    """Write a solid-colour image of ``size`` to ``path``."""
    colors: dict[str, object] = {"RGB": (200, 120, 40), "RGBA": (200, 120, 40, 128), "P": 1}
    color = colors[mode]
    img = Image.new(mode, size, color)
    img.save(path)
    return path


@pytest.fixture
def input_dir(tmp_path: Path) -> Path:
    path = tmp_path / "input"
    path.mkdir()
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    path = tmp_path / "output"
    path.mkdir()
    return path


@pytest.fixture
def landscape_jpg(input_dir: Path) -> Path:
    return make_image(input_dir / "horizontal.jpg", LANDSCAPE_BOUNDS)


@pytest.fixture
def portrait_jpg(input_dir: Path) -> Path:
    return make_image(input_dir / "vertical.jpg", PORTRAIT_BOUNDS)


@pytest.fixture
def landscape_png(input_dir: Path) -> Path:
    return make_image(input_dir / "horizontal.png", LANDSCAPE_BOUNDS)


@pytest.fixture
def landscape_rgba_png(input_dir: Path) -> Path:
    return make_image(input_dir / "alpha.png", LANDSCAPE_BOUNDS, mode="RGBA")


@pytest.fixture
def landscape_gif(input_dir: Path) -> Path:
    return make_image(input_dir / "horizontal.gif", LANDSCAPE_BOUNDS, mode="P")


@pytest.fixture
def not_an_image(input_dir: Path) -> Path:
    path = input_dir / "not.an.image.tmp"
    _ = path.write_text("this is not an image")
    return path
