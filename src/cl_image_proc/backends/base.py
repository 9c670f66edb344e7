"""ImageBackend - abstract base class for resize engines.

A backend does not have to support cropping, only two things: report the
bounds of an image and resize an image to an exact width and height. The
public methods here check their arguments and delegate to ``read_bounds``
and ``process_exact``, which concrete backends implement.

Backends keep no per-call state, so one instance can serve concurrent calls.
"""

import re
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from loguru import logger

from ..common.schemas import Bounds
from ..errors import Error


class ImageBackend(ABC):
    """Stateless resize engine."""

    name: ClassVar[str]

    # Diagnostic lines matching any of these are known to be benign
    HARMLESS: ClassVar[tuple[re.Pattern[str], ...]] = ()

    @classmethod
    @abstractmethod
    def is_available(cls) -> bool:
        """Whether this backend can run on the current host."""
        ...

    def get_bounds(self, path: str | Path) -> Bounds:
        """Return ``(width, height)`` of the image at ``path``.

        Raises:
            Error: If the file is missing or its dimensions cannot be read
        """
        source = Path(path).expanduser().resolve()
        if not source.is_file():
            raise Error(f"No such file {source}")
        return self.read_bounds(source)

    def resize_exact(
        self, source: str | Path, dest: str | Path, width: int, height: int
    ) -> None:
        """Resize ``source`` to exactly ``width`` x ``height`` into ``dest``.

        The aspect ratio is not preserved.

        Raises:
            FormatUnsupported: If this backend cannot handle the source format
            Error: If the backend fails
        """
        if width <= 0 or height <= 0:
            raise Error(f"Cannot resize to {width}x{height}")
        source_path = Path(source)
        self.check_source(source_path)
        self.process_exact(source_path, Path(dest), width, height)

    def check_source(self, source: Path) -> None:
        """Raise ``FormatUnsupported`` if ``source`` cannot be resized by this backend."""
        return None

    @abstractmethod
    def read_bounds(self, source: Path) -> Bounds: ...

    @abstractmethod
    def process_exact(self, source: Path, dest: Path, width: int, height: int) -> None: ...

    # ─────────────────────────────────────────────
    # Diagnostics
    # ─────────────────────────────────────────────

    def significant_diagnostics(self, diagnostics: str) -> str:
        """Drop lines matching ``HARMLESS`` and return whatever is left."""
        kept: list[str] = []
        for line in diagnostics.strip().splitlines():
            line = line.strip()
            if not line:
                continue
            if any(pattern.search(line) for pattern in self.HARMLESS):
                logger.debug(f"{self.name}: ignoring harmless diagnostic: {line}")
                continue
            kept.append(line)
        return "\n".join(kept)


class CommandLineBackend(ImageBackend):
    """Backend driving an external command-line tool."""

    def __init__(self, timeout: float | None = None) -> None:
        """
        Args:
            timeout: Seconds to wait for the tool before giving up.
                     None waits indefinitely.
        """
        self.timeout: float | None = timeout

    def run_tool(self, command: list[str]) -> str:
        """Run ``command`` and return its stripped standard output.

        Raises:
            Error: If the tool cannot be started, times out, exits with a
                   non-zero status or prints anything not deemed harmless
                   on standard error
        """
        logger.debug(" ".join(command))

        try:
            process = subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise Error(f"{command[0]} timed out after {exc.timeout}s") from exc
        except (OSError, ValueError, subprocess.SubprocessError) as exc:
            raise Error(f"Failed to start {command[0]}: {exc}") from exc

        problem = self.significant_diagnostics(process.stderr or "")
        if problem:
            logger.error(f"{command[0]} reported: {problem}")
            raise Error(f"Problem: {problem}")

        if process.returncode != 0:
            raise Error(f"{command[0]} exited with status {process.returncode}")

        return (process.stdout or "").strip()
