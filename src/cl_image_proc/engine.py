"""Process-wide selection of the active resize backend.

The first call to ``get_engine()`` picks a backend and caches it. The
choice is, in order:

1. whatever was assigned with ``set_engine()``;
2. the backend named by the ``CL_IMAGE_PROC_ENGINE`` environment variable;
3. ImageMagick, if ``convert`` is on PATH;
4. ``sips`` on macOS;
5. the in-process Pillow backend.

Nothing invalidates the cache automatically; call ``set_engine(None)`` to
detect again.
"""

import os
import threading

from loguru import logger

from .backends import (
    BACKENDS,
    CommandLineBackend,
    ConvertBackend,
    ImageBackend,
    PillowBackend,
    SipsBackend,
)
from .errors import EngineUnavailable

ENGINE_ENV_VAR = "CL_IMAGE_PROC_ENGINE"

_DETECTION_ORDER: tuple[type[ImageBackend], ...] = (ConvertBackend, SipsBackend, PillowBackend)

_engine: ImageBackend | None = None
_lock = threading.Lock()


def create_engine(name: str, timeout: float | None = None) -> ImageBackend:
    """Instantiate the backend registered under ``name``.

    Raises:
        EngineUnavailable: If ``name`` is unknown or cannot run on this host
    """
    backend_cls = BACKENDS.get(name.strip().lower())
    if backend_cls is None:
        raise EngineUnavailable(
            f"Unknown image engine {name!r}. Choose one of: {', '.join(sorted(BACKENDS))}"
        )
    if not backend_cls.is_available():
        raise EngineUnavailable(f"Image engine {backend_cls.name!r} is not usable on this host")
    if issubclass(backend_cls, CommandLineBackend):
        return backend_cls(timeout=timeout)
    return backend_cls()


def available_engines() -> list[str]:
    """Names of the backends usable on this host."""
    return [name for name, backend_cls in BACKENDS.items() if backend_cls.is_available()]


def detect_engine() -> ImageBackend:
    """Pick a backend from the environment variable or by probing the host.

    Raises:
        EngineUnavailable: If no backend is usable
    """
    configured = os.environ.get(ENGINE_ENV_VAR)
    if configured:
        logger.debug(f"Using image engine {configured!r} from {ENGINE_ENV_VAR}")
        return create_engine(configured)

    for backend_cls in _DETECTION_ORDER:
        if backend_cls.is_available():
            logger.info(f"Detected image engine: {backend_cls.name}")
            return backend_cls()

    raise EngineUnavailable(
        "This system has no image processing facilities that we can use. "
        + "Install ImageMagick or Pillow."
    )


def get_engine() -> ImageBackend:
    """Return the active backend, detecting it on first use."""
    global _engine

    with _lock:
        if _engine is None:
            _engine = detect_engine()
        return _engine


def set_engine(engine: ImageBackend | str | None) -> None:
    """Assign the active backend. The assignment sticks until changed.

    Args:
        engine: A backend instance, a registered backend name, or None to
                clear the assignment and detect again on next use.
    """
    global _engine

    if isinstance(engine, str):
        engine = create_engine(engine)

    with _lock:
        _engine = engine

    if engine is not None:
        logger.debug(f"Image engine set to {type(engine).__name__}")
