"""cl_image_proc - geometry fitting and pluggable image resize backends."""

from .backends import (
    BACKENDS,
    CommandLineBackend,
    ConvertBackend,
    ImageBackend,
    PillowBackend,
    SipsBackend,
)
from .common.bounds import parse_geometry, parse_pixel_properties
from .common.schemas import (
    Bounds,
    FitPolicy,
    FitSpec,
    ResizeOptions,
    ResizeRequest,
    ResizeResult,
)
from .engine import available_engines, create_engine, detect_engine, get_engine, set_engine
from .errors import (
    DestinationLocked,
    EngineUnavailable,
    Error,
    FormatUnsupported,
    InvalidOptions,
    MissingInput,
    NoDestinationDir,
    NoOverwrites,
)
from .geometry import fit, fit_crop, fit_sizes, fit_sizes_with_crop
from .processor import (
    ImageProcessor,
    get_bounds,
    resize,
    resize_exact,
    resize_fit,
    resize_fit_both,
    resize_fit_fill,
    resize_fit_height,
    resize_fit_square,
    resize_fit_width,
)

__version__ = "1.0.0"

__all__ = [
    "BACKENDS",
    "Bounds",
    "CommandLineBackend",
    "ConvertBackend",
    "DestinationLocked",
    "EngineUnavailable",
    "Error",
    "FitPolicy",
    "FitSpec",
    "FormatUnsupported",
    "ImageBackend",
    "ImageProcessor",
    "InvalidOptions",
    "MissingInput",
    "NoDestinationDir",
    "NoOverwrites",
    "PillowBackend",
    "ResizeOptions",
    "ResizeRequest",
    "ResizeResult",
    "SipsBackend",
    "__version__",
    "available_engines",
    "create_engine",
    "detect_engine",
    "fit",
    "fit_crop",
    "fit_sizes",
    "fit_sizes_with_crop",
    "get_bounds",
    "get_engine",
    "parse_geometry",
    "parse_pixel_properties",
    "resize",
    "resize_exact",
    "resize_fit",
    "resize_fit_both",
    "resize_fit_fill",
    "resize_fit_height",
    "resize_fit_square",
    "resize_fit_width",
    "set_engine",
]
