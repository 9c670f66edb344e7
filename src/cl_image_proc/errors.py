"""Exception hierarchy for cl_image_proc.

Every failure surfaced by a public operation is an ``Error`` subclass, so
callers can catch ``Error`` to handle all of them.
"""


class Error(RuntimeError):
    """Generic backend failure (process/library error, unparseable output)."""


class MissingInput(Error):
    """Raised when the source image does not exist."""


class NoDestinationDir(Error):
    """Raised when the destination's parent directory does not exist."""


class DestinationLocked(Error):
    """Raised when the destination directory is not writable."""


class NoOverwrites(Error):
    """Raised when the destination file already exists."""


class FormatUnsupported(Error):
    """Raised when the active backend cannot process the source format."""


class InvalidOptions(Error):
    """Raised for malformed or contradictory fit specifications."""


class EngineUnavailable(Error):
    """Raised when no usable resize backend can be found or configured."""
