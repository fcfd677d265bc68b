class ToolkitError(Exception):
    """Base class for toolkit-level failures."""

class UnsupportedAlgorithm(ToolkitError, ValueError):
    """
    Non-recoverable: the caller passed an algorithm selector outside the
    supported set. Nothing is hashed with a fallback algorithm.
    """

class EntropyUnavailable(ToolkitError, RuntimeError):
    """
    Fatal: the OS secure random source could not be read.
    Callers must not substitute a weaker generator.
    """
