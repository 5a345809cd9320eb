class NameSynthError(Exception):
    """Base error for the renderer."""

    code = "ERROR"


class OutOfMemoryError(NameSynthError):
    """Raised when a sample buffer cannot be allocated."""

    code = "OUT_OF_MEMORY"


class OutputOpenError(NameSynthError):
    """Raised when the output file cannot be created."""

    code = "IO_OPEN"


class OutputWriteError(NameSynthError):
    """Raised when writing the output file fails part way."""

    code = "IO_WRITE"
