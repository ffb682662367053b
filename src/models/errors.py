"""
Strip error taxonomy

Every error carries a machine-readable code, a message and a details dict,
so callers (CLI, tests, error callbacks) can report failures uniformly.
"""

from typing import Optional


class StripError(Exception):
    """Base class for LED strip errors"""
    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[dict] = None,
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(StripError):
    """Strip cannot be created with the given settings (e.g. zero pixels)"""
    def __init__(self, message: str = "number of pixels cannot be null", code: str = "NO_PIXELS", **details):
        super().__init__(code=code, message=message, details=details)


class BusyError(StripError):
    """Mutating call while an animation owns the strip"""
    def __init__(self, status_name: str = "RUNNING"):
        super().__init__(
            code="BUSY_PLAYING",
            message="led strip is busy playing an animation",
            details={"status": status_name},
        )


class RangeError(StripError):
    """Sequential write past the last pixel"""
    def __init__(self, position: int, max_range: int):
        self.position = position
        self.max_range = max_range
        super().__init__(
            code="CURSOR_OUT_OF_RANGE",
            message=(
                f"range error: trying to set pixel at position {position}, "
                f"allowed range is [0-{max_range}]"
            ),
            details={"position": position, "max_range": max_range},
        )


class OutOfRangeError(StripError):
    """Positional write outside the strip"""
    def __init__(self, position: int, pixel_count: int):
        self.position = position
        super().__init__(
            code="POSITION_OUT_OF_RANGE",
            message="attempting to set pixel outside of range",
            details={"position": position, "pixel_count": pixel_count},
        )


class EmptyBufferError(StripError):
    """Commit with nothing written since the last commit"""
    def __init__(self):
        super().__init__(
            code="EMPTY_BUFFER",
            message="nothing to render, the buffer is empty",
        )


class TransportError(StripError):
    """Serial I/O failure"""
    def __init__(self, message: str, cause: Optional[BaseException] = None, **details):
        self.cause = cause
        if cause is not None:
            details.setdefault("cause", f"{type(cause).__name__}: {cause}")
        super().__init__(code="TRANSPORT_ERROR", message=message, details=details)


class PatternError(StripError):
    """Malformed pattern or animation source"""
    def __init__(self, message: str, **details):
        super().__init__(code="INVALID_PATTERN", message=message, details=details)
