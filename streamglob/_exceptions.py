class BadPatternError(ValueError):
    """Raised when a glob pattern is syntactically malformed. Subclass of ValueError."""
    def __init__(self, pattern: str, reason: str = "syntax error in pattern") -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"{reason}: {pattern!r}")


class GlobCancelledError(Exception):
    """Raised by the collecting wrappers when the caller cancelled the glob."""
    def __init__(self, message: str = "glob cancelled") -> None:
        super().__init__(message)


class GlobTimeoutError(GlobCancelledError, TimeoutError):
    """Raised when the glob's deadline passed. Subclass of GlobCancelledError and TimeoutError."""
    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout
        if timeout is None:
            message = "glob deadline exceeded"
        else:
            message = f"glob deadline exceeded after {timeout:g} seconds"
        super().__init__(message)


class GlobStreamError(RuntimeError):
    """Raised when a stream's background traversal failed unexpectedly."""
