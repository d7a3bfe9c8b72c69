class DirtallyError(Exception):
    """Base exception for domain-specific errors."""


class ConfigurationError(DirtallyError):
    """Bad CLI args or unusable settings (e.g., capacity below 1)."""


class FilesystemError(DirtallyError):
    """A directory that could not be opened ("open") or fully enumerated ("read")."""

    def __init__(self, path: str, cause: OSError, action: str = "open") -> None:
        self.path = path
        self.cause = cause
        self.action = action
        super().__init__(f"cannot {action}: {path}: {cause.strerror or cause}")


class ScanInvariantError(DirtallyError):
    """Internal bookkeeping of a scan was violated. Always a bug."""


class GateError(ScanInvariantError):
    """Concurrency gate released more often than it was acquired."""


class CounterError(ScanInvariantError):
    """Completion counter used after reaching zero, or driven below it."""


class StreamClosedError(ScanInvariantError):
    """Size-event stream written to or closed after it was closed."""
