from .errors import (
    ConfigurationError,
    CounterError,
    DirtallyError,
    FilesystemError,
    GateError,
    ScanInvariantError,
    StreamClosedError,
)
from .models import DirEntry, DirectoryListing, ScanOutcome, Totals, TotalsSnapshot

__all__ = [
    "ConfigurationError",
    "CounterError",
    "DirtallyError",
    "FilesystemError",
    "GateError",
    "ScanInvariantError",
    "StreamClosedError",
    "DirEntry",
    "DirectoryListing",
    "ScanOutcome",
    "Totals",
    "TotalsSnapshot",
]
