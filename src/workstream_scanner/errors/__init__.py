"""Error taxonomy and user-friendly error translation."""

from .exceptions import (
    ConfigurationError,
    LabelSyncError,
    ScanIOError,
    WorkstreamScannerError,
)
from .translator import ErrorTranslator, UserFriendlyError

__all__ = [
    "ConfigurationError",
    "LabelSyncError",
    "ScanIOError",
    "WorkstreamScannerError",
    "ErrorTranslator",
    "UserFriendlyError",
]
