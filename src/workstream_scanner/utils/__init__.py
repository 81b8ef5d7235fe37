"""Shared utility functions for the workstream scanner."""

from .atomic_io import atomic_write_text
from .error_handling import (
    log_and_ignore,
    handle_filesystem_errors,
    ErrorContext,
)
from .rich_logging import (
    ScanContextLogger,
    ScanLogFormatter,
    get_scan_logger,
    setup_logging,
)
from .subprocess_utils import SubprocessError, run_command, check_command_exists
from .validators import validate_label_color, validate_owner_repo

__all__ = [
    # Atomic I/O
    "atomic_write_text",
    # Error handling
    "log_and_ignore",
    "handle_filesystem_errors",
    "ErrorContext",
    # Logging
    "ScanContextLogger",
    "ScanLogFormatter",
    "get_scan_logger",
    "setup_logging",
    # Subprocess utilities
    "SubprocessError",
    "run_command",
    "check_command_exists",
    # Validators
    "validate_label_color",
    "validate_owner_repo",
]
