"""Exceptions raised by the scanning pipeline and its collaborators."""

from typing import Optional


class WorkstreamScannerError(Exception):
    """Base class for all scanner errors."""


class ScanIOError(WorkstreamScannerError):
    """A file or directory could not be read during a tree walk.

    Never fatal: the matcher logs it as a warning and skips the subtree.
    """

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read {path}: {reason}")


class ConfigurationError(WorkstreamScannerError):
    """Fatal setup problem: missing root, unwritable output, invalid config."""


class LabelSyncError(WorkstreamScannerError):
    """A single label could not be created or updated."""

    def __init__(self, label_name: str, message: str, cause: Optional[Exception] = None):
        self.label_name = label_name
        self.cause = cause
        super().__init__(f"Label '{label_name}': {message}")
