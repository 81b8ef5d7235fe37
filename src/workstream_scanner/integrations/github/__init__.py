"""GitHub label synchronisation."""

from .client import GitHubLabelBackend
from .labels import (
    GhCliLabelBackend,
    LabelBackend,
    LabelSyncAction,
    LabelSyncResult,
    LabelSynchronizer,
)

__all__ = [
    "GitHubLabelBackend",
    "GhCliLabelBackend",
    "LabelBackend",
    "LabelSyncAction",
    "LabelSyncResult",
    "LabelSynchronizer",
]
