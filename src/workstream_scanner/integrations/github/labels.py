"""Create-or-update synchronisation of issue tracker labels."""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from ...core.config import LabelDefinition
from ...errors import ConfigurationError, LabelSyncError
from ...utils.error_handling import ErrorContext
from ...utils.subprocess_utils import check_command_exists, run_command

logger = logging.getLogger(__name__)


class LabelBackend(ABC):
    """Narrow interface over an issue tracker's label API."""

    @abstractmethod
    def get_label(self, name: str) -> Optional[LabelDefinition]:
        ...

    @abstractmethod
    def create_label(self, label: LabelDefinition) -> None:
        ...

    @abstractmethod
    def update_label(self, label: LabelDefinition) -> None:
        ...


class GhCliLabelBackend(LabelBackend):
    """Label operations through the GitHub CLI (``gh``), using its stored auth."""

    def __init__(self, repository: str, executable: str = "gh", timeout: int = 60):
        self.repository = repository
        self.executable = executable
        self.timeout = timeout
        self._labels: Optional[dict[str, LabelDefinition]] = None

    def ensure_available(self) -> None:
        if not check_command_exists(self.executable):
            raise ConfigurationError(
                f"GitHub CLI ({self.executable}) not found. Please install and authenticate."
            )

    def _gh(self, *args: str):
        return run_command(
            [self.executable, *args, "-R", self.repository],
            timeout=self.timeout,
        )

    def _load(self) -> dict[str, LabelDefinition]:
        if self._labels is None:
            result = self._gh("label", "list", "--json", "name,color,description", "--limit", "1000")
            self._labels = {
                item["name"]: LabelDefinition(
                    name=item["name"],
                    color=item["color"],
                    description=item.get("description") or "",
                )
                for item in json.loads(result.stdout or "[]")
            }
        return self._labels

    def get_label(self, name: str) -> Optional[LabelDefinition]:
        return self._load().get(name)

    def create_label(self, label: LabelDefinition) -> None:
        self._gh(
            "label", "create", label.name,
            "--color", label.color,
            "--description", label.description,
        )
        self._load()[label.name] = label

    def update_label(self, label: LabelDefinition) -> None:
        self._gh(
            "label", "edit", label.name,
            "--color", label.color,
            "--description", label.description,
        )
        self._load()[label.name] = label


class LabelSyncAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    UNCHANGED = "unchanged"
    FAILED = "failed"


@dataclass
class LabelSyncResult:
    name: str
    action: LabelSyncAction
    error: Optional[LabelSyncError] = None


class LabelSynchronizer:
    """Makes the tracker's labels match a static definition list.

    A label that fails is logged and reported as FAILED; the rest still sync.
    """

    def __init__(self, backend: LabelBackend, dry_run: bool = False):
        self.backend = backend
        self.dry_run = dry_run

    def sync(self, labels: Iterable[LabelDefinition]) -> list[LabelSyncResult]:
        return [self.sync_label(label) for label in labels]

    def sync_label(self, label: LabelDefinition) -> LabelSyncResult:
        action = LabelSyncAction.FAILED
        with ErrorContext(f"syncing label '{label.name}'", raise_on_error=False,
                          logger_instance=logger) as ctx:
            action = self._apply(label)

        if ctx.error is not None:
            return LabelSyncResult(
                name=label.name,
                action=LabelSyncAction.FAILED,
                error=LabelSyncError(label.name, str(ctx.error), cause=ctx.error),
            )
        return LabelSyncResult(name=label.name, action=action)

    def _apply(self, label: LabelDefinition) -> LabelSyncAction:
        existing = self.backend.get_label(label.name)

        if existing is None:
            logger.info(f"Creating new label: {label.name}")
            if not self.dry_run:
                self.backend.create_label(label)
            return LabelSyncAction.CREATED

        if existing.color.lower() == label.color and existing.description == label.description:
            logger.debug(f"Label up to date: {label.name}")
            return LabelSyncAction.UNCHANGED

        logger.info(f"Updating label: {label.name}")
        if not self.dry_run:
            self.backend.update_label(label)
        return LabelSyncAction.UPDATED
