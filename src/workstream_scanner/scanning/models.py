"""Data models for pattern scan results."""

from dataclasses import dataclass, field
from typing import Optional

UNKNOWN_MODULE = "unknown"

# schema -> table -> file paths
SchemaTableIndex = dict[str, dict[str, list[str]]]


@dataclass(frozen=True)
class RawMatch:
    """One line that matched one pattern."""
    file_path: str
    line_context: str
    pattern: str
    line_number: int = 0  # informational, not part of dedup identity


@dataclass
class FileMatchGroup:
    """All unique line contexts that matched in a single file."""
    file_path: str
    contexts: list[str] = field(default_factory=list)

    def add_context(self, context: str) -> bool:
        """Append a context unless an identical one is already stored."""
        if context in self.contexts:
            return False
        self.contexts.append(context)
        return True

    @property
    def match_count(self) -> int:
        return len(self.contexts)

    @property
    def first_context(self) -> Optional[str]:
        return self.contexts[0] if self.contexts else None


@dataclass
class ModuleBucket:
    """File groups assigned to one logical module."""
    module_name: str
    groups: list[FileMatchGroup] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return title_case(self.module_name)

    @property
    def file_paths(self) -> list[str]:
        return [g.file_path for g in self.groups]


@dataclass
class ModuleStatus:
    """Direct data access status of one module directory."""
    module_name: str
    module_dir: Optional[str]
    files: list[str] = field(default_factory=list)

    @property
    def exists(self) -> bool:
        return self.module_dir is not None

    @property
    def has_direct_access(self) -> bool:
        return bool(self.files)


def title_case(name: str) -> str:
    """Upper-case the first character only ("item-banking" -> "Item-banking")."""
    return name[:1].upper() + name[1:]
