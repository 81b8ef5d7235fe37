"""Path-based module classification and schema/table indexing."""

from dataclasses import dataclass
from typing import Iterable, Sequence

from workstream_scanner.scanning.models import (
    UNKNOWN_MODULE,
    FileMatchGroup,
    ModuleBucket,
    SchemaTableIndex,
)


@dataclass(frozen=True)
class ClassificationRule:
    """Files whose path contains ``path_substring`` belong to ``module_name``."""
    path_substring: str
    module_name: str

    def matches(self, file_path: str) -> bool:
        # Root-relative paths get a leading '/' so "/ui/" also matches "ui/Button.tsx"
        return self.path_substring in "/" + file_path.lstrip("/")


class ModuleClassifier:
    """Assigns file groups to modules with an ordered rule list.

    Rules are tried top to bottom and the first hit wins; paths no rule
    claims land in the default bucket, so classification is total.
    """

    def __init__(
        self,
        rules: Sequence[ClassificationRule],
        default_module: str = UNKNOWN_MODULE,
    ) -> None:
        self.rules = list(rules)
        self.default_module = default_module

    def module_for(self, file_path: str) -> str:
        for rule in self.rules:
            if rule.matches(file_path):
                return rule.module_name
        return self.default_module

    def classify(self, groups: Iterable[FileMatchGroup]) -> dict[str, list[FileMatchGroup]]:
        """Bucket groups by module; bucket and group order follow input order."""
        buckets: dict[str, list[FileMatchGroup]] = {}
        for group in groups:
            buckets.setdefault(self.module_for(group.file_path), []).append(group)
        return buckets

    def classify_buckets(self, groups: Iterable[FileMatchGroup]) -> list[ModuleBucket]:
        return [
            ModuleBucket(module_name=name, groups=members)
            for name, members in self.classify(groups).items()
        ]


def classify(
    groups: Iterable[FileMatchGroup],
    rules: Sequence[ClassificationRule],
) -> dict[str, list[FileMatchGroup]]:
    return ModuleClassifier(rules).classify(groups)


def build_schema_table_index(groups: Iterable[FileMatchGroup]) -> SchemaTableIndex:
    """Index files by the ``schema.table`` contexts captured for them.

    Each file is listed once per (schema, table) pair. Contexts without a
    '.' separator are not schema-qualified and are ignored.
    """
    index: SchemaTableIndex = {}
    for group in groups:
        for context in group.contexts:
            schema, sep, table = context.partition(".")
            if not sep or not schema or not table:
                continue
            files = index.setdefault(schema, {}).setdefault(table, [])
            if group.file_path not in files:
                files.append(group.file_path)
    return index
