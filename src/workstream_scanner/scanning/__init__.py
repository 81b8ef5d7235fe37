"""Scanning stages: pattern matching, aggregation and classification."""

from .models import (
    UNKNOWN_MODULE,
    FileMatchGroup,
    ModuleBucket,
    ModuleStatus,
    RawMatch,
    SchemaTableIndex,
)
from .patterns import CompiledPattern, PatternSet
from .matcher import FileSystemSearcher, PatternMatcher, Searcher, scan
from .aggregator import (
    ExclusionPredicate,
    MatchAggregator,
    aggregate,
    context_contains,
    path_contains,
    under_directory,
)
from .classifier import (
    ClassificationRule,
    ModuleClassifier,
    build_schema_table_index,
    classify,
)

__all__ = [
    "UNKNOWN_MODULE",
    "FileMatchGroup",
    "ModuleBucket",
    "ModuleStatus",
    "RawMatch",
    "SchemaTableIndex",
    "CompiledPattern",
    "PatternSet",
    "FileSystemSearcher",
    "PatternMatcher",
    "Searcher",
    "scan",
    "ExclusionPredicate",
    "MatchAggregator",
    "aggregate",
    "context_contains",
    "path_contains",
    "under_directory",
    "ClassificationRule",
    "ModuleClassifier",
    "build_schema_table_index",
    "classify",
]
