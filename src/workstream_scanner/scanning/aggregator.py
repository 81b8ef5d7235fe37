"""Match aggregation: exclusion filtering and per-file deduplication.

Groups raw line matches by file rather than by pattern, so every file shows
up once with the unique lines that flagged it, whichever pattern found them.
"""

from typing import Callable, Iterable, Optional, Sequence

from workstream_scanner.scanning.models import FileMatchGroup, RawMatch

# (file_path, line_context) -> True when the match should be dropped
ExclusionPredicate = Callable[[str, str], bool]


def path_contains(*markers: str) -> ExclusionPredicate:
    """Exclude matches whose file path contains any of the markers."""
    def predicate(file_path: str, line_context: str) -> bool:
        return any(marker in file_path for marker in markers)
    return predicate


def under_directory(*directories: str) -> ExclusionPredicate:
    """Exclude matches located in (any level below) one of the named directories."""
    def predicate(file_path: str, line_context: str) -> bool:
        parts = file_path.split("/")[:-1]
        return any(d in parts for d in directories)
    return predicate


def context_contains(*markers: str, ignore_case: bool = True) -> ExclusionPredicate:
    """Exclude matches whose line context mentions any of the markers."""
    needles = [m.lower() for m in markers] if ignore_case else list(markers)

    def predicate(file_path: str, line_context: str) -> bool:
        haystack = line_context.lower() if ignore_case else line_context
        return any(needle in haystack for needle in needles)
    return predicate


class MatchAggregator:
    """Folds raw matches into one FileMatchGroup per file."""

    def __init__(self, exclusion_predicates: Optional[Sequence[ExclusionPredicate]] = None):
        self.exclusion_predicates = list(exclusion_predicates or [])
        self.excluded_count = 0

    def is_excluded(self, match: RawMatch) -> bool:
        return any(p(match.file_path, match.line_context) for p in self.exclusion_predicates)

    def aggregate(self, matches: Iterable[RawMatch]) -> list[FileMatchGroup]:
        """Filter, then group by file in first-seen order.

        Contexts are deduplicated by exact string equality; two matches with
        the same file and line collapse to one context regardless of pattern.
        """
        self.excluded_count = 0
        by_file: dict[str, FileMatchGroup] = {}

        for match in matches:
            if self.is_excluded(match):
                self.excluded_count += 1
                continue

            group = by_file.get(match.file_path)
            if group is None:
                group = FileMatchGroup(file_path=match.file_path)
                by_file[match.file_path] = group
            group.add_context(match.line_context)

        return list(by_file.values())


def aggregate(
    matches: Iterable[RawMatch],
    exclusion_predicates: Optional[Sequence[ExclusionPredicate]] = None,
) -> list[FileMatchGroup]:
    return MatchAggregator(exclusion_predicates).aggregate(matches)
