"""Pattern sets and their compiled form."""

import re
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional


@dataclass(frozen=True)
class CompiledPattern:
    """A single pattern ready to be applied to lines of text."""
    source: str
    regex: re.Pattern

    @property
    def has_captures(self) -> bool:
        return self.regex.groups > 0

    def match_line(self, line: str) -> Optional[str]:
        """Return the line context for a matching line, or None.

        Patterns with capture groups yield the captured text joined with '.'
        (e.g. ``assessment.sessions``); other patterns yield the whole line.
        """
        found = self.regex.search(line)
        if found is None:
            return None
        if self.has_captures:
            return ".".join(g for g in found.groups() if g is not None)
        return line


@dataclass(frozen=True)
class PatternSet:
    """Ordered, immutable set of patterns.

    Order only decides scan order; output ordering comes from the tree walk.
    """
    patterns: tuple[str, ...]
    regex: bool = False
    case_sensitive: bool = True

    def __post_init__(self):
        # Accept any iterable at construction time, store a tuple
        object.__setattr__(self, "patterns", tuple(self.patterns))
        if any(not p for p in self.patterns):
            raise ValueError("Patterns must be non-empty strings")

    @classmethod
    def literal(cls, patterns: Iterable[str], case_sensitive: bool = True) -> "PatternSet":
        return cls(tuple(patterns), regex=False, case_sensitive=case_sensitive)

    @classmethod
    def regexes(cls, patterns: Iterable[str], case_sensitive: bool = True) -> "PatternSet":
        return cls(tuple(patterns), regex=True, case_sensitive=case_sensitive)

    def compile_one(self, pattern: str) -> CompiledPattern:
        flags = 0 if self.case_sensitive else re.IGNORECASE
        expression = pattern if self.regex else re.escape(pattern)
        try:
            return CompiledPattern(source=pattern, regex=re.compile(expression, flags))
        except re.error as e:
            raise ValueError(f"Invalid pattern {pattern!r}: {e}") from e

    def compiled(self) -> Iterator[CompiledPattern]:
        for pattern in self.patterns:
            yield self.compile_one(pattern)

    def __iter__(self) -> Iterator[str]:
        return iter(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)
