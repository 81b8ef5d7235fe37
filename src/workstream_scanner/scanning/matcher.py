"""Line-oriented pattern matching over a source tree."""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from workstream_scanner.errors import ConfigurationError, ScanIOError
from workstream_scanner.scanning.models import RawMatch
from workstream_scanner.scanning.patterns import CompiledPattern, PatternSet
from workstream_scanner.utils.error_handling import log_and_ignore

logger = logging.getLogger(__name__)

DEFAULT_INCLUDE_EXTENSIONS: frozenset[str] = frozenset({".ts", ".tsx", ".js", ".jsx"})

DEFAULT_EXCLUDE_DIRS: frozenset[str] = frozenset({
    "node_modules",
    ".git",
    "dist",
    "build",
    "coverage",
    ".next",
    "vendor",
})


class Searcher(ABC):
    """Finds lines matching one compiled pattern under a root."""

    @abstractmethod
    def search(self, root: Path, pattern: CompiledPattern) -> Iterator[RawMatch]:
        ...

    @property
    def warnings(self) -> list[ScanIOError]:
        return []


class FileSystemSearcher(Searcher):
    """Walks the real filesystem with ``os.walk``.

    Directory and file names are visited in sorted order, so output order is
    stable for a fixed tree. Unreadable entries are skipped with a warning.
    """

    def __init__(
        self,
        include_extensions: Optional[Iterable[str]] = None,
        exclude_dirs: Optional[Iterable[str]] = None,
    ) -> None:
        self.include_extensions = frozenset(
            _normalize_extension(e) for e in (include_extensions or DEFAULT_INCLUDE_EXTENSIONS)
        )
        self.exclude_dirs = frozenset(exclude_dirs if exclude_dirs is not None else DEFAULT_EXCLUDE_DIRS)
        self._warnings: list[ScanIOError] = []

    @property
    def warnings(self) -> list[ScanIOError]:
        return list(self._warnings)

    def search(self, root: Path, pattern: CompiledPattern) -> Iterator[RawMatch]:
        for file_path in self._iter_files(root):
            yield from self._search_file(root, file_path, pattern)

    def _iter_files(self, root: Path) -> Iterator[Path]:
        def on_error(error: OSError) -> None:
            self._on_walk_error(root, error)

        for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
            # Prune in place so excluded directories are never descended into
            dirnames[:] = sorted(d for d in dirnames if d not in self.exclude_dirs)
            for name in sorted(filenames):
                if os.path.splitext(name)[1] in self.include_extensions:
                    yield Path(dirpath) / name

    def _search_file(self, root: Path, file_path: Path, pattern: CompiledPattern) -> Iterator[RawMatch]:
        relative = file_path.relative_to(root).as_posix()
        try:
            with open(file_path, encoding="utf-8") as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            self._record(ScanIOError(relative, str(e)))
            return

        for line_number, line in enumerate(lines, 1):
            context = pattern.match_line(line)
            if context is not None:
                yield RawMatch(
                    file_path=relative,
                    line_context=context,
                    pattern=pattern.source,
                    line_number=line_number,
                )

    def _on_walk_error(self, root: Path, error: OSError) -> None:
        path = str(error.filename or "")
        if path:
            path = Path(os.path.relpath(path, root)).as_posix()
        self._record(ScanIOError(path, error.strerror or str(error)))

    def _record(self, error: ScanIOError) -> None:
        # Each pattern re-walks the tree; report each unreadable path once
        if any(w.path == error.path for w in self._warnings):
            return
        self._warnings.append(error)
        log_and_ignore(error, "Skipping unreadable path", logger_instance=logger)


class PatternMatcher:
    """Runs every pattern of a PatternSet over a tree, sequentially."""

    def __init__(self, searcher: Optional[Searcher] = None) -> None:
        self.searcher = searcher or FileSystemSearcher()

    @property
    def warnings(self) -> list[ScanIOError]:
        return self.searcher.warnings

    def scan(self, root: Union[str, Path], pattern: CompiledPattern) -> list[RawMatch]:
        """Return every matching line for one pattern. Empty list when none match."""
        root = ensure_root(root)
        return list(self.searcher.search(root, pattern))

    def scan_all(self, root: Union[str, Path], patterns: PatternSet, scan_logger=None) -> list[RawMatch]:
        """Scan each pattern to completion before starting the next."""
        root = ensure_root(root)
        matches: list[RawMatch] = []
        for compiled in patterns.compiled():
            if scan_logger is not None:
                scan_logger.pattern_started(compiled.source)
            found = list(self.searcher.search(root, compiled))
            if scan_logger is not None:
                scan_logger.pattern_finished(len(found))
            matches.extend(found)
        return matches


def ensure_root(root: Union[str, Path]) -> Path:
    """Validate the scan root. A missing root is the only fatal matcher error."""
    path = Path(root)
    if not path.exists():
        raise ConfigurationError(f"Scan root directory does not exist: {path}")
    if not path.is_dir():
        raise ConfigurationError(f"Scan root is not a directory: {path}")
    return path


def scan(
    root: Union[str, Path],
    pattern: str,
    include_extensions: Optional[Iterable[str]] = None,
    *,
    regex: bool = False,
    case_sensitive: bool = True,
    exclude_dirs: Optional[Iterable[str]] = None,
) -> list[RawMatch]:
    """Convenience wrapper: scan one pattern with a fresh filesystem searcher."""
    pattern_set = PatternSet((pattern,), regex=regex, case_sensitive=case_sensitive)
    searcher = FileSystemSearcher(include_extensions=include_extensions, exclude_dirs=exclude_dirs)
    return PatternMatcher(searcher).scan(root, pattern_set.compile_one(pattern))


def _normalize_extension(extension: str) -> str:
    return extension if extension.startswith(".") else f".{extension}"
