"""Scan pipelines: Matcher -> Aggregator -> Classifier -> Renderer.

Each scan is a pure function of (tree contents, configuration) to a Report.
Nothing is written here; persisting the report is left to ``write_report``.
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Union

from .core.config import (
    DataAccessScanConfig,
    MockScanConfig,
    RepositoryScanConfig,
    ScannerConfig,
)
from .errors import ConfigurationError, ScanIOError
from .reporting.renderer import (
    render_module_report,
    render_repository_report,
    render_schema_report,
)
from .reporting.report import Report
from .scanning.aggregator import MatchAggregator
from .scanning.classifier import ModuleClassifier, build_schema_table_index
from .scanning.matcher import FileSystemSearcher, PatternMatcher, Searcher, ensure_root
from .scanning.models import ModuleStatus
from .utils.atomic_io import atomic_write_text
from .utils.error_handling import handle_filesystem_errors
from .utils.rich_logging import get_scan_logger

logger = logging.getLogger(__name__)

MOCK_REPLACEMENT = "mock-replacement"
DATA_ACCESS = "data-access"
REPOSITORY_PATTERN = "repository-pattern"


@dataclass
class ScanOutcome:
    """A rendered report plus the counts behind it."""
    scan_name: str
    report: Report
    output_file: str
    file_count: int = 0
    match_count: int = 0
    excluded_count: int = 0
    # (group label, file count) in report order
    group_counts: list[tuple[str, int]] = field(default_factory=list)
    warnings: list[ScanIOError] = field(default_factory=list)

    @property
    def has_findings(self) -> bool:
        return self.file_count > 0


SearcherFactory = Callable[[ScannerConfig], Searcher]


def filesystem_searcher(config: ScannerConfig) -> Searcher:
    return FileSystemSearcher(
        include_extensions=config.include_extensions,
        exclude_dirs=config.exclude_dirs,
    )


class ScanPipeline:
    """Runs the configured scans against one root."""

    def __init__(
        self,
        config: Optional[ScannerConfig] = None,
        searcher_factory: SearcherFactory = filesystem_searcher,
    ) -> None:
        self.config = config or ScannerConfig()
        self._searcher_factory = searcher_factory

    def _matcher(self) -> PatternMatcher:
        # Fresh searcher per scan so warnings never leak between runs
        return PatternMatcher(self._searcher_factory(self.config))

    def run(self, scan_name: str, root: Union[str, Path]) -> ScanOutcome:
        runners = {
            MOCK_REPLACEMENT: self.run_mock_replacement,
            DATA_ACCESS: self.run_data_access,
            REPOSITORY_PATTERN: self.run_repository,
        }
        if scan_name not in runners:
            raise ConfigurationError(f"Unknown scan: {scan_name}")
        return runners[scan_name](root)

    def run_mock_replacement(self, root: Union[str, Path]) -> ScanOutcome:
        scan_config: MockScanConfig = self.config.mock
        root = ensure_root(root)
        scan_logger = get_scan_logger(MOCK_REPLACEMENT)
        started = time.monotonic()
        scan_logger.scan_started(root)

        matcher = self._matcher()
        matches = matcher.scan_all(root, scan_config.pattern_set(), scan_logger)

        aggregator = MatchAggregator(scan_config.exclusion_predicates())
        groups = aggregator.aggregate(matches)

        buckets = ModuleClassifier(scan_config.classification_rules()).classify(groups)
        report = render_module_report(buckets, scan_config.report, detail=scan_config.detail)

        scan_logger.scan_completed(len(groups), len(buckets), time.monotonic() - started)
        return ScanOutcome(
            scan_name=MOCK_REPLACEMENT,
            report=report,
            output_file=scan_config.output_file,
            file_count=len(groups),
            match_count=sum(g.match_count for g in groups),
            excluded_count=aggregator.excluded_count,
            group_counts=[(name, len(members)) for name, members in buckets.items()],
            warnings=matcher.warnings,
        )

    def run_data_access(self, root: Union[str, Path]) -> ScanOutcome:
        scan_config: DataAccessScanConfig = self.config.data_access
        root = ensure_root(root)
        scan_logger = get_scan_logger(DATA_ACCESS)
        started = time.monotonic()
        scan_logger.scan_started(root)

        matcher = self._matcher()
        matches = matcher.scan_all(root, scan_config.pattern_set(), scan_logger)

        aggregator = MatchAggregator(scan_config.exclusion_predicates())
        groups = aggregator.aggregate(matches)

        index = build_schema_table_index(groups)
        report = render_schema_report(index, scan_config.report)

        scan_logger.scan_completed(len(groups), len(index), time.monotonic() - started)
        return ScanOutcome(
            scan_name=DATA_ACCESS,
            report=report,
            output_file=scan_config.output_file,
            file_count=len(groups),
            match_count=sum(g.match_count for g in groups),
            excluded_count=aggregator.excluded_count,
            group_counts=[
                (f"{schema}.{table}", len(files))
                for schema, tables in index.items()
                for table, files in tables.items()
            ],
            warnings=matcher.warnings,
        )

    def run_repository(self, root: Union[str, Path]) -> ScanOutcome:
        """Check each configured module directory for direct database access."""
        scan_config: RepositoryScanConfig = self.config.repository
        root = ensure_root(root)
        scan_logger = get_scan_logger(REPOSITORY_PATTERN)
        started = time.monotonic()
        scan_logger.scan_started(root)

        matcher = self._matcher()
        aggregator = MatchAggregator()
        patterns = scan_config.pattern_set()
        statuses: list[ModuleStatus] = []
        match_count = 0

        for module in scan_config.modules:
            module_rel = f"{scan_config.modules_dir.strip('/')}/{module}"
            module_dir = root / module_rel
            if not module_dir.is_dir():
                scan_logger.debug(f"Module directory not found: {module_rel}")
                statuses.append(ModuleStatus(module_name=module, module_dir=None))
                continue

            matches = matcher.scan_all(module_dir, patterns, scan_logger)
            groups = aggregator.aggregate(matches)
            match_count += sum(g.match_count for g in groups)
            statuses.append(ModuleStatus(
                module_name=module,
                module_dir=module_rel,
                # Matches are relative to the module dir; report them relative to root
                files=[f"{module_rel}/{g.file_path}" for g in groups],
            ))

        report = render_repository_report(statuses, scan_config.report, scan_config.max_listed_files)

        file_count = sum(len(s.files) for s in statuses)
        with_access = [s for s in statuses if s.has_direct_access]
        scan_logger.scan_completed(file_count, len(with_access), time.monotonic() - started)
        return ScanOutcome(
            scan_name=REPOSITORY_PATTERN,
            report=report,
            output_file=scan_config.output_file,
            file_count=file_count,
            match_count=match_count,
            group_counts=[(s.module_name, len(s.files)) for s in statuses if s.exists],
            warnings=matcher.warnings,
        )


SCAN_NAMES = (MOCK_REPLACEMENT, DATA_ACCESS, REPOSITORY_PATTERN)


def run_mock_replacement_scan(root: Union[str, Path], config: Optional[ScannerConfig] = None) -> ScanOutcome:
    return ScanPipeline(config).run_mock_replacement(root)


def run_data_access_scan(root: Union[str, Path], config: Optional[ScannerConfig] = None) -> ScanOutcome:
    return ScanPipeline(config).run_data_access(root)


def run_repository_scan(root: Union[str, Path], config: Optional[ScannerConfig] = None) -> ScanOutcome:
    return ScanPipeline(config).run_repository(root)


@handle_filesystem_errors("write report", logger_instance=logger)
def _write(path: Path, content: str) -> None:
    atomic_write_text(path, content)


def write_report(outcome: ScanOutcome, output_dir: Union[str, Path]) -> Path:
    """Persist a rendered report under its fixed file name.

    Raises:
        ConfigurationError: If the output directory is missing or not writable
    """
    output_dir = Path(output_dir)
    if not output_dir.is_dir():
        raise ConfigurationError(f"Cannot write report: output directory does not exist: {output_dir}")

    path = output_dir / outcome.output_file
    try:
        _write(path, outcome.report.to_markdown())
    except OSError as e:
        raise ConfigurationError(f"Cannot write report to {path}: {e}") from e
    return path
