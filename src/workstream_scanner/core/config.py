"""Configuration loading and validation."""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings

from . import presets
from ..errors import ConfigurationError
from ..scanning.aggregator import (
    ExclusionPredicate,
    context_contains,
    path_contains,
    under_directory,
)
from ..scanning.classifier import ClassificationRule
from ..scanning.matcher import DEFAULT_EXCLUDE_DIRS, DEFAULT_INCLUDE_EXTENSIONS
from ..scanning.patterns import PatternSet
from ..utils.validators import validate_label_color, validate_owner_repo

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/workstream-scanner.yaml")


class ReportSectionTemplate(BaseModel):
    """A static section appended to a report."""
    heading: str
    body: str


class ReportTemplate(BaseModel):
    """Static text of a report; only the findings are derived from the scan."""
    title: str
    overview: str
    findings_heading: str
    group_intro: str = ""
    empty_message: str = "No findings."
    closing_sections: List[ReportSectionTemplate] = Field(default_factory=list)


class ModuleRuleConfig(BaseModel):
    """Path substring -> module mapping, evaluated in list order."""
    path: str
    module: str

    @field_validator('path', 'module')
    @classmethod
    def validate_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("module rule path and module must be non-empty")
        return v

    def to_rule(self) -> ClassificationRule:
        return ClassificationRule(path_substring=self.path, module_name=self.module)


class MockScanConfig(BaseModel):
    """Mock data usage scan, grouped by module."""
    output_file: str = "workstream-mock-replacement-report.md"
    patterns: List[str] = Field(default_factory=lambda: list(presets.MOCK_PATTERNS))
    case_sensitive: bool = True
    exclude_path_markers: List[str] = Field(
        default_factory=lambda: list(presets.MOCK_EXCLUDE_PATH_MARKERS)
    )
    exclude_context_markers: List[str] = Field(
        default_factory=lambda: list(presets.MOCK_EXCLUDE_CONTEXT_MARKERS)
    )
    # Whole directory names, matched at any depth below the root
    exclude_dir_names: List[str] = Field(default_factory=list)
    module_rules: List[ModuleRuleConfig] = Field(default_factory=lambda: [
        ModuleRuleConfig(path=path, module=module) for path, module in presets.MODULE_RULES
    ])
    # "first" shows one representative line per file, "all" every unique line
    detail: Literal["first", "all"] = "first"
    report: ReportTemplate = Field(default_factory=lambda: ReportTemplate(**presets.MOCK_REPORT))

    def pattern_set(self) -> PatternSet:
        return PatternSet.literal(self.patterns, case_sensitive=self.case_sensitive)

    def exclusion_predicates(self) -> List[ExclusionPredicate]:
        predicates: List[ExclusionPredicate] = []
        if self.exclude_path_markers:
            predicates.append(path_contains(*self.exclude_path_markers))
        if self.exclude_context_markers:
            predicates.append(context_contains(*self.exclude_context_markers))
        if self.exclude_dir_names:
            predicates.append(under_directory(*self.exclude_dir_names))
        return predicates

    def classification_rules(self) -> List[ClassificationRule]:
        return [r.to_rule() for r in self.module_rules]


class DataAccessScanConfig(BaseModel):
    """Direct schema.table access scan, grouped by schema and table."""
    output_file: str = "workstream-data-access-report.md"
    schemas: List[str] = Field(default_factory=lambda: list(presets.SCHEMAS))
    table_pattern: str = presets.SCHEMA_TABLE_PATTERN
    case_sensitive: bool = True
    exclude_path_markers: List[str] = Field(default_factory=list)
    exclude_dir_names: List[str] = Field(default_factory=list)
    report: ReportTemplate = Field(
        default_factory=lambda: ReportTemplate(**presets.DATA_ACCESS_REPORT)
    )

    @field_validator('table_pattern')
    @classmethod
    def validate_table_pattern(cls, v: str) -> str:
        if "{schema}" not in v:
            raise ValueError("table_pattern must contain a {schema} placeholder")
        return v

    def pattern_set(self) -> PatternSet:
        # str.replace rather than format(): the regex itself may contain braces
        patterns = [self.table_pattern.replace("{schema}", re.escape(s)) for s in self.schemas]
        return PatternSet.regexes(patterns, case_sensitive=self.case_sensitive)

    def exclusion_predicates(self) -> List[ExclusionPredicate]:
        predicates: List[ExclusionPredicate] = []
        if self.exclude_path_markers:
            predicates.append(path_contains(*self.exclude_path_markers))
        if self.exclude_dir_names:
            predicates.append(under_directory(*self.exclude_dir_names))
        return predicates


class RepositoryScanConfig(BaseModel):
    """Per-module direct database access status."""
    output_file: str = "workstream-repository-pattern-report.md"
    modules_dir: str = "src/modules"
    modules: List[str] = Field(default_factory=lambda: list(presets.REPOSITORY_MODULES))
    access_pattern: str = presets.REPOSITORY_ACCESS_PATTERN
    case_sensitive: bool = True
    # File lists longer than this are summarised by count only
    max_listed_files: int = 3
    report: ReportTemplate = Field(
        default_factory=lambda: ReportTemplate(**presets.REPOSITORY_REPORT)
    )

    def pattern_set(self) -> PatternSet:
        return PatternSet.regexes([self.access_pattern], case_sensitive=self.case_sensitive)


class LabelDefinition(BaseModel):
    """An issue tracker label: name, 6-digit hex colour, description."""
    name: str
    color: str
    description: str = ""

    @field_validator('color')
    @classmethod
    def validate_color(cls, v: str) -> str:
        return validate_label_color(v)


class GitHubConfig(BaseModel):
    """GitHub repository targeted by label sync."""
    token: Optional[str] = None
    owner: Optional[str] = None
    repo: Optional[str] = None

    @property
    def full_name(self) -> str:
        if not self.owner or not self.repo:
            raise ConfigurationError(
                "GitHub repository not configured: set github.owner and github.repo"
            )
        return validate_owner_repo(f"{self.owner}/{self.repo}")


class ScannerConfig(BaseModel):
    """Top-level scanner configuration."""
    include_extensions: List[str] = Field(
        default_factory=lambda: sorted(DEFAULT_INCLUDE_EXTENSIONS)
    )
    exclude_dirs: List[str] = Field(default_factory=lambda: sorted(DEFAULT_EXCLUDE_DIRS))
    mock: MockScanConfig = Field(default_factory=MockScanConfig)
    data_access: DataAccessScanConfig = Field(default_factory=DataAccessScanConfig)
    repository: RepositoryScanConfig = Field(default_factory=RepositoryScanConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    labels: List[LabelDefinition] = Field(default_factory=lambda: [
        LabelDefinition(**label)
        for label in presets.WORKSTREAM_LABELS + presets.PRIORITY_LABELS
    ])

    @field_validator('include_extensions')
    @classmethod
    def validate_extensions(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("include_extensions must list at least one extension")
        return [e if e.startswith(".") else f".{e}" for e in v]


class ScannerSettings(BaseSettings):
    """Process-level settings, overridable with WORKSTREAM_* environment variables."""
    root: Path = Path(".")
    output_dir: Path = Path(".")
    config_path: Path = DEFAULT_CONFIG_PATH
    log_level: str = "INFO"
    log_file: Optional[Path] = None

    class Config:
        env_prefix = "WORKSTREAM_"
        env_file = ".env"
        extra = "ignore"


# Module-level mtime-based config cache: path -> (parsed_config, file_mtime)
_config_cache: Dict[str, tuple] = {}


def _get_cached_or_load(resolved_path: Path, loader):
    """Return cached config if file mtime unchanged, else reload."""
    key = str(resolved_path)
    try:
        current_mtime = resolved_path.stat().st_mtime
    except FileNotFoundError:
        _config_cache.pop(key, None)
        return None

    cached = _config_cache.get(key)
    if cached is not None:
        cached_result, cached_mtime = cached
        if cached_mtime == current_mtime:
            return cached_result

    result = loader(resolved_path)
    _config_cache[key] = (result, current_mtime)
    return result


def _load_config_from_file(config_path: Path) -> ScannerConfig:
    """Internal loader for scanner config (no caching)."""
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Invalid config file {config_path}: expected a mapping at the top level"
        )

    data = _expand_env_vars(data)
    try:
        return ScannerConfig(**data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid config file {config_path}: {e}") from e


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> ScannerConfig:
    """Load scanner configuration from YAML file.

    A missing file is not an error: the built-in presets are used.
    Uses mtime-based caching: returns cached config if the file hasn't changed.
    """
    if not config_path.exists():
        logger.debug(f"Config file not found: {config_path}. Using built-in defaults.")
        return ScannerConfig()

    result = _get_cached_or_load(config_path.resolve(), _load_config_from_file)
    return result if result is not None else ScannerConfig()


def _expand_env_vars(data: Any, _path: str = "") -> Any:
    """Recursively expand ``${VAR}`` strings in config data.

    Args:
        data: Config data to process
        _path: Internal tracking for error messages (e.g., "github.token")
    """
    if isinstance(data, dict):
        return {k: _expand_env_vars(v, f"{_path}.{k}" if _path else k) for k, v in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item, f"{_path}[{i}]") for i, item in enumerate(data)]
    elif isinstance(data, str) and data.startswith("${") and data.endswith("}"):
        env_var = data[2:-1]
        value = os.environ.get(env_var)
        if value is None:
            logger.warning(
                f"Environment variable '{env_var}' not set (referenced at config path: {_path or 'root'}). "
                f"The literal string '{data}' will be used, which may cause errors."
            )
            return data
        return value
    return data
