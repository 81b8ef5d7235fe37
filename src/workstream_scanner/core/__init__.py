"""Configuration models and built-in presets."""

from .config import (
    DataAccessScanConfig,
    GitHubConfig,
    LabelDefinition,
    MockScanConfig,
    ModuleRuleConfig,
    ReportSectionTemplate,
    ReportTemplate,
    RepositoryScanConfig,
    ScannerConfig,
    ScannerSettings,
    load_config,
)

__all__ = [
    "DataAccessScanConfig",
    "GitHubConfig",
    "LabelDefinition",
    "MockScanConfig",
    "ModuleRuleConfig",
    "ReportSectionTemplate",
    "ReportTemplate",
    "RepositoryScanConfig",
    "ScannerConfig",
    "ScannerSettings",
    "load_config",
]
