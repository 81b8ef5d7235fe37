"""Report model and renderers."""

from .report import Report, ReportSection
from .renderer import render_module_report, render_repository_report, render_schema_report

__all__ = [
    "Report",
    "ReportSection",
    "render_module_report",
    "render_repository_report",
    "render_schema_report",
]
