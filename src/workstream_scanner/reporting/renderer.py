"""Render classified scan results into Report documents.

Output depends only on its inputs: no timestamps, no absolute paths, so an
unchanged tree always renders to byte-identical text.
"""

from typing import Literal, Mapping, Optional, Sequence

from ..core.config import ReportTemplate
from ..scanning.models import FileMatchGroup, ModuleStatus, SchemaTableIndex, title_case
from .report import Report, ReportSection

Detail = Literal["first", "all"]


def _code_block(lines: Sequence[str]) -> str:
    return "```\n" + "\n".join(lines) + "\n```"


def _plural(count: int, singular: str, plural: Optional[str] = None) -> str:
    return f"{count} {singular if count == 1 else (plural or singular + 's')}"


def _closing_sections(template: ReportTemplate) -> list[ReportSection]:
    return [ReportSection(s.heading, s.body) for s in template.closing_sections]


def _file_group_body(group: FileMatchGroup, detail: Detail) -> str:
    if not group.contexts:
        return ""
    if detail == "all":
        return (
            f"Context ({_plural(group.match_count, 'match', 'matches')}):\n\n"
            f"{_code_block(group.contexts)}"
        )
    return (
        f"Context (showing 1 of {_plural(group.match_count, 'match', 'matches')}):\n\n"
        f"{_code_block([group.first_context])}"
    )


def render_module_report(
    buckets: Mapping[str, Sequence[FileMatchGroup]],
    template: ReportTemplate,
    detail: Detail = "first",
) -> Report:
    """One section per non-empty module bucket, in bucket order."""
    non_empty = [(name, groups) for name, groups in buckets.items() if groups]
    file_count = sum(len(groups) for _, groups in non_empty)

    if file_count:
        summary = (
            f"Found {_plural(file_count, 'file')} across "
            f"{_plural(len(non_empty), 'module')}:\n\n"
            + "\n".join(
                f"- {title_case(name)}: {_plural(len(groups), 'file')}"
                for name, groups in non_empty
            )
        )
    else:
        summary = template.empty_message

    sections = [
        ReportSection("Overview", template.overview),
        ReportSection(template.findings_heading, summary),
    ]

    for name, groups in non_empty:
        sections.append(ReportSection(f"{title_case(name)} Module", template.group_intro, level=3))
        for group in groups:
            sections.append(
                ReportSection(f"`{group.file_path}`", _file_group_body(group, detail), level=4)
            )

    sections.extend(_closing_sections(template))
    return Report(title=template.title, sections=tuple(sections))


def render_schema_report(index: SchemaTableIndex, template: ReportTemplate) -> Report:
    """One section per schema, one subsection per table, files as a bullet list."""
    table_count = sum(len(tables) for tables in index.values())

    if table_count:
        summary = (
            f"Found direct access to {_plural(table_count, 'table')} in "
            f"{_plural(len(index), 'schema')}."
        )
    else:
        summary = template.empty_message

    sections = [
        ReportSection("Overview", template.overview),
        ReportSection(template.findings_heading, summary),
    ]

    for schema, tables in index.items():
        if not tables:
            continue
        sections.append(ReportSection(f"{title_case(schema)} Schema", level=3))
        for table, files in tables.items():
            body = template.group_intro + "\n\n" if template.group_intro else ""
            body += "\n".join(f"- `{f}`" for f in files)
            sections.append(ReportSection(f"{table} Table", body, level=4))

    sections.extend(_closing_sections(template))
    return Report(title=template.title, sections=tuple(sections))


def render_repository_report(
    statuses: Sequence[ModuleStatus],
    template: ReportTemplate,
    max_listed_files: int = 3,
) -> Report:
    """Status of every configured module, found or not."""
    with_access = [s for s in statuses if s.has_direct_access]

    if with_access:
        summary = (
            f"{_plural(len(with_access), 'module')} of {len(statuses)} "
            f"{'has' if len(with_access) == 1 else 'have'} direct database access."
        )
    else:
        summary = template.empty_message

    sections = [
        ReportSection("Overview", template.overview),
        ReportSection(template.findings_heading, summary),
    ]

    for status in statuses:
        sections.append(
            ReportSection(
                f"{title_case(status.module_name)} Module",
                _module_status_body(status, max_listed_files),
                level=3,
            )
        )

    sections.extend(_closing_sections(template))
    return Report(title=template.title, sections=tuple(sections))


def _module_status_body(status: ModuleStatus, max_listed_files: int) -> str:
    if not status.exists:
        return "- Module directory not found"

    lines = [
        f"- Module directory: `{status.module_dir}`",
        f"- Has direct database access: {'Yes' if status.has_direct_access else 'No'}",
    ]
    if status.has_direct_access:
        lines.append(f"- Files with direct access: {len(status.files)}")
        if len(status.files) <= max_listed_files:
            lines.extend(f"  - `{f}`" for f in status.files)
    return "\n".join(lines)
