"""Main CLI for the workstream scanner."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from ..core.config import ScannerSettings, load_config
from ..errors import ErrorTranslator
from ..integrations.github.client import GitHubLabelBackend
from ..integrations.github.labels import (
    GhCliLabelBackend,
    LabelSyncAction,
    LabelSynchronizer,
)
from ..pipeline import (
    DATA_ACCESS,
    MOCK_REPLACEMENT,
    REPOSITORY_PATTERN,
    SCAN_NAMES,
    ScanOutcome,
    ScanPipeline,
    write_report,
)
from ..utils.rich_logging import setup_logging

logger = logging.getLogger(__name__)

console = Console()


def _fail(ctx: click.Context, error: Exception) -> None:
    """Log once, show a friendly message, exit non-zero."""
    logger.error(f"{type(error).__name__}: {error}", exc_info=logger.isEnabledFor(logging.DEBUG))
    translator = ErrorTranslator()
    console.print(translator.format_for_cli(translator.translate(error)))
    ctx.exit(1)


@click.group()
@click.option("--root", "-r", type=click.Path(path_type=Path), help="Directory to scan")
@click.option("--output-dir", "-o", type=click.Path(path_type=Path), help="Where reports are written")
@click.option("--config", "-c", "config_path", type=click.Path(path_type=Path), help="Scanner config YAML")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
@click.pass_context
def cli(ctx, root, output_dir, config_path, log_level):
    """Workstream Scanner - find mock data and direct data access, report by module."""
    settings = ScannerSettings()
    ctx.ensure_object(dict)
    ctx.obj["root"] = root or settings.root
    ctx.obj["output_dir"] = output_dir or settings.output_dir
    ctx.obj["config_path"] = config_path or settings.config_path
    setup_logging(log_level or settings.log_level, log_file=settings.log_file)


def _print_outcome(outcome: ScanOutcome, report_path: Path) -> None:
    if outcome.has_findings:
        table = Table(title=outcome.report.title)
        table.add_column("Group")
        table.add_column("Files", justify="right")
        for name, count in outcome.group_counts:
            table.add_row(name, str(count))
        console.print(table)
        console.print(
            f"[bold]{outcome.file_count}[/] files, {outcome.match_count} unique matching lines"
            + (f", {outcome.excluded_count} excluded" if outcome.excluded_count else "")
        )
    else:
        console.print(f"[green]No findings for {outcome.scan_name}[/]")

    if outcome.warnings:
        console.print(f"[yellow]Skipped {len(outcome.warnings)} unreadable paths (see log)[/]")
    console.print(f"[green]✓ Report written to {report_path}[/]")


def _run_scans(ctx: click.Context, scan_names) -> None:
    try:
        config = load_config(ctx.obj["config_path"])
        pipeline = ScanPipeline(config)
        # Render everything before writing anything
        outcomes = [pipeline.run(name, ctx.obj["root"]) for name in scan_names]
        for outcome in outcomes:
            report_path = write_report(outcome, ctx.obj["output_dir"])
            _print_outcome(outcome, report_path)
    except Exception as e:
        _fail(ctx, e)


@cli.command("mock-replacement")
@click.pass_context
def mock_replacement(ctx):
    """Report mock data usage, grouped by module."""
    _run_scans(ctx, [MOCK_REPLACEMENT])


@cli.command("data-access")
@click.pass_context
def data_access(ctx):
    """Report direct schema-prefixed table access, grouped by schema and table."""
    _run_scans(ctx, [DATA_ACCESS])


@cli.command("repository-pattern")
@click.pass_context
def repository_pattern(ctx):
    """Report direct database access per module directory."""
    _run_scans(ctx, [REPOSITORY_PATTERN])


@cli.command("scan-all")
@click.pass_context
def scan_all(ctx):
    """Run every scan and write all reports."""
    _run_scans(ctx, SCAN_NAMES)


@cli.command("sync-labels")
@click.option("--backend", type=click.Choice(["api", "gh"]), default="api",
              help="GitHub REST API (token) or the gh CLI (its own auth)")
@click.option("--dry-run", is_flag=True, help="Show what would change without writing")
@click.pass_context
def sync_labels(ctx, backend, dry_run):
    """Create or update the workstream and priority labels on GitHub."""
    try:
        config = load_config(ctx.obj["config_path"])
        if backend == "gh":
            label_backend = GhCliLabelBackend(config.github.full_name)
            label_backend.ensure_available()
        else:
            label_backend = GitHubLabelBackend(config.github)

        console.print(f"[bold]Syncing {len(config.labels)} labels to {config.github.full_name}...[/]")
        results = LabelSynchronizer(label_backend, dry_run=dry_run).sync(config.labels)
    except Exception as e:
        _fail(ctx, e)
        return

    styles = {
        LabelSyncAction.CREATED: "green",
        LabelSyncAction.UPDATED: "cyan",
        LabelSyncAction.UNCHANGED: "dim",
        LabelSyncAction.FAILED: "red",
    }
    descriptions = {label.name: label.description for label in config.labels}

    table = Table(title="Label sync" + (" (dry run)" if dry_run else ""))
    table.add_column("Label")
    table.add_column("Action")
    table.add_column("Description")
    for result in results:
        style = styles[result.action]
        table.add_row(result.name, f"[{style}]{result.action.value}[/]", descriptions.get(result.name, ""))
    console.print(table)

    failed = [r for r in results if r.action == LabelSyncAction.FAILED]
    for result in failed:
        console.print(f"[red]✗ {result.error}[/]")
    if failed:
        ctx.exit(1)


def _entry_point(command: str):
    def main():
        # Group options (--root, --output-dir, ...) must precede the subcommand
        cli.main(args=[*sys.argv[1:], command], prog_name=f"workstream-{command}")
    main.__name__ = f"{command.replace('-', '_')}_main"
    return main


mock_replacement_main = _entry_point("mock-replacement")
data_access_main = _entry_point("data-access")
repository_pattern_main = _entry_point("repository-pattern")
sync_labels_main = _entry_point("sync-labels")


if __name__ == "__main__":
    cli()
