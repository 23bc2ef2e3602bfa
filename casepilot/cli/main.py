"""Main CLI command group for CasePilot."""

import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.table import Table

from casepilot import __version__
from casepilot.core.batch import BatchGenerator, BatchResult
from casepilot.core.config_manager import ConfigManager
from casepilot.core.engine import TestStrategyEngine
from casepilot.core.management.output_manager import OutputManager
from casepilot.core.parsing.descriptor_loader import DescriptorLoader
from casepilot.core.progress import ProgressReporter, RichProgressReporter
from casepilot.models.config import CasePilotConfig
from casepilot.models.endpoint import EndpointDescriptor
from casepilot.utils.constants import UI_COLORS, UI_ICONS
from casepilot.utils.exceptions import (
    CasePilotError, ErrorContext, ErrorHandler, convert_exception_to_casepilot_error
)
from casepilot.utils.file_utils import format_file_size
from casepilot.utils.logging import CasePilotLogger, LoggingContext, configure_logging

console = Console()


def main():
    """Console script entry point."""
    cli()


@click.group()
@click.version_option(version=__version__, prog_name="casepilot")
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (shows DEBUG level)"
)
@click.option(
    "--quiet", "-q",
    is_flag=True,
    help="Quiet mode - only show errors"
)
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Configuration file (default: ~/.casepilot/config.yaml)"
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, quiet: bool, config_path: Optional[Path]) -> None:
    """CasePilot: recommend test strategies and generate test case specifications.

    Reads endpoint descriptor files (YAML or JSON), scores each endpoint's
    complexity, picks test strategies and writes prioritized test suites.
    """
    ctx.ensure_object(dict)

    if verbose and quiet:
        console.print("[yellow]Warning: Both --verbose and --quiet specified. Using verbose mode.[/yellow]")
        quiet = False

    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["config_path"] = config_path
    ctx.obj["error_handler"] = ErrorHandler(verbose=verbose)


def _load_config(ctx: click.Context, cli_overrides: Optional[dict] = None) -> CasePilotConfig:
    """Load configuration and configure logging, exiting on errors."""
    handler: ErrorHandler = ctx.obj["error_handler"]
    manager = ConfigManager(config_path=ctx.obj["config_path"])

    try:
        config = manager.load_config_with_overrides(
            env_overrides=manager.get_env_overrides(),
            cli_overrides=cli_overrides,
        )
        manager.validate_config(config)
    except CasePilotError as e:
        handler.handle_error(e, {"config_path": str(manager.config_path)})
        ctx.exit(1)

    if ctx.obj["quiet"]:
        log_level = "ERROR"
    else:
        log_level = config.logging.level

    configure_logging(
        log_level=log_level,
        verbose=ctx.obj["verbose"],
        structured=config.logging.structured,
    )
    return config


def _load_endpoints(ctx: click.Context, sources: List[str]) -> List[EndpointDescriptor]:
    """Load every descriptor source, exiting on the first error."""
    loader = DescriptorLoader()
    endpoints: List[EndpointDescriptor] = []

    for source in sources:
        try:
            endpoints.extend(asyncio.run(loader.load_source(source)))
        except (CasePilotError, OSError, ValueError) as e:
            error = convert_exception_to_casepilot_error(
                e, f"Loading {source}", suggestion="Check the descriptor source"
            )
            ctx.obj["error_handler"].handle_error(error, {"source": source})
            ctx.exit(1)

    if not endpoints:
        console.print(f"[{UI_COLORS['warning']}]No endpoints found[/{UI_COLORS['warning']}]")
    return endpoints


@cli.command()
@click.argument("descriptors", nargs=-1, required=True)
@click.pass_context
def recommend(ctx: click.Context, descriptors: tuple) -> None:
    """Show strategy recommendations for endpoint DESCRIPTORS.

    \b
    Examples:
      casepilot recommend endpoints.yaml
      casepilot recommend https://example.com/endpoints.json
    """
    config = _load_config(ctx)
    endpoints = _load_endpoints(ctx, list(descriptors))
    if not endpoints:
        return

    engine = TestStrategyEngine(config=config, verbose=ctx.obj["verbose"])

    table = Table(title="Strategy Recommendations", show_header=True, header_style="bold magenta")
    table.add_column("Endpoint", style="cyan")
    table.add_column("Complexity", justify="right")
    table.add_column("Primary", style="green")
    table.add_column("Complementary")
    table.add_column("Confidence", justify="right")
    table.add_column("Effort", justify="right")

    for endpoint in endpoints:
        rec = engine.recommend(endpoint)
        complexity = (
            f"{rec.complexity.total} ({rec.complexity.level.value})" if rec.complexity else "-"
        )
        primary = rec.primary_strategy.value + (" [dim](fallback)[/dim]" if rec.is_fallback else "")
        table.add_row(
            endpoint.get_endpoint_id(),
            complexity,
            primary,
            ", ".join(s.value for s in rec.complementary_strategies) or "-",
            f"{rec.confidence:.2f}",
            f"{int(rec.estimated_effort.total_seconds() // 60)}m",
        )

    console.print(table)
    console.print(f"Recommended strategies for {len(endpoints)} endpoints")


@cli.command()
@click.argument("descriptors", nargs=-1, required=True)
@click.option(
    "--output", "-o",
    type=click.Path(file_okay=False),
    help="Output directory for test suite files"
)
@click.option(
    "--workers", "-w",
    type=click.IntRange(min=1),
    help="Number of concurrent workers"
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Generate and summarize without writing files"
)
@click.pass_context
def generate(
    ctx: click.Context,
    descriptors: tuple,
    output: Optional[str],
    workers: Optional[int],
    dry_run: bool
) -> None:
    """Generate test suites for endpoint DESCRIPTORS.

    \b
    Examples:
      casepilot generate endpoints.yaml
      casepilot generate endpoints.yaml --output suites/ --workers 8
      casepilot generate endpoints.yaml --dry-run
    """
    config = _load_config(ctx, {
        "output.directory": output,
        "processing.workers": workers,
    })
    endpoints = _load_endpoints(ctx, list(descriptors))
    if not endpoints:
        return

    show_progress = not ctx.obj["quiet"] and console.is_terminal
    progress = RichProgressReporter(console=console) if show_progress else ProgressReporter()
    engine = TestStrategyEngine(config=config, progress=progress, verbose=ctx.obj["verbose"])
    batch = BatchGenerator(
        engine,
        max_workers=config.processing.workers,
        timeout=config.processing.timeout,
    )

    logger = CasePilotLogger("cli", console=console, verbose=ctx.obj["verbose"])
    logging_context = LoggingContext(logger, "generate", endpoints=len(endpoints))

    with logging_context:
        if isinstance(progress, RichProgressReporter):
            with progress:
                result = asyncio.run(batch.generate(endpoints))
        else:
            result = asyncio.run(batch.generate(endpoints))
        logging_context.set_success(result.failure_count == 0)

    _show_batch_summary(result)

    unsaved = 0
    if dry_run:
        console.print(f"[{UI_COLORS['warning']}]Dry run - no files written[/{UI_COLORS['warning']}]")
    elif result.suites:
        output_manager = OutputManager(config.output, console=console)
        with ErrorContext(ctx.obj["error_handler"], "saving test suites",
                          directory=config.output.directory):
            saved = asyncio.run(
                output_manager.save_suites(result.suites, max_workers=config.processing.workers)
            )
        unsaved = len(result.suites) - len(saved)
        summary = output_manager.get_output_summary()
        console.print(
            f"{UI_ICONS['folder']} Wrote {summary['files_generated']} files "
            f"({format_file_size(summary['total_size'])}) to {summary['output_directory']}"
        )

    success_color = UI_COLORS['success']
    console.print(
        f"[{success_color}]{UI_ICONS['success']} Generated {result.success_count} test suites "
        f"with {result.total_test_cases} test cases[/{success_color}]"
    )

    if unsaved:
        error_color = UI_COLORS['error']
        console.print(
            f"[{error_color}]{UI_ICONS['error']} Failed to write {unsaved} of "
            f"{len(result.suites)} test suites[/{error_color}]"
        )

    if result.failure_count or unsaved:
        ctx.exit(1)


def _show_batch_summary(result: BatchResult) -> None:
    table = Table(title="Generated Test Suites", show_header=True, header_style="bold magenta")
    table.add_column("Endpoint", style="cyan")
    table.add_column("Primary")
    table.add_column("Tests", justify="right")
    table.add_column("Coverage")

    for suite in result.suites:
        coverage = ", ".join(f"{k}={v}" for k, v in sorted(suite.coverage_summary.items()))
        table.add_row(
            suite.endpoint.get_endpoint_id(),
            suite.recommendation.primary_strategy.value,
            str(len(suite.test_cases)),
            coverage or "-",
        )
    console.print(table)

    error_color = UI_COLORS['error']
    for endpoint_id, error in result.failures.items():
        console.print(f"[{error_color}]{UI_ICONS['error']} {endpoint_id}: {error}[/{error_color}]")
    for endpoint_id in result.timed_out:
        console.print(f"[{error_color}]{UI_ICONS['error']} {endpoint_id}: timed out[/{error_color}]")


if __name__ == "__main__":
    sys.exit(main())
