"""Typer CLI entrypoint for supplier-export."""

from __future__ import annotations

import signal
import sys
from typing import Any, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import ConfigRepository, ExportConfig
from .engine import CancelToken, PageClient, RequestTemplate
from .errors import ConfigError, PrimingError
from .logging_conf import configure_logging
from .orchestrator import RunController, RunSummary
from .ui import ProgressReporter

EXIT_FAILED = 1
EXIT_CANCELLED = 130
RULE = "=" * 70

app = typer.Typer(
    help="Export the supplier directory to a CSV file.",
    add_completion=False,
    rich_markup_mode=None,
)

console = Console()


def _progress_default_enabled() -> bool:
    return bool(getattr(sys.stdout, "isatty", lambda: False)())


def _install_signal_handlers(token: CancelToken) -> dict[int, Any]:
    """Route SIGINT/SIGTERM to the cancel token; return the previous handlers."""

    def _handler(signum: int, _frame: Any) -> None:
        if not token.cancelled:
            console.print("\n[yellow]⚠ Interrupt received, stopping after in-flight pages…[/yellow]")
        token.cancel()

    previous: dict[int, Any] = {}
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            previous[signum] = signal.signal(signum, _handler)
        except ValueError:
            # Only the main thread may install handlers.
            continue
    return previous


def _restore_signal_handlers(previous: dict[int, Any]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler)


def _print_settings(config: ExportConfig, template: RequestTemplate) -> None:
    console.print(f"Target URL: {config.base_url}", highlight=False)
    console.print(f"Service: {template.service_name}", highlight=False)
    console.print(f"Method: {template.method_name}", highlight=False)
    console.print(f"Page size: {config.page_size} rows", highlight=False)
    console.print(f"Request delay: {config.request_delay:.1f} s", highlight=False)
    console.print(f"Workers: {config.max_workers}", highlight=False)
    console.print(f"Token: {escape(config.masked_token())}", highlight=False)


def _render_summary(summary: RunSummary) -> Table:
    table = Table(title="Export summary", box=box.SIMPLE_HEAD)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Records reported", str(summary.total_count))
    table.add_row("Rows written", str(summary.total_rows_written))
    table.add_row("Pages planned", str(summary.total_pages_planned))
    table.add_row("Pages requested", str(summary.total_pages_requested))
    table.add_row("Pages failed", str(summary.total_pages_failed))
    if summary.output_path is not None:
        table.add_row("Output file", str(summary.output_path))
    return table


@app.command(help="Run one export using the given configuration file.")
def export(
    config_path: Optional[str] = typer.Argument(
        None,
        help="JSON or YAML configuration file (default: config.json in the home directory).",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
) -> None:
    logger = configure_logging(verbose)
    console.print(RULE)
    console.print("Supplier data export")
    console.print(RULE)

    repository = ConfigRepository()
    try:
        config = repository.load(config_path)
    except ConfigError as exc:
        logger.error("config_failed", error=str(exc))
        console.print(f"\n[red]Initialisation failed:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=EXIT_FAILED) from exc
    console.print(
        f"✓ Loaded configuration: {escape(str(repository.locator.resolve(config_path)))}",
        highlight=False,
    )

    if not config.has_token:
        logger.error("config_failed", error="access_token missing")
        console.print("[red]❌ Set access_token in the configuration file.[/red]")
        console.print("💡 Copy the Access-Token value from the browser's request headers.")
        raise typer.Exit(code=EXIT_FAILED)

    template = RequestTemplate()
    _print_settings(config, template)
    console.print(RULE)

    token = CancelToken()
    previous_handlers = _install_signal_handlers(token)
    progress = ProgressReporter(enabled=_progress_default_enabled(), console=console)
    try:
        with PageClient(config, template=template) as client:
            controller = RunController(
                config, page_client=client, cancel_token=token, progress=progress, logger=logger
            )
            summary = controller.run()
    except (ConfigError, PrimingError) as exc:
        console.print(f"\n[red]❌ Export failed:[/red] {escape(str(exc))}", highlight=False)
        raise typer.Exit(code=EXIT_FAILED) from exc
    finally:
        _restore_signal_handlers(previous_handlers)

    console.print(RULE)
    if summary.total_pages_planned == 0:
        console.print("[yellow]❌ The server reported no records; nothing was written.[/yellow]")
        return
    if summary.cancelled:
        console.print(
            f"\n[yellow]⚠ Export interrupted! Saved {summary.total_rows_written} rows.[/yellow]",
            highlight=False,
        )
    else:
        console.print(
            f"\n[green]✅ Export completed! Saved {summary.total_rows_written} rows.[/green]",
            highlight=False,
        )
    console.print(_render_summary(summary))
    if summary.total_pages_failed:
        console.print(
            f"[red]{summary.total_pages_failed} page(s) failed; "
            f"{summary.missing_rows} reported record(s) are missing from the file.[/red]",
            highlight=False,
        )
    if summary.cancelled:
        raise typer.Exit(code=EXIT_CANCELLED)


__all__ = ["app", "export"]
