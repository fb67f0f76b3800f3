"""Typer CLI entrypoint for jsonxml."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import yaml
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import RunConfig, build_config
from .dispatcher import Dispatcher, RunSummary
from .engine.errors import DispatchError, FatalSetupError
from .logging_conf import configure_logging

app = typer.Typer(
    help="jsonxml fetches JSON records from URLs concurrently and converts them to XML.",
    add_completion=False,
    rich_markup_mode=None,
)

console = Console()


def _fail(message: str) -> None:
    console.print(f"[red]{escape(message)}[/red]")
    raise typer.Exit(code=1)


def _render_summary(summary: RunSummary) -> Table:
    table = Table(
        title=f"Conversion results · {summary.total} urls · {summary.elapsed:.2f}s",
        box=box.SIMPLE_HEAD,
    )
    table.add_column("#", justify="right", style="cyan")
    table.add_column("URL", overflow="fold")
    table.add_column("Output", overflow="fold")
    table.add_column("Status")
    for result in summary.results:
        if result.ok:
            status = "[green]ok[/green]"
        else:
            status = f"[red]failed: {escape(str(result.error))}[/red]"
        table.add_row(str(result.index), escape(result.url), str(result.output_path), status)
    return table


@app.command()
def run(
    urls: str = typer.Option(
        "", "--urls", "-u", help="Comma separated list of URLs to process."
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output directory to store xml files. One file per url will be created. [default: ./out]",
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Per-request timeout in seconds. [default: 5]"
    ),
    max_workers: Optional[int] = typer.Option(
        None, "--max-workers", help="Concurrent workers, 0 for one per URL. [default: 16]"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML/JSON settings file."
    ),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write JSON logs here."),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    quiet: bool = typer.Option(False, "--quiet", help="Print a one-line summary only."),
) -> None:
    if not urls.strip():
        _fail("--urls flag cannot be empty.")
    if output is not None and not output.strip():
        _fail("--output flag cannot be empty.")

    try:
        run_config: RunConfig = build_config(
            config,
            urls=urls,
            output_dir=output,
            timeout=timeout,
            max_workers=max_workers,
        )
    except (FileNotFoundError, ValueError, yaml.YAMLError) as exc:
        _fail(f"Invalid configuration: {exc}")

    logger = configure_logging(verbose=verbose, log_file=log_file)
    logger.info("started_processing", urls=len(run_config.urls))

    try:
        summary = Dispatcher(run_config).run()
    except (FatalSetupError, DispatchError) as exc:
        _fail(str(exc))

    if quiet:
        console.print(
            f"Processed {summary.total} urls in {summary.elapsed:.3f}s "
            f"({summary.succeeded} succeeded, {summary.failed} failed)"
        )
    else:
        console.print(_render_summary(summary))


__all__ = ["app", "run"]
