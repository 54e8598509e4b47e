"""Lexicon CLI: build an inverted index from a manifest of document paths.

    lexicon MANIFEST [--workers N] [--shards N] [--granularity document|batch]
                     [--strict|--lenient] [--config PATH] [--summary] [--log-level LEVEL]

The index goes to stdout; diagnostics, logs and the optional summary table
go to stderr.  Uses typer for argument parsing and rich for terminal output.
"""

from __future__ import annotations

import sys

import typer
from rich.console import Console
from rich.table import Table

from lexcore.builder import BuildSummary, IndexBuilder
from lexcore.config import BuildConfig, load_config
from lexcore.errors import ConfigError, DataError, WorkerJoinError
from lexcore.formatter import write_index
from lexcore.logs import setup_logging

app = typer.Typer(
    help="Lexicon: concurrent inverted-index builder.",
    add_completion=False,
)
err_console = Console(stderr=True)


def _print_summary(summary: BuildSummary, config: BuildConfig) -> None:
    table = Table(title="Build Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Manifest lines", str(summary.manifest_lines))
    table.add_row("Documents indexed", str(summary.documents_indexed))
    table.add_row("Documents skipped", str(summary.documents_skipped))
    table.add_row("Lines skipped", str(summary.lines_skipped))
    table.add_row("Terms recorded", str(summary.terms_recorded))
    table.add_row("Unique terms", str(summary.unique_terms))
    table.add_row("Workers", str(summary.workers))
    table.add_row("Shards", str(config.shards))
    table.add_row("Granularity", config.granularity)
    table.add_row("Elapsed", f"{summary.elapsed:.3f}s")
    err_console.print(table)


@app.command()
def build(
    manifest: str = typer.Argument(..., help="File listing one document path per line"),
    workers: int | None = typer.Option(
        None, "--workers", "-w", help="Worker threads (0 = one per document)"
    ),
    shards: int | None = typer.Option(None, "--shards", help="Independently locked index shards"),
    granularity: str | None = typer.Option(
        None, "--granularity", help="Lock scope per document: 'document' or 'batch'"
    ),
    strict: bool | None = typer.Option(
        None,
        "--strict/--lenient",
        help="Abort on unreadable inputs, or skip them (default: config file / env)",
    ),
    config_path: str | None = typer.Option(None, "--config", help="Path to config JSON"),
    summary: bool = typer.Option(False, "--summary", help="Print a build summary to stderr"),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level"),
):
    """Index every document named in MANIFEST and print the inverted index."""
    try:
        config = load_config(
            config_path,
            overrides={
                "workers": workers,
                "shards": shards,
                "granularity": granularity,
                "strict": strict,
                "log_level": log_level,
            },
        )
    except ConfigError as e:
        for err in e.errors:
            err_console.print(f"  [red]✗[/red] {err}")
        raise typer.Exit(code=1)

    setup_logging(config.log_level)

    builder = IndexBuilder(config)
    try:
        index, build_summary = builder.build_with_summary(manifest)
    except (DataError, WorkerJoinError) as e:
        err_console.print(f"[bold red]✗ Build failed:[/bold red] {e}")
        raise typer.Exit(code=1)

    write_index(index, sys.stdout)
    sys.stdout.flush()

    if summary:
        _print_summary(build_summary, config)


if __name__ == "__main__":
    app()
