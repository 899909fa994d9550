"""
Root Typer application for the bookquery CLI.

Exit codes: 0 success, 1 document store unreachable, 2 validation error
(bad query, unknown query name, bad catalog file or configuration).
"""

from __future__ import annotations

from pathlib import Path

import typer
from typer import Typer

from bookquery import __version__
from bookquery.catalog import dump_catalog
from bookquery.cli.utils import (
    console,
    execute_run,
    fail,
    load_settings,
    resolve_catalog,
)
from bookquery.core.connection import open_store
from bookquery.core.errors import BookQueryError, StoreConnectionError
from bookquery.core.logging import configure_logging
from bookquery.execution.result import EXIT_CONNECTION, EXIT_VALIDATION
from bookquery.reporting.reporter import Reporter
from bookquery.seed import seed_books

app = Typer(
    name="bookquery",
    help="bookquery: run the bookstore query catalog against MongoDB.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("bookquery")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"bookquery {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", "-l", help="Log level (env: BOOKQUERY_LOG_LEVEL)."
    ),
    json_logs: bool | None = typer.Option(
        None, "--json-logs/--console-logs", help="Log format (default: JSON unless stderr is a tty)."
    ),
) -> None:
    """bookquery CLI: list, run and seed catalog queries."""
    settings = load_settings()
    configure_logging(
        level=log_level or settings.log_level,
        json_format=json_logs if json_logs is not None else settings.json_logs,
    )


# ── Commands ─────────────────────────────────────────────────────────────


@app.command("run")
def run_query(
    name: str = typer.Argument(..., help="Catalog query name"),
    uri: str | None = typer.Option(None, "--uri", "-u", help="Store URL (env: BOOKQUERY_MONGO_URI)"),
    database: str | None = typer.Option(None, "--database", "-d"),
    collection: str | None = typer.Option(None, "--collection", "-c"),
    catalog_file: Path | None = typer.Option(None, "--catalog", help="YAML/JSON catalog file"),
    show_docs: bool = typer.Option(False, "--show-docs", help="Print returned documents"),
    stats: bool = typer.Option(False, "--stats", help="Include execution statistics for find queries"),
    seed: bool = typer.Option(False, "--seed", help="Load the sample books before running"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Execute one catalog entry and print its result."""
    settings = load_settings(uri, database, collection)
    catalog = resolve_catalog(catalog_file)
    if name not in catalog:
        fail(f"Query '{name}' not found. Available: {', '.join(catalog.names())}", code=EXIT_VALIDATION)

    reporter = Reporter(console, show_documents=show_docs, show_stats=stats, as_json=json_out)
    summary = execute_run(
        settings,
        catalog,
        lambda runner: runner.run(name),
        reporter=reporter,
        explain=stats,
        seed=seed,
    )
    if summary.exit_code:
        raise typer.Exit(code=summary.exit_code)


@app.command("run-all")
def run_all(
    uri: str | None = typer.Option(None, "--uri", "-u", help="Store URL (env: BOOKQUERY_MONGO_URI)"),
    database: str | None = typer.Option(None, "--database", "-d"),
    collection: str | None = typer.Option(None, "--collection", "-c"),
    catalog_file: Path | None = typer.Option(None, "--catalog", help="YAML/JSON catalog file"),
    show_docs: bool = typer.Option(False, "--show-docs", help="Print returned documents"),
    stats: bool = typer.Option(False, "--stats", help="Include execution statistics for find queries"),
    seed: bool = typer.Option(False, "--seed", help="Load the sample books before running"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Execute every catalog entry in order."""
    settings = load_settings(uri, database, collection)
    catalog = resolve_catalog(catalog_file)

    reporter = Reporter(console, show_documents=show_docs, show_stats=stats, as_json=json_out)
    summary = execute_run(
        settings,
        catalog,
        lambda runner: runner.run_all(),
        reporter=reporter,
        explain=stats,
        seed=seed,
    )
    reporter.summary(summary)
    if summary.exit_code:
        raise typer.Exit(code=summary.exit_code)


@app.command("list")
def list_queries(
    catalog_file: Path | None = typer.Option(None, "--catalog", help="YAML/JSON catalog file"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """List catalog entries in run order."""
    from rich.table import Table

    catalog = resolve_catalog(catalog_file)
    if json_out:
        import json

        console.print_json(json.dumps([d.to_dict() for d in catalog]))
        return

    table = Table(title="Queries", show_lines=False, pad_edge=False)
    table.add_column("Name", style="bold")
    table.add_column("Kind")
    table.add_column("Description", overflow="fold")
    for definition in catalog:
        table.add_row(definition.name, definition.kind.value, definition.description)
    console.print(table)


@app.command("export")
def export_catalog(
    catalog_file: Path | None = typer.Option(None, "--catalog", help="YAML/JSON catalog file"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Write to file instead of stdout"),
) -> None:
    """Write the catalog as YAML (a starting point for --catalog files)."""
    content = dump_catalog(resolve_catalog(catalog_file))
    if output is None:
        typer.echo(content, nl=False)
        return
    output.write_text(content, encoding="utf-8")
    console.print(f"Wrote catalog to [cyan]{output}[/cyan]")


@app.command("seed")
def seed_collection(
    uri: str | None = typer.Option(None, "--uri", "-u", help="Store URL (env: BOOKQUERY_MONGO_URI)"),
    database: str | None = typer.Option(None, "--database", "-d"),
    collection: str | None = typer.Option(None, "--collection", "-c"),
    drop: bool = typer.Option(True, "--drop/--no-drop", help="Drop the collection first"),
) -> None:
    """Insert the sample bookstore dataset."""
    settings = load_settings(uri, database, collection)
    try:
        with open_store(settings) as store:
            count = seed_books(store.collection, drop=drop)
    except StoreConnectionError as e:
        fail(e.message, code=EXIT_CONNECTION)
    except BookQueryError as e:
        fail(e.message, code=EXIT_VALIDATION)
    console.print(f"Seeded {count} books into [cyan]{settings.database}.{settings.collection}[/cyan]")

