"""
CLI utility helpers: settings, catalog resolution and error output.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import NoReturn

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from bookquery.catalog import QueryCatalog, bookstore_catalog, load_catalog
from bookquery.core.connection import open_store
from bookquery.core.errors import BookQueryError, StoreConnectionError
from bookquery.core.settings import BookQuerySettings
from bookquery.execution.executor import QueryExecutor
from bookquery.execution.result import EXIT_CONNECTION, EXIT_VALIDATION, RunSummary
from bookquery.execution.runner import CatalogRunner
from bookquery.reporting.reporter import Reporter
from bookquery.seed import seed_books

console = Console()
err_console = Console(stderr=True)


# ── Settings / catalog ───────────────────────────────────────────────────


def load_settings(
    uri: str | None = None,
    database: str | None = None,
    collection: str | None = None,
) -> BookQuerySettings:
    """Environment settings with CLI flags applied on top."""
    try:
        return BookQuerySettings().with_overrides(
            mongo_uri=uri, database=database, collection=collection
        )
    except ValidationError as e:
        fail(f"Invalid configuration: {e}", code=EXIT_VALIDATION)


def resolve_catalog(path: Path | None) -> QueryCatalog:
    """Catalog file when given, else the built-in bookstore catalog."""
    if path is None:
        return bookstore_catalog()
    try:
        return load_catalog(path)
    except BookQueryError as e:
        fail(e.message, code=EXIT_VALIDATION)


# ── Execution ────────────────────────────────────────────────────────────


def execute_run(
    settings: BookQuerySettings,
    catalog: QueryCatalog,
    action: Callable[[CatalogRunner], RunSummary],
    *,
    reporter: Reporter,
    explain: bool = False,
    seed: bool = False,
) -> RunSummary:
    """Open the store, run ``action`` and close the store on every path."""
    try:
        with open_store(settings) as store:
            if seed:
                seed_books(store.collection)
            runner = CatalogRunner(
                catalog,
                QueryExecutor(store.collection),
                reporter,
                explain=explain,
            )
            return action(runner)
    except StoreConnectionError as e:
        fail(e.message, code=EXIT_CONNECTION)
    except BookQueryError as e:
        fail(e.message, code=EXIT_VALIDATION)


# ── Output helpers ───────────────────────────────────────────────────────


def fail(message: str, *, code: int) -> NoReturn:
    """Print an error to stderr and exit with ``code``."""
    err_console.print(f"[bold red]Error[/bold red]: {escape(message)}", highlight=False)
    raise typer.Exit(code=code)
