"""
Human-readable rendering of execution results.

The reporter only writes to its ``rich`` console; it holds no other state.
"""

from __future__ import annotations

from typing import Any

from bson import json_util
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from bookquery.catalog.models import QueryKind
from bookquery.execution.result import ExecutionResult, RunSummary

MAX_GROUP_LABELS = 10


class Reporter:
    """Formats :class:`ExecutionResult` objects.

    Args:
        console: Output console (stdout by default).
        show_documents: Print returned documents as a table.
        show_stats: Print execution statistics attached to find results.
        as_json: Print one JSON object per result instead of text.
    """

    def __init__(
        self,
        console: Console | None = None,
        *,
        show_documents: bool = False,
        show_stats: bool = False,
        as_json: bool = False,
    ):
        self.console = console or Console()
        self.show_documents = show_documents
        self.show_stats = show_stats
        self.as_json = as_json

    def report(self, result: ExecutionResult) -> None:
        if self.as_json:
            self.console.print_json(json_util.dumps(result.to_dict()))
            return

        if not result.success:
            self.console.print(
                f"[bold red]✗[/bold red] [bold]{escape(result.query_name)}[/bold] "
                f"({result.kind.value}) {result.error.value} error: "
                f"{escape(result.error_message or '')}"
            )
            return

        self.console.print(
            f"[green]✓[/green] [bold]{escape(result.query_name)}[/bold] "
            f"({result.kind.value}) {_count_label(result)} "
            f"[dim]in {result.elapsed_ms:.2f} ms[/dim]"
        )
        self._print_details(result)

    def summary(self, run: RunSummary) -> None:
        failed = len(run.failures)
        if self.as_json:
            self.console.print_json(
                json_util.dumps(
                    {
                        "summary": {
                            "ran": len(run.results),
                            "failed": failed,
                            "aborted": run.aborted,
                            "skipped": run.skipped,
                            "exit_code": run.exit_code,
                        }
                    }
                )
            )
            return

        style = "red" if failed else "green"
        self.console.print(
            f"\n[{style}]Ran {len(run.results)} "
            f"{'query' if len(run.results) == 1 else 'queries'}, {failed} failed[/{style}]"
        )
        if run.aborted:
            skipped = ", ".join(run.skipped) if run.skipped else "none"
            self.console.print(f"[red]Run aborted; skipped: {escape(skipped)}[/red]")

    # ── Private helpers ──────────────────────────────────────────────────

    def _print_details(self, result: ExecutionResult) -> None:
        if result.kind is QueryKind.UPDATE:
            self.console.print(
                f"  matched {result.matched_count or 0}, modified {result.modified_count or 0}"
            )
        elif result.kind is QueryKind.DELETE:
            self.console.print(f"  deleted {result.deleted_count or 0}")
        elif result.kind is QueryKind.CREATE_INDEX:
            self.console.print(f"  index [cyan]{escape(result.index_name or '')}[/cyan]")

        if result.documents:
            if self.show_documents:
                self._print_table(result.documents, title=result.query_name)
            elif result.kind is QueryKind.AGGREGATE:
                self._print_groups(result.documents)

        if self.show_stats and result.stats:
            parts = " ".join(f"{k}={v}" for k, v in result.stats.items() if v is not None)
            self.console.print(f"  [cyan]stats[/cyan]: {escape(parts)}")

    def _print_groups(self, documents: list[dict[str, Any]]) -> None:
        labels = [_cell(doc.get("_id")) for doc in documents[:MAX_GROUP_LABELS]]
        more = len(documents) - len(labels)
        line = ", ".join(labels) + (f" (+{more} more)" if more > 0 else "")
        self.console.print(f"  groups: {escape(line)}")

    def _print_table(self, documents: list[dict[str, Any]], *, title: str = "") -> None:
        columns: list[str] = []
        for doc in documents:
            for key in doc:
                if key not in columns:
                    columns.append(key)
        table = Table(title=title or None, show_lines=False, pad_edge=False)
        for column in columns:
            table.add_column(column, overflow="fold")
        for doc in documents:
            table.add_row(*(Text(_cell(doc.get(column, ""))) for column in columns))
        self.console.print(table)


def _count_label(result: ExecutionResult) -> str:
    count = result.count
    if result.kind is QueryKind.UPDATE:
        return f"{count} modified"
    if result.kind is QueryKind.DELETE:
        return f"{count} deleted"
    if result.kind is QueryKind.CREATE_INDEX:
        return "index ready"
    return f"{count} document{'s' if count != 1 else ''}"


def _cell(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json_util.dumps(value)
    return str(value)
