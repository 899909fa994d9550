"""
Catalog runner: Catalog -> Executor -> Reporter.

Entries run one at a time, each to completion before the next starts.

- ``QueryValidationError`` fails that entry only; the run continues.
- ``StoreConnectionError`` fails that entry and aborts the run; the
  remaining names are recorded as skipped.
- Execution statistics (``explain=True``) are best effort: if they cannot
  be collected the find result is kept without them.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from bookquery.catalog.catalog import QueryCatalog
from bookquery.catalog.models import QueryDefinition, QueryKind
from bookquery.core.errors import (
    ErrorKind,
    QueryValidationError,
    StoreConnectionError,
    error_kind,
)
from bookquery.core.logging import LogContext, get_logger
from bookquery.execution.executor import QueryExecutor
from bookquery.execution.result import ExecutionResult, RunSummary

if TYPE_CHECKING:
    from bookquery.reporting.reporter import Reporter

logger = get_logger(__name__)


class CatalogRunner:
    """Runs catalog entries and streams each result to the reporter."""

    def __init__(
        self,
        catalog: QueryCatalog,
        executor: QueryExecutor,
        reporter: Reporter | None = None,
        *,
        explain: bool = False,
    ):
        self.catalog = catalog
        self.executor = executor
        self.reporter = reporter
        self.explain = explain

    def run(self, name: str) -> RunSummary:
        """Run a single entry by name (raises ``QueryNotFoundError``)."""
        return self.run_many([self.catalog.get(name)])

    def run_all(self) -> RunSummary:
        return self.run_many(self.catalog.list())

    def run_many(self, definitions: Sequence[QueryDefinition]) -> RunSummary:
        summary = RunSummary()
        for position, definition in enumerate(definitions):
            result = self._run_one(definition)
            summary.add(result)
            if self.reporter is not None:
                self.reporter.report(result)
            if result.error is ErrorKind.CONNECTION:
                summary.aborted = True
                summary.skipped = [d.name for d in definitions[position + 1:]]
                logger.error("run_aborted", query=definition.name, skipped=len(summary.skipped))
                break
        logger.info(
            "run_completed",
            ran=len(summary.results),
            failed=len(summary.failures),
            aborted=summary.aborted,
        )
        return summary

    def _run_one(self, definition: QueryDefinition) -> ExecutionResult:
        with LogContext(query=definition.name, kind=definition.kind.value):
            logger.info("query_started")
            try:
                result = self.executor.execute(definition)
                if self.explain and definition.kind is QueryKind.FIND:
                    result.stats = self._explain(definition)
            except (QueryValidationError, StoreConnectionError) as e:
                kind = error_kind(e)
                log = logger.error if kind is ErrorKind.CONNECTION else logger.warning
                log("query_failed", **e.to_dict())
                return ExecutionResult.failed(definition.name, definition.kind, kind, e.message)
            logger.info("query_completed", count=result.count, elapsed_ms=round(result.elapsed_ms, 3))
            return result

    def _explain(self, definition: QueryDefinition) -> dict[str, Any] | None:
        """Statistics for a find that already succeeded; ``None`` if unavailable."""
        try:
            return self.executor.explain(definition)
        except QueryValidationError as e:
            logger.warning("explain_failed", **e.to_dict())
            return None
