"""
Execution results.

:class:`ExecutionResult` is created once per executed catalog entry and
discarded after it is reported.  :class:`RunSummary` collects the results
of one ``run`` / ``run-all`` invocation and derives the process exit code.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from bookquery.catalog.models import QueryKind
from bookquery.core.errors import ErrorKind

EXIT_OK = 0
EXIT_CONNECTION = 1
EXIT_VALIDATION = 2


@dataclass
class ExecutionResult:
    """Outcome of one catalog entry.

    Attributes:
        query_name: Catalog entry name.
        kind: Query kind that was executed.
        documents: Returned documents (empty for mutations and indexes).
        elapsed_ms: Wall-clock time of the store call.
        error: Failure kind, ``None`` on success.
        error_message: Human-readable failure reason.
        matched_count: Documents matched by an update.
        modified_count: Documents modified by an update.
        deleted_count: Documents removed by a delete.
        index_name: Name returned by index creation.
        stats: Execution statistics summary (``--stats``).
    """

    query_name: str
    kind: QueryKind
    documents: list[dict[str, Any]] = field(default_factory=list)
    elapsed_ms: float = 0.0
    error: ErrorKind | None = None
    error_message: str | None = None
    matched_count: int | None = None
    modified_count: int | None = None
    deleted_count: int | None = None
    index_name: str | None = None
    stats: dict[str, Any] | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def count(self) -> int:
        """Documents returned, or documents affected for mutations."""
        if self.kind is QueryKind.UPDATE:
            return self.modified_count or 0
        if self.kind is QueryKind.DELETE:
            return self.deleted_count or 0
        if self.kind is QueryKind.CREATE_INDEX:
            return 1 if self.index_name else 0
        return len(self.documents)

    @classmethod
    def failed(
        cls,
        query_name: str,
        kind: QueryKind,
        error: ErrorKind,
        message: str,
        *,
        elapsed_ms: float = 0.0,
    ) -> ExecutionResult:
        return cls(
            query_name=query_name,
            kind=kind,
            elapsed_ms=elapsed_ms,
            error=error,
            error_message=message,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict (for JSON output)."""
        d: dict[str, Any] = {
            "query": self.query_name,
            "kind": self.kind.value,
            "success": self.success,
            "elapsed_ms": round(self.elapsed_ms, 3),
            "count": self.count,
        }
        if self.error is not None:
            d["error"] = {"kind": self.error.value, "message": self.error_message}
            return d
        if self.kind in (QueryKind.FIND, QueryKind.AGGREGATE):
            d["documents"] = self.documents
        for key in ("matched_count", "modified_count", "deleted_count", "index_name"):
            value = getattr(self, key)
            if value is not None:
                d[key] = value
        if self.stats is not None:
            d["stats"] = self.stats
        return d


@dataclass
class RunSummary:
    """Results of one catalog run, in execution order."""

    results: list[ExecutionResult] = field(default_factory=list)
    aborted: bool = False
    skipped: list[str] = field(default_factory=list)

    def add(self, result: ExecutionResult) -> None:
        self.results.append(result)

    @property
    def failures(self) -> list[ExecutionResult]:
        return [r for r in self.results if not r.success]

    @property
    def success(self) -> bool:
        return not self.failures

    @property
    def exit_code(self) -> int:
        """0 on success, 1 after a connection error, 2 after validation errors."""
        kinds = {r.error for r in self.failures}
        if ErrorKind.CONNECTION in kinds:
            return EXIT_CONNECTION
        if ErrorKind.VALIDATION in kinds:
            return EXIT_VALIDATION
        return EXIT_OK
