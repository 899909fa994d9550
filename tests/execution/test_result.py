"""Tests for ExecutionResult and RunSummary."""

from __future__ import annotations

from bookquery.catalog.models import QueryKind
from bookquery.core.errors import ErrorKind
from bookquery.execution.result import ExecutionResult, RunSummary


class TestExecutionResult:
    def test_count_per_kind(self):
        assert ExecutionResult("f", QueryKind.FIND, documents=[{}, {}]).count == 2
        assert ExecutionResult("u", QueryKind.UPDATE, matched_count=1, modified_count=0).count == 0
        assert ExecutionResult("d", QueryKind.DELETE, deleted_count=4).count == 4
        assert ExecutionResult("i", QueryKind.CREATE_INDEX, index_name="title_1").count == 1

    def test_failed(self):
        result = ExecutionResult.failed("q", QueryKind.AGGREGATE, ErrorKind.VALIDATION, "bad stage")
        assert not result.success
        assert result.to_dict() == {
            "query": "q",
            "kind": "aggregate",
            "success": False,
            "elapsed_ms": 0.0,
            "count": 0,
            "error": {"kind": "validation", "message": "bad stage"},
        }

    def test_to_dict_for_update(self):
        result = ExecutionResult(
            "u", QueryKind.UPDATE, elapsed_ms=1.23456, matched_count=1, modified_count=1
        )
        assert result.to_dict() == {
            "query": "u",
            "kind": "update",
            "success": True,
            "elapsed_ms": 1.235,
            "count": 1,
            "matched_count": 1,
            "modified_count": 1,
        }

    def test_to_dict_includes_documents_for_reads(self):
        result = ExecutionResult("f", QueryKind.FIND, documents=[{"title": "1984"}])
        assert result.to_dict()["documents"] == [{"title": "1984"}]


class TestRunSummary:
    def test_connection_error_wins(self):
        summary = RunSummary()
        summary.add(ExecutionResult.failed("a", QueryKind.FIND, ErrorKind.VALIDATION, "x"))
        summary.add(ExecutionResult.failed("b", QueryKind.FIND, ErrorKind.CONNECTION, "y"))
        assert summary.exit_code == 1
        assert len(summary.failures) == 2

    def test_empty_run_succeeds(self):
        assert RunSummary().success
        assert RunSummary().exit_code == 0
