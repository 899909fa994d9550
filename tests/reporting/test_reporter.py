"""Tests for Reporter text and JSON output."""

from __future__ import annotations

import io
import json

import pytest
from bson import ObjectId
from rich.console import Console

from bookquery.catalog.models import QueryKind
from bookquery.core.errors import ErrorKind
from bookquery.execution.result import ExecutionResult, RunSummary
from bookquery.reporting import Reporter


@pytest.fixture
def output():
    return io.StringIO()


def _reporter(output, **kwargs):
    console = Console(file=output, width=200, color_system=None, highlight=False)
    return Reporter(console, **kwargs)


class TestTextReport:
    def test_find_result(self, output):
        result = ExecutionResult(
            "fiction-books", QueryKind.FIND, documents=[{"title": "A"}] * 4, elapsed_ms=1.5
        )
        _reporter(output).report(result)

        text = output.getvalue()
        assert "✓ fiction-books (find) 4 documents in 1.50 ms" in text

    def test_single_document_label(self, output):
        _reporter(output).report(ExecutionResult("one", QueryKind.FIND, documents=[{}]))
        assert "1 document " in output.getvalue()

    def test_update_details(self, output):
        result = ExecutionResult(
            "update-1984-price", QueryKind.UPDATE, matched_count=1, modified_count=1
        )
        _reporter(output).report(result)

        text = output.getvalue()
        assert "1 modified" in text
        assert "matched 1, modified 1" in text

    def test_delete_details(self, output):
        _reporter(output).report(ExecutionResult("d", QueryKind.DELETE, deleted_count=0))
        text = output.getvalue()
        assert "0 deleted" in text
        assert "deleted 0" in text

    def test_index(self, output):
        _reporter(output).report(
            ExecutionResult("index-title", QueryKind.CREATE_INDEX, index_name="title_1")
        )
        text = output.getvalue()
        assert "index ready" in text
        assert "index title_1" in text

    def test_aggregate_prints_group_labels(self, output):
        documents = [{"_id": "Fiction", "average_price": 10.7}, {"_id": "Fantasy", "average_price": 17.5}]
        _reporter(output).report(ExecutionResult("avg", QueryKind.AGGREGATE, documents=documents))
        assert "groups: Fiction, Fantasy" in output.getvalue()

    def test_show_documents_prints_table(self, output):
        documents = [{"_id": ObjectId(), "title": "[1984]", "price": 10.99}]
        _reporter(output, show_documents=True).report(
            ExecutionResult("f", QueryKind.FIND, documents=documents)
        )
        text = output.getvalue()
        assert "[1984]" in text
        assert "10.99" in text

    def test_failure(self, output):
        result = ExecutionResult.failed(
            "broken", QueryKind.AGGREGATE, ErrorKind.VALIDATION, "broken: bad [stage]"
        )
        _reporter(output).report(result)
        assert "✗ broken (aggregate) validation error: broken: bad [stage]" in output.getvalue()

    def test_stats(self, output):
        result = ExecutionResult(
            "f", QueryKind.FIND, stats={"n_returned": 5, "winning_stage": "COLLSCAN", "keys_examined": None}
        )
        _reporter(output, show_stats=True).report(result)
        text = output.getvalue()
        assert "stats: n_returned=5 winning_stage=COLLSCAN" in text
        assert "keys_examined" not in text

    def test_stats_hidden_unless_requested(self, output):
        result = ExecutionResult("f", QueryKind.FIND, stats={"n_returned": 5})
        _reporter(output).report(result)
        assert "stats" not in output.getvalue()


class TestJsonReport:
    def test_result_is_one_json_object(self, output):
        documents = [{"_id": ObjectId("5f43a1b2c3d4e5f6a7b8c9d0"), "title": "1984"}]
        _reporter(output, as_json=True).report(
            ExecutionResult("f", QueryKind.FIND, documents=documents)
        )
        data = json.loads(output.getvalue())
        assert data["query"] == "f"
        assert data["count"] == 1
        assert data["documents"][0]["_id"] == {"$oid": "5f43a1b2c3d4e5f6a7b8c9d0"}

    def test_summary(self, output):
        run = RunSummary(aborted=True, skipped=["b"])
        run.add(ExecutionResult.failed("a", QueryKind.FIND, ErrorKind.CONNECTION, "down"))
        _reporter(output, as_json=True).summary(run)

        data = json.loads(output.getvalue())
        assert data == {
            "summary": {"ran": 1, "failed": 1, "aborted": True, "skipped": ["b"], "exit_code": 1}
        }


class TestSummary:
    def test_successful_run(self, output):
        run = RunSummary()
        run.add(ExecutionResult("a", QueryKind.FIND))
        run.add(ExecutionResult("b", QueryKind.FIND))
        _reporter(output).summary(run)
        assert "Ran 2 queries, 0 failed" in output.getvalue()

    def test_aborted_run(self, output):
        run = RunSummary(aborted=True, skipped=["b", "c"])
        run.add(ExecutionResult.failed("a", QueryKind.FIND, ErrorKind.CONNECTION, "down"))
        _reporter(output).summary(run)

        text = output.getvalue()
        assert "Ran 1 query, 1 failed" in text
        assert "Run aborted; skipped: b, c" in text
