"""
Execution layer: run catalog entries against the store and collect results.
"""

from bookquery.execution.result import ExecutionResult, RunSummary
from bookquery.execution.executor import QueryExecutor, summarize_explain
from bookquery.execution.runner import CatalogRunner

__all__ = [
    "CatalogRunner",
    "ExecutionResult",
    "QueryExecutor",
    "RunSummary",
    "summarize_explain",
]
