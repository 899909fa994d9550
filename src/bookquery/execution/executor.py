"""
Query executor.

Translates a :class:`~bookquery.catalog.models.QueryDefinition` into the
matching pymongo call on an explicitly passed collection and wraps the
outcome in an :class:`~bookquery.execution.result.ExecutionResult`.

Error mapping
-------------
==========================================  ===========================
pymongo exception                           Raised as
==========================================  ===========================
``ConnectionFailure`` and subclasses        ``StoreConnectionError``
(``ServerSelectionTimeoutError``,
``AutoReconnect``, ``NetworkTimeout``)
``OperationFailure``, ``InvalidOperation``, ``QueryValidationError``
``InvalidDocument``, other ``PyMongoError``
``TypeError`` / ``ValueError`` from         ``QueryValidationError``
driver argument checks, or a command the
backend does not implement
==========================================  ===========================

An update or delete that matches nothing returns a zero count; it is
never an error.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from pymongo.errors import ConnectionFailure, PyMongoError

from bookquery.catalog.models import QueryDefinition, QueryKind
from bookquery.catalog.validation import validate_definition
from bookquery.core.errors import QueryValidationError, StoreConnectionError
from bookquery.core.logging import get_logger
from bookquery.execution.result import ExecutionResult

logger = get_logger(__name__)

EXPLAIN_VERBOSITY = "executionStats"


class QueryExecutor:
    """Runs catalog entries against one collection."""

    def __init__(self, collection: Any):
        self.collection = collection
        self._handlers: dict[QueryKind, Callable[[QueryDefinition], ExecutionResult]] = {
            QueryKind.FIND: self._find,
            QueryKind.UPDATE: self._update,
            QueryKind.DELETE: self._delete,
            QueryKind.AGGREGATE: self._aggregate,
            QueryKind.CREATE_INDEX: self._create_index,
        }

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def validate(self, definition: QueryDefinition) -> None:
        validate_definition(definition)

    def cursor(self, definition: QueryDefinition) -> Any:
        """Lazy cursor for a ``find`` entry; call again to restart."""
        if definition.kind is not QueryKind.FIND:
            raise QueryValidationError(
                f"{definition.name}: only find queries produce a cursor",
                field="kind",
            ).with_context(query=definition.name, kind=definition.kind.value)
        self.validate(definition)
        options = definition.options
        cursor = self.collection.find(definition.filter_document(), options.projection)
        sort = options.sort_spec()
        if sort:
            cursor = cursor.sort(sort)
        if options.skip:
            cursor = cursor.skip(options.skip)
        if options.limit is not None:
            cursor = cursor.limit(options.limit)
        return cursor

    def execute(self, definition: QueryDefinition) -> ExecutionResult:
        """Run one entry and time the store call.

        Raises
        ------
        QueryValidationError
            The definition is malformed or the store rejected it.
        StoreConnectionError
            The store could not be reached.
        """
        self.validate(definition)
        handler = self._handlers[definition.kind]
        start = time.perf_counter()
        result = self._guard(definition, handler)
        result.elapsed_ms = (time.perf_counter() - start) * 1000
        logger.debug(
            "query_executed",
            query=definition.name,
            kind=definition.kind.value,
            count=result.count,
            elapsed_ms=round(result.elapsed_ms, 3),
        )
        return result

    def explain(self, definition: QueryDefinition) -> dict[str, Any]:
        """Execution statistics for a ``find`` entry.

        Runs the ``explain`` command at ``executionStats`` verbosity and
        returns a flat summary (see :func:`summarize_explain`).
        """
        if definition.kind is not QueryKind.FIND:
            raise QueryValidationError(
                f"{definition.name}: execution statistics are only available for find queries",
                field="kind",
            ).with_context(query=definition.name, kind=definition.kind.value)
        self.validate(definition)
        command = self._find_command(definition)
        raw = self._guard(
            definition,
            lambda _: self.collection.database.command(
                "explain", command, verbosity=EXPLAIN_VERBOSITY
            ),
        )
        return summarize_explain(raw)

    # ------------------------------------------------------------------ #
    # Handlers
    # ------------------------------------------------------------------ #

    def _find(self, definition: QueryDefinition) -> ExecutionResult:
        documents = list(self.cursor(definition))
        return ExecutionResult(definition.name, definition.kind, documents=documents)

    def _update(self, definition: QueryDefinition) -> ExecutionResult:
        method = self.collection.update_many if definition.multi else self.collection.update_one
        ack = method(definition.filter_document(), definition.update_document())
        return ExecutionResult(
            definition.name,
            definition.kind,
            matched_count=ack.matched_count,
            modified_count=ack.modified_count,
        )

    def _delete(self, definition: QueryDefinition) -> ExecutionResult:
        method = self.collection.delete_many if definition.multi else self.collection.delete_one
        ack = method(definition.filter_document())
        return ExecutionResult(
            definition.name,
            definition.kind,
            deleted_count=ack.deleted_count,
        )

    def _aggregate(self, definition: QueryDefinition) -> ExecutionResult:
        documents = list(self.collection.aggregate(definition.pipeline_stages()))
        return ExecutionResult(definition.name, definition.kind, documents=documents)

    def _create_index(self, definition: QueryDefinition) -> ExecutionResult:
        kwargs: dict[str, Any] = {}
        if definition.unique:
            kwargs["unique"] = True
        index_name = self.collection.create_index(definition.index_keys(), **kwargs)
        return ExecutionResult(definition.name, definition.kind, index_name=index_name)

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #

    def _find_command(self, definition: QueryDefinition) -> dict[str, Any]:
        options = definition.options
        command: dict[str, Any] = {
            "find": self.collection.name,
            "filter": definition.filter_document(),
        }
        if options.projection is not None:
            command["projection"] = dict(options.projection)
        if options.sort:
            command["sort"] = dict(options.sort)
        if options.skip:
            command["skip"] = options.skip
        if options.limit is not None:
            command["limit"] = options.limit
        return command

    def _guard(self, definition: QueryDefinition, call: Callable[[QueryDefinition], Any]) -> Any:
        """Invoke ``call`` and translate driver errors."""
        try:
            return call(definition)
        except ConnectionFailure as e:
            raise StoreConnectionError(
                f"{definition.name}: document store unreachable: {e}", cause=e
            ).with_context(query=definition.name, kind=definition.kind.value) from e
        except PyMongoError as e:
            raise QueryValidationError(
                f"{definition.name}: rejected by the document store: {e}", cause=e
            ).with_context(query=definition.name, kind=definition.kind.value) from e
        except (TypeError, ValueError, NotImplementedError) as e:
            raise QueryValidationError(
                f"{definition.name}: invalid request: {e}", cause=e
            ).with_context(query=definition.name, kind=definition.kind.value) from e


def summarize_explain(raw: dict[str, Any]) -> dict[str, Any]:
    """Reduce ``explain`` output to the numbers worth printing."""
    stats = raw.get("executionStats", {})
    planner = raw.get("queryPlanner", {})
    plan = planner.get("winningPlan", {})
    plan = plan.get("queryPlan", plan)

    stages: list[str] = []
    while plan:
        stage = plan.get("stage")
        if stage:
            stages.append(stage)
        plan = plan.get("inputStage")

    return {
        "n_returned": stats.get("nReturned"),
        "docs_examined": stats.get("totalDocsExamined"),
        "keys_examined": stats.get("totalKeysExamined"),
        "execution_time_ms": stats.get("executionTimeMillis"),
        "winning_stage": " <- ".join(stages) or None,
    }
