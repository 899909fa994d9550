"""Structural checks run before a definition is submitted to the store.

These only catch requests that are malformed regardless of the data
(wrong types, bad directions, stages that are not ``$`` operators).
Anything the server rejects is mapped to the same
:class:`~bookquery.core.errors.QueryValidationError` by the executor.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bookquery.catalog.models import QueryDefinition, QueryKind
from bookquery.core.errors import QueryValidationError

SORT_DIRECTIONS = (1, -1)
# String index types accepted by create_index besides 1/-1
INDEX_TYPES = frozenset({"text", "hashed", "2d", "2dsphere"})


def _fail(definition: QueryDefinition, message: str, field: str) -> QueryValidationError:
    return QueryValidationError(
        f"{definition.name}: {message}", field=field
    ).with_context(query=definition.name, kind=definition.kind.value)


def _check_mapping(definition: QueryDefinition, value: Any, field: str) -> None:
    if not isinstance(value, Mapping):
        raise _fail(definition, f"{field} must be a document, got {type(value).__name__}", field)


def _check_count(definition: QueryDefinition, value: int | None, field: str, minimum: int = 0) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise _fail(definition, f"{field} must be an integer >= {minimum}, got {value!r}", field)


def _check_stage(definition: QueryDefinition, stage: Any, index: int) -> None:
    field = f"pipeline[{index}]"
    if not isinstance(stage, Mapping):
        raise _fail(definition, f"{field} must be a document", field)
    if len(stage) != 1:
        raise _fail(definition, f"{field} must have exactly one stage operator, got {len(stage)}", field)
    (operator,) = stage
    if not isinstance(operator, str) or not operator.startswith("$"):
        raise _fail(definition, f"{field} stage name must start with '$', got {operator!r}", field)


def _validate_find(definition: QueryDefinition) -> None:
    options = definition.options
    if options.projection is not None:
        _check_mapping(definition, options.projection, "projection")
    if options.sort is not None:
        _check_mapping(definition, options.sort, "sort")
        for key, direction in options.sort.items():
            if isinstance(direction, bool) or direction not in SORT_DIRECTIONS:
                raise _fail(definition, f"sort direction for {key!r} must be 1 or -1, got {direction!r}", "sort")
    _check_count(definition, options.skip, "skip")
    # the store reads limit 0 as "no limit"
    _check_count(definition, options.limit, "limit", minimum=1)


def _validate_update(definition: QueryDefinition) -> None:
    spec = definition.update
    if isinstance(spec, list):
        if not spec:
            raise _fail(definition, "update pipeline must not be empty", "update")
        for index, stage in enumerate(spec):
            _check_stage(definition, stage, index)
        return
    if not spec:
        raise _fail(definition, "update requires an update document", "update")
    _check_mapping(definition, spec, "update")
    plain = [key for key in spec if not str(key).startswith("$")]
    if plain:
        raise _fail(definition, f"update keys must be $ operators, got {plain}", "update")


def _validate_aggregate(definition: QueryDefinition) -> None:
    pipeline = definition.pipeline
    if not isinstance(pipeline, list) or not pipeline:
        raise _fail(definition, "aggregate requires a non-empty pipeline", "pipeline")
    for index, stage in enumerate(pipeline):
        _check_stage(definition, stage, index)


def _validate_create_index(definition: QueryDefinition) -> None:
    keys = definition.keys
    if not keys:
        raise _fail(definition, "create_index requires at least one key", "keys")
    _check_mapping(definition, keys, "keys")
    for key, direction in keys.items():
        if isinstance(direction, str) and direction in INDEX_TYPES:
            continue
        if isinstance(direction, bool) or direction not in SORT_DIRECTIONS:
            raise _fail(definition, f"index direction for {key!r} must be 1, -1 or an index type, got {direction!r}", "keys")


_VALIDATORS = {
    QueryKind.FIND: _validate_find,
    QueryKind.UPDATE: _validate_update,
    QueryKind.DELETE: lambda definition: None,
    QueryKind.AGGREGATE: _validate_aggregate,
    QueryKind.CREATE_INDEX: _validate_create_index,
}


def validate_definition(definition: QueryDefinition) -> None:
    """Raise :class:`QueryValidationError` if ``definition`` is malformed."""
    if definition.kind in (QueryKind.FIND, QueryKind.UPDATE, QueryKind.DELETE):
        _check_mapping(definition, definition.filter, "filter")
    _VALIDATORS[definition.kind](definition)
