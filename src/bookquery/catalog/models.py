"""
Query definition types.

A :class:`QueryDefinition` is a tagged variant keyed by :class:`QueryKind`.
Every kind shares ``name``, ``filter`` and ``options``; the kind decides
which of the remaining fields the executor reads:

============  ===========================================================
Kind          Fields used
============  ===========================================================
find          filter, options (projection, sort, skip, limit)
update        filter, update, multi
delete        filter, multi
aggregate     pipeline
create_index  keys, unique
============  ===========================================================

Definitions are frozen.  Accessors that hand documents to pymongo return
deep copies, so the catalog entry itself is never mutated by a driver.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

Document = dict[str, Any]


class QueryKind(str, Enum):
    """Operation a catalog entry performs."""

    FIND = "find"
    UPDATE = "update"
    DELETE = "delete"
    AGGREGATE = "aggregate"
    CREATE_INDEX = "create_index"

    @property
    def is_mutation(self) -> bool:
        return self in (QueryKind.UPDATE, QueryKind.DELETE)


@dataclass(frozen=True)
class QueryOptions:
    """Cursor options for ``find`` queries.

    Attributes:
        projection: Fields to include (1) or exclude (0).
        sort: Ordered mapping of field to direction (1 ascending, -1 descending).
        skip: Documents to skip before returning results.
        limit: Maximum number of documents returned.
    """

    projection: Document | None = None
    sort: dict[str, int] | None = None
    skip: int | None = None
    limit: int | None = None

    def sort_spec(self) -> list[tuple[str, int]] | None:
        """Sort as the ordered key list pymongo expects."""
        if not self.sort:
            return None
        return list(self.sort.items())

    def to_dict(self) -> dict[str, Any]:
        return {
            k: v
            for k, v in (
                ("projection", self.projection),
                ("sort", self.sort),
                ("skip", self.skip),
                ("limit", self.limit),
            )
            if v is not None
        }


@dataclass(frozen=True)
class QueryDefinition:
    """One named entry of the catalog."""

    name: str
    kind: QueryKind
    filter: Document = field(default_factory=dict)
    options: QueryOptions = field(default_factory=QueryOptions)
    pipeline: list[Document] | None = None
    update: Document | list[Document] | None = None
    keys: dict[str, Any] | None = None
    multi: bool = False
    unique: bool = False
    description: str = ""

    def filter_document(self) -> Document:
        return copy.deepcopy(self.filter)

    def pipeline_stages(self) -> list[Document]:
        return copy.deepcopy(self.pipeline or [])

    def update_document(self) -> Document | list[Document]:
        return copy.deepcopy(self.update) if self.update is not None else {}

    def index_keys(self) -> list[tuple[str, Any]]:
        return list((self.keys or {}).items())

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the catalog file shape (omits unused fields)."""
        d: dict[str, Any] = {"name": self.name, "kind": self.kind.value}
        if self.description:
            d["description"] = self.description
        if self.filter:
            d["filter"] = self.filter
        options = self.options.to_dict()
        if options:
            d["options"] = options
        if self.pipeline is not None:
            d["pipeline"] = self.pipeline
        if self.update is not None:
            d["update"] = self.update
        if self.keys is not None:
            d["keys"] = self.keys
        if self.multi:
            d["multi"] = True
        if self.unique:
            d["unique"] = True
        return d


# ── Constructors ─────────────────────────────────────────────────────────


def find(
    name: str,
    filter: Document | None = None,
    *,
    projection: Document | None = None,
    sort: dict[str, int] | None = None,
    skip: int | None = None,
    limit: int | None = None,
    description: str = "",
) -> QueryDefinition:
    return QueryDefinition(
        name=name,
        kind=QueryKind.FIND,
        filter=filter or {},
        options=QueryOptions(projection=projection, sort=sort, skip=skip, limit=limit),
        description=description,
    )


def update(
    name: str,
    filter: Document,
    update: Document | list[Document],
    *,
    multi: bool = False,
    description: str = "",
) -> QueryDefinition:
    return QueryDefinition(
        name=name,
        kind=QueryKind.UPDATE,
        filter=filter,
        update=update,
        multi=multi,
        description=description,
    )


def delete(
    name: str,
    filter: Document,
    *,
    multi: bool = False,
    description: str = "",
) -> QueryDefinition:
    return QueryDefinition(
        name=name,
        kind=QueryKind.DELETE,
        filter=filter,
        multi=multi,
        description=description,
    )


def aggregate(
    name: str,
    pipeline: list[Document],
    *,
    description: str = "",
) -> QueryDefinition:
    return QueryDefinition(
        name=name,
        kind=QueryKind.AGGREGATE,
        pipeline=pipeline,
        description=description,
    )


def create_index(
    name: str,
    keys: dict[str, Any],
    *,
    unique: bool = False,
    description: str = "",
) -> QueryDefinition:
    return QueryDefinition(
        name=name,
        kind=QueryKind.CREATE_INDEX,
        keys=keys,
        unique=unique,
        description=description,
    )
