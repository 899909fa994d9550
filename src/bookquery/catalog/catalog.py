"""Ordered, read-only collection of query definitions."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from bookquery.catalog.models import QueryDefinition
from bookquery.core.errors import CatalogError, QueryNotFoundError
from bookquery.core.logging import get_logger

logger = get_logger(__name__)


class QueryCatalog:
    """Named query definitions in insertion order.

    Built once at startup; there is no API for adding or removing entries
    afterwards.
    """

    def __init__(self, definitions: Iterable[QueryDefinition]):
        self._entries: dict[str, QueryDefinition] = {}
        for definition in definitions:
            if not definition.name:
                raise CatalogError("Query definitions need a non-empty name")
            if definition.name in self._entries:
                raise CatalogError(f"Query '{definition.name}' is defined more than once")
            self._entries[definition.name] = definition
        logger.debug("catalog_loaded", entries=len(self._entries))

    def list(self) -> list[QueryDefinition]:
        """All definitions, in catalog order."""
        return list(self._entries.values())

    def get(self, name: str) -> QueryDefinition:
        """Definition named ``name``; raises :class:`QueryNotFoundError` if absent."""
        try:
            return self._entries[name]
        except KeyError:
            raise QueryNotFoundError(name, available=self.names()) from None

    def names(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[QueryDefinition]:
        return iter(self._entries.values())

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __repr__(self) -> str:
        return f"QueryCatalog({len(self)} entries)"
