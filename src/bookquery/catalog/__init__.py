"""
Query catalog: definitions, the built-in bookstore catalog and catalog files.
"""

from bookquery.catalog.bookstore import bookstore_catalog, bookstore_definitions
from bookquery.catalog.catalog import QueryCatalog
from bookquery.catalog.loader import CatalogSpec, dump_catalog, load_catalog
from bookquery.catalog.models import QueryDefinition, QueryKind, QueryOptions
from bookquery.catalog.validation import validate_definition

__all__ = [
    "QueryCatalog",
    "QueryDefinition",
    "QueryKind",
    "QueryOptions",
    "CatalogSpec",
    "bookstore_catalog",
    "bookstore_definitions",
    "dump_catalog",
    "load_catalog",
    "validate_definition",
]
