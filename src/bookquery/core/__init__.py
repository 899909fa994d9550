"""
Core primitives: errors, logging, settings and the store connection.
"""

from bookquery.core.connection import ConnectionInfo, StoreHandle, create_client, open_store
from bookquery.core.errors import (
    BookQueryError,
    CatalogError,
    ConfigError,
    ErrorCategory,
    ErrorContext,
    ErrorKind,
    QueryNotFoundError,
    QueryValidationError,
    StoreConnectionError,
)
from bookquery.core.logging import configure_logging, get_logger
from bookquery.core.settings import BookQuerySettings

__all__ = [
    "BookQueryError",
    "BookQuerySettings",
    "CatalogError",
    "ConfigError",
    "ConnectionInfo",
    "ErrorCategory",
    "ErrorContext",
    "ErrorKind",
    "QueryNotFoundError",
    "QueryValidationError",
    "StoreConnectionError",
    "StoreHandle",
    "configure_logging",
    "create_client",
    "get_logger",
    "open_store",
]
