"""
Structured error types for bookquery.

Every failure raised by the catalog, executor or CLI extends
:class:`BookQueryError` so callers get the same metadata regardless of
where it came from:

- **Category:** What kind of error (network, validation, catalog, config)
- **Retryable:** Whether re-running the same query could succeed
- **Context:** Query name, kind and collection involved
- **Cause:** Chained underlying exception (usually a pymongo error)

Architecture:
    ::

        ┌───────────────────────────────────────────────────────┐
        │                    BookQueryError                      │
        │        (category, retryable, context, cause)           │
        ├───────────────────────────────────────────────────────┤
        │                                                        │
        │  StoreConnectionError   QueryValidationError           │
        │  (NETWORK, retryable)   (VALIDATION)                   │
        │                                                        │
        │  CatalogError           ConfigError                    │
        │  (CATALOG)              (CONFIG)                       │
        │       │                                                │
        │  QueryNotFoundError                                    │
        └───────────────────────────────────────────────────────┘

Propagation policy:
    - ``StoreConnectionError`` aborts the remaining catalog entries.
    - ``QueryValidationError`` is local to one entry; the run continues.
    - A query that matches no document is *not* an error: updates and
      deletes report a zero count.

Usage:
    from bookquery.core.errors import QueryValidationError

    try:
        collection.aggregate(pipeline)
    except OperationFailure as e:
        raise QueryValidationError(str(e), cause=e).with_context(query="top-author")
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and exit-code routing."""

    NETWORK = "NETWORK"           # Store unreachable, server selection timeout
    VALIDATION = "VALIDATION"     # Malformed filter, pipeline, options
    CATALOG = "CATALOG"           # Unknown query name, duplicate names, bad file
    CONFIG = "CONFIG"             # Missing or invalid settings
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


class ErrorKind(str, Enum):
    """Failure recorded on an :class:`~bookquery.execution.result.ExecutionResult`."""

    CONNECTION = "connection"
    VALIDATION = "validation"


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Attributes:
        query: Catalog entry name
        kind: Query kind (``find``, ``aggregate``, ...)
        collection: Collection the query targeted
        metadata: Additional key-value pairs
    """

    query: str | None = None
    kind: str | None = None
    collection: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["query", "kind", "collection"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class BookQueryError(Exception):
    """
    Base exception for all bookquery errors.

    Subclasses set ``default_category`` and ``default_retryable``.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> BookQueryError:
        """
        Add context to this error (fluent API).

        Usage:
            raise QueryValidationError("bad stage").with_context(
                query="top-author", kind="aggregate"
            )
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# STORE ERRORS
# =============================================================================


class StoreConnectionError(BookQueryError):
    """
    The document store could not be reached.

    Fatal for a catalog run: remaining entries are not attempted.
    """

    default_category = ErrorCategory.NETWORK
    default_retryable = True


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class QueryValidationError(BookQueryError):
    """
    Structurally invalid query (filter, options, pipeline, index keys).

    Never retryable - the definition must be fixed.
    """

    default_category = ErrorCategory.VALIDATION
    default_retryable = False

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


# =============================================================================
# CATALOG / CONFIG ERRORS
# =============================================================================


class CatalogError(BookQueryError):
    """Catalog could not be built (duplicate names, malformed catalog file)."""

    default_category = ErrorCategory.CATALOG
    default_retryable = False


class QueryNotFoundError(CatalogError):
    """Requested query name is not in the catalog."""

    def __init__(self, name: str, available: list[str] | None = None):
        message = f"Query '{name}' not found in catalog"
        if available:
            message += f". Available: {', '.join(available)}"
        super().__init__(message)
        self.name = name
        self.context.query = name


class ConfigError(BookQueryError):
    """Missing or invalid configuration."""

    default_category = ErrorCategory.CONFIG
    default_retryable = False


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def error_kind(error: Exception) -> ErrorKind | None:
    """Map an exception to the :class:`ErrorKind` stored on a result."""
    if isinstance(error, StoreConnectionError):
        return ErrorKind.CONNECTION
    if isinstance(error, QueryValidationError):
        return ErrorKind.VALIDATION
    return None


__all__ = [
    "ErrorCategory",
    "ErrorKind",
    "ErrorContext",
    "BookQueryError",
    "StoreConnectionError",
    "QueryValidationError",
    "CatalogError",
    "QueryNotFoundError",
    "ConfigError",
    "error_kind",
]
