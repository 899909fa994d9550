"""Tests for bookquery.core.errors module."""

from pymongo.errors import OperationFailure

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
    error_kind,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        ctx = ErrorContext()
        assert ctx.query is None
        assert ctx.metadata == {}
        assert ctx.to_dict() == {}

    def test_to_dict_excludes_none(self):
        ctx = ErrorContext(query="top-author", kind="aggregate")
        assert ctx.to_dict() == {"query": "top-author", "kind": "aggregate"}

    def test_metadata_is_merged(self):
        ctx = ErrorContext(query="q")
        ctx.metadata["stage"] = 2
        assert ctx.to_dict() == {"query": "q", "stage": 2}


class TestBookQueryError:
    def test_defaults(self):
        err = BookQueryError("boom")
        assert err.message == "boom"
        assert err.category == ErrorCategory.INTERNAL
        assert err.retryable is False
        assert str(err) == "boom"

    def test_with_context_sets_known_fields_and_metadata(self):
        err = BookQueryError("boom").with_context(query="q1", collection="books", stage=3)
        assert err.context.query == "q1"
        assert err.context.collection == "books"
        assert err.context.metadata == {"stage": 3}

    def test_cause_is_chained(self):
        cause = OperationFailure("bad $group")
        err = QueryValidationError("rejected", cause=cause)
        assert err.__cause__ is cause
        assert err.to_dict()["cause"] == str(cause)

    def test_to_dict(self):
        err = QueryValidationError("bad sort", field="sort").with_context(query="q")
        d = err.to_dict()
        assert d["error_type"] == "QueryValidationError"
        assert d["category"] == "VALIDATION"
        assert d["field"] == "sort"
        assert d["context"] == {"query": "q"}

    def test_repr(self):
        assert repr(CatalogError("dup")) == "CatalogError('dup', category=CATALOG)"


class TestHierarchy:
    def test_connection_error_is_retryable_network(self):
        err = StoreConnectionError("unreachable")
        assert err.category == ErrorCategory.NETWORK
        assert err.retryable is True

    def test_validation_error_never_retryable(self):
        assert QueryValidationError("x").retryable is False

    def test_not_found_is_a_catalog_error(self):
        err = QueryNotFoundError("missing", available=["a", "b"])
        assert isinstance(err, CatalogError)
        assert err.name == "missing"
        assert err.context.query == "missing"
        assert "Available: a, b" in err.message

    def test_config_error_category(self):
        assert ConfigError("bad").category == ErrorCategory.CONFIG


class TestUtilities:
    def test_error_kind(self):
        assert error_kind(StoreConnectionError("x")) is ErrorKind.CONNECTION
        assert error_kind(QueryValidationError("x")) is ErrorKind.VALIDATION
        assert error_kind(QueryNotFoundError("x")) is None
