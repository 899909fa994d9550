"""Tests for structural query validation."""

from __future__ import annotations

import pytest

from bookquery.catalog import validate_definition
from bookquery.catalog.models import (
    QueryDefinition,
    QueryKind,
    aggregate,
    create_index,
    delete,
    find,
    update,
)
from bookquery.catalog.bookstore import bookstore_definitions
from bookquery.core.errors import QueryValidationError


class TestValidDefinitions:
    @pytest.mark.parametrize("definition", bookstore_definitions(), ids=lambda d: d.name)
    def test_bookstore_entries_are_valid(self, definition):
        validate_definition(definition)

    def test_update_pipeline_form(self):
        validate_definition(update("u", {}, [{"$set": {"price": 1}}]))

    def test_text_index(self):
        validate_definition(create_index("t", {"title": "text"}))


class TestFind:
    def test_filter_must_be_mapping(self):
        definition = QueryDefinition(name="f", kind=QueryKind.FIND, filter=["genre"])
        with pytest.raises(QueryValidationError) as exc:
            validate_definition(definition)
        assert exc.value.field == "filter"
        assert exc.value.context.query == "f"

    @pytest.mark.parametrize("direction", [0, 2, "asc", True])
    def test_bad_sort_direction(self, direction):
        with pytest.raises(QueryValidationError, match="sort direction"):
            validate_definition(find("s", sort={"price": direction}))

    def test_negative_skip(self):
        with pytest.raises(QueryValidationError) as exc:
            validate_definition(find("s", skip=-5))
        assert exc.value.field == "skip"

    def test_zero_limit_rejected(self):
        with pytest.raises(QueryValidationError) as exc:
            validate_definition(find("s", limit=0))
        assert exc.value.field == "limit"

    def test_projection_must_be_mapping(self):
        with pytest.raises(QueryValidationError):
            validate_definition(find("p", projection=["title"]))


class TestAggregate:
    def test_empty_pipeline(self):
        with pytest.raises(QueryValidationError, match="non-empty pipeline"):
            validate_definition(aggregate("a", []))

    def test_stage_must_be_mapping(self):
        with pytest.raises(QueryValidationError) as exc:
            validate_definition(aggregate("a", [{"$match": {}}, "$sort"]))
        assert exc.value.field == "pipeline[1]"

    def test_stage_with_two_operators(self):
        with pytest.raises(QueryValidationError, match="exactly one"):
            validate_definition(aggregate("a", [{"$match": {}, "$sort": {"x": 1}}]))

    def test_stage_without_dollar(self):
        with pytest.raises(QueryValidationError, match="must start with"):
            validate_definition(aggregate("a", [{"group": {"_id": "$genre"}}]))


class TestUpdateDelete:
    def test_update_needs_document(self):
        with pytest.raises(QueryValidationError, match="update document"):
            validate_definition(update("u", {"title": "1984"}, {}))

    def test_replacement_document_rejected(self):
        with pytest.raises(QueryValidationError, match="\\$ operators"):
            validate_definition(update("u", {"title": "1984"}, {"price": 13.99}))

    def test_delete_filter_must_be_mapping(self):
        definition = QueryDefinition(name="d", kind=QueryKind.DELETE, filter="Moby Dick")
        with pytest.raises(QueryValidationError):
            validate_definition(definition)

    def test_delete_with_empty_filter_is_structurally_valid(self):
        validate_definition(delete("d", {}))


class TestCreateIndex:
    def test_needs_keys(self):
        with pytest.raises(QueryValidationError, match="at least one key"):
            validate_definition(create_index("i", {}))

    def test_bad_direction(self):
        with pytest.raises(QueryValidationError, match="index direction"):
            validate_definition(create_index("i", {"title": 5}))
