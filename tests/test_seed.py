"""Tests for the sample dataset and seed_books."""

from unittest.mock import MagicMock

import pytest
from pymongo.errors import AutoReconnect

from bookquery.core.errors import StoreConnectionError
from bookquery.seed import SAMPLE_BOOKS, seed_books


class TestSeedBooks:
    def test_inserts_sample_books(self, collection):
        assert seed_books(collection) == 12
        assert collection.count_documents({}) == 12
        assert collection.count_documents({"genre": "Fiction"}) == 4

    def test_sample_data_is_not_mutated(self, collection):
        seed_books(collection)
        assert all("_id" not in book for book in SAMPLE_BOOKS)

    def test_drop_replaces_existing_documents(self, collection):
        seed_books(collection)
        seed_books(collection)
        assert collection.count_documents({}) == 12

    def test_no_drop_appends(self, collection):
        seed_books(collection)
        seed_books(collection, [{"title": "Extra"}], drop=False)
        assert collection.count_documents({}) == 13

    def test_empty_input(self, collection):
        assert seed_books(collection, []) == 0

    def test_connection_failure(self):
        collection = MagicMock()
        collection.insert_many.side_effect = AutoReconnect("reset")
        with pytest.raises(StoreConnectionError):
            seed_books(collection)

    def test_every_book_has_the_documented_fields(self):
        fields = {"title", "author", "genre", "published_year", "price", "in_stock", "pages", "publisher"}
        assert all(set(book) == fields for book in SAMPLE_BOOKS)
