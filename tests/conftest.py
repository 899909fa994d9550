"""
Shared pytest fixtures and configuration for bookquery tests.

This module provides:
- In-memory collections (mongomock) for executor and runner tests
- Small seeded datasets matching the documented query scenarios
- Logging context cleanup between tests

Tests that need a real MongoDB live under ``tests/integration`` and are
skipped unless ``BOOKQUERY_TEST_MONGO_URI`` is set.
"""

import sys
from pathlib import Path
from typing import Any, Generator

import mongomock
import pytest

# Ensure bookquery package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from bookquery.core.logging import clear_context


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)

        if "integration" in str(test_path):
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def clean_log_context() -> Generator[None, None, None]:
    """Drop any structlog context a test left bound."""
    clear_context()
    yield
    clear_context()


# =============================================================================
# Collections
# =============================================================================


@pytest.fixture
def collection() -> Any:
    """Empty in-memory ``books`` collection."""
    client = mongomock.MongoClient()
    return client["bookquery_test"]["books"]


@pytest.fixture
def genre_collection(collection: Any) -> Any:
    """Three Fiction and two Non-Fiction books."""
    collection.insert_many(
        [
            {"title": "Fiction 1", "genre": "Fiction", "price": 10.0},
            {"title": "Fiction 2", "genre": "Fiction", "price": 12.0},
            {"title": "Fiction 3", "genre": "Fiction", "price": 14.0},
            {"title": "Essay 1", "genre": "Non-Fiction", "price": 20.0},
            {"title": "Essay 2", "genre": "Non-Fiction", "price": 22.0},
        ]
    )
    return collection


@pytest.fixture
def ten_books(collection: Any) -> Any:
    """Ten books with distinct prices, for sorting and pagination."""
    collection.insert_many(
        [
            {"title": f"Book {i:02d}", "genre": "Fiction", "price": float(i * 3 % 11 + 1)}
            for i in range(10)
        ]
    )
    return collection


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    """Small YAML catalog covering every query kind."""
    path = tmp_path / "catalog.yaml"
    path.write_text(
        """\
queries:
  - name: fiction-books
    kind: find
    filter: {genre: Fiction}
  - name: cheapest-two
    kind: find
    options:
      sort: {price: 1}
      limit: 2
  - name: avg-price-by-genre
    kind: aggregate
    pipeline:
      - $group: {_id: $genre, average_price: {$avg: $price}}
  - name: reprice-1984
    kind: update
    filter: {title: "1984"}
    update: {$set: {price: 13.99}}
  - name: drop-moby-dick
    kind: delete
    filter: {title: Moby Dick}
  - name: index-title
    kind: create_index
    keys: {title: 1}
""",
        encoding="utf-8",
    )
    return path
