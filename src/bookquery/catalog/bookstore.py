"""
Built-in catalog for the bookstore ``books`` collection.

Entries mirror the classic bookstore exercise: basic CRUD, advanced
filters with projection/sort/pagination, three aggregation pipelines and
two indexes.  Order matters: ``run-all`` executes them top to bottom, so
the update and delete run before the reads that follow them.
"""

from __future__ import annotations

from bookquery.catalog.catalog import QueryCatalog
from bookquery.catalog.models import (
    QueryDefinition,
    aggregate,
    create_index,
    delete,
    find,
    update,
)

PAGE_SIZE = 5

# Decade label built from the numeric year: 1949 -> "1940s", 850 -> "850s".
DECADE_LABEL = {
    "$concat": [
        {
            "$toString": {
                "$toInt": {
                    "$subtract": ["$published_year", {"$mod": ["$published_year", 10]}]
                }
            }
        },
        "s",
    ]
}


def bookstore_definitions() -> list[QueryDefinition]:
    return [
        # ── Basic CRUD ───────────────────────────────────────────────
        find(
            "fiction-books",
            {"genre": "Fiction"},
            description="Books in the Fiction genre",
        ),
        find(
            "published-after-1950",
            {"published_year": {"$gt": 1950}},
            description="Books published after 1950",
        ),
        find(
            "books-by-orwell",
            {"author": "George Orwell"},
            description="Books by George Orwell",
        ),
        update(
            "update-1984-price",
            {"title": "1984"},
            {"$set": {"price": 13.99}},
            description="Set the price of 1984 to 13.99",
        ),
        delete(
            "delete-moby-dick",
            {"title": "Moby Dick"},
            description="Remove Moby Dick from the collection",
        ),
        # ── Advanced queries ─────────────────────────────────────────
        find(
            "in-stock-after-2010",
            {"in_stock": True, "published_year": {"$gt": 2010}},
            description="In-stock books published after 2010",
        ),
        find(
            "title-author-price-projection",
            projection={"title": 1, "author": 1, "price": 1, "_id": 0},
            description="Only title, author and price",
        ),
        find(
            "price-ascending",
            sort={"price": 1},
            description="All books, cheapest first",
        ),
        find(
            "price-descending",
            sort={"price": -1},
            description="All books, most expensive first",
        ),
        find(
            "first-page",
            limit=PAGE_SIZE,
            description=f"First page, {PAGE_SIZE} books per page",
        ),
        find(
            "second-page",
            skip=PAGE_SIZE,
            limit=PAGE_SIZE,
            description=f"Second page, {PAGE_SIZE} books per page",
        ),
        # ── Aggregation pipelines ────────────────────────────────────
        aggregate(
            "avg-price-by-genre",
            [{"$group": {"_id": "$genre", "average_price": {"$avg": "$price"}}}],
            description="Average price per genre",
        ),
        aggregate(
            "top-author",
            [
                {"$group": {"_id": "$author", "book_count": {"$sum": 1}}},
                {"$sort": {"book_count": -1}},
                {"$limit": 1},
            ],
            description="Author with the most books",
        ),
        aggregate(
            "books-per-decade",
            [
                {"$project": {"decade": DECADE_LABEL}},
                {"$group": {"_id": "$decade", "count": {"$sum": 1}}},
                {"$sort": {"_id": 1}},
            ],
            description="Book count per publication decade",
        ),
        # ── Indexing ─────────────────────────────────────────────────
        create_index(
            "index-title",
            {"title": 1},
            description="Single-field index on title",
        ),
        create_index(
            "index-author-year",
            {"author": 1, "published_year": -1},
            description="Compound index on author and published_year",
        ),
        find(
            "title-lookup",
            {"title": "1984"},
            description="Title lookup; run with --stats to see index use",
        ),
    ]


def bookstore_catalog() -> QueryCatalog:
    """The default catalog used when no ``--catalog`` file is given."""
    return QueryCatalog(bookstore_definitions())
