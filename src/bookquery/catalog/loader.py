"""Pydantic models for catalog files.

A catalog file lists query definitions in run order.  JSON files are
accepted too, since JSON is valid YAML.

Usage::

    from bookquery.catalog.loader import load_catalog

    catalog = load_catalog("queries.yaml")

Example YAML::

    queries:
      - name: fiction-books
        kind: find
        filter: {genre: Fiction}
      - name: cheapest-five
        kind: find
        options:
          sort: {price: 1}
          limit: 5
      - name: avg-price-by-genre
        kind: aggregate
        pipeline:
          - $group: {_id: $genre, average_price: {$avg: $price}}
      - name: index-title
        kind: create_index
        keys: {title: 1}
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from bookquery.catalog.catalog import QueryCatalog
from bookquery.catalog.models import QueryDefinition, QueryKind, QueryOptions
from bookquery.core.errors import CatalogError


class QueryOptionsSpec(BaseModel):
    """``options`` section of a find query."""

    model_config = ConfigDict(extra="forbid")

    projection: dict[str, Any] | None = None
    sort: dict[str, int] | None = None
    skip: int | None = Field(default=None, ge=0)
    limit: int | None = Field(default=None, ge=0)

    def to_options(self) -> QueryOptions:
        return QueryOptions(
            projection=self.projection,
            sort=self.sort,
            skip=self.skip,
            limit=self.limit,
        )


class QuerySpec(BaseModel):
    """One catalog entry.

    Shape checks that depend on the document contents (``$`` stage names,
    sort directions) are left to the executor so a bad entry fails on its
    own instead of rejecting the whole file.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., min_length=1, description="Unique query name")
    kind: QueryKind = Field(..., description="find, update, delete, aggregate or create_index")
    description: str = Field(default="")
    filter: dict[str, Any] = Field(default_factory=dict)
    options: QueryOptionsSpec = Field(default_factory=QueryOptionsSpec)
    pipeline: list[Any] | None = None
    update: dict[str, Any] | list[Any] | None = None
    keys: dict[str, Any] | None = None
    multi: bool = False
    unique: bool = False

    def to_definition(self) -> QueryDefinition:
        return QueryDefinition(
            name=self.name,
            kind=self.kind,
            filter=self.filter,
            options=self.options.to_options(),
            pipeline=self.pipeline,
            update=self.update,
            keys=self.keys,
            multi=self.multi,
            unique=self.unique,
            description=self.description,
        )


class CatalogSpec(BaseModel):
    """Root model of a catalog file."""

    model_config = ConfigDict(extra="forbid")

    queries: list[QuerySpec] = Field(..., min_length=1)

    @field_validator("queries")
    @classmethod
    def validate_unique_names(cls, v: list[QuerySpec]) -> list[QuerySpec]:
        """Ensure query names are unique."""
        names = [q.name for q in v]
        if len(names) != len(set(names)):
            duplicates = sorted({n for n in names if names.count(n) > 1})
            raise ValueError(f"Duplicate query names: {duplicates}")
        return v

    def to_catalog(self) -> QueryCatalog:
        return QueryCatalog(q.to_definition() for q in self.queries)

    @classmethod
    def from_yaml(cls, yaml_content: str) -> CatalogSpec:
        """Parse and validate YAML content.

        Raises
        ------
        CatalogError
            If the YAML is invalid or doesn't match the schema.
        """
        try:
            data = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise CatalogError(f"Invalid YAML: {e}", cause=e) from e

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise CatalogError(f"Invalid catalog: {e}", cause=e) from e

    @classmethod
    def from_yaml_file(cls, path: str | Path) -> CatalogSpec:
        try:
            content = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise CatalogError(f"Cannot read catalog file {path}: {e}", cause=e) from e
        return cls.from_yaml(content)

    @classmethod
    def from_catalog(cls, catalog: QueryCatalog) -> CatalogSpec:
        return cls.model_validate({"queries": [d.to_dict() for d in catalog]})


def load_catalog(path: str | Path) -> QueryCatalog:
    """Load a catalog file into a :class:`QueryCatalog`."""
    return CatalogSpec.from_yaml_file(path).to_catalog()


def dump_catalog(catalog: QueryCatalog) -> str:
    """Render a catalog as YAML in the same shape :func:`load_catalog` reads."""
    spec = CatalogSpec.from_catalog(catalog)
    return yaml.safe_dump(
        spec.model_dump(mode="json", exclude_defaults=True),
        sort_keys=False,
        allow_unicode=True,
    )
