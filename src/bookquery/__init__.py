"""
bookquery - a query-catalog runner for a MongoDB books collection.

Catalog -> Executor -> Reporter:

- ``bookquery.catalog``: named query definitions (built-in bookstore set or
  YAML/JSON catalog files)
- ``bookquery.execution``: executor, runner and result types
- ``bookquery.reporting``: rich console rendering
- ``bookquery.cli``: the ``bookquery`` command
"""

__version__ = "0.1.0"
