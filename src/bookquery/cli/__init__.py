"""
CLI layer for bookquery.

Provides a Typer application whose commands delegate to the catalog,
execution and reporting packages.  This package handles only terminal
transport: argument parsing, coloured output and exit codes.

Entry point::

    bookquery --help
"""

from bookquery.cli.app import app

__all__ = ["app"]
