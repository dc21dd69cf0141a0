"""
CLI layer for naming-spine.

Provides a Typer application whose commands delegate to the conventions
package, the manifest loader and the linter.  This package handles only
terminal transport: argument parsing, coloured output, and exit codes.

Entry point::

    naming-spine --help
"""

from naming_spine.cli.app import app

__all__ = ["app"]
