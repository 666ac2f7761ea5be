"""
CLI layer for lcp.

Provides a Typer application whose sub-commands delegate to the
configurators and orchestrations. All business logic lives in
``lcp.configure`` and ``lcp.deploy``; this package handles only terminal
transport: argument parsing, coloured output, and table formatting.

Entry point::

    lcp --help
"""

from lcp.cli.app import app

__all__ = ["app"]
