"""Command line interface for codequery."""

from codequery.cli.main import cli

__all__ = ["cli"]
