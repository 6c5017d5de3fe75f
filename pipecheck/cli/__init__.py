"""Command-line interface for pipecheck."""

from pipecheck.cli.main import main

__all__ = ["main"]
