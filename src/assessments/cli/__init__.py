"""Command-line interface."""

from assessments.cli.commands import app

__all__ = ["app"]
