"""Command line interface for recordcsv."""

from .app import app, create_app, run

__all__ = ["app", "create_app", "run"]
