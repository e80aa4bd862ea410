"""Command line interface for xlsx-sender."""

from .typer_app import app, run

__all__ = ["app", "run"]
