"""Command-line interface package for the change-graph tooling."""

from .app import build_parser, create_service, main, render_table, run

__all__ = [
    "build_parser",
    "create_service",
    "main",
    "render_table",
    "run",
]
