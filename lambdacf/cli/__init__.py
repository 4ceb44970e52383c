"""CLI forwarding module backing the `lambdacf` console script."""

from cli.main import app, build_parser, main

__all__ = ["app", "build_parser", "main"]
