"""Unified CLI package exports."""

from elastic_lite.cli.argument_parser import build_parser
from elastic_lite.cli.entrypoint import main

__all__ = ["build_parser", "main"]
