"""Argument parser construction for all CLI subcommands."""

from __future__ import annotations

import argparse
import os

from elastic_lite.cli.command_handlers import (
    handle_drop_index,
    handle_get,
    handle_search,
    handle_seed,
    handle_serve_mock,
)
from elastic_lite.cli.common_runtime import DEFAULT_MOCK_HOST, DEFAULT_MOCK_PORT
from elastic_lite.config import DEFAULT_TIMEOUT_S, DEFAULT_URL, env_float
from elastic_lite.domain import CommandName
from elastic_lite.mock.store import MATCH_ALL


def add_output_flag(subparser: argparse.ArgumentParser) -> None:
    """Add output emission flag used by all subcommands."""
    subparser.add_argument(
        "--output",
        default="-",
        help="Output destination: '-' for stdout or path to file.",
    )


def add_connection_flags(subparser: argparse.ArgumentParser) -> None:
    """Add store connection flags shared by client subcommands."""
    subparser.add_argument(
        "--url",
        default=os.getenv("ELASTIC_LITE_URL", DEFAULT_URL),
        help="Store base URL.",
    )
    subparser.add_argument(
        "--timeout-s",
        type=float,
        default=env_float("ELASTIC_LITE_TIMEOUT_S", default_value=DEFAULT_TIMEOUT_S),
        help="Per-request timeout in seconds.",
    )
    subparser.add_argument(
        "--index",
        required=True,
        help="Target index name.",
    )


def build_serve_mock_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Build parser for the `serve-mock` command."""
    serve_parser = subparsers.add_parser(
        CommandName.SERVE_MOCK.value,
        help="Run the in-memory mock store over HTTP.",
    )
    serve_parser.add_argument(
        "--host",
        default=os.getenv("ELASTIC_LITE_MOCK_HOST", DEFAULT_MOCK_HOST),
        help="Interface to bind.",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=int(os.getenv("ELASTIC_LITE_MOCK_PORT", str(DEFAULT_MOCK_PORT))),
        help="Port to bind.",
    )
    add_output_flag(serve_parser)
    serve_parser.set_defaults(handler=handle_serve_mock)


def build_search_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Build parser for the `search` command."""
    search_parser = subparsers.add_parser(CommandName.SEARCH.value, help="Search an index or a type.")
    add_connection_flags(search_parser)
    search_parser.add_argument(
        "--type",
        default=None,
        help="Restrict the search to one document type.",
    )
    search_parser.add_argument(
        "--query",
        default=MATCH_ALL,
        help="Query string, for instance 'name:alice'.",
    )
    add_output_flag(search_parser)
    search_parser.set_defaults(handler=handle_search)


def build_get_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Build parser for the `get` command."""
    get_parser = subparsers.add_parser(CommandName.GET.value, help="Fetch one document by id.")
    add_connection_flags(get_parser)
    get_parser.add_argument("--type", required=True, help="Document type.")
    get_parser.add_argument("--id", required=True, help="Document id.")
    add_output_flag(get_parser)
    get_parser.set_defaults(handler=handle_get)


def build_seed_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Build parser for the `seed` command."""
    seed_parser = subparsers.add_parser(
        CommandName.SEED.value,
        help="Bulk insert documents from a JSON array or NDJSON file.",
    )
    add_connection_flags(seed_parser)
    seed_parser.add_argument("--type", required=True, help="Document type.")
    seed_parser.add_argument("--input", required=True, help="Path to the documents file.")
    add_output_flag(seed_parser)
    seed_parser.set_defaults(handler=handle_seed)


def build_drop_index_parser(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Build parser for the `drop-index` command."""
    drop_parser = subparsers.add_parser(CommandName.DROP_INDEX.value, help="Drop an index and its documents.")
    add_connection_flags(drop_parser)
    add_output_flag(drop_parser)
    drop_parser.set_defaults(handler=handle_drop_index)


def build_parser() -> argparse.ArgumentParser:
    """Build the root parser for `elastic-lite`.

    Returns:
        argparse.ArgumentParser: Root parser with every subcommand registered.

    """
    parser = argparse.ArgumentParser(
        prog="elastic-lite",
        description="Talk to a minimal Elasticsearch-compatible store, or run the bundled mock.",
    )
    subparsers = parser.add_subparsers(dest="command")
    build_serve_mock_parser(subparsers)
    build_search_parser(subparsers)
    build_get_parser(subparsers)
    build_seed_parser(subparsers)
    build_drop_index_parser(subparsers)
    return parser
