"""CLI entrypoint execution flow."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from elastic_lite.cli.argument_parser import build_parser
from elastic_lite.cli.common_runtime import configure_logging, emit_payload
from elastic_lite.errors import ElasticLiteError

_logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return a process exit code.

    Args:
        argv (list[str] | None): Optional command-line arguments.

    Returns:
        int: Process exit code.

    """
    parser = build_parser()

    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    handler = getattr(args, "handler", None)
    if handler is None:
        parser.print_help()
        return 1

    configure_logging()
    try:
        payload = handler(args)
    except (httpx.TransportError, ElasticLiteError, ValidationError, OSError) as exc:
        _logger.error("%s failed: %s", args.command, exc)  # noqa: TRY400
        return 1

    if payload is not None:
        emit_payload(payload=payload, output=args.output)
    return 0
