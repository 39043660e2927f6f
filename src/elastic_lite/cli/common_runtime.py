"""Shared CLI runtime primitives (logging, payload emission, client construction)."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from elastic_lite.client import Client
from elastic_lite.config import ClientOptions

if TYPE_CHECKING:
    import argparse

    from elastic_lite.domain import Document

_DEFAULT_LOG_FORMAT = "%(levelname)s %(name)s - %(message)s"
DEFAULT_MOCK_HOST = "127.0.0.1"
DEFAULT_MOCK_PORT = 9201


def configure_logging() -> None:
    """Configure process logging from `ELASTIC_LITE_LOG_LEVEL`."""
    logging.basicConfig(
        level=os.getenv("ELASTIC_LITE_LOG_LEVEL", "INFO").upper(),
        format=_DEFAULT_LOG_FORMAT,
    )


def emit_payload(payload: dict[str, Any] | BaseModel | str, output: str) -> None:
    """Emit payload to stdout or to a file.

    Args:
        payload (dict[str, Any] | BaseModel | str): Data payload to serialize.
        output (str): Output path or "-" for stdout.

    """
    if isinstance(payload, str):
        serialized = payload
    else:
        payload_dict = payload.model_dump(mode="json") if isinstance(payload, BaseModel) else payload
        serialized = json.dumps(payload_dict, ensure_ascii=False, indent=2)

    if output == "-":
        print(serialized)
        return

    output_path = Path(output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if serialized.endswith("\n"):
        output_path.write_text(serialized, encoding="utf-8")
    else:
        output_path.write_text(serialized + "\n", encoding="utf-8")


def client_from_args(args: argparse.Namespace) -> Client:
    """Build a client from `--url` and `--timeout-s` flags.

    Args:
        args (argparse.Namespace): Parsed command-line arguments.

    Returns:
        Client: Client owning its HTTP connection pool.

    """
    return Client(options=ClientOptions(url=str(args.url), timeout_s=float(args.timeout_s)))


def document_payload(doc: Document) -> dict[str, Any]:
    """Render a document for JSON output.

    Args:
        doc (Document): Document returned by the store.

    Returns:
        dict[str, Any]: Id and parsed source.

    """
    return {"id": doc.id, "source": doc.loads() if doc.body else None}
