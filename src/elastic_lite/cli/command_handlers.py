"""CLI command handlers."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import uvicorn

from elastic_lite.cli.common_runtime import client_from_args, document_payload
from elastic_lite.domain import CommandName
from elastic_lite.errors import InvalidDocumentError
from elastic_lite.protocol.codec import load_document
from elastic_lite.protocol.spans import array_items

if TYPE_CHECKING:
    import argparse

_MOCK_APP_FACTORY = "elastic_lite.mock.app:create_app"
_logger = logging.getLogger(__name__)


def load_seed_documents(path: Path) -> list[bytes]:
    """Load seed documents from a JSON array file or an NDJSON file.

    Args:
        path (Path): Input file.

    Raises:
        InvalidDocumentError: If the file holds something other than JSON objects.

    Returns:
        list[bytes]: One JSON body per document, as written in the file.

    """
    text = path.read_text(encoding="utf-8")
    stripped = text.strip()
    try:
        if stripped.startswith("["):
            chunks = [stripped[start:end] for start, end in array_items(stripped)]
        else:
            chunks = [line for line in text.splitlines() if line.strip()]
    except json.JSONDecodeError as exc:
        raise InvalidDocumentError(f"Seed file '{path}' is not valid JSON: {exc}") from exc

    bodies: list[bytes] = []
    for position, chunk in enumerate(chunks):
        body = chunk.encode("utf-8")
        if not isinstance(load_document(body), dict):
            raise InvalidDocumentError(f"Seed document #{position} in '{path}' is not a JSON object.")
        bodies.append(body)
    return bodies


def handle_serve_mock(args: argparse.Namespace) -> None:
    """Run the mock server until interrupted.

    Args:
        args (argparse.Namespace): Parsed command-line arguments.

    """
    _logger.info("Serving mock store on http://%s:%s", args.host, args.port)
    uvicorn.run(_MOCK_APP_FACTORY, host=args.host, port=int(args.port), factory=True)


def handle_search(args: argparse.Namespace) -> dict[str, Any]:
    """Handle the `search` command.

    Args:
        args (argparse.Namespace): Parsed command-line arguments.

    Returns:
        dict[str, Any]: Query echo and matching documents.

    """
    with client_from_args(args) as client:
        index = client.index(args.index)
        if args.type:
            docs = index.doc_type(args.type).search(args.query)
        else:
            docs = index.search(args.query)

    return {
        "command": CommandName.SEARCH.value,
        "index": args.index,
        "type": args.type,
        "query": args.query,
        "count": len(docs),
        "documents": [document_payload(doc) for doc in docs],
    }


def handle_get(args: argparse.Namespace) -> dict[str, Any]:
    """Handle the `get` command.

    Args:
        args (argparse.Namespace): Parsed command-line arguments.

    Returns:
        dict[str, Any]: Requested document.

    """
    with client_from_args(args) as client:
        doc = client.index(args.index).doc_type(args.type).find_by_id(args.id)

    return {
        "command": CommandName.GET.value,
        "index": args.index,
        "type": args.type,
        "document": document_payload(doc),
    }


def handle_seed(args: argparse.Namespace) -> dict[str, Any]:
    """Handle the `seed` command: bulk insert documents read from a file.

    Args:
        args (argparse.Namespace): Parsed command-line arguments.

    Returns:
        dict[str, Any]: Inserted ids in file order.

    """
    bodies = load_seed_documents(Path(args.input))
    with client_from_args(args) as client:
        ids = client.index(args.index).doc_type(args.type).bulk_insert(bodies)

    _logger.info("Seeded %d documents into %s/%s", len(ids), args.index, args.type)
    return {
        "command": CommandName.SEED.value,
        "index": args.index,
        "type": args.type,
        "count": len(ids),
        "ids": ids,
    }


def handle_drop_index(args: argparse.Namespace) -> dict[str, Any]:
    """Handle the `drop-index` command.

    Args:
        args (argparse.Namespace): Parsed command-line arguments.

    Returns:
        dict[str, Any]: Acknowledgement.

    """
    with client_from_args(args) as client:
        client.index(args.index).drop()

    return {
        "command": CommandName.DROP_INDEX.value,
        "index": args.index,
        "acknowledged": True,
    }
