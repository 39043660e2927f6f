"""Request encoding for single and bulk operations."""

from __future__ import annotations

import json
import math
from collections.abc import Iterable, Sequence
from typing import Any, NoReturn

import httpx

from elastic_lite.domain import BulkAction, Document, HttpMethod
from elastic_lite.errors import InvalidDocumentError

JSON_CONTENT_TYPE = "application/json"
_NEWLINE = b"\n"
_CARRIAGE_RETURN = b"\r"
_UPDATE_PREFIX = b'{"doc":'
_UPDATE_SUFFIX = b"}"


def _dumps(payload: Any) -> bytes:
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def _headers() -> dict[str, str]:
    return {"Content-Type": JSON_CONTENT_TYPE}


def encode_single(method: HttpMethod | str, url: str, body: bytes | None = None) -> httpx.Request:
    """Build a transport-ready request carrying at most one JSON document.

    Args:
        method (HttpMethod | str): HTTP method.
        url (str): Fully expanded request URL.
        body (bytes | None): JSON payload. ``None`` sends an empty payload.

    Returns:
        httpx.Request: Request with `Content-Type: application/json`.

    """
    return httpx.Request(str(method), url, content=body if body is not None else b"", headers=_headers())


def encode_bulk(method: HttpMethod | str, url: str, operations: Iterable[bytes]) -> httpx.Request:
    """Build a newline-delimited JSON request from pre-paired operation lines.

    Args:
        method (HttpMethod | str): HTTP method.
        url (str): Fully expanded request URL.
        operations (Iterable[bytes]): Metadata and data lines, in submission order.

    Returns:
        httpx.Request: Request whose payload terminates every line with `\\n`.

    """
    payload = b"".join(operation + _NEWLINE for operation in operations)
    return httpx.Request(str(method), url, content=payload, headers=_headers())


def _reject_constant(name: str) -> NoReturn:
    raise InvalidDocumentError(f"Document body contains the non-finite number {name}.")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise InvalidDocumentError(f"Document body contains the out-of-range number {literal}.")
    return value


def load_document(body: bytes) -> Any:
    """Parse a caller-supplied JSON document.

    Args:
        body (bytes): JSON document.

    Raises:
        InvalidDocumentError: If the body is not strict JSON or holds a non-finite number.

    Returns:
        Any: Parsed JSON value.

    """
    try:
        return json.loads(body, parse_float=_finite_float, parse_constant=_reject_constant)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidDocumentError(f"Document body is not valid JSON: {exc}") from exc


def compact_document(body: bytes) -> bytes:
    """Validate a JSON document and put it on a single line.

    Strict JSON never holds a raw line break inside a string, so dropping line
    breaks keeps every token byte for byte. A body already on one line is
    returned unchanged.

    Args:
        body (bytes): JSON document.

    Raises:
        InvalidDocumentError: If the body is not strict JSON or holds a non-finite number.

    Returns:
        bytes: The same document without line breaks.

    """
    load_document(body)
    return body.replace(_CARRIAGE_RETURN, b"").replace(_NEWLINE, b"")


def bulk_metadata(
    action: BulkAction,
    *,
    index: str,
    doc_type: str | None = None,
    doc_id: str | None = None,
) -> bytes:
    """Build one bulk action metadata line.

    Args:
        action (BulkAction): Bulk action tag.
        index (str): Target index.
        doc_type (str | None): Target type.
        doc_id (str | None): Target document id.

    Returns:
        bytes: Compact JSON metadata line.

    """
    target: dict[str, str] = {"_index": index}
    if doc_type:
        target["_type"] = doc_type
    if doc_id:
        target["_id"] = doc_id
    return _dumps({action.value: target})


def bulk_insert_operations(index: str, doc_type: str | None, docs: Sequence[bytes]) -> list[bytes]:
    """Pair every document with an `index` metadata line.

    Args:
        index (str): Target index.
        doc_type (str | None): Target type.
        docs (Sequence[bytes]): JSON documents.

    Returns:
        list[bytes]: Operation lines.

    """
    operations: list[bytes] = []
    for doc in docs:
        operations.extend(
            [
                bulk_metadata(BulkAction.INDEX, index=index, doc_type=doc_type),
                compact_document(doc),
            ],
        )
    return operations


def bulk_update_operations(index: str, doc_type: str | None, docs: Sequence[Document]) -> list[bytes]:
    """Pair every partial document with an `update` metadata line.

    Args:
        index (str): Target index.
        doc_type (str | None): Target type.
        docs (Sequence[Document]): Documents whose body is the partial update.

    Returns:
        list[bytes]: Operation lines.

    """
    operations: list[bytes] = []
    for doc in docs:
        operations.extend(
            [
                bulk_metadata(BulkAction.UPDATE, index=index, doc_type=doc_type, doc_id=doc.id),
                _UPDATE_PREFIX + compact_document(doc.body) + _UPDATE_SUFFIX,
            ],
        )
    return operations


def bulk_delete_operations(index: str, doc_type: str | None, ids: Sequence[str]) -> list[bytes]:
    """Build one `delete` metadata line per document id.

    Args:
        index (str): Target index.
        doc_type (str | None): Target type.
        ids (Sequence[str]): Document ids.

    Returns:
        list[bytes]: Operation lines.

    """
    return [bulk_metadata(BulkAction.DELETE, index=index, doc_type=doc_type, doc_id=doc_id) for doc_id in ids]
