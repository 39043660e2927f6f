"""Per-operation response decoders.

Every decoder unmarshals the raw payload into the shared wire envelope, checks
the boolean flag its operation depends on, and returns a typed result. The
envelope never leaves this package, and document sources are sliced from the
payload verbatim.
"""

from __future__ import annotations

from collections.abc import Callable

from elastic_lite.domain import BulkAction, BulkItemResult, Document, OperationKind, bulk_action_for
from elastic_lite.errors import PartialBulkFailureError, ServerError, StateError
from elastic_lite.protocol.envelope import BulkItemEnvelope, Envelope, ErrorBlock, Hit, parse_envelope
from elastic_lite.protocol.spans import document_source, hit_sources

FAILURE_STATUS_THRESHOLD = 299
_REASON_SEPARATOR = ","
_INSERT_FAILED = "Failed to create document."
_DROP_INDEX_FAILED = "Failed to drop index."
_GET_FAILED = "Failed to get document with id: {doc_id}"
_DELETE_FAILED = "Document was not found."
_UPSERTED = "Accidentally upserted document with id: {doc_id}"
_MISSING_ID = "Store reported success without a document id."
_BULK_FAILURES: dict[BulkAction, str] = {
    BulkAction.INDEX: "Some documents were not inserted.",
    BulkAction.UPDATE: "Some documents were not updated.",
    BulkAction.DELETE: "Some documents were not found and thus not deleted.",
}


def _root_cause_reasons(error: ErrorBlock | None) -> str:
    if error is None or not error.root_cause:
        return ""
    return "".join(_REASON_SEPARATOR + (cause.reason or "") for cause in error.root_cause)


def _require_id(envelope: Envelope | Hit) -> str:
    if not envelope.id:
        raise StateError(_MISSING_ID)
    return envelope.id


def decode_server_error(payload: bytes) -> ServerError:
    """Build the error matching a failed response.

    Args:
        payload (bytes): Raw error response body.

    Raises:
        DecodeError: If the error envelope itself cannot be parsed.

    Returns:
        ServerError: Error whose reason concatenates every root cause.

    """
    envelope = parse_envelope(payload)
    return ServerError(_root_cause_reasons(envelope.error))


def decode_insert(payload: bytes) -> Document:
    """Decode an insert response.

    Args:
        payload (bytes): Raw response body.

    Raises:
        StateError: If the store did not report `created`.

    Returns:
        Document: Document carrying the assigned id and the raw response.

    """
    envelope = parse_envelope(payload)
    if envelope.created is not True:
        raise StateError(_INSERT_FAILED)
    return Document(id=_require_id(envelope), body=payload)


def decode_get(payload: bytes) -> Document:
    """Decode a get-by-id response.

    Args:
        payload (bytes): Raw response body.

    Raises:
        StateError: If the store did not report `found`.

    Returns:
        Document: Requested document.

    """
    envelope = parse_envelope(payload)
    if envelope.found is not True:
        raise StateError(_GET_FAILED.format(doc_id=envelope.id or ""))
    return Document(id=_require_id(envelope), body=document_source(payload))


def decode_search(payload: bytes) -> list[Document]:
    """Decode a search response into documents, in the order the store ranked them.

    Args:
        payload (bytes): Raw response body.

    Returns:
        list[Document]: Matching documents; empty when nothing matched.

    """
    envelope = parse_envelope(payload)
    if envelope.hits is None or not envelope.hits.hits:
        return []
    sources = hit_sources(payload)
    return [
        Document(id=_require_id(hit), body=source) for hit, source in zip(envelope.hits.hits, sources, strict=True)
    ]


def decode_update(payload: bytes) -> None:
    """Decode an update-by-id response.

    Args:
        payload (bytes): Raw response body.

    Raises:
        StateError: If the store reports the update created the document.

    """
    envelope = parse_envelope(payload)
    if envelope.created is True:
        raise StateError(_UPSERTED.format(doc_id=envelope.id or ""))


def decode_delete(payload: bytes) -> None:
    """Decode a delete-by-id response.

    Args:
        payload (bytes): Raw response body.

    Raises:
        StateError: If the store did not report `found`.

    """
    envelope = parse_envelope(payload)
    if envelope.found is not True:
        raise StateError(_DELETE_FAILED)


def decode_delete_index(payload: bytes) -> None:
    """Decode a delete-index response.

    Args:
        payload (bytes): Raw response body.

    Raises:
        StateError: If the store did not report `acknowledged`.

    """
    envelope = parse_envelope(payload)
    if envelope.acknowledged is not True:
        raise StateError(_DROP_INDEX_FAILED)


def _item_failure_reason(envelope: Envelope, action: BulkAction) -> str | None:
    if envelope.error is not None:
        return envelope.error.reason or _root_cause_reasons(envelope.error) or "error"
    if envelope.status is not None and envelope.status >= FAILURE_STATUS_THRESHOLD:
        return f"status {envelope.status}"
    if action is BulkAction.INDEX and envelope.created is not True:
        return "not created"
    if action is BulkAction.DELETE and envelope.found is not True:
        return "not found"
    return None


def _item_result(item: BulkItemEnvelope, action: BulkAction) -> BulkItemResult:
    envelope = item.for_action(action)
    if envelope is None:
        other = item.any_action()
        return BulkItemResult(
            id=(other.id or "") if other is not None else "",
            succeeded=False,
            reason=f"missing '{action.value}' item",
        )

    reason = _item_failure_reason(envelope, action)
    return BulkItemResult(
        id=envelope.id or "",
        succeeded=reason is None,
        status=envelope.status,
        reason=reason,
    )


def decode_bulk_items(payload: bytes, action: BulkAction) -> list[BulkItemResult]:
    """Decode every item of a bulk response, in submission order.

    An item fails when it carries an error block or a failure status, when an
    insert was not `created`, or when a delete was not `found`.

    Args:
        payload (bytes): Raw response body.
        action (BulkAction): Action every item is expected to report.

    Returns:
        list[BulkItemResult]: One result per submitted operation.

    """
    envelope = parse_envelope(payload)
    return [_item_result(item, action) for item in envelope.items or []]


def _decode_bulk_ids(payload: bytes, kind: OperationKind) -> list[str]:
    action = bulk_action_for(kind)
    results = decode_bulk_items(payload, action)
    ids = [result.id for result in results]
    failures = [result for result in results if not result.succeeded]
    if failures:
        raise PartialBulkFailureError(_BULK_FAILURES[action], ids=ids, failures=failures)
    return ids


def decode_bulk_insert(payload: bytes) -> list[str]:
    """Decode a bulk insert response.

    Args:
        payload (bytes): Raw response body.

    Raises:
        PartialBulkFailureError: If any item failed; carries every positional id.

    Returns:
        list[str]: Inserted ids in submission order.

    """
    return _decode_bulk_ids(payload, OperationKind.BULK_INSERT)


def decode_bulk_update(payload: bytes) -> list[str]:
    """Decode a bulk update response.

    Args:
        payload (bytes): Raw response body.

    Raises:
        PartialBulkFailureError: If any item failed; carries every positional id.

    Returns:
        list[str]: Updated ids in submission order.

    """
    return _decode_bulk_ids(payload, OperationKind.BULK_UPDATE)


def decode_bulk_delete(payload: bytes) -> list[str]:
    """Decode a bulk delete response.

    Args:
        payload (bytes): Raw response body.

    Raises:
        PartialBulkFailureError: If any item failed; carries every positional id.

    Returns:
        list[str]: Deleted ids in submission order.

    """
    return _decode_bulk_ids(payload, OperationKind.BULK_DELETE)


DECODERS: dict[OperationKind, Callable[[bytes], Document | list[Document] | list[str] | None]] = {
    OperationKind.INSERT: decode_insert,
    OperationKind.GET: decode_get,
    OperationKind.SEARCH: decode_search,
    OperationKind.UPDATE: decode_update,
    OperationKind.DELETE: decode_delete,
    OperationKind.DELETE_INDEX: decode_delete_index,
    OperationKind.BULK_INSERT: decode_bulk_insert,
    OperationKind.BULK_UPDATE: decode_bulk_update,
    OperationKind.BULK_DELETE: decode_bulk_delete,
}


def decode_response(kind: OperationKind, payload: bytes) -> Document | list[Document] | list[str] | None:
    """Decode a response with the decoder registered for an operation kind.

    Args:
        kind (OperationKind): Operation the response answers.
        payload (bytes): Raw response body.

    Returns:
        Document | list[Document] | list[str] | None: Operation result.

    """
    return DECODERS[kind](payload)
