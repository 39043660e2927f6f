"""Typed enumerations for wire-level choices."""

from __future__ import annotations

from enum import StrEnum


class HttpMethod(StrEnum):
    """Represent HTTP verbs used by the protocol."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class BulkAction(StrEnum):
    """Represent bulk action names tagging metadata lines and response items."""

    INDEX = "index"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class OperationKind(StrEnum):
    """Represent one logical operation a response is decoded for."""

    INSERT = "insert"
    GET = "get"
    SEARCH = "search"
    UPDATE = "update"
    DELETE = "delete"
    DELETE_INDEX = "delete_index"
    BULK_INSERT = "bulk_insert"
    BULK_UPDATE = "bulk_update"
    BULK_DELETE = "bulk_delete"


_BULK_OPERATION_TO_ACTION: dict[OperationKind, BulkAction] = {
    OperationKind.BULK_INSERT: BulkAction.INDEX,
    OperationKind.BULK_UPDATE: BulkAction.UPDATE,
    OperationKind.BULK_DELETE: BulkAction.DELETE,
}


def bulk_action_for(kind: OperationKind) -> BulkAction:
    """Return the bulk action tag expected in responses for a bulk operation.

    Args:
        kind (OperationKind): Bulk operation kind.

    Raises:
        ValueError: If the operation is not a bulk operation.

    Returns:
        BulkAction: Action tag used by metadata lines and response items.

    """
    try:
        return _BULK_OPERATION_TO_ACTION[kind]
    except KeyError as exc:
        raise ValueError(f"'{kind}' is not a bulk operation.") from exc  # noqa: TRY003


class CommandName(StrEnum):
    """Represent supported top-level CLI commands."""

    SERVE_MOCK = "serve-mock"
    SEARCH = "search"
    GET = "get"
    SEED = "seed"
    DROP_INDEX = "drop-index"
