"""Domain contracts for elastic-lite."""

from elastic_lite.domain.contracts import Address, BulkItemResult, Document
from elastic_lite.domain.enums import BulkAction, CommandName, HttpMethod, OperationKind, bulk_action_for

__all__ = [
    "Address",
    "BulkAction",
    "BulkItemResult",
    "CommandName",
    "Document",
    "HttpMethod",
    "OperationKind",
    "bulk_action_for",
]
