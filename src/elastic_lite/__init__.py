"""Client library and offline mock for a document store's REST/JSON protocol."""

from elastic_lite.client import Client, DocType, Index
from elastic_lite.config import ClientOptions
from elastic_lite.domain import Address, BulkItemResult, Document

__all__ = [
    "Address",
    "BulkItemResult",
    "Client",
    "ClientOptions",
    "DocType",
    "Document",
    "Index",
]
