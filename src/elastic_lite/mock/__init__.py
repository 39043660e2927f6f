"""Offline mock of the store's REST protocol."""

from elastic_lite.mock.app import apply_bulk, create_app
from elastic_lite.mock.store import MockStore, StoredDocument

__all__ = [
    "MockStore",
    "StoredDocument",
    "apply_bulk",
    "create_app",
]
