"""In-memory document store backing the mock server.

Documents are keyed by ``(index, type, id)`` and hold a JSON object body. A
single re-entrant lock serialises every operation; `batch` holds it across a
whole bulk request so no partially applied batch is ever observable.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Any
from uuid import uuid4

from elastic_lite.errors import IndexNotFoundError, InvalidDocumentError

MATCH_ALL = "*:*"
_FIELD_SEPARATOR = ":"
_logger = logging.getLogger(__name__)

DocumentKey = tuple[str, str, str]


@dataclass(frozen=True, slots=True)
class StoredDocument:
    """Represent one document held by the mock store."""

    index: str
    doc_type: str
    id: str
    body: dict[str, Any]
    version: int = 1


def parse_body(raw: bytes) -> dict[str, Any]:
    """Parse a request body into a document object.

    Args:
        raw (bytes): JSON payload.

    Raises:
        InvalidDocumentError: If the payload is not a JSON object.

    Returns:
        dict[str, Any]: Parsed document.

    """
    try:
        body = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidDocumentError(f"failed to parse document: {exc}") from exc
    if not isinstance(body, dict):
        raise InvalidDocumentError("failed to parse document: expected a JSON object")
    return body


def _scalar_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, bool | int | float):
        return json.dumps(value)
    return None


def _field_matches(body: dict[str, Any], field: str, expected: str) -> bool:
    return field in body and _scalar_text(body[field]) == expected


def query_matches(body: dict[str, Any], query_string: str | None) -> bool:
    """Tell whether a document body satisfies a query string.

    ``*:*`` and empty queries match everything, ``field:value`` matches exact
    top-level field values, and a bare term matches any top-level field.

    Args:
        body (dict[str, Any]): Stored document body.
        query_string (str | None): Query string.

    Returns:
        bool: Whether the document matches.

    """
    if not query_string or query_string == MATCH_ALL:
        return True
    field, separator, expected = query_string.partition(_FIELD_SEPARATOR)
    if not separator:
        return any(_scalar_text(value) == query_string for value in body.values())
    if field == "*":
        return any(_scalar_text(value) == expected for value in body.values())
    return _field_matches(body, field, expected)


def query_string_from_dsl(search_body: dict[str, Any]) -> str:
    """Translate a `match_all`, `term` or `match` search body into a query string.

    Args:
        search_body (dict[str, Any]): Parsed search request body.

    Raises:
        InvalidDocumentError: If the query uses an unsupported clause.

    Returns:
        str: Equivalent query string.

    """
    query = search_body.get("query")
    if query is None or (isinstance(query, dict) and "match_all" in query):
        return MATCH_ALL
    if not isinstance(query, dict) or len(query) != 1:
        raise InvalidDocumentError("unsupported query: expected a single clause")

    clause_name, clause = next(iter(query.items()))
    if clause_name not in {"term", "match"} or not isinstance(clause, dict) or len(clause) != 1:
        raise InvalidDocumentError(f"unsupported query clause [{clause_name}]")
    field, expected = next(iter(clause.items()))
    if isinstance(expected, dict):
        expected = expected.get("value", expected.get("query"))
    text = _scalar_text(expected)
    if text is None:
        raise InvalidDocumentError(f"unsupported value for field [{field}]")
    return f"{field}{_FIELD_SEPARATOR}{text}"


class MockStore:
    """Owned, thread-safe document store."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._documents: dict[DocumentKey, StoredDocument] = {}
        self._indices: set[str] = set()

    @contextmanager
    def batch(self) -> Iterator[MockStore]:
        """Hold the store lock across several operations."""
        with self._lock:
            yield self

    def index_exists(self, index: str) -> bool:
        """Tell whether any write created the index since it was last dropped."""
        with self._lock:
            return index in self._indices

    def insert(self, index: str, doc_type: str, body: dict[str, Any]) -> StoredDocument:
        """Store a new document under a freshly assigned id.

        Args:
            index (str): Index name.
            doc_type (str): Type name.
            body (dict[str, Any]): Document body.

        Returns:
            StoredDocument: Stored document.

        """
        doc = StoredDocument(index=index, doc_type=doc_type, id=uuid4().hex, body=body)
        with self._lock:
            self._indices.add(index)
            self._documents[(index, doc_type, doc.id)] = doc
        _logger.debug("Inserted %s/%s/%s", index, doc_type, doc.id)
        return doc

    def upsert(self, index: str, doc_type: str, doc_id: str, body: dict[str, Any]) -> tuple[StoredDocument, bool]:
        """Replace a document body, creating the document when absent.

        Args:
            index (str): Index name.
            doc_type (str): Type name.
            doc_id (str): Document id.
            body (dict[str, Any]): New body.

        Returns:
            tuple[StoredDocument, bool]: Stored document and whether it already existed.

        """
        key = (index, doc_type, doc_id)
        with self._lock:
            existing = self._documents.get(key)
            if existing is None:
                doc = StoredDocument(index=index, doc_type=doc_type, id=doc_id, body=body)
            else:
                doc = replace(existing, body=body, version=existing.version + 1)
            self._indices.add(index)
            self._documents[key] = doc
        _logger.debug("Upserted %s/%s/%s (existed=%s)", index, doc_type, doc_id, existing is not None)
        return doc, existing is not None

    def merge(self, index: str, doc_type: str, doc_id: str, partial: dict[str, Any]) -> StoredDocument | None:
        """Merge top-level fields into an existing document.

        Args:
            index (str): Index name.
            doc_type (str): Type name.
            doc_id (str): Document id.
            partial (dict[str, Any]): Fields to overwrite.

        Returns:
            StoredDocument | None: Updated document, or None when absent.

        """
        key = (index, doc_type, doc_id)
        with self._lock:
            existing = self._documents.get(key)
            if existing is None:
                return None
            doc = replace(existing, body={**existing.body, **partial}, version=existing.version + 1)
            self._documents[key] = doc
        _logger.debug("Merged %d fields into %s/%s/%s", len(partial), index, doc_type, doc_id)
        return doc

    def get(self, index: str, doc_type: str, doc_id: str) -> StoredDocument | None:
        """Return a document, or None when absent."""
        with self._lock:
            return self._documents.get((index, doc_type, doc_id))

    def delete(self, index: str, doc_type: str, doc_id: str) -> StoredDocument | None:
        """Remove a document.

        Args:
            index (str): Index name.
            doc_type (str): Type name.
            doc_id (str): Document id.

        Returns:
            StoredDocument | None: Removed document, or None when it was absent.

        """
        with self._lock:
            removed = self._documents.pop((index, doc_type, doc_id), None)
        _logger.debug("Deleted %s/%s/%s (found=%s)", index, doc_type, doc_id, removed is not None)
        return removed

    def drop_index(self, index: str) -> None:
        """Remove an index and all of its documents. Dropping twice is harmless."""
        with self._lock:
            self._indices.discard(index)
            for key in [key for key in self._documents if key[0] == index]:
                del self._documents[key]
        _logger.debug("Dropped index %s", index)

    def search(
        self,
        index: str,
        doc_type: str | None = None,
        query_string: str | None = None,
    ) -> list[StoredDocument]:
        """Return matching documents in insertion order.

        Args:
            index (str): Index name.
            doc_type (str | None): Restrict to one type when set.
            query_string (str | None): Query string.

        Raises:
            IndexNotFoundError: If the index was never created or was dropped.

        Returns:
            list[StoredDocument]: Matching documents; empty when nothing matched.

        """
        with self._lock:
            if index not in self._indices:
                raise IndexNotFoundError(index)
            return [
                doc
                for (doc_index, stored_type, _), doc in self._documents.items()
                if doc_index == index
                and (doc_type is None or stored_type == doc_type)
                and query_matches(doc.body, query_string)
            ]
