"""Convenience handles over the REST operations: client, index and type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Self

from elastic_lite.config import ClientOptions
from elastic_lite.protocol import HttpTransport
from elastic_lite.rest import RestProtocol

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import TracebackType

    import httpx

    from elastic_lite.domain import Document


class Client:
    """Entry point bound to one store.

    The client owns the HTTP connection pool unless one is injected.
    """

    def __init__(self, options: ClientOptions | None = None, http_client: httpx.Client | None = None) -> None:
        self.options = options if options is not None else ClientOptions()
        self._owns_http_client = http_client is None
        http = http_client if http_client is not None else self.options.build_http_client()
        self.rest = RestProtocol(uri_template=self.options.uri_template, transport=HttpTransport(client=http))

    def index(self, name: str) -> Index:
        """Reference an index. Nothing is created until a document is written."""
        return Index(client=self, name=name)

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_http_client:
            self.rest.transport.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


@dataclass(frozen=True, slots=True)
class Index:
    """Reference to a named index."""

    client: Client
    name: str

    def doc_type(self, name: str) -> DocType:
        """Reference a type inside this index."""
        return DocType(index=self, name=name)

    def search(self, query_string: str) -> list[Document]:
        """Return documents of any type matching the query string."""
        return self.client.rest.search_index(self.name, query_string)

    def drop(self) -> None:
        """Delete the index."""
        self.client.rest.delete_index(self.name)


@dataclass(frozen=True, slots=True)
class DocType:
    """Reference to a type, the namespace documents live in."""

    index: Index
    name: str

    @property
    def _rest(self) -> RestProtocol:
        return self.index.client.rest

    def search(self, query_string: str) -> list[Document]:
        """Return documents of this type matching the query string."""
        return self._rest.search_type(self.index.name, self.name, query_string)

    def find(self, query_string: str) -> list[Document]:
        """Return documents matching `key:value` pairs in the query string."""
        return self.search(query_string)

    def search_with_body(self, query: bytes) -> list[Document]:
        """Return documents matching a JSON query body."""
        return self._rest.search_with_body(self.index.name, self.name, query)

    def insert(self, doc: bytes) -> Document:
        """Insert a document and return its assigned id."""
        return self._rest.insert_document(self.index.name, self.name, doc)

    def bulk_insert(self, docs: Sequence[bytes]) -> list[str]:
        """Insert documents in one round trip."""
        return self._rest.bulk_insert_documents(self.index.name, self.name, docs)

    def find_by_id(self, doc_id: str) -> Document:
        """Return one document; a missing document raises `StateError`."""
        return self._rest.get_document(self.index.name, self.name, doc_id)

    def update_by_id(self, doc_id: str, doc: bytes) -> None:
        """Replace a document body by id."""
        self._rest.update_document(self.index.name, self.name, doc_id, doc)

    def bulk_update(self, docs: Sequence[Document]) -> list[str]:
        """Apply partial updates in one round trip."""
        return self._rest.bulk_update_documents(self.index.name, self.name, docs)

    def delete_by_id(self, doc_id: str) -> None:
        """Delete a document by id; a missing document raises `StateError`."""
        self._rest.delete_document(self.index.name, self.name, doc_id)

    def bulk_delete(self, ids: Sequence[str]) -> list[str]:
        """Delete documents in one round trip."""
        return self._rest.bulk_delete_documents(self.index.name, self.name, ids)
