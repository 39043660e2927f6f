"""REST operations composed from the protocol layer.

Each operation builds its URI from an `Address`, encodes the request, sends it
through the transport and decodes the response for its operation kind.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from elastic_lite.domain import Address, Document, HttpMethod
from elastic_lite.protocol import (
    HttpTransport,
    build_uri,
    bulk_delete_operations,
    bulk_insert_operations,
    bulk_update_operations,
    decode_bulk_delete,
    decode_bulk_insert,
    decode_bulk_update,
    decode_delete,
    decode_delete_index,
    decode_get,
    decode_insert,
    decode_search,
    decode_update,
    encode_bulk,
    encode_single,
)
from elastic_lite.protocol.codec import compact_document

_SEARCH_SUFFIX = "_search"
_BULK_SUFFIX = "_bulk"
_REFRESH: Mapping[str, str] = {"refresh": "true"}
_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RestProtocol:
    """Speak the store's REST dialect against one address template."""

    uri_template: str
    transport: HttpTransport

    def _uri(self, address: Address, query: Mapping[str, str] | None = None) -> str:
        return build_uri(self.uri_template, address.path_variables(), query)

    def _request(self, method: HttpMethod, uri: str, body: bytes | None = None) -> bytes:
        return self.transport.send(encode_single(method, uri, body))

    def _bulk_request(self, uri: str, operations: list[bytes]) -> bytes:
        _logger.debug("Sending bulk request with %d lines.", len(operations))
        return self.transport.send(encode_bulk(HttpMethod.POST, uri, operations))

    def search_index(self, index: str, query_string: str) -> list[Document]:
        """Search every type of an index with a query string.

        Args:
            index (str): Index name.
            query_string (str): Query in `field:value` form, or `*:*`.

        Returns:
            list[Document]: Matching documents in ranking order.

        """
        uri = self._uri(Address(index=index, suffix=_SEARCH_SUFFIX), {"q": query_string})
        return decode_search(self._request(HttpMethod.GET, uri))

    def search_type(self, index: str, doc_type: str, query_string: str) -> list[Document]:
        """Search one type of an index with a query string.

        Args:
            index (str): Index name.
            doc_type (str): Type name.
            query_string (str): Query in `field:value` form, or `*:*`.

        Returns:
            list[Document]: Matching documents in ranking order.

        """
        uri = self._uri(Address(index=index, doc_type=doc_type, suffix=_SEARCH_SUFFIX), {"q": query_string})
        return decode_search(self._request(HttpMethod.GET, uri))

    def search_with_body(self, index: str, doc_type: str | None, query: bytes) -> list[Document]:
        """Search with a JSON query body, as produced by query translators.

        Args:
            index (str): Index name.
            doc_type (str | None): Optional type name.
            query (bytes): JSON search body.

        Returns:
            list[Document]: Matching documents in ranking order.

        """
        uri = self._uri(Address(index=index, doc_type=doc_type, suffix=_SEARCH_SUFFIX))
        return decode_search(self._request(HttpMethod.GET, uri, compact_document(query)))

    def delete_index(self, index: str) -> None:
        """Drop an index and every document it holds.

        Args:
            index (str): Index name.

        """
        uri = self._uri(Address(index=index))
        decode_delete_index(self._request(HttpMethod.DELETE, uri))

    def insert_document(self, index: str, doc_type: str, doc: bytes) -> Document:
        """Insert a document and let the store assign its id.

        Args:
            index (str): Index name.
            doc_type (str): Type name.
            doc (bytes): JSON document.

        Returns:
            Document: Assigned id and raw store response.

        """
        uri = self._uri(Address(index=index, doc_type=doc_type), _REFRESH)
        return decode_insert(self._request(HttpMethod.POST, uri, doc))

    def bulk_insert_documents(self, index: str, doc_type: str, docs: Sequence[bytes]) -> list[str]:
        """Insert documents in one bulk round trip.

        Args:
            index (str): Index name.
            doc_type (str): Type name.
            docs (Sequence[bytes]): JSON documents.

        Returns:
            list[str]: Assigned ids in submission order.

        """
        if not docs:
            return []
        uri = self._uri(Address(suffix=_BULK_SUFFIX), _REFRESH)
        return decode_bulk_insert(self._bulk_request(uri, bulk_insert_operations(index, doc_type, docs)))

    def get_document(self, index: str, doc_type: str, doc_id: str) -> Document:
        """Fetch one document by id.

        Args:
            index (str): Index name.
            doc_type (str): Type name.
            doc_id (str): Document id.

        Returns:
            Document: Stored document.

        """
        uri = self._uri(Address(index=index, doc_type=doc_type, doc_id=doc_id))
        return decode_get(self._request(HttpMethod.GET, uri))

    def update_document(self, index: str, doc_type: str, doc_id: str, doc: bytes) -> None:
        """Replace the body of an existing document.

        Args:
            index (str): Index name.
            doc_type (str): Type name.
            doc_id (str): Document id.
            doc (bytes): New JSON body.

        """
        uri = self._uri(Address(index=index, doc_type=doc_type, doc_id=doc_id), _REFRESH)
        decode_update(self._request(HttpMethod.PUT, uri, doc))

    def bulk_update_documents(self, index: str, doc_type: str, docs: Sequence[Document]) -> list[str]:
        """Apply partial updates in one bulk round trip.

        Args:
            index (str): Index name.
            doc_type (str): Type name.
            docs (Sequence[Document]): Target ids with partial bodies.

        Returns:
            list[str]: Updated ids in submission order.

        """
        if not docs:
            return []
        uri = self._uri(Address(suffix=_BULK_SUFFIX))
        return decode_bulk_update(self._bulk_request(uri, bulk_update_operations(index, doc_type, docs)))

    def delete_document(self, index: str, doc_type: str, doc_id: str) -> None:
        """Delete one document by id.

        Args:
            index (str): Index name.
            doc_type (str): Type name.
            doc_id (str): Document id.

        """
        uri = self._uri(Address(index=index, doc_type=doc_type, doc_id=doc_id), _REFRESH)
        decode_delete(self._request(HttpMethod.DELETE, uri))

    def bulk_delete_documents(self, index: str, doc_type: str, ids: Sequence[str]) -> list[str]:
        """Delete documents in one bulk round trip.

        Args:
            index (str): Index name.
            doc_type (str): Type name.
            ids (Sequence[str]): Document ids.

        Returns:
            list[str]: Deleted ids in submission order.

        """
        if not ids:
            return []
        uri = self._uri(Address(suffix=_BULK_SUFFIX), _REFRESH)
        return decode_bulk_delete(self._bulk_request(uri, bulk_delete_operations(index, doc_type, ids)))
