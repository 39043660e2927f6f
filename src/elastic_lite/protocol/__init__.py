"""Wire protocol: URI building, request encoding, transport and response decoding."""

from elastic_lite.protocol.codec import (
    bulk_delete_operations,
    bulk_insert_operations,
    bulk_update_operations,
    encode_bulk,
    encode_single,
)
from elastic_lite.protocol.decode import (
    decode_bulk_delete,
    decode_bulk_insert,
    decode_bulk_items,
    decode_bulk_update,
    decode_delete,
    decode_delete_index,
    decode_get,
    decode_insert,
    decode_response,
    decode_search,
    decode_server_error,
    decode_update,
)
from elastic_lite.protocol.transport import HttpTransport
from elastic_lite.protocol.uri import build_uri

__all__ = [
    "HttpTransport",
    "build_uri",
    "bulk_delete_operations",
    "bulk_insert_operations",
    "bulk_update_operations",
    "decode_bulk_delete",
    "decode_bulk_insert",
    "decode_bulk_items",
    "decode_bulk_update",
    "decode_delete",
    "decode_delete_index",
    "decode_get",
    "decode_insert",
    "decode_response",
    "decode_search",
    "decode_server_error",
    "decode_update",
    "encode_bulk",
    "encode_single",
]
