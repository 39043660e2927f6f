"""Raw JSON value spans.

Document sources are sliced out of the response text instead of being parsed
and re-serialised, so numbers, escapes and key order reach the caller exactly
as the store sent them.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from json.decoder import scanstring

from elastic_lite.errors import DecodeError

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_DECODER = json.JSONDecoder()
_NULL = "null"

Span = tuple[int, int]


def _skip(text: str, index: int) -> int:
    return _WHITESPACE.match(text, index).end()  # type: ignore[union-attr]


def _expect(text: str, index: int, char: str) -> None:
    if text[index : index + 1] != char:
        raise json.JSONDecodeError(f"Expecting '{char}'", text, index)


def _value_end(text: str, start: int) -> int:
    _, end = _DECODER.raw_decode(text, start)
    return end


def object_members(text: str, start: int = 0) -> Iterator[tuple[str, Span]]:
    """Yield every member of the JSON object starting at `start`.

    Args:
        text (str): JSON text.
        start (int): Offset of the object, leading whitespace allowed.

    Raises:
        json.JSONDecodeError: If the text is not a well-formed object there.

    Yields:
        tuple[str, Span]: Member name and the `(start, end)` span of its raw value.

    """
    index = _skip(text, start)
    _expect(text, index, "{")
    index = _skip(text, index + 1)
    if text[index : index + 1] == "}":
        return
    while True:
        _expect(text, index, '"')
        key, index = scanstring(text, index + 1)
        index = _skip(text, index)
        _expect(text, index, ":")
        value_start = _skip(text, index + 1)
        value_end = _value_end(text, value_start)
        yield key, (value_start, value_end)
        index = _skip(text, value_end)
        if text[index : index + 1] == "}":
            return
        _expect(text, index, ",")
        index = _skip(text, index + 1)


def array_items(text: str, start: int = 0) -> Iterator[Span]:
    """Yield the raw span of every item of the JSON array starting at `start`.

    Raises:
        json.JSONDecodeError: If the text is not a well-formed array there.

    """
    index = _skip(text, start)
    _expect(text, index, "[")
    index = _skip(text, index + 1)
    if text[index : index + 1] == "]":
        return
    while True:
        item_end = _value_end(text, index)
        yield index, item_end
        index = _skip(text, item_end)
        if text[index : index + 1] == "]":
            return
        _expect(text, index, ",")
        index = _skip(text, index + 1)


def _member(text: str, key: str, start: int = 0) -> Span | None:
    found = None
    for name, span in object_members(text, start):
        if name == key:
            found = span
    if found is None or text[found[0] : found[1]] == _NULL:
        return None
    return found


def _payload_text(payload: bytes) -> str:
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DecodeError(f"Response payload is not UTF-8: {exc}") from exc


def _raw_source(text: str, start: int) -> bytes:
    span = _member(text, "_source", start)
    if span is None:
        return b""
    return text[span[0] : span[1]].encode("utf-8")


def document_source(payload: bytes) -> bytes:
    """Return the top-level `_source` of a response exactly as received.

    Args:
        payload (bytes): Raw response body.

    Raises:
        DecodeError: If the payload is not a JSON object.

    Returns:
        bytes: Raw `_source` value; empty when it is missing or null.

    """
    text = _payload_text(payload)
    try:
        return _raw_source(text, 0)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Response payload is not a valid envelope: {exc}") from exc


def hit_sources(payload: bytes) -> list[bytes]:
    """Return the `_source` of every search hit exactly as received, in hit order.

    Args:
        payload (bytes): Raw search response body.

    Raises:
        DecodeError: If the payload is not a JSON object.

    Returns:
        list[bytes]: One raw source per hit; empty bytes for hits without one.

    """
    text = _payload_text(payload)
    try:
        hits = _member(text, "hits")
        if hits is None:
            return []
        hit_list = _member(text, "hits", hits[0])
        if hit_list is None:
            return []
        return [_raw_source(text, item_start) for item_start, _ in array_items(text, hit_list[0])]
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Response payload is not a valid envelope: {exc}") from exc
