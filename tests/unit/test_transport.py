from __future__ import annotations

import json

import httpx
import pytest

from elastic_lite.domain import HttpMethod
from elastic_lite.errors import DecodeError, ServerError
from elastic_lite.protocol import HttpTransport, encode_single

_URL = "http://127.0.0.1:9200/people/person/abc"


def _transport(handler: httpx.MockTransport | None = None, *, status: int = 200, body: bytes = b"{}") -> HttpTransport:
    mock = handler or httpx.MockTransport(lambda _request: httpx.Response(status, content=body))
    return HttpTransport(client=httpx.Client(transport=mock))


def test_send_returns_raw_payload_on_success() -> None:
    transport = _transport(body=b'{"found": true}')

    assert transport.send(encode_single(HttpMethod.GET, _URL)) == b'{"found": true}'


def test_send_forwards_method_url_headers_and_body() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(201, content=b'{"created": true}')

    transport = _transport(httpx.MockTransport(handler))
    transport.send(encode_single(HttpMethod.PUT, _URL + "?refresh=true", b'{"a":1}'))

    assert seen[0].method == "PUT"
    assert str(seen[0].url) == _URL + "?refresh=true"
    assert seen[0].headers["Content-Type"] == "application/json"
    assert seen[0].content == b'{"a":1}'


@pytest.mark.parametrize("status", [299, 400, 404, 500])
def test_send_raises_server_error_from_error_envelope(status: int) -> None:
    body = json.dumps(
        {
            "error": {"type": "index_not_found_exception", "root_cause": [{"reason": "no such index [people]"}]},
            "status": status,
        },
    ).encode("utf-8")

    with pytest.raises(ServerError) as exc_info:
        _transport(status=status, body=body).send(encode_single(HttpMethod.GET, _URL))

    assert exc_info.value.reason == ",no such index [people]"


def test_send_accepts_status_just_below_failure_threshold() -> None:
    assert _transport(status=298, body=b"{}").send(encode_single(HttpMethod.GET, _URL)) == b"{}"


def test_send_reports_unparseable_error_envelope_as_decode_error() -> None:
    with pytest.raises(DecodeError):
        _transport(status=502, body=b"<html>Bad Gateway</html>").send(encode_single(HttpMethod.GET, _URL))


def test_send_propagates_connection_failures() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(httpx.TransportError):
        _transport(httpx.MockTransport(handler)).send(encode_single(HttpMethod.GET, _URL))
