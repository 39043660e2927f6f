from __future__ import annotations

import json

import httpx
import pytest

from elastic_lite.domain import Document
from elastic_lite.protocol import HttpTransport
from elastic_lite.rest import RestProtocol

_TEMPLATE = "http://store:9200{/index,type,suffix}"


class _Recorder:
    def __init__(self, body: bytes) -> None:
        self.body = body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(200, content=self.body)


def _rest(body: bytes) -> tuple[RestProtocol, _Recorder]:
    recorder = _Recorder(body)
    client = httpx.Client(transport=httpx.MockTransport(recorder))
    return RestProtocol(uri_template=_TEMPLATE, transport=HttpTransport(client=client)), recorder


def test_search_type_sends_query_string() -> None:
    rest, recorder = _rest(b'{"hits": {"hits": []}}')

    assert rest.search_type("people", "person", "name:alice") == []

    request = recorder.requests[0]
    assert request.method == "GET"
    assert str(request.url) == "http://store:9200/people/person/_search?q=name%3Aalice"


def test_search_index_skips_type_segment() -> None:
    rest, recorder = _rest(b'{"hits": {"hits": []}}')

    rest.search_index("people", "*:*")

    assert recorder.requests[0].url.path == "/people/_search"


def test_search_with_body_sends_query_on_one_line() -> None:
    rest, recorder = _rest(b'{"hits": {"hits": [{"_id": "a", "_source": {"n": 1.50}}]}}')

    docs = rest.search_with_body("people", None, b'{\n "query": {"match_all": {}}\n}')

    assert docs == [Document(id="a", body=b'{"n": 1.50}')]
    assert recorder.requests[0].content == b'{ "query": {"match_all": {}}}'
    assert recorder.requests[0].url.path == "/people/_search"


def test_insert_document_posts_with_refresh() -> None:
    rest, recorder = _rest(b'{"_id": "new", "created": true}')

    assert rest.insert_document("people", "person", b'{"name":"alice"}').id == "new"

    request = recorder.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "http://store:9200/people/person?refresh=true"
    assert request.content == b'{"name":"alice"}'


def test_get_document_places_id_in_last_segment() -> None:
    rest, recorder = _rest(b'{"_id": "a/b", "found": true, "_source": {}}')

    rest.get_document("people", "person", "a/b")

    assert str(recorder.requests[0].url) == "http://store:9200/people/person/a%2Fb"


def test_update_and_delete_document_use_refresh() -> None:
    rest, recorder = _rest(b'{"_id": "a", "created": false, "found": true}')

    rest.update_document("people", "person", "a", b'{"v":2}')
    rest.delete_document("people", "person", "a")

    assert [(r.method, str(r.url)) for r in recorder.requests] == [
        ("PUT", "http://store:9200/people/person/a?refresh=true"),
        ("DELETE", "http://store:9200/people/person/a?refresh=true"),
    ]


def test_delete_index_targets_index_root() -> None:
    rest, recorder = _rest(b'{"acknowledged": true}')

    rest.delete_index("people")

    assert (recorder.requests[0].method, str(recorder.requests[0].url)) == ("DELETE", "http://store:9200/people")


def test_bulk_insert_posts_ndjson_to_store_root() -> None:
    rest, recorder = _rest(b'{"items": [{"index": {"_id": "x", "created": true, "status": 201}}]}')

    assert rest.bulk_insert_documents("people", "person", [b'{"n": 1}']) == ["x"]

    request = recorder.requests[0]
    assert str(request.url) == "http://store:9200/_bulk?refresh=true"
    lines = request.content.decode("utf-8").splitlines()
    assert json.loads(lines[0]) == {"index": {"_index": "people", "_type": "person"}}
    assert json.loads(lines[1]) == {"n": 1}


def test_bulk_update_does_not_request_refresh() -> None:
    rest, recorder = _rest(b'{"items": [{"update": {"_id": "a", "status": 200}}]}')

    assert rest.bulk_update_documents("people", "person", [Document(id="a", body=b'{"n":2}')]) == ["a"]
    assert str(recorder.requests[0].url) == "http://store:9200/_bulk"


@pytest.mark.parametrize("method_name", ["bulk_insert_documents", "bulk_update_documents", "bulk_delete_documents"])
def test_empty_bulk_input_sends_nothing(method_name: str) -> None:
    rest, recorder = _rest(b"{}")

    assert getattr(rest, method_name)("people", "person", []) == []
    assert recorder.requests == []
