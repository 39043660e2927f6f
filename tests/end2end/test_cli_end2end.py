from __future__ import annotations

import argparse
import json
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from elastic_lite import Client, ClientOptions
from elastic_lite.cli import command_handlers, main
from elastic_lite.mock import MockStore, create_app


@pytest.fixture
def mock_backend(monkeypatch: pytest.MonkeyPatch, store: MockStore) -> Iterator[list[argparse.Namespace]]:
    seen: list[argparse.Namespace] = []
    with TestClient(create_app(store)) as http_client:

        def _client_from_args(args: argparse.Namespace) -> Client:
            seen.append(args)
            return Client(ClientOptions(url="http://testserver"), http_client=http_client)

        monkeypatch.setattr(command_handlers, "client_from_args", _client_from_args)
        yield seen


def _run(argv: list[str], capsys: pytest.CaptureFixture[str]) -> dict[str, Any]:
    assert main(argv) == 0
    return json.loads(capsys.readouterr().out)


def test_seed_search_get_and_drop(
    tmp_path: Path,
    store: MockStore,
    mock_backend: list[argparse.Namespace],
    capsys: pytest.CaptureFixture[str],
) -> None:
    seed_file = tmp_path / "people.ndjson"
    seed_file.write_text('{"name": "alice"}\n{"name": "bob"}\n', encoding="utf-8")

    seeded = _run(["seed", "--index", "people", "--type", "person", "--input", str(seed_file)], capsys)
    assert seeded["count"] == 2

    found = _run(["search", "--index", "people", "--type", "person", "--query", "name:bob"], capsys)
    assert found["count"] == 1
    assert found["documents"][0]["source"] == {"name": "bob"}

    fetched = _run(["get", "--index", "people", "--type", "person", "--id", seeded["ids"][0]], capsys)
    assert fetched["document"] == {"id": seeded["ids"][0], "source": {"name": "alice"}}

    dropped = _run(["drop-index", "--index", "people"], capsys)
    assert dropped["acknowledged"] is True
    assert not store.index_exists("people")
    assert [args.command for args in mock_backend] == ["seed", "search", "get", "drop-index"]


def test_search_writes_output_file(
    tmp_path: Path,
    store: MockStore,
    mock_backend: list[argparse.Namespace],
) -> None:
    _ = mock_backend
    store.insert("people", "person", {"name": "alice"})
    output = tmp_path / "out" / "search.json"

    assert main(["search", "--index", "people", "--output", str(output)]) == 0

    payload = json.loads(output.read_text(encoding="utf-8"))
    assert payload["query"] == "*:*"
    assert payload["count"] == 1


def test_store_failures_exit_with_error(
    mock_backend: list[argparse.Namespace],
    capsys: pytest.CaptureFixture[str],
) -> None:
    _ = mock_backend

    assert main(["search", "--index", "ghosts"]) == 1
    assert main(["get", "--index", "people", "--type", "person", "--id", "nope"]) == 1
    assert capsys.readouterr().out == ""


def test_unreachable_store_exits_with_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    def _client_from_args(_args: argparse.Namespace) -> Client:
        return Client(http_client=httpx.Client(transport=httpx.MockTransport(_refuse)))

    monkeypatch.setattr(command_handlers, "client_from_args", _client_from_args)

    assert main(["drop-index", "--index", "people"]) == 1


def test_invalid_url_exits_with_error() -> None:
    assert main(["search", "--index", "people", "--url", "not-a-url"]) == 1


def test_serve_mock_runs_uvicorn_factory(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    calls: list[tuple[str, dict[str, Any]]] = []
    monkeypatch.setattr(command_handlers.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    assert main(["serve-mock", "--host", "0.0.0.0", "--port", "9300"]) == 0  # noqa: S104

    assert calls == [("elastic_lite.mock.app:create_app", {"host": "0.0.0.0", "port": 9300, "factory": True})]  # noqa: S104
    assert capsys.readouterr().out == ""
