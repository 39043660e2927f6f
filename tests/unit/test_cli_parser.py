from __future__ import annotations

import json
from pathlib import Path

import pytest

from elastic_lite.cli import build_parser, main
from elastic_lite.cli.command_handlers import handle_search, handle_serve_mock, load_seed_documents
from elastic_lite.cli.common_runtime import DEFAULT_MOCK_HOST, DEFAULT_MOCK_PORT, document_payload, emit_payload
from elastic_lite.domain import Document
from elastic_lite.errors import InvalidDocumentError


def test_search_parser_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ELASTIC_LITE_URL", raising=False)

    args = build_parser().parse_args(["search", "--index", "people"])

    assert args.command == "search"
    assert args.query == "*:*"
    assert args.type is None
    assert args.output == "-"
    assert args.handler is handle_search


def test_serve_mock_parser_defaults() -> None:
    args = build_parser().parse_args(["serve-mock"])

    assert (args.host, args.port) == (DEFAULT_MOCK_HOST, DEFAULT_MOCK_PORT) == ("127.0.0.1", 9201)
    assert args.handler is handle_serve_mock


def test_get_parser_requires_type_and_id() -> None:
    with pytest.raises(SystemExit):
        build_parser().parse_args(["get", "--index", "people"])


def test_main_without_command_prints_help_and_fails(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "elastic-lite" in capsys.readouterr().out


def test_main_returns_argparse_exit_code_on_bad_arguments() -> None:
    assert main(["search"]) == 2


def test_emit_payload_writes_json_file(tmp_path: Path) -> None:
    output = tmp_path / "nested" / "out.json"

    emit_payload({"ids": ["a"]}, str(output))

    assert json.loads(output.read_text(encoding="utf-8")) == {"ids": ["a"]}
    assert output.read_text(encoding="utf-8").endswith("\n")


def test_emit_payload_prints_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    emit_payload({"count": 0}, "-")

    assert json.loads(capsys.readouterr().out) == {"count": 0}


def test_document_payload_parses_source() -> None:
    assert document_payload(Document(id="a", body=b'{"n":1}')) == {"id": "a", "source": {"n": 1}}
    assert document_payload(Document(id="a")) == {"id": "a", "source": None}


def test_load_seed_documents_reads_json_array(tmp_path: Path) -> None:
    path = tmp_path / "seed.json"
    path.write_text('[{"name": "alice"}, {"name": "bob"}]', encoding="utf-8")

    assert load_seed_documents(path) == [b'{"name": "alice"}', b'{"name": "bob"}']


def test_load_seed_documents_reads_ndjson(tmp_path: Path) -> None:
    path = tmp_path / "seed.ndjson"
    path.write_text('{"name": "alice"}\n\n{"name": "bob"}\n', encoding="utf-8")

    assert load_seed_documents(path) == [b'{"name": "alice"}', b'{"name": "bob"}']


@pytest.mark.parametrize("content", ["[1, 2]", "{oops", '"text"\n'])
def test_load_seed_documents_rejects_non_objects(tmp_path: Path, content: str) -> None:
    path = tmp_path / "seed.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(InvalidDocumentError):
        load_seed_documents(path)


def test_load_seed_documents_keeps_bodies_as_written(tmp_path: Path) -> None:
    path = tmp_path / "seed.json"
    path.write_text('[\n  {"price": 1.10},\n  {"name": "caf\\u00e9"}\n]\n', encoding="utf-8")

    assert load_seed_documents(path) == [b'{"price": 1.10}', b'{"name": "caf\\u00e9"}']


def test_load_seed_documents_rejects_non_finite_numbers(tmp_path: Path) -> None:
    path = tmp_path / "seed.ndjson"
    path.write_text('{"big": 1e400}\n', encoding="utf-8")

    with pytest.raises(InvalidDocumentError, match="out-of-range"):
        load_seed_documents(path)
