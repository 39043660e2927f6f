"""HTTP routes of the mock server.

Handlers translate mock-store results into the envelopes a real store returns,
so the client library can be exercised offline.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from elastic_lite.domain import BulkAction
from elastic_lite.errors import BulkRequestError, IndexNotFoundError, InvalidDocumentError
from elastic_lite.mock.models import (
    BulkItem,
    BulkResponse,
    DeleteDocumentResponse,
    DeleteIndexResponse,
    ErrorDetail,
    ErrorResponse,
    GetDocumentResponse,
    IndexResponse,
    RootCause,
    SearchHit,
    SearchHits,
    SearchResponse,
    UpdateDocumentResponse,
)
from elastic_lite.mock.store import MockStore, StoredDocument, parse_body, query_string_from_dsl

_STATUS_OK = 200
_STATUS_CREATED = 201
_STATUS_BAD_REQUEST = 400
_STATUS_NOT_FOUND = 404
_STATUS_CONFLICT = 409
_DEFAULT_DOC_TYPE = "_doc"
_logger = logging.getLogger(__name__)


def get_store(request: Request) -> MockStore:
    """Return the store owned by the running application."""
    return request.app.state.store


StoreDep = Annotated[MockStore, Depends(get_store)]


def _json(payload: dict[str, Any], status_code: int = _STATUS_OK) -> JSONResponse:
    return JSONResponse(content=payload, status_code=status_code)


def _error(*, error_type: str, reason: str, status: int) -> JSONResponse:
    return _json(ErrorResponse.build(error_type=error_type, reason=reason, status=status).to_wire(), status)


def _search_response(hits: list[StoredDocument]) -> JSONResponse:
    response = SearchResponse(
        hits=SearchHits(
            total=len(hits),
            max_score=1.0 if hits else None,
            hits=[
                SearchHit(index=doc.index, doc_type=doc.doc_type, id=doc.id, source=doc.body)
                for doc in hits
            ],
        ),
    )
    return _json(response.to_wire())


async def _query_string(request: Request, q: str | None) -> str | None:
    if q is not None:
        return q
    raw = await request.body()
    if not raw.strip():
        return None
    return query_string_from_dsl(parse_body(raw))


def _bulk_lines(raw: bytes) -> list[dict[str, Any]]:
    lines: list[dict[str, Any]] = []
    for number, line in enumerate(raw.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            parsed = json.loads(line)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise BulkRequestError(f"Malformed bulk line {number}: {exc}") from exc
        if not isinstance(parsed, dict):
            raise BulkRequestError(f"Malformed bulk line {number}: expected a JSON object")
        lines.append(parsed)
    return lines


def _item_error(error_type: str, reason: str) -> ErrorDetail:
    return ErrorDetail(root_cause=[RootCause(type=error_type, reason=reason)], type=error_type, reason=reason)


def _bulk_write(
    store: MockStore,
    action: BulkAction,
    target: tuple[str, str, str | None],
    source: dict[str, Any],
) -> BulkItem:
    index, doc_type, doc_id = target
    if doc_id is None:
        doc = store.insert(index, doc_type, source)
        return BulkItem(
            index=index,
            doc_type=doc_type,
            id=doc.id,
            version=doc.version,
            status=_STATUS_CREATED,
            created=True,
            result="created",
        )

    if action is BulkAction.CREATE and store.get(index, doc_type, doc_id) is not None:
        return BulkItem(
            index=index,
            doc_type=doc_type,
            id=doc_id,
            status=_STATUS_CONFLICT,
            created=False,
            error=_item_error("version_conflict_engine_exception", f"[{doc_id}]: document already exists"),
        )

    doc, existed = store.upsert(index, doc_type, doc_id, source)
    return BulkItem(
        index=index,
        doc_type=doc_type,
        id=doc.id,
        version=doc.version,
        status=_STATUS_OK if existed else _STATUS_CREATED,
        created=not existed,
        result="updated" if existed else "created",
    )


def _bulk_update(store: MockStore, target: tuple[str, str, str], partial: Any) -> BulkItem:
    index, doc_type, doc_id = target
    if not isinstance(partial, dict):
        return BulkItem(
            index=index,
            doc_type=doc_type,
            id=doc_id,
            status=_STATUS_BAD_REQUEST,
            error=_item_error("action_request_validation_exception", "[doc] must be a JSON object"),
        )
    doc = store.merge(index, doc_type, doc_id, partial)
    if doc is None:
        return BulkItem(
            index=index,
            doc_type=doc_type,
            id=doc_id,
            status=_STATUS_NOT_FOUND,
            error=_item_error("document_missing_exception", f"[{doc_type}][{doc_id}]: document missing"),
        )
    return BulkItem(
        index=index,
        doc_type=doc_type,
        id=doc_id,
        version=doc.version,
        status=_STATUS_OK,
        result="updated",
    )


def _bulk_delete(store: MockStore, target: tuple[str, str, str]) -> BulkItem:
    index, doc_type, doc_id = target
    removed = store.delete(index, doc_type, doc_id)
    return BulkItem(
        index=index,
        doc_type=doc_type,
        id=doc_id,
        status=_STATUS_OK if removed is not None else _STATUS_NOT_FOUND,
        found=removed is not None,
        result="deleted" if removed is not None else "not_found",
    )


@dataclass(frozen=True, slots=True)
class _BulkOperation:
    action: BulkAction
    index: str
    doc_type: str
    doc_id: str | None
    source: dict[str, Any] | None = None


def _plan_bulk(
    lines: list[dict[str, Any]],
    default_index: str | None,
    default_type: str | None,
) -> list[_BulkOperation]:
    operations: list[_BulkOperation] = []
    cursor = 0
    while cursor < len(lines):
        metadata = lines[cursor]
        cursor += 1
        if len(metadata) != 1:
            raise BulkRequestError("Bulk metadata lines must name exactly one action.")
        action_name, raw_target = next(iter(metadata.items()))
        try:
            action = BulkAction(action_name)
        except ValueError as exc:
            raise BulkRequestError(f"Unknown bulk action [{action_name}].") from exc

        target = raw_target if isinstance(raw_target, dict) else {}
        index = target.get("_index") or default_index
        doc_id = target.get("_id")
        if not index:
            raise BulkRequestError(f"Bulk action [{action_name}] has no index.")
        if action in {BulkAction.UPDATE, BulkAction.DELETE} and not doc_id:
            raise BulkRequestError(f"Bulk action [{action_name}] requires an id.")

        source = None
        if action is not BulkAction.DELETE:
            if cursor >= len(lines):
                raise BulkRequestError(f"Bulk action [{action_name}] is missing its source line.")
            source = lines[cursor]
            cursor += 1

        operations.append(
            _BulkOperation(
                action=action,
                index=str(index),
                doc_type=str(target.get("_type") or default_type or _DEFAULT_DOC_TYPE),
                doc_id=str(doc_id) if doc_id else None,
                source=source,
            ),
        )
    return operations


def _apply_operation(store: MockStore, operation: _BulkOperation) -> BulkItem:
    target = (operation.index, operation.doc_type, operation.doc_id or "")
    if operation.action is BulkAction.DELETE:
        return _bulk_delete(store, target)
    source = operation.source or {}
    if operation.action is BulkAction.UPDATE:
        return _bulk_update(store, target, source.get("doc"))
    return _bulk_write(store, operation.action, (operation.index, operation.doc_type, operation.doc_id), source)


def apply_bulk(
    store: MockStore,
    raw: bytes,
    *,
    default_index: str | None = None,
    default_type: str | None = None,
) -> BulkResponse:
    """Apply every action of an NDJSON bulk payload under one store batch.

    The whole payload is validated before any action touches the store.

    Args:
        store (MockStore): Target store.
        raw (bytes): NDJSON payload.
        default_index (str | None): Index used when metadata omits `_index`.
        default_type (str | None): Type used when metadata omits `_type`.

    Raises:
        BulkRequestError: If a line is malformed or an action lacks its target.

    Returns:
        BulkResponse: One item per action, in submission order.

    """
    operations = _plan_bulk(_bulk_lines(raw), default_index, default_type)
    with store.batch():
        items = [{operation.action.value: _apply_operation(store, operation)} for operation in operations]

    errors = any(
        item.error is not None or item.status >= _STATUS_BAD_REQUEST for entry in items for item in entry.values()
    )
    _logger.debug("Applied bulk request with %d items (errors=%s).", len(items), errors)
    return BulkResponse(errors=errors, items=items)


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(IndexNotFoundError)
    async def index_not_found(_request: Request, exc: IndexNotFoundError) -> JSONResponse:
        return _error(error_type="index_not_found_exception", reason=str(exc), status=_STATUS_NOT_FOUND)

    @app.exception_handler(InvalidDocumentError)
    async def invalid_document(_request: Request, exc: InvalidDocumentError) -> JSONResponse:
        return _error(error_type="mapper_parsing_exception", reason=str(exc), status=_STATUS_BAD_REQUEST)

    @app.exception_handler(BulkRequestError)
    async def invalid_bulk(_request: Request, exc: BulkRequestError) -> JSONResponse:
        return _error(error_type="illegal_argument_exception", reason=str(exc), status=_STATUS_BAD_REQUEST)


def _register_routes(app: FastAPI) -> None:
    @app.delete("/{index}")
    async def delete_index(index: str, store: StoreDep) -> JSONResponse:
        store.drop_index(index)
        return _json(DeleteIndexResponse().to_wire())

    @app.api_route("/{index}/_search", methods=["GET", "POST"])
    async def search_index(index: str, request: Request, store: StoreDep, q: str | None = None) -> JSONResponse:
        return _search_response(store.search(index, query_string=await _query_string(request, q)))

    @app.api_route("/{index}/{doc_type}/_search", methods=["GET", "POST"])
    async def search_type(
        index: str,
        doc_type: str,
        request: Request,
        store: StoreDep,
        q: str | None = None,
    ) -> JSONResponse:
        return _search_response(store.search(index, doc_type, await _query_string(request, q)))

    @app.post("/_bulk")
    async def bulk(request: Request, store: StoreDep) -> JSONResponse:
        return _json(apply_bulk(store, await request.body()).to_wire())

    @app.post("/{index}/_bulk")
    async def bulk_index(index: str, request: Request, store: StoreDep) -> JSONResponse:
        return _json(apply_bulk(store, await request.body(), default_index=index).to_wire())

    @app.post("/{index}/{doc_type}/_bulk")
    async def bulk_type(index: str, doc_type: str, request: Request, store: StoreDep) -> JSONResponse:
        response = apply_bulk(store, await request.body(), default_index=index, default_type=doc_type)
        return _json(response.to_wire())

    @app.post("/{index}/{doc_type}")
    async def insert_document(index: str, doc_type: str, request: Request, store: StoreDep) -> JSONResponse:
        doc = store.insert(index, doc_type, parse_body(await request.body()))
        response = IndexResponse(index=index, doc_type=doc_type, id=doc.id, version=doc.version)
        return _json(response.to_wire(), _STATUS_CREATED)

    @app.get("/{index}/{doc_type}/{doc_id}")
    async def get_document(index: str, doc_type: str, doc_id: str, store: StoreDep) -> JSONResponse:
        doc = store.get(index, doc_type, doc_id)
        if doc is None:
            return _json(GetDocumentResponse(index=index, doc_type=doc_type, id=doc_id, found=False).to_wire())
        response = GetDocumentResponse(
            index=index,
            doc_type=doc_type,
            id=doc_id,
            version=doc.version,
            found=True,
            source=doc.body,
        )
        return _json(response.to_wire())

    @app.put("/{index}/{doc_type}/{doc_id}")
    async def update_document(
        index: str,
        doc_type: str,
        doc_id: str,
        request: Request,
        store: StoreDep,
    ) -> JSONResponse:
        doc, existed = store.upsert(index, doc_type, doc_id, parse_body(await request.body()))
        response = UpdateDocumentResponse(
            index=index,
            doc_type=doc_type,
            id=doc_id,
            version=doc.version,
            created=not existed,
            result="updated" if existed else "created",
        )
        return _json(response.to_wire(), _STATUS_OK if existed else _STATUS_CREATED)

    @app.delete("/{index}/{doc_type}/{doc_id}")
    async def delete_document(index: str, doc_type: str, doc_id: str, store: StoreDep) -> JSONResponse:
        removed = store.delete(index, doc_type, doc_id)
        response = DeleteDocumentResponse(
            index=index,
            doc_type=doc_type,
            id=doc_id,
            found=removed is not None,
            result="deleted" if removed is not None else "not_found",
        )
        return _json(response.to_wire())


def create_app(store: MockStore | None = None) -> FastAPI:
    """Build the mock server application.

    Args:
        store (MockStore | None): Store to serve. A fresh empty store is used when omitted.

    Returns:
        FastAPI: Configured application.

    """
    app = FastAPI(title="elastic-lite mock")
    app.state.store = store if store is not None else MockStore()
    _register_error_handlers(app)
    _register_routes(app)
    _logger.info("Mock store application ready.")
    return app
