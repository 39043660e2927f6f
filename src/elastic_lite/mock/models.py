"""Response envelopes produced by the mock server."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Envelope(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with wire field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ShardsInfo(BaseModel):
    """Represent the shard summary of a single-shard store."""

    total: int = 1
    successful: int = 1
    failed: int = 0


class IndexResponse(_Envelope):
    """Answer an insert."""

    shards: ShardsInfo = Field(default_factory=ShardsInfo, alias="_shards")
    index: str = Field(alias="_index")
    doc_type: str = Field(alias="_type")
    id: str = Field(alias="_id")
    version: int = Field(default=1, alias="_version")
    created: bool = True
    result: str = "created"


class GetDocumentResponse(_Envelope):
    """Answer a get-by-id; `_source` is omitted when the document is absent."""

    index: str = Field(alias="_index")
    doc_type: str = Field(alias="_type")
    id: str = Field(alias="_id")
    version: int | None = Field(default=None, alias="_version")
    found: bool
    source: dict[str, Any] | None = Field(default=None, alias="_source")


class UpdateDocumentResponse(_Envelope):
    """Answer a put-by-id; `created` tells whether the put inserted the document."""

    shards: ShardsInfo = Field(default_factory=ShardsInfo, alias="_shards")
    index: str = Field(alias="_index")
    doc_type: str = Field(alias="_type")
    id: str = Field(alias="_id")
    version: int = Field(alias="_version")
    created: bool
    result: str


class DeleteDocumentResponse(_Envelope):
    """Answer a delete-by-id."""

    shards: ShardsInfo = Field(default_factory=ShardsInfo, alias="_shards")
    index: str = Field(alias="_index")
    doc_type: str = Field(alias="_type")
    id: str = Field(alias="_id")
    found: bool
    result: str


class DeleteIndexResponse(_Envelope):
    """Answer an index drop."""

    acknowledged: bool = True


class SearchHit(_Envelope):
    """One search hit."""

    index: str = Field(alias="_index")
    doc_type: str = Field(alias="_type")
    id: str = Field(alias="_id")
    score: float = Field(default=1.0, alias="_score")
    source: dict[str, Any] = Field(alias="_source")


class SearchHits(BaseModel):
    """Hit block of a search answer."""

    total: int
    max_score: float | None
    hits: list[SearchHit]


class SearchResponse(_Envelope):
    """Answer a search."""

    took: int = 0
    timed_out: bool = False
    shards: ShardsInfo = Field(default_factory=ShardsInfo, alias="_shards")
    hits: SearchHits

    def to_wire(self) -> dict[str, Any]:
        """Serialize with wire field names, keeping a null `max_score`."""
        return self.model_dump(mode="json", by_alias=True)


class RootCause(BaseModel):
    """One root cause of a failure."""

    type: str
    reason: str


class ErrorDetail(BaseModel):
    """Error block of a failure answer."""

    root_cause: list[RootCause]
    type: str
    reason: str


class ErrorResponse(_Envelope):
    """Answer a failed request."""

    error: ErrorDetail
    status: int

    @classmethod
    def build(cls, *, error_type: str, reason: str, status: int) -> ErrorResponse:
        """Build an error envelope with a single root cause.

        Args:
            error_type (str): Store error type.
            reason (str): Human-readable reason.
            status (int): HTTP status.

        Returns:
            ErrorResponse: Error envelope.

        """
        return cls(
            error=ErrorDetail(
                root_cause=[RootCause(type=error_type, reason=reason)],
                type=error_type,
                reason=reason,
            ),
            status=status,
        )


class BulkItem(_Envelope):
    """Sub-envelope reporting one bulk action."""

    index: str = Field(alias="_index")
    doc_type: str | None = Field(default=None, alias="_type")
    id: str = Field(alias="_id")
    version: int | None = Field(default=None, alias="_version")
    status: int
    created: bool | None = None
    found: bool | None = None
    result: str | None = None
    error: ErrorDetail | None = None


class BulkResponse(BaseModel):
    """Answer a bulk request; each item is keyed by its action name."""

    took: int = 0
    errors: bool
    items: list[dict[str, BulkItem]]

    def to_wire(self) -> dict[str, Any]:
        """Serialize with wire field names."""
        return {
            "took": self.took,
            "errors": self.errors,
            "items": [{action: item.to_wire() for action, item in entry.items()} for entry in self.items],
        }
