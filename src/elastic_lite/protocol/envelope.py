"""Wire envelope shared by every response kind.

The store answers every operation with a JSON object drawn from the same set of
fields. This module models that superset once; decoders read the fields that
matter for their operation and ignore the rest. `_source` is left out: document
bodies are sliced from the raw payload by `spans`.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from elastic_lite.domain import BulkAction
from elastic_lite.errors import DecodeError


class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Shards(_WireModel):
    total: int = 0
    successful: int = 0
    failed: int = 0


class TotalHits(_WireModel):
    value: int = 0
    relation: str = "eq"


class Hit(_WireModel):
    index: str | None = Field(default=None, alias="_index")
    doc_type: str | None = Field(default=None, alias="_type")
    id: str | None = Field(default=None, alias="_id")
    score: float | None = Field(default=None, alias="_score")


class Hits(_WireModel):
    total: int | TotalHits | None = None
    max_score: float | None = None
    hits: list[Hit] | None = None


class RootCause(_WireModel):
    type: str | None = None
    reason: str | None = None


class ErrorBlock(_WireModel):
    type: str | None = None
    reason: str | None = None
    root_cause: list[RootCause] | None = None


class Envelope(_WireModel):
    """Superset of every response field the store may return."""

    shards: Shards | None = Field(default=None, alias="_shards")
    index: str | None = Field(default=None, alias="_index")
    doc_type: str | None = Field(default=None, alias="_type")
    id: str | None = Field(default=None, alias="_id")
    version: int | None = Field(default=None, alias="_version")
    created: bool | None = None
    found: bool | None = None
    acknowledged: bool | None = None
    result: str | None = None
    status: int | None = None
    score: float | None = Field(default=None, alias="_score")
    took: int | None = None
    timed_out: bool | None = None
    hits: Hits | None = None
    error: ErrorBlock | None = None
    errors: bool | None = None
    items: list[BulkItemEnvelope] | None = None


class BulkItemEnvelope(_WireModel):
    """One bulk response item, tagged by the action it reports on."""

    index: Envelope | None = None
    create: Envelope | None = None
    update: Envelope | None = None
    delete: Envelope | None = None

    def for_action(self, action: BulkAction) -> Envelope | None:
        """Return the sub-envelope reported under an action tag.

        Args:
            action (BulkAction): Expected action tag.

        Returns:
            Envelope | None: Sub-envelope, if present.

        """
        return getattr(self, action.value)

    def any_action(self) -> Envelope | None:
        """Return whichever sub-envelope the item carries.

        Returns:
            Envelope | None: First populated sub-envelope.

        """
        for action in BulkAction:
            envelope = self.for_action(action)
            if envelope is not None:
                return envelope
        return None


Envelope.model_rebuild()


def parse_envelope(payload: bytes) -> Envelope:
    """Unmarshal a raw response payload into the wire envelope.

    Boolean flags are read leniently: the strings ``"true"`` and ``"false"``
    decode like their JSON counterparts.

    Args:
        payload (bytes): Raw response body.

    Raises:
        DecodeError: If the payload is not a JSON object matching the envelope.

    Returns:
        Envelope: Parsed envelope.

    """
    try:
        return Envelope.model_validate_json(payload)
    except ValidationError as exc:
        raise DecodeError(f"Response payload is not a valid envelope: {exc}") from exc
