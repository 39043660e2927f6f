"""Domain contracts exchanged with callers of the protocol layer."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Address(BaseModel):
    """Represent one hierarchical address in the store.

    Every resource address names an ``index``; only store-wide endpoints such
    as ``_bulk`` leave it out. A document id occupies the ``suffix`` segment of
    the address template, so ``doc_id`` and ``suffix`` are mutually exclusive.
    """

    model_config = ConfigDict(frozen=True)

    index: str | None = None
    doc_type: str | None = None
    doc_id: str | None = None
    suffix: str | None = None

    def path_variables(self) -> list[tuple[str, str | None]]:
        """Return ordered path variables for URI expansion.

        Raises:
            ValueError: If both a document id and an operation suffix are set.

        Returns:
            list[tuple[str, str | None]]: Ordered `(name, value)` pairs.

        """
        if self.doc_id and self.suffix:
            raise ValueError("An address cannot carry both a document id and a suffix.")  # noqa: TRY003
        return [
            ("index", self.index),
            ("type", self.doc_type),
            ("suffix", self.doc_id or self.suffix),
        ]


class Document(BaseModel):
    """Represent one stored document: its identifier and verbatim JSON body."""

    model_config = ConfigDict(frozen=True)

    id: str
    body: bytes = b""

    def loads(self) -> Any:
        """Deserialize the document body.

        Returns:
            Any: Parsed JSON body.

        """
        return json.loads(self.body)


class BulkItemResult(BaseModel):
    """Represent the outcome of one item inside a bulk response."""

    model_config = ConfigDict(frozen=True)

    id: str
    succeeded: bool
    status: int | None = None
    reason: str | None = Field(default=None, description="Failure reason reported by the store.")
