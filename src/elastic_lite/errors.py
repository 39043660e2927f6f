"""Project-specific exceptions for elastic-lite."""

from __future__ import annotations

from typing import TYPE_CHECKING

from httpx import TransportError

if TYPE_CHECKING:
    from elastic_lite.domain.contracts import BulkItemResult

__all__ = [
    "BulkRequestError",
    "DecodeError",
    "ElasticLiteError",
    "IndexNotFoundError",
    "InvalidBackendUrlError",
    "InvalidDocumentError",
    "MalformedTemplateError",
    "PartialBulkFailureError",
    "ServerError",
    "StateError",
    "TransportError",
]


class ElasticLiteError(Exception):
    """Base exception for the project."""


class MalformedTemplateError(ValueError, ElasticLiteError):
    """Raised when a URI template cannot be parsed."""

    def __init__(self, template: str, detail: str) -> None:
        """Build exception payload for unparseable URI templates."""
        super().__init__(f"Malformed URI template '{template}': {detail}.")
        self.template = template


class DecodeError(ValueError, ElasticLiteError):
    """Raised when a response payload does not decode into the wire envelope."""


class ServerError(RuntimeError, ElasticLiteError):
    """Raised when the store answers with a failure status.

    The message is the concatenation of every root-cause reason reported in the
    error envelope, each one prefixed with a comma.
    """

    def __init__(self, reason: str) -> None:
        """Build exception payload from the concatenated root causes."""
        super().__init__(reason)
        self.reason = reason


class StateError(RuntimeError, ElasticLiteError):
    """Raised when a decoded response violates its operation invariant."""


class PartialBulkFailureError(StateError):
    """Raised when one or more items of a bulk request failed.

    ``ids`` keeps one entry per submitted operation, in submission order, so
    callers can reconcile what went through.
    """

    def __init__(self, message: str, *, ids: list[str], failures: list[BulkItemResult]) -> None:
        """Build exception payload carrying the positional bulk identifiers."""
        super().__init__(message)
        self.ids = ids
        self.failures = failures


class BulkRequestError(ValueError, ElasticLiteError):
    """Raised by the mock server when a bulk payload cannot be parsed."""


class IndexNotFoundError(LookupError, ElasticLiteError):
    """Raised by the mock engine when searching an index that does not exist."""

    def __init__(self, index: str) -> None:
        """Build exception payload for unknown indices."""
        super().__init__(f"no such index [{index}]")
        self.index = index


class InvalidDocumentError(ValueError, ElasticLiteError):
    """Raised when a document body is not the JSON value an operation needs."""


class InvalidBackendUrlError(ValueError, ElasticLiteError):
    """Raised when the configured backend URL has no http(s) scheme or host."""

    def __init__(self, url: str) -> None:
        """Build exception payload for unusable backend URLs."""
        super().__init__(f"Backend URL '{url}' must declare an http or https scheme and a host.")
