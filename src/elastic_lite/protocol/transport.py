"""HTTP transport executing encoded requests against the store."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from elastic_lite.protocol.decode import FAILURE_STATUS_THRESHOLD, decode_server_error

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HttpTransport:
    """Send requests through a shared, thread-safe `httpx.Client`.

    Connection failures and timeouts propagate as the `httpx.TransportError`
    raised by the client. Any status of 299 or above is raised as a
    `ServerError` decoded from the error envelope.
    """

    client: httpx.Client

    def send(self, request: httpx.Request) -> bytes:
        """Execute a request and return the full response payload.

        Args:
            request (httpx.Request): Encoded request.

        Raises:
            ServerError: If the response status is 299 or above.
            DecodeError: If a failure response carries an unparseable error envelope.

        Returns:
            bytes: Raw response body.

        """
        _logger.debug("%s %s", request.method, request.url)
        response = self.client.send(request)
        payload = response.read()
        _logger.debug("%s %s -> %d (%d bytes)", request.method, request.url, response.status_code, len(payload))

        if response.status_code >= FAILURE_STATUS_THRESHOLD:
            raise decode_server_error(payload)
        return payload

    def close(self) -> None:
        """Release pooled connections."""
        self.client.close()
