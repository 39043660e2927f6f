"""Client configuration: backend URL, timeouts and address template."""

from __future__ import annotations

import os
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from elastic_lite.errors import InvalidBackendUrlError

DEFAULT_URL = "http://127.0.0.1:9200"
DEFAULT_TIMEOUT_S = 30.0
ADDRESS_TEMPLATE_SUFFIX = "{/index,type,suffix}"
_ALLOWED_SCHEMES = {"http", "https"}


def env_bool(name: str, *, default_value: bool) -> bool:
    """Read a boolean value from environment variables.

    Args:
        name (str): Environment variable name.
        default_value (bool): Fallback value when missing or invalid.

    Returns:
        bool: Parsed boolean value.

    """
    raw = os.getenv(name)
    if raw is None:
        return default_value
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default_value


def env_float(name: str, *, default_value: float) -> float:
    """Read a float value from environment variables.

    Args:
        name (str): Environment variable name.
        default_value (float): Fallback value when missing or invalid.

    Returns:
        float: Parsed float value.

    """
    raw = os.getenv(name)
    if raw is None:
        return default_value
    try:
        return float(raw.strip())
    except ValueError:
        return default_value


class ClientOptions(BaseModel):
    """Store connection settings for one client."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(default_factory=lambda: os.getenv("ELASTIC_LITE_URL", DEFAULT_URL))
    timeout_s: float = Field(
        default_factory=lambda: env_float("ELASTIC_LITE_TIMEOUT_S", default_value=DEFAULT_TIMEOUT_S),
        gt=0,
    )
    verify_certs: bool = Field(default_factory=lambda: env_bool("ELASTIC_LITE_VERIFY_CERTS", default_value=True))

    @field_validator("url")
    @classmethod
    def url_must_declare_scheme_and_host(cls, value: str) -> str:
        """Reject URLs without an http(s) scheme or host.

        Args:
            value (str): Raw backend URL.

        Raises:
            InvalidBackendUrlError: If the URL is unusable.

        Returns:
            str: URL without trailing slash.

        """
        stripped = value.strip().rstrip("/")
        parts = urlsplit(stripped)
        if parts.scheme not in _ALLOWED_SCHEMES or not parts.netloc:
            raise InvalidBackendUrlError(value)
        return stripped

    @property
    def uri_template(self) -> str:
        """Return the address template rooted at the backend URL."""
        return self.url + ADDRESS_TEMPLATE_SUFFIX

    def build_http_client(self) -> httpx.Client:
        """Build the pooled HTTP client used by the transport.

        Returns:
            httpx.Client: Configured client.

        """
        return httpx.Client(timeout=self.timeout_s, verify=self.verify_certs)
