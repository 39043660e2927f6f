from __future__ import annotations

import pytest
from pydantic import ValidationError

from elastic_lite.config import DEFAULT_URL, ClientOptions, env_bool, env_float


def test_client_options_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ELASTIC_LITE_URL", raising=False)
    monkeypatch.delenv("ELASTIC_LITE_TIMEOUT_S", raising=False)
    monkeypatch.delenv("ELASTIC_LITE_VERIFY_CERTS", raising=False)

    options = ClientOptions()

    assert options.url == DEFAULT_URL
    assert options.timeout_s == pytest.approx(30.0)
    assert options.verify_certs is True
    assert options.uri_template == "http://127.0.0.1:9200{/index,type,suffix}"


def test_client_options_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ELASTIC_LITE_URL", "https://search.internal:9243/")
    monkeypatch.setenv("ELASTIC_LITE_TIMEOUT_S", "2.5")
    monkeypatch.setenv("ELASTIC_LITE_VERIFY_CERTS", "off")

    options = ClientOptions()

    assert options.url == "https://search.internal:9243"
    assert options.timeout_s == pytest.approx(2.5)
    assert options.verify_certs is False


@pytest.mark.parametrize("url", ["127.0.0.1:9200", "ftp://host", "http://", ""])
def test_client_options_reject_unusable_urls(url: str) -> None:
    with pytest.raises(ValidationError, match="must declare an http or https scheme"):
        ClientOptions(url=url)


def test_client_options_reject_non_positive_timeout() -> None:
    with pytest.raises(ValidationError):
        ClientOptions(url=DEFAULT_URL, timeout_s=0)


def test_build_http_client_applies_timeout() -> None:
    client = ClientOptions(url=DEFAULT_URL, timeout_s=3.0).build_http_client()
    try:
        assert client.timeout.read == pytest.approx(3.0)
    finally:
        client.close()


def test_env_helpers_fall_back_on_invalid_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ELASTIC_LITE_FLAG", "perhaps")
    monkeypatch.setenv("ELASTIC_LITE_NUMBER", "fast")

    assert env_bool("ELASTIC_LITE_FLAG", default_value=True) is True
    assert env_float("ELASTIC_LITE_NUMBER", default_value=1.5) == pytest.approx(1.5)
