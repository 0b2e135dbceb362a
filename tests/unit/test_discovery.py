"""Unit tests for the httpx discovery client."""

from __future__ import annotations

import httpx
import pytest

from aad_issuer_validator.discovery import HttpDiscoveryClient, discovery_url
from aad_issuer_validator.exceptions import DiscoveryError
from tests.helpers import AUTHORITY_V2, ISSUER_V2_TEMPLATE

METADATA_URL = f"{AUTHORITY_V2}/.well-known/openid-configuration"


def _client(handler) -> HttpDiscoveryClient:
    return HttpDiscoveryClient(transport=httpx.MockTransport(handler))


@pytest.mark.unit
def test_discovery_url() -> None:
    assert discovery_url(f"{AUTHORITY_V2}/") == METADATA_URL
    assert discovery_url(AUTHORITY_V2, "/custom") == f"{AUTHORITY_V2}/custom"


@pytest.mark.unit
class TestHttpDiscoveryClient:
    """Tests for HttpDiscoveryClient.get_issuer."""

    def test_returns_issuer(self) -> None:
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(200, json={"issuer": ISSUER_V2_TEMPLATE, "jwks_uri": "x"})

        assert _client(handler).get_issuer(AUTHORITY_V2) == ISSUER_V2_TEMPLATE
        assert requested == [METADATA_URL]

    def test_custom_metadata_path(self) -> None:
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(request.url.path)
            return httpx.Response(200, json={"issuer": "https://issuer/"})

        client = HttpDiscoveryClient(
            transport=httpx.MockTransport(handler),
            metadata_path="/v2.0/.well-known/openid-configuration",
        )
        client.get_issuer("https://login.microsoftonline.com/tenant")
        assert requested == ["/tenant/v2.0/.well-known/openid-configuration"]

    def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(DiscoveryError) as exc_info:
            _client(handler).get_issuer(AUTHORITY_V2)

        assert exc_info.value.error == "DISCOVERY_FAILED"
        assert exc_info.value.url == METADATA_URL
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_non_success_status(self) -> None:
        def handler(_request: httpx.Request) -> httpx.Response:
            return httpx.Response(404, json={"error": "not_found"})

        with pytest.raises(DiscoveryError) as exc_info:
            _client(handler).get_issuer(AUTHORITY_V2)

        assert exc_info.value.details["upstream_status_code"] == 404

    def test_invalid_json(self) -> None:
        def handler(_request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>")

        with pytest.raises(DiscoveryError, match="not valid JSON"):
            _client(handler).get_issuer(AUTHORITY_V2)

    def test_body_not_an_object(self) -> None:
        def handler(_request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=["issuer"])

        with pytest.raises(DiscoveryError, match="JSON object"):
            _client(handler).get_issuer(AUTHORITY_V2)

    @pytest.mark.parametrize("document", [{}, {"issuer": ""}, {"issuer": 3}])
    def test_missing_issuer(self, document: dict[str, object]) -> None:
        def handler(_request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=document)

        with pytest.raises(DiscoveryError, match="no issuer"):
            _client(handler).get_issuer(AUTHORITY_V2)

    def test_close(self) -> None:
        client = _client(lambda _request: httpx.Response(200, json={"issuer": "x"}))
        client.close()
        with pytest.raises(RuntimeError):
            client.get_issuer(AUTHORITY_V2)
