"""OpenID Connect discovery: the port used by the validator and its httpx adapter."""

from __future__ import annotations

import json
from typing import Protocol

import httpx

from aad_issuer_validator.constants import OIDC_METADATA_PATH
from aad_issuer_validator.exceptions import DiscoveryError
from aad_issuer_validator.logging import get_logger

DEFAULT_TIMEOUT_SECONDS = 10.0


class DiscoveryClient(Protocol):
    """Returns the issuer published in an authority's discovery document."""

    def get_issuer(self, authority_url: str) -> str: ...


def discovery_url(authority_url: str, metadata_path: str = OIDC_METADATA_PATH) -> str:
    """Build the discovery document URL of an authority."""
    return f"{authority_url.rstrip('/')}{metadata_path}"


class HttpDiscoveryClient:
    """
    Fetches discovery documents over HTTP with httpx.

    Timeouts belong to this client; it performs no retries. Tests pass an
    ``httpx.MockTransport`` as ``transport``.
    """

    def __init__(
        self,
        transport: httpx.BaseTransport | None = None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        metadata_path: str = OIDC_METADATA_PATH,
    ) -> None:
        self._metadata_path = metadata_path
        self._client = httpx.Client(
            transport=transport,
            timeout=httpx.Timeout(timeout_seconds),
        )

    def get_issuer(self, authority_url: str) -> str:
        """
        Fetch the discovery document and return its ``issuer``.

        Raises:
            DiscoveryError: on connection/timeout errors, non-2xx responses,
                a body that is not a JSON object, or a missing issuer
        """
        logger = get_logger(__name__)
        url = discovery_url(authority_url, self._metadata_path)

        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            logger.warning(
                "Discovery request failed",
                extra={"error": str(exc), "url": url},
            )
            raise DiscoveryError("Cannot reach discovery endpoint", url) from exc

        if not response.is_success:
            logger.warning(
                "Discovery endpoint unexpected status",
                extra={"status_code": response.status_code, "url": url},
            )
            raise DiscoveryError(
                f"Discovery endpoint returned unexpected status {response.status_code}",
                url,
                status_code=response.status_code,
            )

        try:
            document = response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise DiscoveryError("Discovery document is not valid JSON", url) from exc

        if not isinstance(document, dict):
            raise DiscoveryError("Discovery document must be a JSON object", url)

        issuer = document.get("issuer")
        if not isinstance(issuer, str) or not issuer:
            raise DiscoveryError("Discovery document has no issuer", url)

        logger.info("Discovery document fetched", extra={"url": url, "issuer": issuer})
        return issuer

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()
